from collections import Counter
import requests
import json

REG = "http://127.0.0.1:8080"
def jprint(x): print(json.dumps(x, indent=2))

def register(address, port):
    r = requests.post(f"{REG}/register", json={"address": address, "port": port}, timeout=5)
    r.raise_for_status()

def deregister(address, port):
    r = requests.post(f"{REG}/deregister", json={"address": address, "port": port}, timeout=5)
    r.raise_for_status()

def query():
    r = requests.get(f"{REG}/query", timeout=5)
    r.raise_for_status()
    return r.json()

if __name__ == "__main__":
    # A once, B twice: B should come back about twice as often
    register("10.0.0.1", 9000)
    register("10.0.0.2", 9000)
    register("10.0.0.2", 9000)

    counts = Counter()
    for _ in range(600):
        node = query()
        counts[f"{node['address']}:{node['port']}"] += 1

    print("=== Picks per node ===")
    jprint(dict(counts))

    # one deregister drops both copies of B
    deregister("10.0.0.1", 9000)
    deregister("10.0.0.2", 9000)
    print("\n=== Query after cleanup ==="); jprint(query())
