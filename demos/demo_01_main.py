import requests
import json

REG = "http://127.0.0.1:8080"

def jprint(x): print(json.dumps(x, indent=2))

def ping():
    r = requests.get(f"{REG}/", timeout=5)
    r.raise_for_status()
    return r.text

def register(address, port):
    r = requests.post(f"{REG}/register", json={"address": address, "port": port}, timeout=5)
    r.raise_for_status()
    return r.text

def deregister(address, port):
    r = requests.post(f"{REG}/deregister", json={"address": address, "port": port}, timeout=5)
    r.raise_for_status()
    return r.text

def query():
    r = requests.get(f"{REG}/query", timeout=5)
    r.raise_for_status()
    return r.json()

if __name__ == "__main__":
    print("=== Ping ==="); print(ping())

    print("\n=== Register ===")
    print(register("10.0.0.1", 9000))

    print("\n=== Query ===")
    jprint(query())

    print("\n=== Deregister ===")
    print(deregister("10.0.0.1", 9000))

    print("\n=== Query (empty) ===")
    jprint(query())

    print("\n=== Malformed register ===")
    r = requests.post(f"{REG}/register", json={"address": "10.0.0.1"}, timeout=5)
    print(r.status_code)
    jprint(r.json())
