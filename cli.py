import argparse
import json
import os
import requests

DEFAULT_REGISTRY = os.getenv("REGISTRY_URL", "http://127.0.0.1:8080")

def main():
    p = argparse.ArgumentParser(prog="node-registry-cli")
    p.add_argument("--registry", default=DEFAULT_REGISTRY)

    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("ping")

    reg = sub.add_parser("register")
    reg.add_argument("--address", required=True)
    reg.add_argument("--port", type=int, required=True)

    dereg = sub.add_parser("deregister")
    dereg.add_argument("--address", required=True)
    dereg.add_argument("--port", type=int, required=True)

    sub.add_parser("query")

    args = p.parse_args()
    base = args.registry.rstrip("/")

    def pr(x):
        print(json.dumps(x, indent=2))

    if args.cmd == "ping":
        r = requests.get(f"{base}/", timeout=5)
        r.raise_for_status()
        print(r.text)

    elif args.cmd in ("register", "deregister"):
        r = requests.post(f"{base}/{args.cmd}", json={
            "address": args.address,
            "port": args.port
        }, timeout=5)
        if r.status_code == 400:
            pr({"error": "bad_request", "detail": r.json().get("detail")})
            return
        r.raise_for_status()
        print(r.text)

    elif args.cmd == "query":
        r = requests.get(f"{base}/query", timeout=5)
        r.raise_for_status()
        pr(r.json())

if __name__ == "__main__":
    main()
