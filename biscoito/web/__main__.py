"""Entry point for the web API: python -m biscoito.web"""

import argparse

from biscoito.web.server import run_server


def main() -> None:
    parser = argparse.ArgumentParser(description="Biscoito Clicker — Web API")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    args = parser.parse_args()

    print("\n  🍪 Biscoito Clicker (Web API)")
    print(f"  ➜ http://{args.host}:{args.port}/api/state\n")

    run_server(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
