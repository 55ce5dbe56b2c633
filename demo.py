#!/usr/bin/env python3
"""
evolink — Server Launcher

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.

Usage:
    python demo.py              # Start on port 8000
    python demo.py --port 3000  # Custom port
"""

import argparse
import logging

import uvicorn

from evolink.server import app


def main():
    parser = argparse.ArgumentParser(description='evolink — HTTP control surface')
    parser.add_argument('--port', type=int, default=8000, help='Server port (default: 8000)')
    parser.add_argument('--host', type=str, default='0.0.0.0', help='Server host (default: 0.0.0.0)')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    print(f"  Server:    http://localhost:{args.port}")
    print(f"  API docs:  http://localhost:{args.port}/docs")
    print(f"  WebSocket: ws://localhost:{args.port}/ws")
    print()
    print("  POST /sim/create   new world (WorldConfig body)")
    print("  POST /sim/turn     advance {turns: n}")
    print("  POST /sim/auto     toggle auto-run (interval_ms=1 to fast-forward)")
    print("  GET  /sim/dump     export the current generation")
    print()

    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")


if __name__ == '__main__':
    main()
