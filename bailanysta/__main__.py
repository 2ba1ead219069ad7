"""
Development server.

Usage:
  python -m bailanysta [--host 127.0.0.1] [--port 8000] [--reload]
"""
from __future__ import annotations

import argparse


def main() -> None:
    import uvicorn

    ap = argparse.ArgumentParser(description="Run the Bailanysta API with uvicorn")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--reload", action="store_true", help="Restart on code changes")
    args = ap.parse_args()

    uvicorn.run("bailanysta.app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
