#!/usr/bin/env python3
"""
Local API Server

Usage:
    python scripts/run_server.py
    python scripts/run_server.py --port 3001 --reload
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Run the scoreboard API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=3001)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    load_dotenv()
    uvicorn.run("api.main:create_app", factory=True, host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
