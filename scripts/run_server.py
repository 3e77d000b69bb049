#!/usr/bin/env python
"""
Serve the recipe API with uvicorn.

Run manually:
    python scripts/run_server.py
    python scripts/run_server.py --host 0.0.0.0 --port 8000 --reload
"""
import argparse
from pathlib import Path

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    env_path = repo_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    parser = argparse.ArgumentParser(description="Run the recipe API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    args = parser.parse_args()

    uvicorn.run("recipe_keeper.app.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
