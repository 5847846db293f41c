"""Vanguard PbP dev launcher. Starts the backend in watch mode."""

import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
BACKEND_PORT = os.getenv("BACKEND_PORT", "13013")
LOG_LEVEL = os.getenv("LOG_LEVEL", "info")


def main():
    parser = argparse.ArgumentParser(description="Vanguard PbP dev launcher")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: ./data)")
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL.upper())

    # Build env for the subprocess so the backend picks up the same data dir
    env = os.environ.copy()
    if args.data_dir:
        env["DATA_DIR"] = str(args.data_dir.resolve())

    print(f"Starting backend on http://localhost:{BACKEND_PORT} ...")
    proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "backend.app:create_app", "--factory", "--reload",
         "--host", HOST, "--port", BACKEND_PORT, "--log-level", LOG_LEVEL],
        cwd=ROOT, env=env,
    )
    try:
        proc.wait()
    except KeyboardInterrupt:
        print("\nShutting down...")
        proc.terminate()
        proc.wait()


if __name__ == "__main__":
    main()
