"""
Launch the GTM Content Engine FastAPI app with explicit options.

Handy under process managers: point the manager at this script instead of
spelling out the uvicorn arguments. Every option falls back to a GTM_*
environment variable.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path

import uvicorn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the GTM Content Engine via uvicorn.")
    parser.add_argument("--host", default=os.environ.get("GTM_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("GTM_PORT", 8000)))
    parser.add_argument(
        "--log-level",
        default=os.environ.get("GTM_LOG_LEVEL", "info"),
        choices=["critical", "error", "warning", "info", "debug", "trace"],
    )
    parser.add_argument(
        "--reload",
        dest="reload",
        action="store_true",
        help="Enable uvicorn reload while developing templates or prompts.",
    )
    parser.add_argument(
        "--no-reload",
        dest="reload",
        action="store_false",
        help="Disable uvicorn reload (default).",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Anthropic model for every generation call (sets GTM_ANTHROPIC_MODEL).",
    )
    parser.set_defaults(reload=False)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    project_root = Path(__file__).resolve().parents[1]
    os.chdir(project_root)
    if args.model:
        # Read by Settings when uvicorn imports the app
        os.environ["GTM_ANTHROPIC_MODEL"] = args.model

    uvicorn.run(
        "gtm_engine.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
