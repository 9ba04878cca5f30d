#!/usr/bin/env python3
"""
Run the weapon value API server.

Usage:
    python run_api.py
    python run_api.py --port 8080
    python run_api.py --host 0.0.0.0 --port 8000 --debug

Host and port default to the "api" section of ~/.poe_weapon_value/config.json.
"""

import argparse
import sys

from weapon_value.config import Config
from weapon_value.logging_setup import setup_logging


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the PoE2 weapon value API server")
    parser.add_argument(
        "--host",
        default=config.api_host,
        help=f"Host to bind to (default: {config.api_host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.api_port,
        help=f"Port to listen on (default: {config.api_port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Verbose application logging (fallbacks, skipped listings, rune choices)",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Uvicorn log level (default: info)",
    )
    return parser


def main(argv=None):
    args = build_parser(Config()).parse_args(argv)

    log_file = setup_logging(debug=args.debug)

    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Run: pip install uvicorn")
        sys.exit(1)

    print(f"Starting weapon value API on http://{args.host}:{args.port}")
    print(f"API docs: http://{args.host}:{args.port}/docs")
    print(f"Health check: http://{args.host}:{args.port}/health")
    print(f"Log file: {log_file}")
    print()

    uvicorn.run(
        "weapon_api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
