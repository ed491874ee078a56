import argparse

import uvicorn

from recruit_api.database import init_db
from recruit_api.logging_setup import setup_console_logging
from recruit_api.services.cleanup_service import run_token_cleanup

setup_console_logging()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recruit assessment API")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (development)",
    )

    subparsers.add_parser("init-db", help="Create database tables")
    subparsers.add_parser("cleanup-tokens", help="Delete stale login codes once")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.command == "init-db":
        init_db()
        print("Database initialized")
    elif args.command == "cleanup-tokens":
        init_db()
        deleted = run_token_cleanup()
        print(f"Deleted {deleted} stale login codes")
    else:
        host = getattr(args, "host", "127.0.0.1")
        port = getattr(args, "port", 8000)
        reload = getattr(args, "reload", False)
        uvicorn.run("recruit_api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
