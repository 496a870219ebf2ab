"""
Thesis Archive admin CLI

Usage:
    thesis-archive init-db                 Create all tables
    thesis-archive seed                    Insert default admin, programs and settings
    thesis-archive create-admin -u NAME    Create another admin account
    thesis-archive serve [--host --port]   Run the API with uvicorn
"""

import argparse
import asyncio
import getpass
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table


console = Console()


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="thesis-archive",
        description="Thesis Archive - administration commands",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  thesis-archive init-db
  thesis-archive seed
  thesis-archive create-admin -u registrar --first-name Ana --last-name Cruz
  thesis-archive serve --port 8080 --reload
""",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init-db", help="Create database tables")
    subparsers.add_parser("seed", help="Insert bootstrap data (idempotent)")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("-u", "--username", required=True)
    admin_parser.add_argument("-p", "--password", help="Prompted for when omitted")
    admin_parser.add_argument("--first-name", default="System")
    admin_parser.add_argument("--last-name", default="Administrator")

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true")

    return parser


async def _init_db() -> None:
    from thesis_archive.core.database import init_db, close_db
    await init_db()
    await close_db()


async def _seed() -> dict:
    from thesis_archive.core.database import close_db
    from thesis_archive.db.seed_data import seed_all
    try:
        return await seed_all()
    finally:
        await close_db()


async def _create_admin(username: str, password: str, first_name: str, last_name: str) -> bool:
    from thesis_archive.core.database import get_session_local, init_db, close_db
    from thesis_archive.db.seed_data import ensure_admin

    await init_db()
    try:
        async with get_session_local()() as db:
            admin = await ensure_admin(db, username, password, first_name, last_name)
        return admin is not None
    finally:
        await close_db()


def _read_password() -> str:
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Confirm password: "):
        console.print("[red]✗ Passwords do not match[/red]")
        sys.exit(1)
    return password


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "init-db":
        asyncio.run(_init_db())
        console.print("[green]✓ Database tables created[/green]")
        return 0

    if args.command == "seed":
        summary = asyncio.run(_seed())
        table = Table(title="Seed results")
        table.add_column("Item")
        table.add_column("Created", justify="right")
        for item, count in summary.items():
            table.add_row(item, str(count))
        console.print(table)
        return 0

    if args.command == "create-admin":
        password = args.password or _read_password()
        if len(password) < 6:
            console.print("[red]✗ Password must be at least 6 characters[/red]")
            return 1
        created = asyncio.run(_create_admin(args.username, password, args.first_name, args.last_name))
        if not created:
            console.print(f"[yellow]Username '{args.username}' already exists[/yellow]")
            return 1
        console.print(f"[green]✓ Admin '{args.username}' created[/green]")
        return 0

    if args.command == "serve":
        import uvicorn
        from thesis_archive.core.config import settings

        uvicorn.run(
            "thesis_archive.main:app",
            host=args.host or settings.SERVER_HOST,
            port=args.port or settings.SERVER_PORT,
            reload=args.reload,
        )
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
