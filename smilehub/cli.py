"""SmileHub CLI - Command Line Interface for administrative tasks.

Usage:
    python -m smilehub.cli <command> [options]

Commands:
    create-tenant   Create a practice account
    init-db         Create database tables (optionally with demo data)
    check-db        Check database connectivity
    version         Show version information

Examples:
    python -m smilehub.cli create-tenant --email clinic@example.com --password secret123
    python -m smilehub.cli init-db --demo
    python -m smilehub.cli check-db

"""

import argparse
import asyncio
import getpass
import sys
from typing import NoReturn

from smilehub.core.config import settings
from smilehub.core.exceptions import ConflictError, StorageError
from smilehub.core.security import SecurityManager

MIN_PASSWORD_LENGTH = 6


def print_banner() -> None:
    """Print SmileHub CLI banner."""
    print("\n" + "=" * 50)
    print(" SmileHub CLI")
    print(" Dental Practice Patient Management")
    print("=" * 50 + "\n")


def print_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"ERROR: {message}", file=sys.stderr)


def print_success(message: str) -> None:
    """Print success message."""
    print(f"SUCCESS: {message}")


def print_info(message: str) -> None:
    """Print info message."""
    print(f"INFO: {message}")


def _security() -> SecurityManager:
    return SecurityManager(
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        access_token_expire_minutes=settings.access_token_expire_minutes,
    )


async def check_database() -> bool:
    """Check database connectivity."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    from smilehub.models.base import async_session_maker

    try:
        print_info("Checking database connectivity...")
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
            print_success("Database connection successful")
            return True
    except (SQLAlchemyError, OSError) as e:
        print_error(f"Database connection failed: {e}")
        return False


async def create_tenant(email: str, password: str) -> bool:
    """Create a practice account in the database."""
    from smilehub.models.base import async_session_maker, init_db
    from smilehub.services.tenants import TenantStore

    await init_db()
    async with async_session_maker() as session:
        try:
            user = await TenantStore(session, _security()).register(email, password)
        except ConflictError:
            print_error(f"Email '{email}' already exists")
            return False
        except StorageError as e:
            print_error(f"Failed to create tenant: {e}")
            return False

    print_success(f"Tenant '{user.email}' created successfully")
    print_info(f"  Tenant ID: {user.id}")
    return True


async def init_database(with_demo_data: bool = False) -> bool:
    """Create tables and optionally seed the demo tenant."""
    from smilehub.models.base import async_session_maker, init_db
    from smilehub.services.demo_data import DEMO_EMAIL, DEMO_PASSWORD, seed_demo_tenant

    # First check DB connectivity
    if not await check_database():
        return False

    await init_db()
    print_success("Database tables created")

    if with_demo_data:
        async with async_session_maker() as session:
            inserted = await seed_demo_tenant(session, _security())
        if inserted:
            print_success("Demo tenant created:")
            print_info(f"  - {DEMO_EMAIL} / {DEMO_PASSWORD} ({inserted} patients)")
            print_info("")
            print_info("IMPORTANT: Never enable demo data in production!")
        else:
            print_info("Demo tenant already exists")
    return True


def cmd_version(_args: argparse.Namespace) -> int:
    """Show version information."""
    print_banner()
    print(f"Version:     {settings.app_version}")
    print(f"Environment: {settings.environment}")
    print(f"Debug:       {settings.debug}")
    print(f"Python:      {sys.version.split()[0]}")
    return 0


def cmd_check_db(_args: argparse.Namespace) -> int:
    """Check database connectivity command."""
    print_banner()
    result = asyncio.run(check_database())
    return 0 if result else 1


def cmd_create_tenant(args: argparse.Namespace) -> int:
    """Create tenant command."""
    print_banner()

    email = args.email
    password = args.password

    # Prompt for password if not provided
    if not password:
        print("Enter password for the practice account:")
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print_error("Passwords do not match")
            return 1

    if len(password) < MIN_PASSWORD_LENGTH:
        print_error(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return 1

    # Validate email format (basic check)
    if "@" not in email or "." not in email:
        print_error("Invalid email format")
        return 1

    result = asyncio.run(create_tenant(email=email, password=password))
    return 0 if result else 1


def cmd_init_db(args: argparse.Namespace) -> int:
    """Initialize database command."""
    print_banner()
    result = asyncio.run(init_database(with_demo_data=args.demo))
    return 0 if result else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smilehub-cli",
        description="SmileHub CLI - Administrative command line interface",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"SmileHub {settings.app_version}",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    # version command
    version_parser = subparsers.add_parser(
        "version",
        help="Show version information",
    )
    version_parser.set_defaults(func=cmd_version)

    # check-db command
    check_db_parser = subparsers.add_parser(
        "check-db",
        help="Check database connectivity",
    )
    check_db_parser.set_defaults(func=cmd_check_db)

    # init-db command
    init_db_parser = subparsers.add_parser(
        "init-db",
        help="Create database tables",
    )
    init_db_parser.add_argument(
        "--demo",
        action="store_true",
        help="Also create the demo tenant with sample patients",
    )
    init_db_parser.set_defaults(func=cmd_init_db)

    # create-tenant command
    create_tenant_parser = subparsers.add_parser(
        "create-tenant",
        help="Create a practice account",
    )
    create_tenant_parser.add_argument(
        "--email",
        "-e",
        required=True,
        help="Email address for the account",
    )
    create_tenant_parser.add_argument(
        "--password",
        "-p",
        required=False,
        help="Password (will prompt if not provided)",
    )
    create_tenant_parser.set_defaults(func=cmd_create_tenant)

    return parser


def main() -> NoReturn:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    # Execute command
    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
