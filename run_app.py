#!/usr/bin/env python3
"""
Storefront Backend Runner
=========================

Script to run the storefront backend and perform one-off setup tasks.

Usage:
    python run_app.py                                # Development server with auto-reload
    python run_app.py --mode prod                    # Production mode
    python run_app.py --port 8001                    # Custom port
    python run_app.py --init-db                      # Create database tables and exit
    python run_app.py --create-admin admin@shop.io   # Create an administrator and exit
"""

import argparse
import asyncio
import getpass
import sys

def print_banner():
    """Print application banner"""
    banner = """
╔═══════════════════════════════════════════════════════╗
║                 🛒 Storefront Backend                 ║
║                  Backend Runner Script                ║
╚═══════════════════════════════════════════════════════╝
    """
    print(banner)

def run_app(host: str, port: int, reload: bool, workers: int):
    """Run the FastAPI application"""
    print(f"\n🚀 Starting Storefront API on {host}:{port}")
    print(f"📖 API Docs: http://{host}:{port}/api/docs")
    print("\n" + "=" * 50)

    import uvicorn
    try:
        uvicorn.run(
            "app.main:app",
            host=host,
            port=port,
            reload=reload,
            workers=1 if reload else workers,
            log_level="info"
        )
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")

async def init_database():
    from app.core.database import init_db, close_db

    await init_db()
    await close_db()
    print("✅ Database tables created")

async def create_admin(email: str, name: str, password: str) -> int:
    """Create an ADMIN user, or promote an existing account"""
    from sqlalchemy import select
    from app.core.database import init_db, get_db_context, close_db
    from app.core.security import SecurityUtils
    from app.models import User, UserRole

    is_valid, message = SecurityUtils.validate_password(password)
    if not is_valid:
        print(f"❌ {message}")
        return 1

    await init_db()
    async with get_db_context() as db:
        result = await db.execute(select(User).where(User.email == email.lower()))
        user = result.scalar_one_or_none()
        if user:
            user.role = UserRole.ADMIN
            print(f"✅ Existing user {user.email} promoted to ADMIN")
        else:
            db.add(User(
                email=email.lower(),
                name=name,
                password_hash=SecurityUtils.hash_password(password),
                role=UserRole.ADMIN,
                address=None,
            ))
            print(f"✅ Admin {email.lower()} created")
    await close_db()
    return 0

def main():
    from app.core.config import settings

    parser = argparse.ArgumentParser(
        description="Storefront Backend Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_app.py                          # Development server on port 8000
  python run_app.py --mode prod --port 8080  # Production server
  python run_app.py --create-admin a@b.io    # Prompt for a password and create an admin
        """
    )

    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="Server mode (default: dev)"
    )
    parser.add_argument(
        "--host",
        default=settings.HOST,
        help=f"Host to bind to (default: {settings.HOST})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help=f"Port to bind to (default: {settings.PORT})"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload"
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create database tables and exit"
    )
    parser.add_argument(
        "--create-admin",
        metavar="EMAIL",
        help="Create an administrator account and exit"
    )
    parser.add_argument(
        "--admin-name",
        default="Administrator",
        help="Display name for --create-admin"
    )

    args = parser.parse_args()

    print_banner()

    if args.init_db:
        asyncio.run(init_database())
        return 0

    if args.create_admin:
        password = getpass.getpass("Admin password: ")
        return asyncio.run(create_admin(args.create_admin, args.admin_name, password))

    reload = not args.no_reload and args.mode != "prod"
    run_app(args.host, args.port, reload, settings.WORKERS)
    return 0

if __name__ == "__main__":
    try:
        exit_code = main()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
        sys.exit(0)
