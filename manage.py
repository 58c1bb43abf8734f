#!/usr/bin/env python3
"""
Stockyard management CLI.

Usage:
    python manage.py migrate          Apply pending database migrations
    python manage.py status           Show migration status
    python manage.py verify           Check schema integrity and ledger balance
    python manage.py quantities       Unified quantities for every active item
    python manage.py quantities CODE  Unified quantities for one item
    python manage.py reorder          Items at or below their reorder point
    python manage.py categories       List stock categories
"""

import argparse
import asyncio
import sys
from pathlib import Path

from stockyard.config import configure_logging
from stockyard.core.exceptions import StockyardError


def _print_quantity_row(code: str, name: str, qty) -> None:
    print(
        f"{code:<16} {name[:28]:<28} {qty.tracking_mode.value:<10} "
        f"{qty.total:>10g} {qty.available:>10g} {qty.allocated:>10g}"
    )


def _print_quantity_header() -> None:
    print(
        f"{'CODE':<16} {'NAME':<28} {'MODE':<10} "
        f"{'TOTAL':>10} {'AVAILABLE':>10} {'ALLOCATED':>10}"
    )


async def _migrate(args: argparse.Namespace) -> int:
    from stockyard.infrastructure.storage.sqlite.migrations import run_migrations

    results = await run_migrations(args.db_path, create_backup_before=not args.no_backup)
    if not results:
        print("Database is up to date.")
    for result in results:
        status = "SUCCESS" if result.success else "FAILED"
        print(f"[{status}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"         Error: {result.error}")
    return 0 if all(r.success for r in results) else 1


async def _status(args: argparse.Namespace) -> int:
    from stockyard.infrastructure.storage.sqlite.migrations import get_migration_status

    status = await get_migration_status(args.db_path)
    print(f"Database exists: {status['exists']}")
    print(f"Current version: {status.get('current_version') or 'N/A'}")
    print(f"Applied migrations: {status.get('applied_migrations', [])}")
    print(f"Pending migrations: {status.get('pending_migrations', [])}")
    return 0


async def _verify(args: argparse.Namespace) -> int:
    from stockyard.infrastructure.storage.sqlite.migrations import verify_schema_integrity

    checks = await verify_schema_integrity(args.db_path)
    failed = False
    for check in checks:
        print(f"[{check['status']}] {check['check']}")
        if check["status"] != "PASS":
            failed = True
            for key, value in check.items():
                if key not in ("check", "status"):
                    print(f"       {key}: {value}")
    return 1 if failed else 0


async def _quantities(args: argparse.Namespace) -> int:
    from stockyard.application.use_cases import GetQuantitiesUseCase
    from stockyard.infrastructure.storage.sqlite import close_pool

    use_case = GetQuantitiesUseCase()
    try:
        if args.code:
            rows = [await use_case.by_code(args.code)]
        else:
            rows = await use_case.list_all(active_only=not args.all)
    finally:
        await close_pool()

    _print_quantity_header()
    for item, qty in rows:
        _print_quantity_row(item.code, item.name, qty)
    return 0


async def _reorder(args: argparse.Namespace) -> int:
    from stockyard.application.use_cases import GetQuantitiesUseCase
    from stockyard.infrastructure.storage.sqlite import close_pool

    try:
        rows = await GetQuantitiesUseCase().reorder_candidates()
    finally:
        await close_pool()

    if not rows:
        print("No items at or below their reorder point.")
        return 0
    _print_quantity_header()
    for item, qty in rows:
        _print_quantity_row(item.code, item.name, qty)
    return 0


async def _categories(args: argparse.Namespace) -> int:
    from stockyard.application.use_cases import ListCategoriesUseCase
    from stockyard.infrastructure.storage.sqlite import close_pool

    try:
        categories = await ListCategoriesUseCase().execute()
    finally:
        await close_pool()

    names = {c.id: c.name for c in categories}
    for category in categories:
        parent = names.get(category.parent_id, "")
        print(f"{category.id:>5}  {category.name:<28} {parent}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Stockyard management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--db-path",
        type=Path,
        default=None,
        help="Database path for migrate/status/verify (default from settings)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override LOG_LEVEL",
    )
    parser.add_argument("--json-logs", action="store_true", help="Render logs as JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip backup before migrating")
    p_migrate.set_defaults(func=_migrate)

    # status
    p_status = sub.add_parser("status", help="Show migration status")
    p_status.set_defaults(func=_status)

    # verify
    p_verify = sub.add_parser("verify", help="Check schema integrity and ledger balance")
    p_verify.set_defaults(func=_verify)

    # quantities
    p_qty = sub.add_parser("quantities", help="Show unified quantities")
    p_qty.add_argument("code", nargs="?", help="Item code (all items when omitted)")
    p_qty.add_argument("--all", action="store_true", help="Include inactive items")
    p_qty.set_defaults(func=_quantities)

    # reorder
    p_reorder = sub.add_parser("reorder", help="List items due for reorder")
    p_reorder.set_defaults(func=_reorder)

    # categories
    p_categories = sub.add_parser("categories", help="List stock categories")
    p_categories.set_defaults(func=_categories)

    args = parser.parse_args()
    configure_logging(args.log_level, json_output=True if args.json_logs else None)

    try:
        code = asyncio.run(args.func(args))
    except StockyardError as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
