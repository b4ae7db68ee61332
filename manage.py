#!/usr/bin/env python3
"""
Inventory costing management CLI.

Usage:
    python manage.py init-db                              Apply schema migrations
    python manage.py receive SKU QTY COST [--method M]    Receive a lot
    python manage.py issue SKU QTY [--reference REF]      Issue stock, print COGS
    python manage.py value [SKU]                          Inventory valuation
"""

import argparse
import asyncio
import sys
from datetime import date, datetime

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.application import (
    InventoryValuationRequest,
    IssueStockRequest,
    IssueStockUseCase,
    ReceiveStockRequest,
    ReceiveStockUseCase,
    ValueInventoryUseCase,
)
from src.application.dto.responses import ErrorResponse
from src.config import configure_logging
from src.core.entities.inventory import ValuationMethod
from src.core.exceptions import ConfigurationError, CostingError
from src.infrastructure.storage.sqlite import close_pool
from src.infrastructure.storage.sqlite.migrations import initialize_database


def iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO timestamp: {value!r}") from None


def iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date: {value!r}") from None


def _print(model: BaseModel) -> None:
    print(model.model_dump_json(indent=2))


async def cmd_init_db(args: argparse.Namespace) -> None:
    results = await initialize_database()
    for result in results:
        status = "ok" if result.success else f"FAILED: {result.error}"
        print(f"v{result.version} {result.name}: {status}")
    if not results:
        print("Schema up to date.")
    if any(not r.success for r in results):
        sys.exit(1)


async def cmd_receive(args: argparse.Namespace) -> None:
    use_case = ReceiveStockUseCase()
    request = ReceiveStockRequest(
        sku=args.sku,
        quantity=args.quantity,
        unit_cost=args.unit_cost,
        received_date=args.date,
        batch_id=args.batch_id,
        expiry_date=args.expiry,
        name=args.name,
        valuation_method=ValuationMethod(args.method) if args.method else None,
    )
    _print(use_case.to_response(await use_case.execute(request)))


async def cmd_issue(args: argparse.Namespace) -> None:
    use_case = IssueStockUseCase()
    request = IssueStockRequest(sku=args.sku, quantity=args.quantity, reference=args.reference)
    _print(use_case.to_response(await use_case.execute(request)))


async def cmd_value(args: argparse.Namespace) -> None:
    use_case = ValueInventoryUseCase()
    request = InventoryValuationRequest(sku=args.sku, limit=args.limit, offset=args.offset)
    _print(use_case.to_response(await use_case.execute(request)))


async def _run(args: argparse.Namespace) -> int:
    try:
        await args.func(args)
    except CostingError as e:
        print(ErrorResponse.from_error(e).model_dump_json(indent=2), file=sys.stderr)
        return 1
    except PydanticValidationError as e:
        print(e, file=sys.stderr)
        return 2
    finally:
        await close_pool()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inventory costing management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # init-db
    p_init = sub.add_parser("init-db", help="Create or upgrade the database schema")
    p_init.set_defaults(func=cmd_init_db)

    # receive
    p_receive = sub.add_parser("receive", help="Receive stock into a new lot")
    p_receive.add_argument("sku", help="Product SKU")
    p_receive.add_argument("quantity", help="Quantity received")
    p_receive.add_argument("unit_cost", help="Cost per unit")
    p_receive.add_argument(
        "--date", type=iso_datetime, help="Receipt timestamp, ISO format (default: now)"
    )
    p_receive.add_argument("--batch-id", help="Lot identifier (default: generated)")
    p_receive.add_argument("--expiry", type=iso_date, help="Lot expiry date, ISO format")
    p_receive.add_argument("--name", help="Product name when creating the product")
    p_receive.add_argument(
        "--method",
        choices=[m.value for m in ValuationMethod],
        help="Valuation method; sets it for a new product (default: FIFO), "
        "must match an existing one",
    )
    p_receive.set_defaults(func=cmd_receive)

    # issue
    p_issue = sub.add_parser("issue", help="Issue stock and report cost of goods sold")
    p_issue.add_argument("sku", help="Product SKU")
    p_issue.add_argument("quantity", help="Quantity issued")
    p_issue.add_argument("--reference", help="Sales invoice or delivery reference")
    p_issue.set_defaults(func=cmd_issue)

    # value
    p_value = sub.add_parser("value", help="Show inventory valuation")
    p_value.add_argument("sku", nargs="?", help="Limit to one product")
    p_value.add_argument("--limit", type=int, default=100, help="Page size without a SKU")
    p_value.add_argument("--offset", type=int, default=0, help="Page start without a SKU")
    p_value.set_defaults(func=cmd_value)

    return parser


def main() -> None:
    args = build_parser().parse_args()
    try:
        configure_logging()
    except ConfigurationError as e:
        print(ErrorResponse.from_error(e).model_dump_json(indent=2), file=sys.stderr)
        sys.exit(1)
    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
