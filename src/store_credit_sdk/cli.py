from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Sequence

from .config import ConfigError, load_config
from .services.receivables_service import AccountListRow, AccountSnapshot, ReceivablesService, ReceivablesServiceError
from .session import ApiSession

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Unsupported type {type(value).__name__}")


def _dump(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=_json_default))


def _row_payload(row: AccountListRow) -> dict[str, Any]:
    sale = row.account.sale
    return {
        "id": row.account.id,
        "sale_id": sale.id if sale else None,
        "client_id": sale.client_id if sale else None,
        "status": row.account.status,
        "total_amount": row.account.total_amount,
        "paid_amount": row.summary.paid_amount,
        "balance": row.summary.balance,
        "is_overdue": row.summary.is_overdue,
    }


def _snapshot_payload(snapshot: AccountSnapshot) -> dict[str, Any]:
    return {
        "id": snapshot.account.id,
        "status": snapshot.account.status,
        "state": snapshot.state.value,
        "total_amount": snapshot.account.total_amount,
        "paid_amount": snapshot.summary.paid_amount,
        "balance": snapshot.summary.balance,
        "percentage": snapshot.summary.percentage,
        "is_overdue": snapshot.summary.is_overdue,
        "credit_start_date": snapshot.metrics.credit_start_date,
        "overdue_installments": snapshot.metrics.overdue_count,
        "installments": [
            {
                "number": item.number,
                "due_date": item.due_date,
                "pending_capital": item.pending_capital,
                "pending_penalty": item.pending_penalty,
                "total_pending": item.total_pending,
                "is_late": item.is_late,
            }
            for item in snapshot.installments
        ],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="store-credit", description="Accounts receivable console")
    parser.add_argument("--env-file", default=None)
    parser.add_argument("--token", default=None, help="Bearer token; stored session is used when omitted")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List accounts with their balances")
    list_cmd.add_argument("--credit", action="store_true", help="Only accounts sold on credit")
    list_cmd.add_argument("--search", default="")

    show_cmd = sub.add_parser("show", help="Show one account summary")
    show_cmd.add_argument("account_id", type=int)

    pay_cmd = sub.add_parser("pay", help="Register a collection against an account")
    pay_cmd.add_argument("account_id", type=int)
    pay_cmd.add_argument("--amount", required=True, type=Decimal)
    pay_cmd.add_argument("--method-id", required=True, type=int)
    pay_cmd.add_argument("--reference", default=None)
    pay_cmd.add_argument("--date", default=None, type=datetime.fromisoformat)
    return parser


def run(args: argparse.Namespace, service: ReceivablesService) -> int:
    try:
        if args.command == "list":
            rows = service.list_credit_accounts(args.search) if args.credit else service.list_accounts()
            _dump([_row_payload(row) for row in rows])
        elif args.command == "show":
            _dump(_snapshot_payload(service.load_account(args.account_id)))
        elif args.command == "pay":
            result = service.register_payment(
                args.account_id,
                amount=args.amount,
                payment_method_id=args.method_id,
                reference_number=args.reference,
                collection_date=args.date,
            )
            _dump({"collection_id": result.collection.id, "account": _snapshot_payload(result.snapshot)})
    except ReceivablesServiceError as exc:
        _dump({"error": exc.kind, "message": exc.message, "details": exc.details, "trace_id": exc.trace_id})
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    try:
        config = load_config(args.env_file)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    session = ApiSession(config=config, token=args.token)
    logger.debug("cli_start", extra={"command": args.command, "env": config.env_name})
    return run(args, ReceivablesService(session))


if __name__ == "__main__":
    raise SystemExit(main())
