from __future__ import annotations

import argparse
import asyncio
import json
from dataclasses import asdict
from datetime import datetime

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.vouchers.errors import VoucherError
from app.vouchers.service import VoucherService


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Voucher lottery operations")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check-code", help="Inspect a voucher and its owner")
    check.add_argument("code")

    confirm = subparsers.add_parser("confirm-winner", help="Mark an activated voucher as the winner")
    confirm.add_argument("code")

    reset_code = subparsers.add_parser("reset-code", help="Void one activated voucher")
    reset_code.add_argument("code")

    reset_user = subparsers.add_parser("reset-user", help="Void every activated voucher of a user")
    reset_user.add_argument("user_id", type=int)

    subparsers.add_parser("stats", help="Print dashboard counters")
    return parser.parse_args(argv)


def _json_default(value: object) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"unsupported type: {type(value).__name__}")


async def _dispatch(args: argparse.Namespace) -> dict[str, object]:
    if args.command == "check-code":
        return asdict(await VoucherService.check_code(code=args.code))
    if args.command == "confirm-winner":
        return asdict(await VoucherService.confirm_winner(code=args.code))
    if args.command == "reset-code":
        await VoucherService.reset_voucher(code=args.code)
        return {"code": args.code, "reset": 1}
    if args.command == "reset-user":
        reset = await VoucherService.reset_user_vouchers(user_id=args.user_id)
        return {"user_id": args.user_id, "reset": reset}
    if args.command == "stats":
        return asdict(await VoucherService.dashboard_counters())
    raise ValueError(f"unknown command: {args.command}")


async def _run(argv: list[str] | None = None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level, app_env=settings.app_env)
    args = _parse_args(argv)
    try:
        payload = await _dispatch(args)
    except VoucherError as exc:
        payload = {"ok": False, "error": type(exc).__name__, "detail": str(exc)}
        print(json.dumps(payload, default=_json_default))  # noqa: T201
        return 1

    print(json.dumps({"ok": True, **payload}, default=_json_default))  # noqa: T201
    return 0


def main() -> int:
    return asyncio.run(_run())


if __name__ == "__main__":
    raise SystemExit(main())
