from __future__ import annotations

import argparse
import asyncio
import csv
from pathlib import Path

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.vouchers.service import VoucherService
from app.vouchers.types import GeneratedVoucher


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Voucher batch generation tool")
    parser.add_argument("--campaign-id", type=int, required=True)
    parser.add_argument("--brand-id", type=int, required=True)
    parser.add_argument("--count", type=int, required=True)
    parser.add_argument("--output-csv", type=Path)
    return parser.parse_args()


def _validate_args(args: argparse.Namespace, *, max_count: int) -> None:
    if args.campaign_id <= 0:
        raise ValueError("--campaign-id must be positive")
    if args.brand_id <= 0:
        raise ValueError("--brand-id must be positive")
    if not (1 <= args.count <= max_count):
        raise ValueError(f"--count must be in range 1..{max_count}")


def _write_output(path: Path, batch: list[GeneratedVoucher]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as file:
        writer = csv.writer(file)
        writer.writerow(["code", "brand", "campaign"])
        for item in batch:
            writer.writerow([item.code, item.brand_name, item.campaign_title])


async def _run() -> int:
    settings = get_settings()
    configure_logging(settings.log_level, app_env=settings.app_env)
    args = _parse_args()
    _validate_args(args, max_count=settings.voucher_batch_max_count)

    batch = await VoucherService.generate_batch(
        campaign_id=args.campaign_id,
        brand_id=args.brand_id,
        count=args.count,
    )

    output_csv = args.output_csv or Path(
        f"reports/vouchers_campaign{args.campaign_id}_brand{args.brand_id}.csv"
    )
    _write_output(output_csv, batch)
    print(f"generated={len(batch)} output={output_csv}")  # noqa: T201
    return 0


def main() -> int:
    return asyncio.run(_run())


if __name__ == "__main__":
    raise SystemExit(main())
