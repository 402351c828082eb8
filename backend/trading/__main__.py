"""CLI entry point for the order engine.

Usage:
    python -m trading assets
    python -m trading quote --asset IDX_STC --direction CALL --stake 10000 --duration 1m
"""

import argparse
import logging
import sys
from pathlib import Path

from settlement.durations import Duration, parse_duration
from settlement.errors import OrderError
from settlement.formatting import (
    format_countdown,
    format_currency,
    format_duration_label,
)
from trading.asset_config import load_asset_configs
from trading.config import get_settings
from trading.services.order_service import OrderService


def parse_duration_arg(value: str) -> Duration | float:
    """Accept a label ("1s", "15m", "1h") or a number of minutes."""
    try:
        return float(value)
    except ValueError:
        pass
    try:
        return parse_duration(value)
    except OrderError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m trading",
        description="Binary-option order timing and settlement",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m trading assets
  python -m trading quote --asset IDX_STC --direction CALL --stake 10000 --duration 1m
        """,
    )
    parser.add_argument(
        "--assets",
        type=Path,
        default=None,
        help="Path to assets.yaml (default: backend/assets.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("assets", help="List configured assets")

    quote = sub.add_parser("quote", help="Show expiry and payout for an order")
    quote.add_argument("--asset", required=True, help="Asset id")
    quote.add_argument("--direction", default="CALL", help="CALL or PUT")
    quote.add_argument("--stake", required=True, help="Stake amount (rupiah)")
    quote.add_argument(
        "--duration",
        type=parse_duration_arg,
        required=True,
        help="Duration label (1s, 1m, 15m, 1h) or minutes",
    )
    quote.add_argument(
        "--at",
        type=int,
        default=None,
        help="Entry timestamp in epoch seconds (default: now)",
    )
    return parser.parse_args(argv)


def cmd_assets(service: OrderService) -> None:
    """List all configured assets."""
    print(f"\n{'Asset':<12} {'Name':<16} {'Rate':>6} {'Min stake':>16} {'Max stake':>16}  Durations")
    print("-" * 96)
    for config in service.assets:
        durations = ", ".join(format_duration_label(d) for d in config.duration_catalog())
        print(
            f"{config.asset_id:<12} {config.display_name:<16} "
            f"{str(config.profit_rate) + '%':>6} "
            f"{format_currency(config.min_stake):>16} "
            f"{format_currency(config.max_stake):>16}  {durations}"
        )


def cmd_quote(args: argparse.Namespace, service: OrderService) -> None:
    """Print order timing and potential payout."""
    q = service.quote(args.asset, args.direction, args.stake, args.duration, args.at)
    t = q.timing
    print(f"\nAsset:            {q.asset_id}")
    print(f"Direction:        {q.direction.value}")
    print(f"Stake:            {format_currency(q.stake)}")
    print(f"Duration:         {t.duration_display}")
    print(f"Entry:            {t.entry_display} WIB ({t.entry_timestamp})")
    print(f"Candle close:     {t.remaining_in_candle}s"
          f"{' (near close)' if t.is_near_candle_close else ''}")
    print(f"Expiry:           {t.expiry_display} WIB ({t.expiry_timestamp})")
    print(f"Time to expiry:   {format_countdown(t.seconds_to_expiry)}")
    print(f"Profit rate:      {q.profit_rate}%")
    print(f"Payout if WON:    {format_currency(q.potential_payout)}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()

    level = logging.DEBUG if args.verbose else getattr(
        logging, settings.log_level.upper(), logging.INFO
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    assets = load_asset_configs(args.assets or settings.assets_path)
    service = OrderService(assets, settings=settings)

    try:
        if args.command == "assets":
            cmd_assets(service)
        elif args.command == "quote":
            cmd_quote(args, service)
    except OrderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
