#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.core.amm_pool import Direction
from src.integration import InMemoryLedger, PoolService, PoolServiceConfig, RecordingEventSink


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Offline replay of a pool lifecycle against an in-memory ledger.")
    p.add_argument("--fee-rate", type=int, default=30, help="fee rate in parts-per-thousand (default: 30)")
    p.add_argument("--deposit", type=int, default=500, help="amount of each asset deposited (default: 500)")
    p.add_argument("--swap", type=int, default=100, help="A->B swap amount_in (default: 100)")
    p.add_argument("--verbose", action="store_true", help="log every operation")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = PoolServiceConfig(
        pool_id="demo",
        fee_rate_milli=args.fee_rate,
        admin_signers=("admin",),
        fee_collector_signers=("admin",),
    )
    lp, trader = "lp-1", "trader-1"
    ledger = InMemoryLedger(
        [lp, trader, config.pool_account, config.fee_custody_account, config.fee_receiver_account]
    )
    ledger.deposit(lp, config.asset_a, args.deposit)
    ledger.deposit(lp, config.asset_b, args.deposit)
    ledger.deposit(trader, config.asset_a, args.swap)

    sink = RecordingEventSink()
    service = PoolService(ledger, config, event_sink=sink)

    service.initialize("admin")
    added = service.add_liquidity(lp, args.deposit, args.deposit)
    print(f"[pool-demo] added liquidity: shares={added.effect.shares}")

    swapped = service.swap(trader, args.swap, Direction.A_TO_B, minimum_out=0)
    s = service.state
    print(
        f"[pool-demo] swap: amount_in={swapped.effect.amount_in} amount_out={swapped.effect.amount_out} "
        f"fee={swapped.effect.fee_amount}"
    )
    print(f"[pool-demo] reserves after swap: a={s.reserve_a} b={s.reserve_b} accrued_fee_b={s.accrued_fee_b}")
    print(f"[pool-demo] spot price a->b: {service.spot_price_milli(Direction.A_TO_B)} per 1000")

    half = s.total_shares // 2
    removed = service.remove_liquidity(lp, half)
    print(f"[pool-demo] removed {half} shares: amount_a={removed.effect.amount_a} amount_b={removed.effect.amount_b}")

    print(f"[pool-demo] trader balances: a={ledger.balance(trader, config.asset_a)} b={ledger.balance(trader, config.asset_b)}")
    print(f"[pool-demo] snapshot commitment: {service.snapshot().commitment_hex()}")
    print(f"[pool-demo] events: {', '.join(r['event'] for r in sink.records)}")
    print("[pool-demo] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
