# scripts/smoke_rank.py
from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path

from drivlet.domain.formatting import cancellation_policy_message, format_refund_amount
from drivlet.domain.policies import calculate_refund, hours_before_pickup
from drivlet.domain.ranking import rank_garages
from drivlet.domain.types import GarageRankingInput, SubscriptionTier
from drivlet.service_layer.clock import booking_now


def _dt(v: str | None) -> datetime | None:
    return datetime.fromisoformat(v) if v else None


def _load(path: Path) -> list[GarageRankingInput]:
    rows = json.loads(path.read_text(encoding="utf-8"))
    out: list[GarageRankingInput] = []
    for r in rows:
        r = dict(r)
        r["subscription_tier"] = SubscriptionTier(r.get("subscription_tier", "free"))
        r["next_available_slot"] = _dt(r.get("next_available_slot"))
        r["last_active_at"] = _dt(r.get("last_active_at"))
        out.append(GarageRankingInput(**r))
    return out


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")

    ap = argparse.ArgumentParser(description="Rank garages from a JSON file, or quote a cancellation.")
    ap.add_argument("--garages", type=Path, help="JSON list of ranking inputs")
    ap.add_argument("--pickup", help='Pickup time, e.g. "Tomorrow, 9:00 AM - 10:00 AM"')
    ap.add_argument("--amount", type=int, default=10000, help="Payment amount in cents")
    ap.add_argument("--status", default="pending")
    ap.add_argument("--stage", default=None)
    args = ap.parse_args()

    now = booking_now()

    if args.garages:
        for i, r in enumerate(rank_garages(_load(args.garages), now=now), start=1):
            star = "*" if r.is_featured else " "
            badges = ",".join(b.value for b in r.badges)
            print(f"{i:>3}{star} {r.score:6.2f}  {r.garage_name:<30} {badges}")

    if args.pickup:
        calc = calculate_refund(args.pickup, args.amount, args.status, args.stage, now=now)
        print(f"can_cancel={calc.can_cancel} eligible={calc.eligible} percentage={calc.percentage}")
        print(f"refund={format_refund_amount(calc.amount)} hours_until_pickup={calc.hours_until_pickup}")
        print(calc.reason)
        if calc.can_cancel:
            print(cancellation_policy_message(hours_before_pickup(args.pickup, now=now)))


if __name__ == "__main__":
    main()
