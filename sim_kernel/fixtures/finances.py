"""Deterministic finance series for the simulated company."""

import math
from datetime import date, timedelta
from typing import List

from sim_kernel.models.packet import FinanceSnapshot

SERIES_START = date(2025, 1, 1)
BASE_CASH_USD = 420_000_000                 # Series C
MONTHLY_BURN_USD = 14_800_000
MONTHLY_REVENUE_USD = 12_800_000            # Q1 revenue of 38.4M over three months
HEADCOUNT = 481


def generate_finance_snapshots(days: int = 90, start: date = SERIES_START) -> List[FinanceSnapshot]:
    """
    One end-of-day snapshot per day from `start`.
    Cash falls by the daily burn; revenue month-to-date resets on the 1st.
    """
    snapshots = []
    cash = float(BASE_CASH_USD)
    revenue_mtd = 0.0

    for i in range(days):
        day = start + timedelta(days=i)
        if day.day == 1:
            revenue_mtd = 0.0

        revenue_mtd += MONTHLY_REVENUE_USD / 30
        cash -= MONTHLY_BURN_USD / 30

        snapshots.append(FinanceSnapshot(
            as_of=day,
            cash_on_hand_usd=round(max(0.0, cash), 2),
            monthly_burn_usd=MONTHLY_BURN_USD,
            revenue_mtd_usd=round(revenue_mtd, 2),
            ap_usd=round(5_000_000 + math.sin(i / 10) * 1_000_000, 2),
            ar_usd=round(8_000_000 + math.cos(i / 7) * 2_000_000, 2),
            headcount=HEADCOUNT,
        ))

    return snapshots


def finance_as_of(day: date, start: date = SERIES_START) -> FinanceSnapshot:
    """The snapshot for `day`; days before `start` get the opening position."""
    offset = max(0, (day - start).days)
    return generate_finance_snapshots(offset + 1, start)[-1].model_copy(update={"as_of": day})
