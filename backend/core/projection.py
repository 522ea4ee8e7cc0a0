"""Compound growth projection for periodic-contribution investments.

Pure functions. No I/O, no shared state: identical inputs always give an
identical series.
"""

from __future__ import annotations

import math
from typing import Dict, List, Sequence

from backend.schemas.projection import (
    ProjectionInput,
    ProjectionPoint,
    ProjectionSummary,
)

# Compounding is always monthly; the series is sampled once per year.
PERIODS_PER_YEAR = 12


def _round_amount(value: float) -> float:
    """Nearest whole currency unit, halves rounded up. Non-finite values pass through."""
    if not math.isfinite(value):
        return value
    # floor(value + 0.5) would round 0.49999999999999994 up
    whole = math.floor(value)
    if value - whole >= 0.5:
        whole += 1
    return float(whole)


def project(
    initial_amount: float,
    periodic_contribution: float,
    annual_rate_percent: float,
    years: int,
) -> List[ProjectionPoint]:
    """
    Build the year-by-year series from year 0 through ``years`` (inclusive).

    Order of operations (per monthly sub-period):
      1) Apply growth to the running balance.
      2) Deposit the contribution (it earns nothing until the next sub-period).
      3) At every 12th sub-period, emit a rounded point.

    Carried state stays unrounded; earnings come from the unrounded
    balance and contribution totals and are rounded once.
    """
    sub_rate = annual_rate_percent / 100 / PERIODS_PER_YEAR

    balance = initial_amount
    total_contributed = initial_amount

    series: List[ProjectionPoint] = [
        ProjectionPoint(
            year=0,
            balance=_round_amount(balance),
            contributions=_round_amount(total_contributed),
            earnings=0.0,
        )
    ]

    for month in range(1, years * PERIODS_PER_YEAR + 1):
        balance = balance * (1 + sub_rate) + periodic_contribution
        total_contributed += periodic_contribution

        if month % PERIODS_PER_YEAR == 0:
            series.append(
                ProjectionPoint(
                    year=month // PERIODS_PER_YEAR,
                    balance=_round_amount(balance),
                    contributions=_round_amount(total_contributed),
                    earnings=_round_amount(balance - total_contributed),
                )
            )

    return series


def project_input(request: ProjectionInput) -> List[ProjectionPoint]:
    """Run :func:`project` for a validated input model."""
    return project(
        initial_amount=request.initial_amount,
        periodic_contribution=request.periodic_contribution,
        annual_rate_percent=request.annual_rate_percent,
        years=request.years,
    )


def final_point(series: Sequence[ProjectionPoint]) -> ProjectionPoint:
    """Last point of a series. A series always holds at least the year-0 point."""
    return series[-1]


def return_on_investment(point: ProjectionPoint) -> float:
    """Earnings as a percentage of contributions.

    Zero contributions give NaN (no earnings) or a signed infinity; the value
    is not clamped, so callers decide how to display it.
    """
    if point.contributions == 0:
        if point.earnings == 0 or math.isnan(point.earnings):
            return math.nan
        return math.copysign(math.inf, point.earnings)
    return point.earnings / point.contributions * 100


def format_percent(value: float) -> str:
    """ROI as shown to the user, one decimal place."""
    return f"{value:.1f}"


def results_payload(series: Sequence[ProjectionPoint]) -> Dict[str, float]:
    """The three final-point figures stored with a saved calculation."""
    last = final_point(series)
    return {
        "finalBalance": last.balance,
        "totalContributions": last.contributions,
        "totalEarnings": last.earnings,
    }


def summarize(series: Sequence[ProjectionPoint]) -> ProjectionSummary:
    roi = return_on_investment(final_point(series))
    if not math.isfinite(roi):
        return ProjectionSummary(**results_payload(series))
    return ProjectionSummary(
        **results_payload(series),
        roiPercent=round(roi, 1),
        roiDisplay=format_percent(roi),
    )
