from __future__ import annotations

import math
from math import isclose

import pytest
from pydantic import ValidationError

from backend.core.projection import project, project_input
from backend.schemas.projection import ProjectionInput


def test_series_has_one_point_per_year_including_zero():
    series = project(10000, 500, 8, 20)

    assert len(series) == 21
    assert [point.year for point in series] == list(range(21))


def test_year_zero_is_initial_amount():
    series = project(10000.4, 500, 8, 3)

    assert series[0].model_dump() == {
        "year": 0,
        "balance": 10000.0,
        "contributions": 10000.0,
        "earnings": 0.0,
    }


def test_one_year_at_eight_percent():
    series = project(10000, 500, 8, 1)

    assert series[0].model_dump() == {
        "year": 0,
        "balance": 10000.0,
        "contributions": 10000.0,
        "earnings": 0.0,
    }
    assert series[1].contributions == 16000
    assert series[1].balance > 16000
    assert series[1].earnings == series[1].balance - series[1].contributions


def test_growth_is_applied_before_the_monthly_deposit():
    series = project(10000, 500, 8, 1)

    rate = 8 / 100 / 12
    balance = 10000.0
    for _ in range(12):
        balance = balance * (1 + rate) + 500
    assert series[1].balance == math.floor(balance + 0.5)

    # Depositing first would have earned one extra month on every deposit.
    contribute_first = 10000.0
    for _ in range(12):
        contribute_first = (contribute_first + 500) * (1 + rate)
    assert series[1].balance < round(contribute_first)


def test_nothing_invested_stays_zero():
    series = project(0, 0, 8, 5)

    assert len(series) == 6
    for point in series:
        assert point.balance == 0
        assert point.contributions == 0
        assert point.earnings == 0


def test_retirement_defaults_thirty_years():
    series = project(50000, 1000, 7, 30)

    assert len(series) == 31
    last = series[-1]
    assert last.contributions == 410000
    assert last.earnings > 0
    assert math.isfinite(last.earnings / last.contributions * 100)


def test_zero_rate_is_linear_accumulation():
    """
    With no growth, the balance is the principal plus every deposit so far.
    """
    series = project(2500, 300, 0, 10)

    for point in series:
        expected = 2500 + 300 * 12 * point.year
        assert point.balance == expected
        assert point.contributions == expected
        assert point.earnings == 0


def test_contributions_strictly_increase_with_positive_deposits():
    series = project(1000, 50, 5, 15)

    prev = None
    for point in series:
        if prev is not None:
            assert point.contributions > prev.contributions
            assert point.balance >= point.contributions
        prev = point


def test_earnings_use_unrounded_running_values():
    series = project(1000.3, 0.4, 6, 4)

    # rounding balance and contributions first would give 274
    assert series[4].earnings == 273
    assert series[4].balance - series[4].contributions == 274

    rate = 6 / 100 / 12
    balance = total = 1000.3
    for month in range(1, 49):
        balance = balance * (1 + rate) + 0.4
        total += 0.4
        if month % 12 == 0:
            assert series[month // 12].earnings == math.floor(balance - total + 0.5)


def test_rounding_does_not_push_just_below_half_up():
    assert project(0.49999999999999994, 0, 0, 0)[0].balance == 0
    assert project(0.5, 0, 0, 0)[0].balance == 1
    assert project(2.5, 0, 0, 0)[0].balance == 3


def test_negative_rate_compounds_losses():
    series = project(10000, 0, -10, 5)

    balances = [point.balance for point in series]
    assert balances == sorted(balances, reverse=True)
    assert series[-1].balance < 10000
    assert series[-1].contributions == 10000
    assert series[-1].earnings < 0


def test_withdrawals_reduce_contributions():
    series = project(10000, -100, 0, 2)

    assert [point.contributions for point in series] == [10000, 8800, 7600]


def test_zero_and_negative_years_return_only_the_initial_point():
    for years in (0, -3):
        series = project(1234, 100, 5, years)
        assert len(series) == 1
        assert series[0].year == 0
        assert series[0].balance == 1234


def test_identical_inputs_give_identical_series():
    first = project(15000, 750, 6.5, 25)
    second = project(15000, 750, 6.5, 25)

    assert first == second


def test_non_finite_inputs_propagate():
    series = project(1000, math.inf, 5, 1)

    assert math.isinf(series[1].balance)
    assert math.isinf(series[1].contributions)
    assert math.isnan(series[1].earnings)


def test_points_are_immutable():
    series = project(100, 10, 5, 1)

    with pytest.raises(ValidationError):
        series[0].balance = 5
    assert series[0].balance == 100


def test_project_input_matches_plain_call():
    request = ProjectionInput(
        initial_amount=5000, periodic_contribution=200, annual_rate_percent=4, years=3
    )

    assert project_input(request) == project(5000, 200, 4, 3)
    assert isclose(project_input(request)[-1].contributions, 5000 + 200 * 36, abs_tol=0.0)
