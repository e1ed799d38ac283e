"""
Unit tests for the repayment schedule engine.
Validates the quarterly amortization formula, lump-sum pricing and schedule invariants.
"""
import math
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime

import pytest

from crediflow.core.exceptions import InvalidLoanTermsError
from crediflow.schedule.engine import build_schedule, generate_schedule, period_payment, quarterly_rate
from crediflow.schedule.policy import LoanCategory, PaymentPlan, period_count, term_months
from crediflow.schedule.schemas import LoanTerms

ORIGINATION = date(2024, 1, 15)


def make_terms(**overrides) -> LoanTerms:
    values = {
        "principal": 500000.0,
        "annual_rate_percent": 15.0,
        "loan_category": "salary",
        "payment_plan": "installment",
        "origination_date": ORIGINATION,
    }
    values.update(overrides)
    return LoanTerms(**values)


def expected_payment(principal: float, annual_rate: float, periods: int) -> float:
    q = annual_rate / 4
    return principal * q * (1 + q) ** periods / ((1 + q) ** periods - 1)


@pytest.mark.parametrize("category, months", [
    ("salary", 12),
    ("business", 24),
    ("mortgage", 60),
    ("personal", 12),
    ("sme", 12),
    ("payday", 12),
    (LoanCategory.BUSINESS, 24),
    ("  Mortgage ", 60),
])
def test_term_lookup(category, months):
    """Known categories map to their term, anything else falls back to 12 months."""
    assert term_months(category) == months


@pytest.mark.parametrize("months, periods", [(12, 4), (24, 8), (60, 20), (6, 2), (7, 3), (1, 1)])
def test_period_count_rounds_partial_quarters_up(months, periods):
    assert period_count(months) == periods


def test_scenario_salary_installment():
    """500,000 at 15% over 4 quarters: q = 3.75% and payment follows the amortization formula."""
    terms = make_terms()
    schedule = generate_schedule(terms)

    assert quarterly_rate(15.0) == pytest.approx(0.0375)
    assert len(schedule) == 4
    assert schedule[0].payment == pytest.approx(expected_payment(500000, 0.15, 4))
    assert schedule[0].payment == pytest.approx(136934.37, abs=0.01)
    for entry in schedule:
        assert entry.payment == pytest.approx(136934.37, abs=0.01)


def test_first_period_interest():
    """Interest of the first period is the full principal times the quarterly rate."""
    schedule = generate_schedule(make_terms())

    assert schedule[0].interest == pytest.approx(500000 * 0.0375)
    assert schedule[0].period == 1


@pytest.mark.parametrize("category", ["salary", "business", "mortgage", "sme"])
@pytest.mark.parametrize("principal", [50000.0, 500000.0, 1234567.89, 5000000.0])
def test_principal_components_sum_to_principal(category, principal):
    schedule = generate_schedule(make_terms(principal=principal, loan_category=category))

    total_principal = math.fsum(entry.principal for entry in schedule)
    assert total_principal == pytest.approx(principal, rel=1e-6)


@pytest.mark.parametrize("category", ["salary", "business", "mortgage"])
def test_balance_decreases_to_exactly_zero(category):
    schedule = generate_schedule(make_terms(loan_category=category))

    previous = 500000.0
    for entry in schedule:
        assert 0 <= entry.balance <= previous
        previous = entry.balance

    assert schedule[-1].balance == 0.0


def test_periods_are_contiguous():
    schedule = generate_schedule(make_terms(loan_category="mortgage"))

    assert [entry.period for entry in schedule] == list(range(1, 21))


def test_payment_splits_into_principal_and_interest():
    for entry in generate_schedule(make_terms(loan_category="business")):
        assert entry.principal + entry.interest == pytest.approx(entry.payment)
        assert entry.payment > 0


def test_installment_due_dates_advance_by_quarters():
    schedule = generate_schedule(make_terms())

    assert [entry.due_date for entry in schedule] == [
        date(2024, 4, 15),
        date(2024, 7, 15),
        date(2024, 10, 15),
        date(2025, 1, 15),
    ]


def test_due_dates_clamp_to_month_end():
    schedule = generate_schedule(make_terms(origination_date=date(2023, 11, 30)))

    assert schedule[0].due_date == date(2024, 2, 29)
    assert schedule[1].due_date == date(2024, 5, 30)


def test_origination_timestamp_uses_calendar_date():
    terms = make_terms(origination_date=datetime(2024, 1, 15, 17, 45, 12))

    assert terms.origination_date == ORIGINATION
    assert generate_schedule(terms)[0].due_date == date(2024, 4, 15)


def test_scenario_salary_full_payment():
    """Lump sum: simple interest for the whole term, due one month after origination."""
    schedule = generate_schedule(make_terms(payment_plan="full"))

    assert len(schedule) == 1
    entry = schedule[0]
    assert entry.period == 1
    assert entry.interest == pytest.approx(75000.0)
    assert entry.payment == pytest.approx(575000.0)
    assert entry.principal == 500000.0
    assert entry.balance == 0.0
    assert entry.due_date == date(2024, 2, 15)


def test_full_payment_interest_is_not_compounded():
    """A 24 month business loan pays exactly twice the annual rate on the principal."""
    entry = generate_schedule(make_terms(loan_category="business", payment_plan="full"))[0]

    assert entry.interest == pytest.approx(500000 * 0.15 * 2)
    assert entry.due_date == date(2024, 2, 15)


def test_full_payment_due_date_clamps_to_month_end():
    entry = generate_schedule(make_terms(payment_plan="full", origination_date=date(2023, 1, 31)))[0]

    assert entry.due_date == date(2023, 2, 28)


def test_zero_rate_is_straight_line():
    schedule = generate_schedule(make_terms(annual_rate_percent=0, loan_category="business"))

    assert len(schedule) == 8
    for entry in schedule:
        assert entry.payment == pytest.approx(500000 / 8)
        assert entry.interest == 0
        assert not math.isnan(entry.payment)
    assert schedule[-1].balance == 0.0


def test_zero_rate_full_payment_has_no_interest():
    entry = generate_schedule(make_terms(annual_rate_percent=0, payment_plan="full"))[0]

    assert entry.payment == 500000.0
    assert entry.interest == 0


@pytest.mark.parametrize("rate", [1e-15, 1e-300, 5e-324])
def test_vanishing_rate_falls_back_to_straight_line(rate):
    schedule = generate_schedule(make_terms(annual_rate_percent=rate))

    assert len(schedule) == 4
    for entry in schedule:
        assert entry.payment == pytest.approx(500000 / 4)
        assert math.isfinite(entry.payment)
    assert math.fsum(entry.principal for entry in schedule) == pytest.approx(500000.0)
    assert schedule[-1].balance == 0.0


def test_small_rate_payment_stays_accurate():
    payment = period_payment(500000.0, 1e-9, 4)

    assert payment > 500000 / 4
    assert payment == pytest.approx(500000 / 4, rel=1e-9)


@pytest.mark.parametrize("rate", [100.0, 120.0, 400.0])
def test_rates_above_one_hundred_percent_build_a_schedule(rate):
    schedule = generate_schedule(make_terms(annual_rate_percent=rate, loan_category="business"))

    assert len(schedule) == 8
    assert schedule[0].payment == pytest.approx(expected_payment(500000, rate / 100, 8))
    assert math.fsum(entry.principal for entry in schedule) == pytest.approx(500000.0)
    assert schedule[-1].balance == 0.0


def test_rate_too_large_to_amortize_is_rejected():
    with pytest.raises(InvalidLoanTermsError):
        period_payment(500000.0, 1e300, 20)


def test_schedule_is_deterministic():
    terms = make_terms(loan_category="mortgage", principal=3210000.0)

    assert generate_schedule(terms) == generate_schedule(terms)


def test_concurrent_generation_matches_sequential():
    terms = make_terms(loan_category="mortgage")
    expected = generate_schedule(terms)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: generate_schedule(terms), range(32)))

    assert all(result == expected for result in results)


def test_build_schedule_with_explicit_term():
    """The calculator passes a term in months instead of a category."""
    schedule = build_schedule(500000.0, 15.0, 18, PaymentPlan.INSTALLMENT, ORIGINATION)

    assert len(schedule) == 6
    assert schedule[-1].balance == 0.0


def test_serialized_amounts_are_rounded():
    entry = generate_schedule(make_terms())[0]
    dumped = entry.model_dump()

    assert dumped["payment"] == round(entry.payment, 2)
    assert dumped["interest"] == round(entry.interest, 2)
    assert entry.payment != dumped["payment"]


def test_loan_terms_are_immutable():
    terms = make_terms()

    with pytest.raises(Exception):
        terms.principal = 1.0


@pytest.mark.parametrize("overrides", [
    {"principal": 0},
    {"principal": -100.0},
    {"principal": float("inf")},
    {"annual_rate_percent": -1},
    {"payment_plan": "weekly"},
    {"loan_category": ""},
])
def test_invalid_terms_are_rejected(overrides):
    with pytest.raises(ValueError):
        make_terms(**overrides)


def test_build_schedule_rejects_unknown_plan():
    with pytest.raises(InvalidLoanTermsError):
        build_schedule(500000.0, 15.0, 12, "weekly", ORIGINATION)


def test_build_schedule_rejects_empty_term():
    with pytest.raises(InvalidLoanTermsError):
        build_schedule(500000.0, 15.0, 0, PaymentPlan.INSTALLMENT, ORIGINATION)

    with pytest.raises(InvalidLoanTermsError):
        build_schedule(500000.0, 15.0, 0, PaymentPlan.FULL, ORIGINATION)


@pytest.mark.parametrize("principal, rate, periods", [(0, 15.0, 4), (500000, -5.0, 4), (500000, 15.0, 0)])
def test_period_payment_rejects_invalid_input(principal, rate, periods):
    with pytest.raises(InvalidLoanTermsError):
        period_payment(principal, rate, periods)
