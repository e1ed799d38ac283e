"""
Repayment schedule engine.
Quarterly Price Table amortization for installment loans and simple prorated interest for lump-sum loans.

Every function here is pure: the same inputs always yield the same schedule, and nothing is cached or stored.
"""
import math
from datetime import date, datetime
from typing import List, Union

from dateutil.relativedelta import relativedelta

from crediflow.core.exceptions import InvalidLoanTermsError
from crediflow.schedule.policy import (
    FULL_PAYMENT_DUE_MONTHS,
    MONTHS_PER_PERIOD,
    PERIODS_PER_YEAR,
    PaymentPlan,
    period_count,
    term_months,
)
from crediflow.schedule.schemas import LoanTerms, ScheduleEntry


def quarterly_rate(annual_rate_percent: float) -> float:
    """Converts a nominal annual percentage into the per-quarter decimal rate."""
    return annual_rate_percent / 100 / PERIODS_PER_YEAR


def period_payment(principal: float, annual_rate_percent: float, periods: int) -> float:
    """
    Fixed payment per quarter.

    Formula: PMT = P * [q * (1+q)^n] / [(1+q)^n - 1]
    A zero rate, or one too small to register against 1.0, degenerates to straight-line repayment (P / n).
    """
    if principal <= 0:
        raise InvalidLoanTermsError(f"Principal must be greater than zero, got {principal}")
    if annual_rate_percent < 0:
        raise InvalidLoanTermsError(f"Interest rate cannot be negative, got {annual_rate_percent}")
    if periods < 1:
        raise InvalidLoanTermsError(f"At least one repayment period is required, got {periods}")

    rate = quarterly_rate(annual_rate_percent)

    # (1+q)^n - 1, computed without cancellation for tiny q
    try:
        growth = math.expm1(periods * math.log1p(rate))
    except OverflowError:
        raise InvalidLoanTermsError(f"Interest rate {annual_rate_percent}% is too large to amortize")
    if growth <= 0:
        return principal / periods

    return principal * rate * (growth + 1) / growth


def build_schedule(
    principal: float,
    annual_rate_percent: float,
    months: int,
    plan: Union[PaymentPlan, str],
    origination_date: date
) -> List[ScheduleEntry]:
    """
    Builds the schedule for an explicit term in months.
    Used directly by the calculator preview, where the borrower picks the term.
    """
    if isinstance(origination_date, datetime):
        origination_date = origination_date.date()

    try:
        plan = PaymentPlan(plan)
    except ValueError:
        raise InvalidLoanTermsError(f"Unknown payment plan: {plan!r}")

    if plan == PaymentPlan.FULL:
        return [_lump_sum_entry(principal, annual_rate_percent, months, origination_date)]

    return _installment_entries(principal, annual_rate_percent, months, origination_date)


def generate_schedule(terms: LoanTerms) -> List[ScheduleEntry]:
    """Builds the schedule for a loan, taking the term from its category."""
    return build_schedule(
        terms.principal,
        terms.annual_rate_percent,
        term_months(terms.loan_category),
        terms.payment_plan,
        terms.origination_date
    )


def _installment_entries(
    principal: float,
    annual_rate_percent: float,
    months: int,
    origination_date: date
) -> List[ScheduleEntry]:
    periods = period_count(months)
    payment = period_payment(principal, annual_rate_percent, periods)
    rate = quarterly_rate(annual_rate_percent)

    entries: List[ScheduleEntry] = []
    balance = principal

    for period in range(1, periods + 1):
        interest = balance * rate

        if period == periods:
            # Last period retires whatever is left so the balance closes at exactly zero
            principal_part = balance
            amount = principal_part + interest
            balance = 0.0
        else:
            principal_part = payment - interest
            amount = payment
            balance = max(0.0, balance - principal_part)

        entries.append(ScheduleEntry(
            period=period,
            due_date=origination_date + relativedelta(months=MONTHS_PER_PERIOD * period),
            payment=amount,
            principal=principal_part,
            interest=interest,
            balance=balance
        ))

    return entries


def _lump_sum_entry(
    principal: float,
    annual_rate_percent: float,
    months: int,
    origination_date: date
) -> ScheduleEntry:
    if principal <= 0:
        raise InvalidLoanTermsError(f"Principal must be greater than zero, got {principal}")
    if annual_rate_percent < 0:
        raise InvalidLoanTermsError(f"Interest rate cannot be negative, got {annual_rate_percent}")
    if months < 1:
        raise InvalidLoanTermsError(f"Loan term must be at least 1 month, got {months}")

    # Simple interest prorated over the term, not compounded
    interest = principal * (annual_rate_percent / 100) * (months / 12)

    return ScheduleEntry(
        period=1,
        due_date=origination_date + relativedelta(months=FULL_PAYMENT_DUE_MONTHS),
        payment=principal + interest,
        principal=principal,
        interest=interest,
        balance=0.0
    )
