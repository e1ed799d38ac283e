"""
Product pricing policy.
Loan categories, payment plans and the category to term lookup shared by every schedule.
"""
import enum
import math
from typing import Dict, Union

from crediflow.core.exceptions import InvalidLoanTermsError

DEFAULT_ANNUAL_RATE_PERCENT = 15.0
DEFAULT_TERM_MONTHS = 12

MONTHS_PER_PERIOD = 3
PERIODS_PER_YEAR = 4
FULL_PAYMENT_DUE_MONTHS = 1

MIN_LOAN_AMOUNT = 50_000
MAX_LOAN_AMOUNT = 5_000_000


class LoanCategory(str, enum.Enum):
    """Loan products offered on the application form."""
    PERSONAL = "personal"
    SALARY = "salary"
    BUSINESS = "business"
    SME = "sme"
    MORTGAGE = "mortgage"


class PaymentPlan(str, enum.Enum):
    """How the borrower repays: quarterly amortized installments or one lump sum."""
    INSTALLMENT = "installment"
    FULL = "full"


# Categories not listed here use DEFAULT_TERM_MONTHS
TERM_MONTHS: Dict[str, int] = {
    LoanCategory.SALARY.value: 12,
    LoanCategory.BUSINESS.value: 24,
    LoanCategory.MORTGAGE.value: 60,
}


def term_months(category: Union[LoanCategory, str]) -> int:
    """Returns the loan term in months for a category, defaulting to 12 for anything unknown."""
    key = category.value if isinstance(category, LoanCategory) else str(category).strip().lower()
    return TERM_MONTHS.get(key, DEFAULT_TERM_MONTHS)


def period_count(months: int) -> int:
    """Number of quarterly periods needed to cover a term (a partial quarter counts as one)."""
    if months < 1:
        raise InvalidLoanTermsError(f"Loan term must be at least 1 month, got {months}")
    return math.ceil(months / MONTHS_PER_PERIOD)
