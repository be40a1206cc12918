"""Due-date classification - overdue and due-soon status of loans"""

import math
from datetime import datetime
from typing import Iterable, List
from circulation_desk.domain.models import Classification, ClassifiedLoan, Loan
from circulation_desk.domain.exceptions import InvalidInputError
from circulation_desk.utils.date_utils import SECONDS_PER_DAY, ensure_utc


def classify(due_date: datetime | None, now: datetime) -> Classification:
    """
    Classify a due date against an explicit instant.

    Rules:
    - delta_days = ceil((due_date - now) / 1 day), using the exact time of day
      (no midnight normalization, so a due time later today gives 0 days)
    - now > due_date: overdue, days_overdue = abs(delta_days), days_until_due = 0
    - otherwise: days_until_due = delta_days, days_overdue = 0

    Raises:
        InvalidInputError: If due_date is None (item is not on loan)
    """
    if due_date is None:
        raise InvalidInputError("Cannot classify an item without a due date")

    due_date = ensure_utc(due_date)
    now = ensure_utc(now)

    delta_days = math.ceil((due_date - now).total_seconds() / SECONDS_PER_DAY)

    if now > due_date:
        return Classification(is_overdue=True, days_overdue=abs(delta_days), days_until_due=0)

    return Classification(is_overdue=False, days_overdue=0, days_until_due=delta_days)


def classify_loans(loans: Iterable[Loan], now: datetime) -> List[ClassifiedLoan]:
    """Classify a batch of loans against one shared instant"""
    return [ClassifiedLoan(loan=loan, classification=classify(loan.due_date, now)) for loan in loans]
