# opsboard/services/finance.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from opsboard.schemas.schema import Finance, FinanceStatus, FinanceType
from opsboard.storage.base import Storage

logger = logging.getLogger(__name__)

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

ZERO = Decimal("0")
ONE_DECIMAL = Decimal("0.1")


class FinanceSummary(BaseModel):
    """Headline figures of the finance dashboard"""
    received_income: Decimal = Field(ZERO, description="Income already received")
    pending_income: Decimal = Field(ZERO, description="Income still pending, overdue excluded")
    overdue_amount: Decimal = Field(ZERO, description="Income past due")
    total_expected_income: Decimal = Field(ZERO, description="Received, pending and overdue income")
    total_expenses: Decimal = Field(ZERO, description="All expenses regardless of status")
    net_income: Decimal = Field(ZERO, description="Received income minus expenses")
    received_pct: Decimal = ZERO
    pending_pct: Decimal = ZERO
    overdue_pct: Decimal = ZERO


class MonthlyIncome(BaseModel):
    month: str
    expected: Decimal = ZERO
    received: Decimal = ZERO
    pending: Decimal = ZERO


class FinanceReport(BaseModel):
    summary: FinanceSummary
    monthly: List[MonthlyIncome]
    expenses_by_category: Dict[str, Decimal]


def _amount(record: Finance) -> Decimal:
    return Decimal(record.amount)


def _total(records: Iterable[Finance], type_: FinanceType, status: Optional[FinanceStatus] = None) -> Decimal:
    return sum(
        (
            _amount(r)
            for r in records
            if r.type == type_.value and (status is None or r.status == status.value)
        ),
        ZERO,
    )


def _share(part: Decimal, whole: Decimal) -> Decimal:
    if whole == 0:
        return ZERO
    return (part / whole * 100).quantize(ONE_DECIMAL)


def summarize_finances(records: Iterable[Finance]) -> FinanceSummary:
    records = list(records)

    received = _total(records, FinanceType.INCOME, FinanceStatus.RECEIVED)
    pending = _total(records, FinanceType.INCOME, FinanceStatus.PENDING)
    overdue = _total(records, FinanceType.INCOME, FinanceStatus.OVERDUE)
    expected = received + pending + overdue
    expenses = _total(records, FinanceType.EXPENSE)

    return FinanceSummary(
        received_income=received,
        pending_income=pending,
        overdue_amount=overdue,
        total_expected_income=expected,
        total_expenses=expenses,
        net_income=received - expenses,
        received_pct=_share(received, expected),
        pending_pct=_share(pending, expected),
        overdue_pct=_share(overdue, expected),
    )


def monthly_income(records: Iterable[Finance], year: Optional[int] = None) -> List[MonthlyIncome]:
    """Expected, received and pending income per month of ``year``.

    Any income not yet received counts as pending here, whatever its status.
    """
    if year is None:
        year = datetime.now().year

    monthly = [MonthlyIncome(month=month) for month in MONTHS]

    for record in records:
        if record.type != FinanceType.INCOME.value or record.date.year != year:
            continue
        row = monthly[record.date.month - 1]
        amount = _amount(record)
        row.expected += amount
        if record.status == FinanceStatus.RECEIVED.value:
            row.received += amount
        else:
            row.pending += amount

    return monthly


def expenses_by_category(records: Iterable[Finance]) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = {}
    for record in records:
        if record.type != FinanceType.EXPENSE.value:
            continue
        totals[record.category] = totals.get(record.category, ZERO) + _amount(record)
    return totals


async def build_finance_report(storage: Storage, year: Optional[int] = None) -> FinanceReport:
    records = await storage.get_all_finances()
    logger.debug(f"Building finance report from {len(records)} transactions")
    return FinanceReport(
        summary=summarize_finances(records),
        monthly=monthly_income(records, year),
        expenses_by_category=expenses_by_category(records),
    )
