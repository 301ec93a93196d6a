"""Monthly installment schedules."""

from __future__ import annotations

from datetime import date

from dateutil.relativedelta import relativedelta

from parcel_engine.engine.rounding import quantize_money
from parcel_engine.models.offer import InstallmentDue, ResolvedInstallment


def add_months(d: date, months: int) -> date:
    """Calendar-month offset; the 31st of January plus one month is Feb 28/29."""
    return d + relativedelta(months=months)


def build_installment_schedule(
    resolution: ResolvedInstallment,
    start_date: date,
    places: int = 2,
) -> list[InstallmentDue]:
    """One row per month, the first due on ``start_date`` itself.

    Parameters
    ----------
    resolution : ResolvedInstallment
        Resolved offer supplying the term and monthly amount.
    start_date : date
        Due date of installment number 1.
    places : int
        Decimal places of each ``amount_due``.

    Returns
    -------
    list[InstallmentDue]
        Empty when the resolution has no months.
    """
    amount = quantize_money(resolution.monthly_amount, places)
    return [
        InstallmentDue(
            installment_number=i + 1,
            due_date=add_months(start_date, i),
            amount_due=amount,
        )
        for i in range(resolution.number_of_months)
    ]
