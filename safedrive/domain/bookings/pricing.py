"""Booking price calculation"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ...config import SERVICE_FEE_RATE


@dataclass(frozen=True)
class PriceBreakdown:
    days: int
    daily_rate: float
    subtotal: float
    service_fee: float
    security_deposit: float
    total: float


def rental_days(start_date: date, end_date: date) -> int:
    """Whole days between the dates, rounded up, never less than one"""
    seconds = (end_date - start_date).total_seconds()
    return max(1, math.ceil(seconds / 86400))


def calculate_pricing(
    start_date: date,
    end_date: date,
    daily_rate: float,
    security_deposit: Optional[float] = 0,
    fee_rate: float = SERVICE_FEE_RATE,
) -> PriceBreakdown:
    """
    subtotal = days × daily_rate
    service_fee = subtotal × fee_rate
    total = subtotal + service_fee + security_deposit
    """
    days = rental_days(start_date, end_date)
    deposit = float(security_deposit or 0)
    subtotal = round(days * float(daily_rate), 2)
    service_fee = round(subtotal * fee_rate, 2)
    total = round(subtotal + service_fee + deposit, 2)

    return PriceBreakdown(
        days=days,
        daily_rate=float(daily_rate),
        subtotal=subtotal,
        service_fee=service_fee,
        security_deposit=deposit,
        total=total,
    )
