"""
hoteldesk/domain/rules/billing_rules.py

Invoice arithmetic

All money is Decimal, rounded half-up to two places. The order is fixed:
promo discount on the room subtotal, then the flat additional discount, tax
on what remains, then advances, payments and refunds against the grand
total.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0")

Number = Union[int, float, Decimal, str]
DateLike = Union[date, datetime]


def money(value: Number) -> Decimal:
    """Convert to a two-place Decimal"""
    return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)


def nights_between(start: DateLike, end: DateLike) -> int:
    """Nights between two moments, rounded up, at least one"""
    if isinstance(start, datetime) and isinstance(end, datetime):
        seconds = (end - start).total_seconds()
        nights = math.ceil(seconds / 86400)
    else:
        start_day = start.date() if isinstance(start, datetime) else start
        end_day = end.date() if isinstance(end, datetime) else end
        nights = (end_day - start_day).days
    return max(nights, 1)


def overlaps(a_start: DateLike, a_end: DateLike, b_start: DateLike, b_end: DateLike) -> bool:
    """Half-open interval overlap: [a_start, a_end) and [b_start, b_end)"""
    return a_start < b_end and b_start < a_end


@dataclass
class InvoiceTotals:
    subtotal: Decimal
    promo_discount: Decimal
    additional_discount: Decimal
    discount_amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    grand_total: Decimal
    advance_adjusted: Decimal
    total_paid: Decimal
    total_refunded: Decimal
    balance_due: Decimal


def compute_totals(subtotal: Number, promo_percentage: Number = 0,
                   additional_discount: Number = 0, tax_rate: Number = 0,
                   advance: Number = 0, paid: Number = 0, refunded: Number = 0) -> InvoiceTotals:
    """
    Compute invoice totals

    Args:
        subtotal: sum of invoice lines
        promo_percentage: promo code percentage (0..100)
        additional_discount: flat discount granted at the desk
        tax_rate: tax percentage
        advance: advances collected before check-in
        paid: payments collected during the stay
        refunded: refunds handed back
    """
    subtotal = money(subtotal)
    promo = money(subtotal * Decimal(str(promo_percentage or 0)) / Decimal(100))
    # the flat discount can never push the taxable amount below zero
    additional = min(money(additional_discount), subtotal - promo)
    discount_amount = promo + additional
    taxable = subtotal - discount_amount
    rate = Decimal(str(tax_rate or 0))
    tax = money(taxable * rate / Decimal(100))
    grand_total = taxable + tax

    advance = money(advance)
    paid = money(paid)
    refunded = money(refunded)
    balance = grand_total - advance - paid + refunded

    return InvoiceTotals(
        subtotal=subtotal,
        promo_discount=promo,
        additional_discount=additional,
        discount_amount=discount_amount,
        tax_rate=money(rate),
        tax_amount=tax,
        grand_total=grand_total,
        advance_adjusted=advance,
        total_paid=paid,
        total_refunded=refunded,
        balance_due=balance,
    )
