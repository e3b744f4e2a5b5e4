"""Position benefit resolution."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from ph_payroll.calculators.types import ZERO, BenefitBreakdown, BenefitItem, round_money
from ph_payroll.models import PositionBenefit

RICE_SUBSIDY = "Rice Subsidy"
PHONE_ALLOWANCE = "Phone Allowance"
CLOTHING_ALLOWANCE = "Clothing Allowance"

# Benefit type name -> BenefitBreakdown attribute
_ITEMIZED = {
    RICE_SUBSIDY: "rice_subsidy",
    PHONE_ALLOWANCE: "phone_allowance",
    CLOTHING_ALLOWANCE: "clothing_allowance",
}


def itemize_benefits(items: Iterable[BenefitItem]) -> BenefitBreakdown:
    """Total benefit items and itemize the known allowance types.

    Unknown benefit types still count toward the total.
    """
    breakdown = BenefitBreakdown()
    for item in items:
        breakdown.items.append(item)
        breakdown.total_benefit += item.amount
        attr = _ITEMIZED.get(item.name)
        if attr is not None:
            setattr(breakdown, attr, getattr(breakdown, attr) + item.amount)
    return breakdown


def resolve_benefits(position_benefits: Iterable[PositionBenefit] | None) -> BenefitBreakdown:
    """Benefits granted by a position. A missing position resolves to zeros."""
    if not position_benefits:
        return BenefitBreakdown()
    return itemize_benefits(
        BenefitItem(
            benefit_type_id=row.benefit_type_id,
            name=row.benefit_type.name if row.benefit_type is not None else "",
            amount=round_money(Decimal(row.value if row.value is not None else ZERO)),
        )
        for row in position_benefits
    )
