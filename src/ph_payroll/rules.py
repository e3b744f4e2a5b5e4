"""Default statutory deduction rules and seeding."""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from ph_payroll.calculators.types import round_money
from ph_payroll.models import DeductionRule, DeductionType
from ph_payroll.repositories import DeductionRuleRepository

logger = logging.getLogger(__name__)

SSS_EMPLOYEE_SHARE = Decimal("0.045")
SSS_MSC_MIN = 4000
SSS_MSC_MAX = 30000
SSS_MSC_STEP = 500
SSS_CEILING = Decimal("999999.99")

PHILHEALTH_RATE = Decimal("0.0275")
PAGIBIG_RATE = Decimal("0.02")

# (lower_limit, upper_limit, base_tax, rate). Adjacent brackets share a
# boundary; the lower bracket owns it.
WITHHOLDING_TAX_BRACKETS: list[tuple[str, str, str, str]] = [
    ("0", "20833", "0", "0"),
    ("20833", "33333", "0", "0.20"),
    ("33333", "66667", "2500", "0.25"),
    ("66667", "166667", "10833", "0.30"),
    ("166667", "666667", "40833", "0.32"),
    ("666667", "999999999", "200833", "0.35"),
]


def default_sss_rules() -> list[DeductionRule]:
    """Employee share of the monthly salary credit, one bracket per credit."""
    rules = []
    for msc in range(SSS_MSC_MIN, SSS_MSC_MAX + 1, SSS_MSC_STEP):
        lower = Decimal("0") if msc == SSS_MSC_MIN else Decimal(msc - 250)
        upper = SSS_CEILING if msc == SSS_MSC_MAX else Decimal(msc) + Decimal("249.99")
        rules.append(
            DeductionRule(
                type_name=DeductionType.SSS.value,
                lower_limit=lower,
                upper_limit=upper,
                fixed_amount=round_money(Decimal(msc) * SSS_EMPLOYEE_SHARE),
            )
        )
    return rules


def default_withholding_tax_rules() -> list[DeductionRule]:
    return [
        DeductionRule(
            type_name=DeductionType.WITHHOLDING_TAX.value,
            lower_limit=Decimal(lower),
            upper_limit=Decimal(upper),
            base_tax=Decimal(base),
            rate=Decimal(rate),
        )
        for lower, upper, base, rate in WITHHOLDING_TAX_BRACKETS
    ]


def default_deduction_rules() -> list[DeductionRule]:
    """Fresh, unsaved instances of every default global rule."""
    return [
        *default_sss_rules(),
        DeductionRule(type_name=DeductionType.PHILHEALTH.value, rate=PHILHEALTH_RATE),
        DeductionRule(type_name=DeductionType.PAGIBIG.value, rate=PAGIBIG_RATE),
        *default_withholding_tax_rules(),
    ]


async def seed_default_deduction_rules(session: AsyncSession) -> int:
    """Insert the default global rules unless global rules already exist.

    Returns the number of rules inserted.
    """
    repository = DeductionRuleRepository(session)
    if await repository.global_rules():
        logger.info("Global deduction rules already present; skipping seed")
        return 0

    rules = default_deduction_rules()
    await repository.add_all(rules)
    logger.info("Seeded %d default deduction rules", len(rules))
    return len(rules)
