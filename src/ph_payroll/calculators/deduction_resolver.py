"""Statutory deduction lookup: SSS, PhilHealth, Pag-IBIG and withholding tax."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable

from ph_payroll.calculators.types import ZERO, DeductionBreakdown, round_money
from ph_payroll.models import DeductionRule, DeductionType

if TYPE_CHECKING:
    from ph_payroll.config import Settings

logger = logging.getLogger(__name__)


def _contains(rule: DeductionRule, amount: Decimal) -> bool:
    lower = rule.lower_limit if rule.lower_limit is not None else ZERO
    if amount < lower:
        return False
    return rule.upper_limit is None or amount <= rule.upper_limit


class DeductionResolver:
    """Resolves deduction amounts from the global deduction rules.

    Rules are grouped by type and held in ascending lower_limit order. Where
    brackets share a boundary, the first (lower) bracket wins. Rules bound
    to a specific payroll are ignored.
    """

    def __init__(self, rules: Iterable[DeductionRule], settings: Settings):
        self.settings = settings
        self._rules: dict[str, list[DeductionRule]] = {}
        for rule in rules:
            if not rule.is_global:
                continue
            self._rules.setdefault(rule.type_name, []).append(rule)
        for brackets in self._rules.values():
            brackets.sort(key=lambda r: r.lower_limit if r.lower_limit is not None else ZERO)

    def resolve(self, type_name: str | DeductionType, amount: Decimal) -> Decimal:
        """Deduction of the given type for a monthly amount."""
        kind = DeductionType(type_name)
        if kind is DeductionType.SSS:
            return self._calculate_sss(amount)
        if kind is DeductionType.PHILHEALTH:
            return self._calculate_philhealth(amount)
        if kind is DeductionType.PAGIBIG:
            return self._calculate_pagibig(amount)
        return self._calculate_withholding_tax(amount)

    def compute_statutory(
        self, basic_salary: Decimal, gross_income: Decimal
    ) -> DeductionBreakdown:
        """Contributions on basic salary, withholding tax on gross income."""
        return DeductionBreakdown(
            sss=self._calculate_sss(basic_salary),
            philhealth=self._calculate_philhealth(basic_salary),
            pagibig=self._calculate_pagibig(basic_salary),
            withholding_tax=self._calculate_withholding_tax(gross_income),
        )

    def _first_match(self, type_name: DeductionType, amount: Decimal) -> DeductionRule | None:
        for rule in self._rules.get(type_name.value, []):
            if _contains(rule, amount):
                return rule
        return None

    def _calculate_sss(self, amount: Decimal) -> Decimal:
        """Fixed contribution from the bracket containing the amount."""
        rule = self._first_match(DeductionType.SSS, amount)
        if rule is None:
            logger.debug("No SSS bracket covers %s; contribution is 0", amount)
            return ZERO
        return round_money(rule.fixed_amount or ZERO)

    def _calculate_philhealth(self, amount: Decimal) -> Decimal:
        rule = self._first_match(DeductionType.PHILHEALTH, amount)
        if rule is None:
            logger.debug("No PhilHealth rule covers %s; contribution is 0", amount)
            return ZERO
        if rule.rate is not None and rule.rate > 0:
            return round_money(amount * rule.rate)
        return round_money(rule.fixed_amount or ZERO)

    def _calculate_pagibig(self, amount: Decimal) -> Decimal:
        """Rate contribution capped at the configured ceiling."""
        rule = self._first_match(DeductionType.PAGIBIG, amount)
        rate = self.settings.pagibig_rate
        if rule is not None and rule.rate is not None:
            rate = rule.rate
        return min(round_money(amount * rate), round_money(self.settings.pagibig_cap))

    def _calculate_withholding_tax(self, amount: Decimal) -> Decimal:
        """Base tax plus the bracket rate on the excess over its lower limit."""
        rule = self._first_match(DeductionType.WITHHOLDING_TAX, amount)
        if rule is None:
            logger.debug("No withholding tax bracket covers %s; tax is 0", amount)
            return ZERO
        lower = rule.lower_limit if rule.lower_limit is not None else ZERO
        base_tax = rule.base_tax or ZERO
        rate = rule.rate or ZERO
        return round_money(base_tax + (amount - lower) * rate)
