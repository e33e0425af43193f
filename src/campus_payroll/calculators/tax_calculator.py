"""Step-function tax on monthly gross pay."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class TaxStep:
    """Rate applied to the whole gross once gross exceeds the threshold."""

    threshold: Decimal  # Exclusive lower bound
    rate: Decimal  # As decimal, e.g., 0.10 for 10%


class StepTaxSchedule:
    """Cliff-style tax: the highest exceeded threshold sets the rate for all of gross.

    This is not a marginal bracket schedule. A gross of exactly 100000
    stays in the 5% step; 100000.01 moves the whole amount to 10%.
    """

    DEFAULT_STEPS: tuple[TaxStep, ...] = (
        TaxStep(threshold=Decimal("100000"), rate=Decimal("0.10")),
        TaxStep(threshold=Decimal("50000"), rate=Decimal("0.05")),
    )

    def __init__(self, steps: tuple[TaxStep, ...] | None = None):
        steps = self.DEFAULT_STEPS if steps is None else steps
        self.steps = tuple(sorted(steps, key=lambda s: s.threshold, reverse=True))

    def rate_for(self, gross: Decimal) -> Decimal:
        """Rate applicable to this gross."""
        for step in self.steps:
            if gross > step.threshold:
                return step.rate
        return Decimal("0")

    def calculate(self, gross: Decimal) -> Decimal:
        """Tax owed on gross, rounded to cents."""
        if gross <= 0:
            return Decimal("0.00")
        return (gross * self.rate_for(gross)).quantize(CENTS, rounding=ROUND_HALF_UP)
