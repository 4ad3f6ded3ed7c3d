from collections.abc import Collection
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from intake.analysis.models import DocumentAnalysis

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class CalculationSummary:
    """Credits and price for one analysis across a language selection."""

    total_chars: int
    credits_required: int
    total_cost: Decimal
    currency_symbol: str = "£"

    @property
    def formatted_cost(self) -> str:
        return f"{self.currency_symbol}{self.total_cost:.2f}"


class CostCalculator:
    """Linear pricing: one credit per character per target language."""

    def __init__(self, unit_price: Decimal, currency_symbol: str = "£") -> None:
        if unit_price < 0:
            raise ValueError("unit_price must be non-negative")
        self._unit_price = Decimal(unit_price)
        self._currency_symbol = currency_symbol

    @property
    def unit_price(self) -> Decimal:
        return self._unit_price

    def calculate(
        self,
        analysis: DocumentAnalysis,
        target_languages: Collection[str],
    ) -> CalculationSummary:
        """Pure and deterministic; identical inputs give identical summaries."""
        total_chars = analysis.char_count * len(set(target_languages))
        total_cost = (Decimal(total_chars) * self._unit_price).quantize(
            _CENTS, rounding=ROUND_HALF_UP
        )
        return CalculationSummary(
            total_chars=total_chars,
            credits_required=total_chars,
            total_cost=total_cost,
            currency_symbol=self._currency_symbol,
        )
