"""Gift (donation) tax for relationship categories A, B and C."""

from __future__ import annotations

from hellastax.backend.app.models import GiftTaxResult
from hellastax.backend.config.year_config import GiftConfig

from .utils import non_negative, round_currency


def calculate_gift_tax(
    gift_value: float,
    previous_gifts: float,
    category: str,
    config: GiftConfig,
) -> GiftTaxResult:
    """Tax the cumulative gifts from one donor above the category threshold.

    The tax already attributable to previously reported gifts is subtracted,
    leaving the amount due on the current gift.
    """

    key = category.strip().upper()
    try:
        rules = config.categories[key]
    except KeyError as exc:
        raise ValueError(f"Unknown gift category '{category}'") from exc

    gift_value = non_negative(gift_value)
    previous_gifts = non_negative(previous_gifts)
    total = gift_value + previous_gifts

    taxable = non_negative(total - rules.tax_free_threshold)
    total_tax = taxable * rules.rate
    previous_tax = non_negative(previous_gifts - rules.tax_free_threshold) * rules.rate

    return GiftTaxResult(
        category=key,
        gift_value=round_currency(gift_value),
        previous_gifts=round_currency(previous_gifts),
        total_gift_value=round_currency(total),
        tax_free_threshold=round_currency(rules.tax_free_threshold),
        rate=rules.rate,
        taxable_amount=round_currency(taxable),
        total_tax=round_currency(total_tax),
        previous_tax=round_currency(previous_tax),
        tax_due=round_currency(non_negative(total_tax - previous_tax)),
    )


__all__ = ["calculate_gift_tax"]
