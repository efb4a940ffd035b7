"""Domain-specific calculation helpers."""

from .bonus import bonus_period, compute_annual_bonuses, compute_bonus
from .contributions import compute_contributions, compute_self_employed_contributions
from .credits import compute_tax_credit
from .freelance import calculate_freelance
from .gift import calculate_gift_tax
from .income import calculate_income_tax
from .solver import solve_gross_from_net
from .utils import calculate_progressive_tax, format_percentage, round_currency, round_rate

__all__ = [
    "bonus_period",
    "calculate_freelance",
    "calculate_gift_tax",
    "calculate_income_tax",
    "calculate_progressive_tax",
    "compute_annual_bonuses",
    "compute_bonus",
    "compute_contributions",
    "compute_self_employed_contributions",
    "compute_tax_credit",
    "format_percentage",
    "round_currency",
    "round_rate",
    "solve_gross_from_net",
]
