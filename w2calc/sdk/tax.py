"""Progressive bracket tax calculations.

compute_tax() walks an ascending bracket table and returns the total tax
with a per-slab breakdown. The built-in default is the 2025 single-filer
table; other years and filing statuses are loaded from tax_rules/YYYY.yaml
(or a user tax_rules_dir from settings) and passed in explicitly.
"""

import logging
import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any, Optional, Sequence, Union

import yaml

from .config import get_setting
from .schemas import FilingStatusRules, TaxRules

logger = logging.getLogger(__name__)


class TaxRulesNotFoundError(FileNotFoundError):
    """Raised when no tax rules file exists for a year."""
    pass


@dataclass(frozen=True)
class Slab:
    """One bracket: marginal rate up to a cumulative income bound (None = no cap)."""

    rate: float
    up_to: Optional[float] = None


@dataclass(frozen=True)
class BreakdownEntry:
    """Income taxed in one slab and the tax owed on it."""

    rate: float
    amount: float
    tax: float

    @property
    def label(self) -> str:
        """Human-readable form, e.g. '12% on $36550.00'."""
        return f"{round(self.rate * 100)}% on ${self.amount:.2f}"

    def to_dict(self) -> dict:
        return {"rate": self.rate, "amount": self.amount, "tax": self.tax, "label": self.label}


@dataclass
class TaxResult:
    """Total tax and the slabs that produced it, lowest slab first."""

    tax: float
    breakdown: list[BreakdownEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"tax": self.tax, "breakdown": [entry.to_dict() for entry in self.breakdown]}


BRACKETS_SINGLE_2025 = (
    Slab(0.10, 11925),
    Slab(0.12, 48475),
    Slab(0.22, 103350),
    Slab(0.24, 197300),
    Slab(0.32, 250525),
    Slab(0.35, 626350),
    Slab(0.37),
)


def _round_half_up(amount: float, places: str) -> float:
    """Round like a receipt does: exact decimal value, halves away from zero."""
    return float(Decimal(amount).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def round_cents(amount: float) -> float:
    return _round_half_up(amount, "0.01")


def compute_tax(
    taxable_income: float,
    brackets: Sequence[Slab] = BRACKETS_SINGLE_2025,
) -> TaxResult:
    """Calculate progressive income tax on a taxable amount.

    Negative income is treated as zero. Each breakdown entry's tax is rounded
    to cents when computed; the total is rounded once from the unrounded sum.
    The two can differ by a cent, and the total must not be re-derived from
    the rounded entries.

    Args:
        taxable_income: Taxable income in dollars
        brackets: Ascending slabs; bounds are cumulative and non-decreasing,
            the last slab may be uncapped

    Returns:
        TaxResult with rounded total and one entry per slab that taxed income
    """
    remaining = max(0.0, float(taxable_income))
    consumed = 0.0
    tax = 0.0
    breakdown = []

    for slab in brackets:
        cap = math.inf if slab.up_to is None else slab.up_to
        slab_amount = max(0.0, min(remaining, cap - consumed))
        if slab_amount > 0:
            slab_tax = slab_amount * slab.rate
            tax += slab_tax
            breakdown.append(BreakdownEntry(slab.rate, slab_amount, round_cents(slab_tax)))
            remaining -= slab_amount
        consumed = cap
        if remaining <= 0:
            break

    return TaxResult(tax=round_cents(tax), breakdown=breakdown)


def effective_rate(tax: float, income_base: float) -> float:
    """Tax as a fraction of income, to four places. Zero when income_base <= 0."""
    if income_base <= 0:
        return 0.0
    return _round_half_up(tax / income_base, "0.0001")


# =============================================================================
# Tax rules (YAML)
# =============================================================================

def _get_tax_rules_dirs() -> list[Path]:
    """Directories searched for YYYY.yaml, user directory first."""
    dirs = []
    user_dir = get_setting("tax_rules_dir")
    if user_dir:
        dirs.append(Path(user_dir).expanduser())
    dirs.append(Path(__file__).parent.parent / "tax_rules")
    return dirs


def get_tax_rule_years() -> list[str]:
    """Years with a rules file in any searched directory, newest first."""
    years = set()
    for rules_dir in _get_tax_rules_dirs():
        years.update(p.stem for p in rules_dir.glob("*.yaml") if p.stem.isdigit())
    return sorted(years, reverse=True)


def load_tax_rules(year: Union[str, int]) -> TaxRules:
    """Load and validate tax rules for a year from YYYY.yaml.

    Raises:
        TaxRulesNotFoundError: If no directory has a file for the year
        pydantic.ValidationError: If the file does not match the schema
        yaml.YAMLError: If the file is not valid YAML
    """
    for rules_dir in _get_tax_rules_dirs():
        config_file = rules_dir / f"{year}.yaml"
        if config_file.exists():
            logger.debug(f"loading tax rules from {config_file}")
            with open(config_file, "r") as f:
                return TaxRules.model_validate(yaml.safe_load(f) or {})

    raise TaxRulesNotFoundError(
        f"Tax rules file not found for year {year} "
        f"(searched: {', '.join(str(d) for d in _get_tax_rules_dirs())})"
    )


def brackets_from_rules(rules: FilingStatusRules) -> tuple[Slab, ...]:
    """Convert a validated bracket table into Slabs for compute_tax()."""
    return tuple(Slab(rate=b.rate, up_to=b.up_to) for b in rules.tax_brackets)


def get_brackets(year: Union[str, int], filing_status: str = "single") -> tuple[Slab, ...]:
    """Get the bracket table for a year and filing status.

    Raises:
        TaxRulesNotFoundError: If no rules file exists for the year
        KeyError: If the filing status is not defined for the year
    """
    rules = load_tax_rules(year)
    status_rules = getattr(rules, filing_status) if filing_status in TaxRules.model_fields else None
    if status_rules is None:
        raise KeyError(f"Filing status '{filing_status}' not defined in {year} tax rules")
    return brackets_from_rules(status_rules)


def load_bracket_file(path: Path) -> tuple[Slab, ...]:
    """Load a standalone bracket table from YAML.

    The file holds either a `tax_brackets` mapping key or a bare list of
    {up_to, rate} entries.
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if isinstance(data, list):
        data = {"tax_brackets": data}
    return brackets_from_rules(FilingStatusRules.model_validate(data))


# =============================================================================
# W-2 estimate
# =============================================================================

def estimate_from_w2(
    fields: dict[str, Any],
    adjustments: float = 0.0,
    brackets: Sequence[Slab] = BRACKETS_SINGLE_2025,
) -> dict[str, Any]:
    """Estimate federal tax and refund from extracted W-2 fields.

    Taxable income is Box 1 wages less caller-supplied adjustments (never
    below zero). Missing boxes count as zero.

    Args:
        fields: Field record from parse_w2_text()
        adjustments: Amount subtracted from wages before bracket math
        brackets: Bracket table to apply

    Returns:
        Dict with wages, taxable, tax, withheld, refund_positive_owe_negative,
        effective_rate (tax over wages), and breakdown entries as dicts
    """
    wages = fields.get("wages", 0.0)
    withheld = fields.get("federal_tax_withheld", 0.0)
    taxable = max(0.0, wages - adjustments)
    result = compute_tax(taxable, brackets)

    return {
        "wages": wages,
        "taxable": taxable,
        "tax": result.tax,
        "withheld": withheld,
        "refund_positive_owe_negative": round_cents(withheld - result.tax),
        "effective_rate": effective_rate(result.tax, wages),
        "breakdown": [entry.to_dict() for entry in result.breakdown],
    }
