"""Pydantic schemas for tax rules validation.

These schemas validate the tax_rules/*.yaml files (and bracket files passed
on the command line) and provide typed access to the bracket tables.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaxBracket(BaseModel):
    """Single tax bracket entry."""
    model_config = ConfigDict(extra="forbid")

    up_to: Optional[float] = Field(default=None, ge=0, description="Upper cumulative bound (None = no cap)")
    rate: float = Field(..., ge=0, le=1, description="Marginal rate as decimal")


class FilingStatusRules(BaseModel):
    """Bracket table for one filing status."""
    model_config = ConfigDict(extra="forbid")

    tax_brackets: list[TaxBracket] = Field(..., min_length=1)

    @field_validator("tax_brackets")
    @classmethod
    def _ascending_bounds(cls, brackets: list[TaxBracket]) -> list[TaxBracket]:
        # Only the last slab may be uncapped; capped bounds never decrease
        for bracket in brackets[:-1]:
            if bracket.up_to is None:
                raise ValueError("only the last bracket may omit up_to")
        bounds = [b.up_to for b in brackets if b.up_to is not None]
        if bounds != sorted(bounds):
            raise ValueError(f"bracket bounds must be ascending: {bounds}")
        return brackets


class TaxRules(BaseModel):
    """Tax rules for a year."""
    model_config = ConfigDict(extra="ignore")  # Allow unknown fields for forward compat

    single: Optional[FilingStatusRules] = None
    mfj: Optional[FilingStatusRules] = None
    mfs: Optional[FilingStatusRules] = None
    hoh: Optional[FilingStatusRules] = None
