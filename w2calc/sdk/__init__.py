"""W2 Calc SDK - W-2 field extraction and bracket tax calculations."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    DEFAULT_TAX_YEAR,
    DEFAULT_FILING_STATUS,
    KNOWN_SETTINGS,
)

from .w2 import (
    parse_w2_text,
    normalize_text,
    parse_amount,
    missing_core_fields,
    FIELD_TYPES,
    CORE_MONEY_FIELDS,
)

from .tax import (
    Slab,
    BreakdownEntry,
    TaxResult,
    BRACKETS_SINGLE_2025,
    compute_tax,
    effective_rate,
    estimate_from_w2,
    load_tax_rules,
    get_brackets,
    get_tax_rule_years,
    load_bracket_file,
    TaxRulesNotFoundError,
)

from .sources import (
    read_source_text,
    extract_text_from_pdf,
    SourceReadError,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "unset_setting",
    "DEFAULT_TAX_YEAR",
    "DEFAULT_FILING_STATUS",
    "KNOWN_SETTINGS",
    # W-2 extraction
    "parse_w2_text",
    "normalize_text",
    "parse_amount",
    "missing_core_fields",
    "FIELD_TYPES",
    "CORE_MONEY_FIELDS",
    # Tax
    "Slab",
    "BreakdownEntry",
    "TaxResult",
    "BRACKETS_SINGLE_2025",
    "compute_tax",
    "effective_rate",
    "estimate_from_w2",
    "load_tax_rules",
    "get_brackets",
    "get_tax_rule_years",
    "load_bracket_file",
    "TaxRulesNotFoundError",
    # Sources
    "read_source_text",
    "extract_text_from_pdf",
    "SourceReadError",
]
