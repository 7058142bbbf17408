"""W-2 field extraction from OCR text.

Turns recognized text from a Form W-2 (produced by an external OCR engine,
or the text layer of a PDF) into a partial field record. OCR output is
noisy: punctuation goes missing, words merge, and stray symbols appear, so
every field is located by anchoring on a label and searching a bounded
window after it.

Record contract:
- Keys are drawn from FIELD_TYPES.
- A key is present only when its value parsed: money fields are finite,
  non-negative floats; string fields are non-empty and trimmed; row fields
  are non-empty lists in source order.
- Absence means "not found". Zero and empty string are never placeholders.

Names and addresses are best effort. The name/address split is a line
heuristic and may be empty or wrong on unusual layouts; callers should
present those fields for review rather than trust them.
"""

import logging
import math
import re
from typing import Any, Optional

from .labels import (
    BLOCK_STOP_RE,
    IDENTIFIER_LABELS,
    MONEY_LABELS,
    PARTY_BLOCKS,
    ROW_LABELS,
    FieldLabels,
)

logger = logging.getLogger(__name__)


# Field catalogue: name -> shape
FIELD_TYPES = {
    # Core boxes 1-6
    "wages": "money",
    "federal_tax_withheld": "money",
    "ss_wages": "money",
    "ss_tax_withheld": "money",
    "medicare_wages": "money",
    "medicare_tax_withheld": "money",
    # Identifiers
    "ein": "identifier",
    "control_number": "identifier",
    "employee_ssn": "identifier",
    # Party blocks
    "employer_name": "text",
    "employer_address": "text",
    "employee_name": "text",
    "employee_address": "text",
    # State/local rows (boxes 16-20, may repeat)
    "state_wages": "money_rows",
    "state_income_tax": "money_rows",
    "locality_name": "text_rows",
    "local_wages": "money_rows",
    "local_income_tax": "money_rows",
}

CORE_MONEY_FIELDS = tuple(MONEY_LABELS)

_SMART_QUOTES = str.maketrans({
    "“": '"',
    "”": '"',
    "‘": "'",
    "’": "'",
})

_NON_NUMERIC_RE = re.compile(r"[^0-9.]")
_FLOAT_PREFIX_RE = re.compile(r"[0-9]*(?:\.[0-9]*)?")


def normalize_text(text: str) -> str:
    """Drop carriage returns, turn tabs into spaces, and straighten quotes."""
    return text.replace("\r", "").replace("\t", " ").translate(_SMART_QUOTES)


def parse_amount(raw: Optional[str]) -> Optional[float]:
    """Parse a currency-like token into a float.

    Everything except digits and the decimal point is stripped, then the
    longest leading float is read ("1,204.50" -> 1204.5, "$ 52 000" -> 52000.0).

    Returns:
        The parsed amount, or None when nothing numeric remains or the
        result is not finite.
    """
    if not raw:
        return None
    digits = _NON_NUMERIC_RE.sub("", raw)
    prefix = _FLOAT_PREFIX_RE.match(digits).group()
    if prefix in ("", "."):
        return None
    value = float(prefix)
    if not math.isfinite(value):
        return None
    return value


def _find_after_label(text: str, labels: FieldLabels) -> Optional[str]:
    """Return the first value token found after the first matching label."""
    for pattern in labels.patterns:
        m = pattern.search(text)
        if not m:
            continue
        window = text[m.end():m.end() + labels.window]
        found = labels.value.search(window)
        if not found:
            logger.debug(f"label {pattern.pattern!r} matched but no value in window")
            continue
        # Money patterns capture the bare number; identifiers use the whole match
        return found.group(1) if found.groups() else found.group(0)
    return None


def _capture_block(text: str, pattern: re.Pattern, window: int) -> str:
    """Capture text after a label, cut at a blank line or the next label."""
    m = pattern.search(text)
    if not m:
        return ""
    block = text[m.end():m.end() + window]
    stop = BLOCK_STOP_RE.search(block)
    if stop:
        block = block[:stop.start()]
    return block.strip()


def _split_name_address(block: str) -> tuple[str, str]:
    """First non-empty line is the name; the rest, comma-joined, the address."""
    lines = [line.strip() for line in block.split("\n")]
    lines = [line for line in lines if line]
    if not lines:
        return "", ""
    return lines[0], ", ".join(lines[1:])


def _extract_rows(text: str) -> dict[str, list]:
    """Collect state/local row values, one match per label per physical line."""
    rows: dict[str, list] = {name: [] for name in ROW_LABELS}

    for line in text.split("\n"):
        for name, pattern in ROW_LABELS.items():
            m = pattern.search(line)
            if not m:
                continue
            if FIELD_TYPES[name] == "text_rows":
                value = m.group(1).strip()
                if value:
                    rows[name].append(value)
            else:
                amount = parse_amount(m.group(1))
                if amount is not None:
                    rows[name].append(amount)

    return rows


def parse_w2_text(text: str) -> dict[str, Any]:
    """Extract W-2 fields from recognized text.

    Only the first occurrence of each label in the text is used; a label
    that appears twice surfaces only its first instance. Row fields are the
    exception: every matching line contributes an entry.

    Args:
        text: Recognized text. Multi-page documents should be joined with
            a blank line between pages.

    Returns:
        Field record (see module docstring). Empty dict when nothing is found.

    Raises:
        TypeError: If text is not a string
    """
    if not isinstance(text, str):
        raise TypeError(f"W-2 text must be str, not {type(text).__name__}")

    text = normalize_text(text)
    found: dict[str, Any] = {}

    for name, labels in MONEY_LABELS.items():
        amount = parse_amount(_find_after_label(text, labels))
        if amount is not None:
            found[name] = amount

    for name, labels in IDENTIFIER_LABELS.items():
        token = _find_after_label(text, labels)
        if token and token.strip():
            found[name] = token.strip()

    for party in PARTY_BLOCKS:
        block = ""
        for pattern, window in zip(party.patterns, party.windows):
            block = _capture_block(text, pattern, window)
            if block:
                break
        name, address = _split_name_address(block)
        if name:
            found[party.name_field] = name
        if address:
            found[party.address_field] = address

    for name, values in _extract_rows(text).items():
        if values:
            found[name] = values

    # Emit keys in catalogue order so identical input gives identical output
    record = {key: found[key] for key in FIELD_TYPES if key in found}
    logger.debug(f"parse_w2_text: {len(record)} field(s) from {len(text)} chars")
    return record


def missing_core_fields(record: dict[str, Any]) -> list[str]:
    """List the core money boxes (1-6) absent from a field record, in box order."""
    return [name for name in CORE_MONEY_FIELDS if name not in record]
