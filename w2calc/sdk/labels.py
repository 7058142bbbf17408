"""Label pattern table for W-2 field extraction.

Pure data: every regex the extractor anchors on lives here, so new label
variants can be added (and tested) without touching the search code in
w2.py.

Pattern conventions:
- All patterns are case-insensitive.
- Box patterns tolerate missing punctuation after the box number
  ("Box 1", "Box1:", "BOX 1 -").
- Long-form labels use \\s* between words so OCR-merged words still match
  ("Federal incometaxwithheld"), and [, ]+ where OCR tends to drop commas.
"""

import re
from dataclasses import dataclass


# Window sizes (characters searched after a matched label)
MONEY_WINDOW = 140
IDENTIFIER_WINDOW = 100
EMPLOYER_BLOCK_WINDOW = 300
EMPLOYEE_BLOCK_WINDOW = 200
FALLBACK_BLOCK_WINDOW = 180

# Currency-like token: optional $, digits with optional comma or
# space-separated thousands groups, optional decimal part.
AMOUNT_TOKEN = r"\$?[ ]*([0-9](?:[0-9,]|[ ](?=[0-9]{3}(?![0-9])))*(?:\.[0-9]*)?)"

AMOUNT_RE = re.compile(AMOUNT_TOKEN)

# Employer IDs and control numbers: contiguous alphanumerics plus hyphens
IDENTIFIER_RE = re.compile(r"[A-Z0-9\-]{5,}", re.IGNORECASE)

# Masked SSN: 3-2-4 digit groups, digits optionally masked with X or *
MASKED_SSN_RE = re.compile(r"[0-9X*]{3}-[0-9X*]{2}-[0-9X*]{4}(?![0-9])", re.IGNORECASE)


@dataclass(frozen=True)
class FieldLabels:
    """Ordered label patterns for one field plus how to read its value.

    The first pattern that matches anywhere in the text wins; the value is
    the first `value` match inside the `window` characters after it.
    """

    patterns: tuple
    value: re.Pattern
    window: int


def _labels(*patterns: str) -> tuple:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def _box(number: int) -> str:
    return rf"Box\s*{number}\b[^A-Za-z0-9$]{{0,10}}"


# Six core money boxes, in box order
MONEY_LABELS = {
    "wages": FieldLabels(
        patterns=_labels(
            _box(1),
            r"Wages[, ]+tips[, ]+other[, ]+comp(?:ensation)?[^0-9$]{0,20}",
        ),
        value=AMOUNT_RE,
        window=MONEY_WINDOW,
    ),
    "federal_tax_withheld": FieldLabels(
        patterns=_labels(
            _box(2),
            r"Federal\s*income\s*tax\s*withheld[^0-9$]{0,20}",
        ),
        value=AMOUNT_RE,
        window=MONEY_WINDOW,
    ),
    "ss_wages": FieldLabels(
        patterns=_labels(
            _box(3),
            r"Social\s*security\s*wages[^0-9$]{0,20}",
        ),
        value=AMOUNT_RE,
        window=MONEY_WINDOW,
    ),
    "ss_tax_withheld": FieldLabels(
        patterns=_labels(
            _box(4),
            r"Social\s*security\s*tax\s*withheld[^0-9$]{0,20}",
        ),
        value=AMOUNT_RE,
        window=MONEY_WINDOW,
    ),
    "medicare_wages": FieldLabels(
        patterns=_labels(
            _box(5),
            r"Medicare\s*wages\s*(?:and\s*tips)?[^0-9$]{0,20}",
        ),
        value=AMOUNT_RE,
        window=MONEY_WINDOW,
    ),
    "medicare_tax_withheld": FieldLabels(
        patterns=_labels(
            _box(6),
            r"Medicare\s*tax\s*withheld[^0-9$]{0,20}",
        ),
        value=AMOUNT_RE,
        window=MONEY_WINDOW,
    ),
}

IDENTIFIER_LABELS = {
    "ein": FieldLabels(
        patterns=_labels(r"(?:Employer\s+identification\s+number|\bEIN\b)[:\s]*"),
        value=IDENTIFIER_RE,
        window=IDENTIFIER_WINDOW,
    ),
    "control_number": FieldLabels(
        patterns=_labels(
            r"Control\s*number[:\s]*",
            r"Control\s*No\.?[:\s]*",
        ),
        value=IDENTIFIER_RE,
        window=IDENTIFIER_WINDOW,
    ),
    "employee_ssn": FieldLabels(
        patterns=_labels(
            r"\bEmployee'?s?\s+social\s+security\s+number[:\s]*",
            r"\bSSN\b[:\s]*",
        ),
        value=MASKED_SSN_RE,
        window=IDENTIFIER_WINDOW,
    ),
}


@dataclass(frozen=True)
class BlockLabels:
    """Label patterns for a name/address block, tried in order."""

    patterns: tuple
    windows: tuple
    name_field: str
    address_field: str


# "Employer's name, address, and ZIP code" is the printed box c label; the
# suffix is consumed so it never becomes the captured name line.
_NAME_SUFFIX = r"(?:,?\s*address(?:,?\s*(?:and\s*)?ZIP\s*code)?)?[ ]*:?[ ]*"
# Box e: "Employee's first name and initial  Last name  Suff."
_EMPLOYEE_NAME_SUFFIX = r"(?:\s*and\s*initial)?(?:\s*Last\s*name)?(?:\s*Suff\.?)?" + _NAME_SUFFIX

PARTY_BLOCKS = (
    BlockLabels(
        patterns=_labels(
            rf"Employer'?s?\s+name{_NAME_SUFFIX}",
            r"Employer\s*:[ ]*",
        ),
        windows=(EMPLOYER_BLOCK_WINDOW, FALLBACK_BLOCK_WINDOW),
        name_field="employer_name",
        address_field="employer_address",
    ),
    BlockLabels(
        patterns=_labels(
            rf"Employee'?s?\s+(?:first\s+)?name{_EMPLOYEE_NAME_SUFFIX}",
            r"Employee\s*:[ ]*",
        ),
        windows=(EMPLOYEE_BLOCK_WINDOW, FALLBACK_BLOCK_WINDOW),
        name_field="employee_name",
        address_field="employee_address",
    ),
)

# Where a captured block ends: a blank line, or a new line starting with
# a box marker or another party/identifier label.
BLOCK_STOP_RE = re.compile(
    r"\n[ ]*\n|\n[ ]*(?:Box\s*\d|Employee'?s?\b|Employer\b|EIN\b|Control\b)",
    re.IGNORECASE,
)

# State/local rows, matched once per physical line
ROW_LABELS = {
    "state_wages": re.compile(r"State\s*wages[^0-9$\n]*" + AMOUNT_TOKEN, re.IGNORECASE),
    "state_income_tax": re.compile(r"State\s*income\s*tax[^0-9$\n]*" + AMOUNT_TOKEN, re.IGNORECASE),
    "locality_name": re.compile(
        r"Locality\s*name[: ]*([A-Za-z][A-Za-z \-]*?)[ ]*(?=\bLocal\s|[^A-Za-z \-]|$)",
        re.IGNORECASE,
    ),
    "local_wages": re.compile(r"Local\s*wages[^0-9$\n]*" + AMOUNT_TOKEN, re.IGNORECASE),
    "local_income_tax": re.compile(r"Local\s*income\s*tax[^0-9$\n]*" + AMOUNT_TOKEN, re.IGNORECASE),
}
