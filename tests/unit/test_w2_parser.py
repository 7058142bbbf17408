"""Unit tests for W-2 field extraction (parse_w2_text).

Covers the core boxes, identifiers, name/address blocks, state/local rows,
and OCR noise handling. Every field is optional: absence is the only
"not found" signal, so tests assert on exact record contents.
"""

import json

import pytest

from w2calc.sdk.w2 import (
    CORE_MONEY_FIELDS,
    FIELD_TYPES,
    missing_core_fields,
    normalize_text,
    parse_amount,
    parse_w2_text,
)


SAMPLE_W2 = """a Employee's social security number
XXX-XX-1234
b Employer identification number (EIN)
12-3456789
c Employer's name, address, and ZIP code
ACME WIDGETS INC
100 MAIN ST
SPRINGFIELD IL 62701

d Control number
A1B2C3D4
e Employee's first name and initial  Last name  Suff.
JANE Q PUBLIC
42 ELM AVE
SPRINGFIELD IL 62704

Box 1 Wages, tips, other compensation 52,000.00
Box 2 Federal income tax withheld 6,120.45
Box 3 Social security wages 54,500.00
Box 4 Social security tax withheld 3,379.00
Box 5 Medicare wages and tips 54,500.00
Box 6 Medicare tax withheld 790.25
15 State IL
16 State wages, tips, etc. 52,000.00   17 State income tax 2,574.00
16 State wages, tips, etc. 1,500.00   17 State income tax 74.25
Locality name CHICAGO  Local wages 10,000.00  Local income tax 100.00
"""


class TestFullForm:
    """A complete, clean W-2 yields every field."""

    def test_all_fields(self):
        record = parse_w2_text(SAMPLE_W2)

        assert record == {
            "wages": 52000.00,
            "federal_tax_withheld": 6120.45,
            "ss_wages": 54500.00,
            "ss_tax_withheld": 3379.00,
            "medicare_wages": 54500.00,
            "medicare_tax_withheld": 790.25,
            "ein": "12-3456789",
            "control_number": "A1B2C3D4",
            "employee_ssn": "XXX-XX-1234",
            "employer_name": "ACME WIDGETS INC",
            "employer_address": "100 MAIN ST, SPRINGFIELD IL 62701",
            "employee_name": "JANE Q PUBLIC",
            "employee_address": "42 ELM AVE, SPRINGFIELD IL 62704",
            "state_wages": [52000.00, 1500.00],
            "state_income_tax": [2574.00, 74.25],
            "locality_name": ["CHICAGO"],
            "local_wages": [10000.00],
            "local_income_tax": [100.00],
        }

    def test_keys_follow_catalogue_order(self):
        record = parse_w2_text(SAMPLE_W2)
        assert list(record) == [k for k in FIELD_TYPES if k in record]

    def test_idempotent(self):
        first = parse_w2_text(SAMPLE_W2)
        second = parse_w2_text(SAMPLE_W2)
        assert json.dumps(first) == json.dumps(second)


class TestEmptyAndUnrecognized:

    def test_empty_string(self):
        assert parse_w2_text("") == {}

    def test_no_labels(self):
        assert parse_w2_text("Hello world\nNothing here 123.45\n") == {}

    def test_non_string_raises(self):
        with pytest.raises(TypeError):
            parse_w2_text(None)


class TestCoreBoxes:
    """Label-anchored money fields (boxes 1-6)."""

    def test_box_label_with_amount(self):
        assert parse_w2_text("Box 1 Wages 45,230.00") == {"wages": 45230.00}

    def test_long_label_with_dollar_and_colon(self):
        record = parse_w2_text("Federal income tax withheld: $1,204.50")
        assert record == {"federal_tax_withheld": 1204.50}

    def test_long_label_with_merged_words(self):
        record = parse_w2_text("Federal incometaxwithheld 1204.50")
        assert record == {"federal_tax_withheld": 1204.50}

    def test_long_label_with_dropped_commas(self):
        record = parse_w2_text("Wages tips other compensation 61,250.75")
        assert record == {"wages": 61250.75}

    def test_space_separated_thousands(self):
        record = parse_w2_text("Wages, tips, other compensation 61 250.75")
        assert record == {"wages": 61250.75}

    def test_box_number_without_space(self):
        record = parse_w2_text("BOX6: 790.25")
        assert record == {"medicare_tax_withheld": 790.25}

    def test_amount_on_next_line(self):
        record = parse_w2_text("Box 3 Social security wages\n54,500.00")
        assert record == {"ss_wages": 54500.00}

    def test_first_occurrence_wins(self):
        record = parse_w2_text("Box 1 100.00\nBox 1 200.00")
        assert record == {"wages": 100.00}

    def test_box_10_is_not_box_1(self):
        assert parse_w2_text("Box 10 Dependent care benefits 5,000.00") == {}

    def test_label_without_amount_is_absent(self):
        record = parse_w2_text("Box 1 Wages, tips, other compensation\nsee attached")
        assert "wages" not in record

    def test_amount_outside_window_is_absent(self):
        text = "Box 1 " + "x" * 200 + " 500.00"
        assert parse_w2_text(text) == {}

    def test_tabs_and_carriage_returns(self):
        record = parse_w2_text("Box 2\t$3,000.00\r\n")
        assert record == {"federal_tax_withheld": 3000.00}

    def test_falls_back_to_long_label(self):
        record = parse_w2_text("Medicare wages and tips 54,500.00")
        assert record == {"medicare_wages": 54500.00}


class TestIdentifiers:

    def test_ein_after_short_label(self):
        assert parse_w2_text("EIN: 98-7654321") == {"ein": "98-7654321"}

    def test_control_number_abbreviated(self):
        assert parse_w2_text("Control No. 00X-99Z") == {"control_number": "00X-99Z"}

    def test_short_control_number_is_absent(self):
        assert parse_w2_text("Control number 12") == {}

    def test_ssn_masked_with_asterisks(self):
        assert parse_w2_text("SSN: ***-**-6789") == {"employee_ssn": "***-**-6789"}

    def test_incomplete_ssn_is_absent(self):
        assert parse_w2_text("SSN: 123-45") == {}


class TestNameAddressBlocks:
    """Best-effort party blocks: first line name, rest address."""

    def test_smart_quote_label(self):
        record = parse_w2_text("Employer’s name\nACME CORP\n")
        assert record == {"employer_name": "ACME CORP"}

    def test_block_stops_at_next_label(self):
        text = "Employer's name\nACME CORP\n123 Road\nEmployee's name\nJOHN DOE\n"
        record = parse_w2_text(text)

        assert record["employer_name"] == "ACME CORP"
        assert record["employer_address"] == "123 Road"
        assert record["employee_name"] == "JOHN DOE"
        assert "employee_address" not in record

    def test_colon_fallback_labels(self):
        text = "Employer: Globex LLC\n500 Oak Rd\n\nEmployee: John Smith\n"
        record = parse_w2_text(text)

        assert record == {
            "employer_name": "Globex LLC",
            "employer_address": "500 Oak Rd",
            "employee_name": "John Smith",
        }

    def test_empty_block_is_absent(self):
        assert parse_w2_text("Employer's name\n\nBox 1") == {}


class TestRepeatedRows:
    """State/local rows: one entry per matching line, in source order."""

    def test_state_wages_accumulate(self):
        text = "State wages ... 10,000.00\nsomething else\nState wages ... 5,000.00\n"
        assert parse_w2_text(text) == {"state_wages": [10000.00, 5000.00]}

    def test_rows_are_independent(self):
        text = "State wages 10,000.00\nState income tax 300.00\nState income tax 25.00\n"
        record = parse_w2_text(text)

        assert record["state_wages"] == [10000.00]
        assert record["state_income_tax"] == [300.00, 25.00]

    def test_row_without_number_is_absent(self):
        assert parse_w2_text("State wages\n") == {}

    def test_locality_requires_a_name(self):
        assert parse_w2_text("Locality name 123\n") == {}

    def test_locality_name_alone_on_line(self):
        record = parse_w2_text("Locality name: City of Detroit\n")
        assert record == {"locality_name": ["City of Detroit"]}

    def test_locality_stops_at_comma(self):
        assert parse_w2_text("Locality name CHICAGO, IL\n") == {"locality_name": ["CHICAGO"]}

    def test_locality_stops_at_period(self):
        record = parse_w2_text("Locality name ST. LOUIS  Local wages 10,000.00\n")
        assert record == {"locality_name": ["ST"], "local_wages": [10000.00]}

    @pytest.mark.parametrize("line", [
        "Locality name YONKERS (NY)\n",
        "Locality name YONKERS/NY\n",
    ])
    def test_locality_followed_by_punctuation(self, line):
        assert parse_w2_text(line) == {"locality_name": ["YONKERS"]}


class TestParseAmount:

    @pytest.mark.parametrize("raw, expected", [
        ("1,204.50", 1204.50),
        ("$ 52 000", 52000.0),
        ("790.25", 790.25),
        ("1.2.3", 1.2),
        ("12.", 12.0),
    ])
    def test_parses(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", ".", "$"])
    def test_unparseable_is_none(self, raw):
        assert parse_amount(raw) is None

    def test_huge_value_is_none(self):
        assert parse_amount("9" * 400) is None


class TestHelpers:

    def test_normalize_text(self):
        raw = "a\r\nb\tc “q” ‘s’"
        assert normalize_text(raw) == "a\nb c \"q\" 's'"

    def test_missing_core_fields(self):
        assert missing_core_fields({"wages": 1.0}) == list(CORE_MONEY_FIELDS[1:])

    def test_missing_core_fields_complete(self):
        assert missing_core_fields(parse_w2_text(SAMPLE_W2)) == []
