"""
Thai Text Utilities
Digit normalization and Buddhist Era date conversion
"""
import re
from types import MappingProxyType
from typing import Mapping


THAI_DIGITS = "๐๑๒๓๔๕๖๗๘๙"
ARABIC_DIGITS = "0123456789"

_THAI_DIGIT_TABLE = str.maketrans(THAI_DIGITS, ARABIC_DIGITS)

# Thai letters, vowels and tone marks (U+0E01-U+0E4F), excluding Thai digits
THAI_CHARS = "ก-๏"

# Full name, dotted abbreviation and undotted abbreviation for each month
THAI_MONTHS: Mapping[str, str] = MappingProxyType({
    "ม.ค.": "Jan", "มกราคม": "Jan", "มค": "Jan",
    "ก.พ.": "Feb", "กุมภาพันธ์": "Feb", "กพ": "Feb",
    "มี.ค.": "Mar", "มีนาคม": "Mar", "มีค": "Mar",
    "เม.ย.": "Apr", "เมษายน": "Apr", "เมย": "Apr",
    "พ.ค.": "May", "พฤษภาคม": "May", "พค": "May",
    "มิ.ย.": "Jun", "มิถุนายน": "Jun", "มิย": "Jun",
    "ก.ค.": "Jul", "กรกฎาคม": "Jul", "กค": "Jul",
    "ส.ค.": "Aug", "สิงหาคม": "Aug", "สค": "Aug",
    "ก.ย.": "Sep", "กันยายน": "Sep", "กย": "Sep",
    "ต.ค.": "Oct", "ตุลาคม": "Oct", "ตค": "Oct",
    "พ.ย.": "Nov", "พฤศจิกายน": "Nov", "พย": "Nov",
    "ธ.ค.": "Dec", "ธันวาคม": "Dec", "ธค": "Dec",
})

# Years at or above this are Buddhist Era
BUDDHIST_ERA_THRESHOLD = 2400
BUDDHIST_ERA_OFFSET = 543

THAI_DATE_PATTERN = re.compile(rf"(\d{{1,2}})\s+([{THAI_CHARS}.]+)\s+(\d{{4}})")


def normalize_thai_digits(text: str) -> str:
    """Replace Thai digits with ASCII digits, leaving everything else intact"""
    return text.translate(_THAI_DIGIT_TABLE)


def convert_buddhist_to_gregorian(thai_date: str) -> str:
    """
    Convert a Thai date such as "25 มิ.ย. 2539" to "25 Jun 1996"

    Unknown month tokens are kept as recognized, and years below the
    Buddhist Era threshold are assumed to be Gregorian already. Input that
    does not look like "day month year" is returned unchanged.
    """
    match = THAI_DATE_PATTERN.search(thai_date)
    if not match:
        return thai_date

    day, thai_month, year = match.groups()
    month = THAI_MONTHS.get(thai_month.strip(), thai_month)

    gregorian_year = int(year)
    if gregorian_year >= BUDDHIST_ERA_THRESHOLD:
        gregorian_year -= BUDDHIST_ERA_OFFSET

    return f"{day} {month} {gregorian_year}"
