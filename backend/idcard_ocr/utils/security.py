"""
Security Utilities
Identifier validation and masking of sensitive values for logs
"""
import re
from typing import List

from idcard_ocr.utils.thai_text import normalize_thai_digits


def mask_sensitive_value(value: str, visible_chars: int = 4) -> str:
    """
    Mask sensitive value, showing only last few characters
    Example: "1103702071811" -> "XXXXXXXXX1811"
    """
    if not value or len(value) <= visible_chars:
        return "X" * len(value) if value else ""

    masked_length = len(value) - visible_chars
    return "X" * masked_length + value[-visible_chars:]


def validate_thai_id_checksum(citizen_id: str) -> bool:
    """
    Validate Thai national ID number using its modulo-11 check digit

    Thai digits are read as their ASCII counterparts. Separators and any
    other characters are ignored. Anything that does not leave exactly 13
    digits is invalid.
    """
    digits: List[int] = [int(c) for c in re.sub(r"[^0-9]", "", normalize_thai_digits(citizen_id))]

    if len(digits) != 13:
        return False

    total = sum(digit * (13 - i) for i, digit in enumerate(digits[:12]))
    check = (11 - total % 11) % 10

    return check == digits[12]
