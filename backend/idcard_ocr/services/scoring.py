"""
Detection Scoring
Additive confidence score over the fields found on a card
"""
from typing import Tuple

from idcard_ocr.schemas.id_card import ExtractedRecord


# (field, points awarded when the field is non-empty)
FIELD_WEIGHTS: Tuple[Tuple[str, int], ...] = (
    ("identifier", 25),
    ("local_name_prefix", 5),
    ("local_name", 15),
    ("latin_name_prefix", 5),
    ("latin_name", 10),
    ("address", 10),
    ("birth_date", 5),
    ("birth_date_local", 5),
    ("issue_date", 5),
    ("expiry_date", 5),
    ("religion", 5),
    ("laser_code", 5),
)

# Bonus on top of the identifier weight when its check digit validates
VALID_IDENTIFIER_BONUS = 10


def calculate_detection_score(record: ExtractedRecord) -> int:
    """Sum the weights of every populated field. The total is not clamped."""
    score = sum(weight for field, weight in FIELD_WEIGHTS if getattr(record, field))

    if record.identifier and record.identifier_valid:
        score += VALID_IDENTIFIER_BONUS

    return score
