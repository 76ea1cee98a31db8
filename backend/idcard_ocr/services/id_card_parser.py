"""
Thai ID Card Parser
Structured field extraction from Google Vision document text annotations
"""
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from loguru import logger

from idcard_ocr.schemas.id_card import ExtractedRecord
from idcard_ocr.services.scoring import calculate_detection_score
from idcard_ocr.utils.patterns import FallbackChain, FieldValues, collapse_whitespace
from idcard_ocr.utils.security import mask_sensitive_value, validate_thai_id_checksum
from idcard_ocr.utils.thai_text import THAI_CHARS, convert_buddhist_to_gregorian, normalize_thai_digits


class InvalidPayloadError(ValueError):
    """The recognition payload is not a JSON object at all"""


TH = THAI_CHARS

# Longest first so นางสาว is not cut short by นาง
THAI_PREFIXES = ("นางสาว", "เด็กหญิง", "เด็กชาย", "นาย", "นาง")
ENGLISH_PREFIXES = (r"Mr\.", r"Mrs\.", "Miss", r"Ms\.")

THAI_PREFIX_PATTERN = "|".join(THAI_PREFIXES)
ENGLISH_PREFIX_PATTERN = "|".join(ENGLISH_PREFIXES)
CAPITALIZED_WORD = r"[A-Z][a-z]+"

# Positional assignment of dates found on the card
DATE_FIELDS = ("birth_date", "issue_date", "expiry_date")

# Carried through from the payload rather than read off the card
NON_EXTRACTED_FIELDS = ("raw_text", "error_message")


def _clean_prefix(prefix: str) -> str:
    return prefix.strip().rstrip(".")


def _identifier_fields(match: re.Match) -> FieldValues:
    digits = re.sub(r"[\s-]", "", match.group(0))
    return {
        "identifier": digits,
        "identifier_valid": validate_thai_id_checksum(digits),
    }


def _thai_name_fields(match: re.Match) -> FieldValues:
    return {
        "local_name_prefix": match.group(1).strip(),
        "local_name": match.group(2).strip(),
    }


def _thai_name_only_fields(match: re.Match) -> FieldValues:
    return {"local_name": match.group(1).strip()}


def _english_two_line_fields(match: re.Match) -> FieldValues:
    return {
        "latin_name_prefix": _clean_prefix(match.group(1)),
        "latin_name": f"{match.group(2)} {match.group(3)}",
    }


def _english_name_fields(match: re.Match) -> FieldValues:
    return {
        "latin_name_prefix": _clean_prefix(match.group(1)),
        "latin_name": collapse_whitespace(match.group(2)),
    }


def _english_name_only_fields(match: re.Match) -> FieldValues:
    return {"latin_name": collapse_whitespace(match.group(1))}


def _thai_date_fields(matches: List[re.Match]) -> FieldValues:
    values = {}
    for field, match in zip(DATE_FIELDS, matches):
        thai_date = match.group(0)
        values[f"{field}_local"] = thai_date
        values[field] = convert_buddhist_to_gregorian(thai_date)
    return values


def _gregorian_date_fields(matches: List[re.Match]) -> FieldValues:
    return {field: match.group(0) for field, match in zip(DATE_FIELDS, matches)}


def _address_fields(match: re.Match) -> FieldValues:
    return {"address": collapse_whitespace(match.group(0))}


def _religion_fields(match: re.Match) -> FieldValues:
    return {"religion": match.group(1)}


def _laser_code_fields(match: re.Match) -> FieldValues:
    return {"laser_code": match.group(0)}


class ThaiIdCardParser:
    """Parser turning Vision OCR output for a Thai ID card into an ExtractedRecord"""

    # 13 digits, grouped 1-4-5-2-1 as printed on the card, or a bare run
    IDENTIFIER_PATTERNS = FallbackChain(
        (r"\b\d[\s-]?\d{4}[\s-]?\d{5}[\s-]?\d{2}[\s-]?\d\b", _identifier_fields),
        (r"\b\d{13}\b", _identifier_fields),
        flags=re.ASCII,
    )

    THAI_NAME_PATTERNS = FallbackChain(
        (rf"({THAI_PREFIX_PATTERN})\s+([{TH}][{TH}\s]*)", _thai_name_fields),
        # No honorific recognized, fall back to the name label
        (rf"(?i:ชื่อตัว.*?ชื่อสกุล|Name)\s*([{TH}][{TH}\s]*)", _thai_name_only_fields),
    )

    ENGLISH_NAME_PATTERNS = FallbackChain(
        # "Name Mrs. Bunyang" followed by "Last name Lopez" on the same or next line
        (
            rf"\b(?i:Name)\s+((?i:{ENGLISH_PREFIX_PATTERN}))\s+({CAPITALIZED_WORD})"
            rf"\s*\n?.*?(?i:Last\s*name)\s+({CAPITALIZED_WORD})",
            _english_two_line_fields,
        ),
        (
            rf"({ENGLISH_PREFIX_PATTERN})[ \t]+({CAPITALIZED_WORD}(?:[ \t]+{CAPITALIZED_WORD})*)",
            _english_name_fields,
        ),
        (
            rf"({CAPITALIZED_WORD}(?:[ \t]+{CAPITALIZED_WORD}){{1,2}})",
            _english_name_only_fields,
        ),
    )

    DATE_PATTERNS = FallbackChain(
        (rf"[0-9]{{1,2}}\s+[{TH}.]+\s+[0-9]{{4}}", _thai_date_fields),
        # Only consulted when no Thai calendar date is present
        (r"[0-9]{1,2}\s+[A-Za-z]{3,}\.?\s+[0-9]{4}|[0-9]{1,2}/[0-9]{1,2}/[0-9]{4}", _gregorian_date_fields),
        find_all=True,
    )

    ADDRESS_PATTERNS = FallbackChain(
        # house no. [หมู่ที่ n] ต.sub-district อ.district จ.province
        (
            rf"[0-9]+/?[0-9]*\s+(?:หมู่(?:ที่)?\s*[0-9]+\s+)?"
            rf"ต\.\s*[{TH}\s]+?อ\.\s*[{TH}\s]+?จ\.\s*[{TH}]+",
            _address_fields,
        ),
        (rf"[0-9]+/?[0-9]*[{TH}\s/,.-]*?จ\.?\s*[{TH}]+", _address_fields),
    )

    RELIGION_PATTERNS = FallbackChain(
        (rf"ศาสนา\s+([{TH}]+?)(?=\s|$|ที่อยู่)", _religion_fields),
    )

    LASER_CODE_PATTERNS = FallbackChain(
        (r"\d{4}-\d{2}-\d{8}|\d{14}", _laser_code_fields),
        flags=re.ASCII,
    )

    def parse(self, payload: Any) -> ExtractedRecord:
        """
        Extract every field from a Vision images:annotate response

        A payload without recognized text yields the default record. Only a
        payload that is not a mapping at all is rejected.
        """
        if not isinstance(payload, Mapping):
            raise InvalidPayloadError(
                f"Recognition payload must be a JSON object, got {type(payload).__name__}"
            )

        full_text, error_message = self._read_annotation(payload)
        if error_message:
            logger.warning(f"Recognition service reported an error: {error_message}")

        if not full_text:
            return ExtractedRecord(error_message=error_message)

        normalized_text = normalize_thai_digits(full_text)

        fields: Dict[str, Any] = {"raw_text": full_text, "error_message": error_message}
        for extractor in (
            self._extract_identifier,
            self._extract_thai_name,
            self._extract_english_name,
            self._extract_dates,
            self._extract_address,
            self._extract_religion,
            self._extract_laser_code,
        ):
            fields.update(extractor(full_text, normalized_text))

        record = ExtractedRecord(**fields)
        score = calculate_detection_score(record)

        found = [
            name for name, value in fields.items()
            if isinstance(value, str) and value and name not in NON_EXTRACTED_FIELDS
        ]
        logger.debug(
            f"Parsed Thai ID card ({len(full_text)} chars): "
            f"id={mask_sensitive_value(record.identifier)} score={score} fields={found}"
        )

        return record.model_copy(update={"detection_score": score})

    def _read_annotation(self, payload: Mapping) -> Tuple[str, Optional[str]]:
        """Pull responses[0].fullTextAnnotation.text and responses[0].error.message"""
        responses = payload.get("responses")
        if not isinstance(responses, (list, tuple)) or not responses:
            return "", None

        first = responses[0]
        if not isinstance(first, Mapping):
            return "", None

        annotation = first.get("fullTextAnnotation")
        text = annotation.get("text") if isinstance(annotation, Mapping) else None

        error = first.get("error")
        message = error.get("message") if isinstance(error, Mapping) else None

        return (
            text if isinstance(text, str) else "",
            str(message) if message else None,
        )

    def _extract_identifier(self, raw_text: str, normalized_text: str) -> FieldValues:
        return self.IDENTIFIER_PATTERNS.search(normalized_text)

    def _extract_thai_name(self, raw_text: str, normalized_text: str) -> FieldValues:
        return self.THAI_NAME_PATTERNS.search(raw_text)

    def _extract_english_name(self, raw_text: str, normalized_text: str) -> FieldValues:
        return self.ENGLISH_NAME_PATTERNS.search(raw_text)

    def _extract_dates(self, raw_text: str, normalized_text: str) -> FieldValues:
        """First three dates in document order are birth, issue and expiry"""
        return self.DATE_PATTERNS.search(normalized_text)

    def _extract_address(self, raw_text: str, normalized_text: str) -> FieldValues:
        return self.ADDRESS_PATTERNS.search(normalized_text)

    def _extract_religion(self, raw_text: str, normalized_text: str) -> FieldValues:
        return self.RELIGION_PATTERNS.search(raw_text)

    def _extract_laser_code(self, raw_text: str, normalized_text: str) -> FieldValues:
        return self.LASER_CODE_PATTERNS.search(normalized_text)


_parser = ThaiIdCardParser()


def extract(payload: Any) -> ExtractedRecord:
    """Parse a Vision response into an ExtractedRecord"""
    return _parser.parse(payload)
