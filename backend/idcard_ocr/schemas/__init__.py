# Schemas Package
from idcard_ocr.schemas.id_card import ExtractedRecord

__all__ = ["ExtractedRecord"]
