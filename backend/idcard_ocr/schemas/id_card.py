"""
Thai ID Card Schemas
Pydantic models for the structured record extracted from OCR text
"""
from pydantic import BaseModel, Field
from typing import Optional


class ExtractedRecord(BaseModel):
    """Fields extracted from a Thai national ID card"""
    identifier: str = Field("", description="13-digit citizen ID, digits only")
    identifier_valid: bool = Field(False, description="Whether the citizen ID check digit validates")

    local_name_prefix: str = Field("", description="Thai honorific (นาย, นาง, นางสาว, ...)")
    local_name: str = Field("", description="Name in Thai script")
    latin_name_prefix: str = Field("", description="English honorific without trailing period")
    latin_name: str = Field("", description="Given name and surname in Latin script")

    address: str = Field("", description="Registered address on a single line")

    birth_date_local: str = Field("", description="Birth date as printed in the Thai calendar")
    birth_date: str = Field("", description="Birth date in the Gregorian calendar")
    issue_date_local: str = Field("", description="Issue date as printed in the Thai calendar")
    issue_date: str = Field("", description="Issue date in the Gregorian calendar")
    expiry_date_local: str = Field("", description="Expiry date as printed in the Thai calendar")
    expiry_date: str = Field("", description="Expiry date in the Gregorian calendar")

    religion: str = ""
    laser_code: str = Field("", description="Code printed on the back of the card")

    detection_score: int = Field(0, description="Additive score over extracted fields")
    raw_text: str = Field("", description="Recognized text, verbatim")
    error_message: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "identifier": "1103702071811",
                "identifier_valid": True,
                "local_name_prefix": "นางสาว",
                "local_name": "ณัฐธิดา ยางสวย",
                "latin_name_prefix": "Miss",
                "latin_name": "Nattida Yangsuai",
                "address": "111/17 หมู่ที่ 2 ต.ลาดหญ้า อ.เมืองกาญจนบุรี จ.กาญจนบุรี",
                "birth_date_local": "25 มิ.ย. 2539",
                "birth_date": "25 Jun 1996",
                "issue_date_local": "24 มิ.ย. 2562",
                "issue_date": "24 Jun 2019",
                "expiry_date_local": "24 มิ.ย. 2571",
                "expiry_date": "24 Jun 2028",
                "religion": "พุทธ",
                "laser_code": "1234-56-78901234",
                "detection_score": 110,
                "raw_text": "บัตรประจำตัวประชาชน Thai National ID Card ...",
                "error_message": None
            }
        }
