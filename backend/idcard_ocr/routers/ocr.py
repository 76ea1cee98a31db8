"""
OCR Router
Endpoint turning a recognition payload into a structured Thai ID card record
"""
from typing import Any, Dict
from fastapi import APIRouter, Body, HTTPException, Request, status
from loguru import logger

from idcard_ocr.schemas.id_card import ExtractedRecord
from idcard_ocr.services.id_card_parser import InvalidPayloadError, extract
from idcard_ocr.utils.security import mask_sensitive_value


router = APIRouter()


VISION_RESPONSE_EXAMPLE: Dict[str, Any] = {
    "responses": [
        {
            "fullTextAnnotation": {
                "text": "บัตรประจำตัวประชาชน Thai National ID Card\n1 1037 02071 81 1\n..."
            }
        }
    ]
}


@router.post("/parse", response_model=ExtractedRecord)
async def parse_id_card(
    request: Request,
    payload: Any = Body(
        ...,
        description="Google Vision images:annotate response (DOCUMENT_TEXT_DETECTION)",
        examples=[VISION_RESPONSE_EXAMPLE]
    )
):
    """
    Extract Thai ID card fields from recognized text

    The response includes:
    - Citizen ID and whether its check digit validates
    - Thai and English names with honorifics
    - Address, religion and laser code
    - Birth, issue and expiry dates (Thai calendar and Gregorian)
    - A detection score over the fields found

    A payload without recognized text returns an empty record, not an error.
    """
    try:
        record = extract(payload)
    except InvalidPayloadError as e:
        logger.warning(f"Rejected recognition payload: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )

    # Picked up by the audit middleware
    request.state.masked_identifier = mask_sensitive_value(record.identifier)
    request.state.detection_score = record.detection_score
    return record
