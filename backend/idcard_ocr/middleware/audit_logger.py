"""
Audit Logging Middleware
Tags every response with a request ID and keeps an audit trail of ID card parses
"""
import time
import uuid
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from loguru import logger

from idcard_ocr.config import settings


class AuditLogMiddleware(BaseHTTPMiddleware):
    """
    Middleware recording who parsed which card and how much was recognized

    The parse endpoint leaves `masked_identifier` and `detection_score` on
    request.state; only the masked identifier ever reaches the log.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = uuid.uuid4().hex
        request.state.request_id = request_id
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Audit: request_id={request_id} {request.method} {request.url.path} "
                f"failed after {self._elapsed_ms(start_time)}ms: {e}"
            )
            raise

        duration_ms = self._elapsed_ms(start_time)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        score = getattr(request.state, "detection_score", None)
        if score is not None:
            client = request.client.host if request.client else "unknown"
            logger.info(
                f"Audit: ID card parse request_id={request_id} client={client} "
                f"id={request.state.masked_identifier or '-'} score={score} "
                f"status={response.status_code} duration_ms={duration_ms}"
            )
        elif settings.AUDIT_LOG_ENABLED:
            logger.debug(
                f"Audit: request_id={request_id} {request.method} {request.url.path} "
                f"status={response.status_code} duration_ms={duration_ms}"
            )

        return response

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.perf_counter() - start_time) * 1000)
