"""
Test suite for the Thai ID Card OCR Parser API
"""
import pytest
from httpx import AsyncClient, ASGITransport
from loguru import logger
from idcard_ocr.main import app


SAMPLE_TEXT = (
    "บัตรประจำตัวประชาชน Thai National ID Card\n"
    "1 1037 02071 81 1\n"
    "ชื่อตัวและชื่อสกุล นาย สมชาย ใจดี\n"
    "Name Mr. Somchai\n"
    "Last name Jaidee\n"
    "เกิดวันที่ 12 ม.ค. 2530\n"
)


@pytest.fixture
async def client():
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


class TestHealthEndpoints:
    """Test health check endpoints."""

    @pytest.mark.asyncio
    async def test_health_check(self, client: AsyncClient):
        """Test the main health check endpoint."""
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

    @pytest.mark.asyncio
    async def test_root_endpoint(self, client: AsyncClient):
        """Test the root endpoint."""
        response = await client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "message" in data


class TestParseEndpoint:
    """Test the OCR parse endpoint."""

    @pytest.mark.asyncio
    async def test_parse_vision_response(self, client: AsyncClient):
        """Test parsing a recognition payload with card text."""
        payload = {"responses": [{"fullTextAnnotation": {"text": SAMPLE_TEXT}}]}
        response = await client.post("/ocr/parse", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["identifier"] == "1103702071811"
        assert data["identifier_valid"] is True
        assert data["local_name_prefix"] == "นาย"
        assert data["latin_name"] == "Somchai Jaidee"
        assert data["birth_date"] == "12 Jan 1987"
        assert data["raw_text"] == SAMPLE_TEXT
        assert data["detection_score"] > 0

    @pytest.mark.asyncio
    async def test_parse_without_text(self, client: AsyncClient):
        """Test that a payload without text returns an empty record."""
        response = await client.post("/ocr/parse", json={"responses": [{}]})
        assert response.status_code == 200
        data = response.json()
        assert data["raw_text"] == ""
        assert data["detection_score"] == 0
        assert data["error_message"] is None

    @pytest.mark.asyncio
    async def test_parse_reports_upstream_error(self, client: AsyncClient):
        """Test that a per-image error from the recognition service is passed on."""
        payload = {"responses": [{"error": {"code": 3, "message": "Bad image data."}}]}
        response = await client.post("/ocr/parse", json=payload)
        assert response.status_code == 200
        assert response.json()["error_message"] == "Bad image data."

    @pytest.mark.asyncio
    async def test_parse_rejects_non_object(self, client: AsyncClient):
        """Test that a JSON array body is rejected."""
        response = await client.post("/ocr/parse", json=["not", "an", "object"])
        assert response.status_code == 422
        assert "JSON object" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_parse_response_has_request_id(self, client: AsyncClient):
        """Test that the audit middleware tags responses."""
        response = await client.post("/ocr/parse", json={})
        assert response.status_code == 200
        assert "X-Request-ID" in response.headers
        assert response.headers["X-Response-Time"].endswith("ms")

    @pytest.mark.asyncio
    async def test_parse_is_audited_with_masked_identifier(self, client: AsyncClient):
        """Test that the audit trail records the masked ID and score, never the raw ID."""
        messages = []
        sink_id = logger.add(messages.append, level="INFO", format="{message}")
        try:
            payload = {"responses": [{"fullTextAnnotation": {"text": SAMPLE_TEXT}}]}
            response = await client.post("/ocr/parse", json=payload)
        finally:
            logger.remove(sink_id)

        assert response.status_code == 200
        audit = [m for m in messages if m.startswith("Audit: ID card parse")]
        assert len(audit) == 1
        assert "id=XXXXXXXXX1811" in audit[0]
        assert f"score={response.json()['detection_score']}" in audit[0]
        assert f"request_id={response.headers['X-Request-ID']}" in audit[0]
        assert all("1103702071811" not in m for m in messages)

    @pytest.mark.asyncio
    async def test_rejected_payload_is_not_audited_as_parse(self, client: AsyncClient):
        """Test that a rejected body leaves no parse audit entry."""
        messages = []
        sink_id = logger.add(messages.append, level="INFO", format="{message}")
        try:
            response = await client.post("/ocr/parse", json=[1, 2])
        finally:
            logger.remove(sink_id)

        assert response.status_code == 422
        assert "X-Request-ID" in response.headers
        assert not any(m.startswith("Audit: ID card parse") for m in messages)


class TestInputValidation:
    """Test input validation."""

    @pytest.mark.asyncio
    async def test_missing_body(self, client: AsyncClient):
        """Test parse without a request body."""
        response = await client.post("/ocr/parse")
        assert response.status_code == 422
        assert response.json()["detail"] == "Validation error"


if __name__ == "__main__":
    pytest.main(["-v", __file__])
