"""Tests for middleware and error rendering — headers, request IDs, error shape."""

import pytest


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["X-XSS-Protection"] == "1; mode=block"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


@pytest.mark.asyncio
async def test_security_headers_on_errors(client):
    """Rejected requests carry the same headers."""
    r = await client.get("/photos")
    assert r.status_code == 401
    assert r.headers["X-Frame-Options"] == "DENY"


@pytest.mark.asyncio
async def test_request_id_generated(client):
    r1 = await client.get("/health")
    r2 = await client.get("/health")
    assert "X-Request-ID" in r1.headers
    assert "X-Request-ID" in r2.headers
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    custom_id = "test-trace-12345"
    r = await client.get("/health", headers={"X-Request-ID": custom_id})
    assert r.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    r = await client.get("/health")
    assert "Strict-Transport-Security" not in r.headers


@pytest.mark.asyncio
async def test_unknown_route_uses_message_shape(client):
    r = await client.get("/nope")
    assert r.status_code == 404
    assert r.json() == {"message": "Not Found"}


def test_validation_messages_name_fields_not_offsets():
    """Decode errors and list indexes don't leak into messages."""
    from photo_api.main import _format_validation_error

    assert _format_validation_error(
        {"type": "json_invalid", "loc": ("body", 1), "msg": "JSON decode error"}
    ) == "Malformed JSON body"
    assert _format_validation_error(
        {"type": "string_type", "loc": ("body", "tags", 0), "msg": "Input should be a valid string"}
    ) == "tags: Input should be a valid string"
    assert _format_validation_error(
        {"type": "missing", "loc": ("body",), "msg": "Field required"}
    ) == "Field required"
