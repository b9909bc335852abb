"""Claim check endpoints proxying the verification backend."""

import logging
from typing import Any, Dict

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask

from ...domain.models.verification import VerificationResult
from ..dependencies import get_backend_client

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/check", tags=["check"])

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def _read_json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


@router.post("")
async def check_claim(
    request: Request,
    client: httpx.AsyncClient = Depends(get_backend_client),
):
    """Verify a claim through the backend and reshape its result.

    Returns:
        ``{"success": true, "data": {...}}`` with confidence as a percentage
        and time as ``"12.4s"``
    """
    body = await _read_json_body(request)
    claim = body.get("claim")
    if not isinstance(claim, str) or not claim.strip():
        return JSONResponse(status_code=400, content={"error": "Claim is required and must be a string"})

    payload = {
        "claim": claim.strip(),
        "language": body.get("language") or "en",
        "skip_cache": bool(body.get("skip_cache", False)),
    }
    logger.info(f"🔍 Forwarding claim to backend: {payload['claim'][:80]}")

    try:
        response = await client.post(
            "/api/check",
            json=payload,
            headers={"Content-Type": "application/json"},
        )
    except httpx.TransportError as e:
        logger.warning(f"⚠️ Backend unreachable: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "error": "Backend service unavailable",
                "message": "The verification service is currently unavailable. Please try again later.",
                "fallback": True,
            },
        )

    if response.is_error:
        logger.error(f"❌ Backend error {response.status_code}: {response.text[:200]}")
        return JSONResponse(
            status_code=response.status_code,
            content={"error": "Failed to verify claim", "details": response.text},
        )

    try:
        result = VerificationResult.from_backend(response.json())
    except Exception as e:
        logger.error(f"❌ Unexpected backend response: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(e)},
        )

    logger.info(f"✅ Verdict {result.verdict.value} ({result.confidence}%)")
    return {"success": True, "data": result.to_check_data()}


@router.get("")
async def check_health(client: httpx.AsyncClient = Depends(get_backend_client)):
    """Report whether the verification backend is healthy."""
    try:
        response = await client.get("/api/health")
        if response.is_success:
            return {"status": "healthy", "backend": True, **response.json()}
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"⚠️ Backend health check failed: {e}")

    return JSONResponse(status_code=503, content={"status": "unhealthy", "backend": False})


@router.get("/stream")
async def stream_check(
    claim: str = "",
    language: str = "en",
    skip_cache: bool = False,
    client: httpx.AsyncClient = Depends(get_backend_client),
):
    """Relay the backend's event stream for a claim unchanged."""
    if not claim.strip():
        return JSONResponse(status_code=400, content={"error": "Claim is required"})

    params = {"claim": claim, "language": language}
    if skip_cache:
        params["skip_cache"] = "true"

    backend_request = client.build_request(
        "GET",
        "/api/check/stream",
        params=params,
        headers={"Accept": "text/event-stream"},
    )
    try:
        response = await client.send(backend_request, stream=True)
    except httpx.TransportError as e:
        logger.warning(f"⚠️ Backend stream unreachable: {e}")
        return JSONResponse(
            status_code=503,
            content={"error": "Failed to connect to backend", "fallback": True},
        )

    if response.is_error:
        await response.aclose()
        logger.error(f"❌ Backend stream failed with {response.status_code}")
        return JSONResponse(
            status_code=response.status_code,
            content={"error": "Backend SSE connection failed"},
        )

    logger.info(f"📡 Relaying event stream for: {claim[:80]}")
    return StreamingResponse(
        response.aiter_raw(),
        media_type="text/event-stream",
        headers=STREAM_HEADERS,
        background=BackgroundTask(response.aclose),
    )
