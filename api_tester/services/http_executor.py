"""
HTTP execution service for sending HTTP requests.

This service performs the single outbound call for a PreparedRequest using
httpx, captures status, headers, body, timing and size, and classifies
failures. It has no side effects besides the network call: recording the
result in history is up to the caller.
"""

import asyncio
import json
import logging
import time

import httpx

from .. import config
from ..exceptions import TransportError, UpstreamTimeoutError
from ..schemas.execute import ExecutionResult, JsonBody, PreparedRequest, RawBody


logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse_response_body(text: str) -> JsonBody | RawBody:
    """
    Interpret a response body.

    The text is parsed as strict JSON when possible (NaN and Infinity are
    refused); otherwise it is kept as raw text so the response is never
    discarded or altered.
    """
    if not text.strip():
        return RawBody(text=text)
    try:
        return JsonBody(value=json.loads(text, parse_constant=_reject_constant))
    except ValueError:
        return RawBody(text=text)


def get_http_transport() -> httpx.AsyncBaseTransport | None:
    """
    Dependency returning the transport used for outbound calls.

    None means the default network transport. Tests override this with an
    httpx.MockTransport.
    """
    return None


async def execute_request(
    request: PreparedRequest,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None
) -> ExecutionResult:
    """
    Execute a prepared HTTP request and return the result.

    Exactly one attempt is made. Any HTTP status, including 4xx and 5xx,
    is a completed execution.

    Args:
        request: Normalized request from the normalizer
        timeout: Timeout in seconds, defaults to EXECUTION_TIMEOUT_SECONDS
        transport: Optional httpx transport to send through

    Returns:
        ExecutionResult describing the received response

    Raises:
        UpstreamTimeoutError: If the target does not answer in time
        TransportError: If the target cannot be reached (DNS, connect, TLS)
    """
    if timeout is None:
        timeout = config.EXECUTION_TIMEOUT_SECONDS

    headers = [(pair.key, pair.value) for pair in request.headers]
    content = request.body.encode("utf-8") if request.body is not None else None

    try:
        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=config.FOLLOW_REDIRECTS,
            transport=transport
        ) as client:
            start_time = time.perf_counter()
            # httpx timeouts apply per connect/read/write; this bounds the whole call
            response = await asyncio.wait_for(
                client.request(
                    method=request.method,
                    url=request.url,
                    headers=headers,
                    content=content
                ),
                timeout
            )
            end_time = time.perf_counter()
    except (httpx.TimeoutException, asyncio.TimeoutError):
        logger.warning("%s %s timed out after %ss", request.method, request.url, timeout)
        raise UpstreamTimeoutError(f"Request exceeded {timeout} seconds timeout")
    except httpx.HTTPError as e:
        logger.warning("%s %s failed: %s", request.method, request.url, e)
        raise TransportError(f"Failed to reach {request.url}: {e}")

    timing_ms = int((end_time - start_time) * 1000)
    raw_body = response.content

    result = ExecutionResult(
        status=response.status_code,
        status_text=response.reason_phrase or "Unknown",
        headers=dict(response.headers),
        body=parse_response_body(response.text),
        timing_ms=timing_ms,
        size_bytes=len(raw_body)
    )
    logger.info(
        "%s %s -> %s in %dms (%d bytes)",
        request.method, request.url, result.status, result.timing_ms, result.size_bytes
    )
    return result
