"""
Tests for the HTTP executor.

Upstream APIs are simulated with httpx.MockTransport, or with a local
asyncio socket server where real transport timing matters.
"""

import asyncio
import json

import httpx
import pytest

from api_tester import config
from api_tester.exceptions import TransportError, UpstreamTimeoutError
from api_tester.schemas.execute import HeaderPair, JsonBody, PreparedRequest, RawBody
from api_tester.services.http_executor import execute_request, parse_response_body


def run(request: PreparedRequest, handler, **kwargs):
    """Execute a request against a mock handler."""
    return asyncio.run(execute_request(request, transport=httpx.MockTransport(handler), **kwargs))


def make_request(method="GET", url="https://api.example.com/users", headers=(), body=None):
    return PreparedRequest(method=method, url=url, headers=tuple(headers), body=body)


class TestResponseCapture:
    """Completed calls are captured whatever their status."""

    def test_json_response(self):
        payload = [{"id": 1, "name": "Ada"}]
        raw = json.dumps(payload).encode()

        def handler(request):
            return httpx.Response(200, content=raw, headers={"Content-Type": "application/json"})

        result = run(make_request(), handler)

        assert result.status == 200
        assert result.status_text == "OK"
        assert result.body == JsonBody(value=payload)
        assert result.size_bytes == len(raw)
        assert result.timing_ms >= 0
        assert result.headers["content-type"] == "application/json"

    def test_json_parsed_without_json_content_type(self):
        def handler(request):
            return httpx.Response(200, text='{"ok": true}', headers={"Content-Type": "text/plain"})

        result = run(make_request(), handler)
        assert result.body == JsonBody(value={"ok": True})

    def test_non_json_body_is_kept_as_raw_text(self):
        html = "<html><body>Hello</body></html>"

        def handler(request):
            return httpx.Response(200, html=html)

        result = run(make_request(), handler)

        assert result.body == RawBody(text=html)
        assert result.size_bytes == len(html.encode())

    def test_invalid_json_with_json_content_type_is_raw(self):
        def handler(request):
            return httpx.Response(200, text="{broken", headers={"Content-Type": "application/json"})

        result = run(make_request(), handler)
        assert result.body == RawBody(text="{broken")

    def test_empty_body(self):
        def handler(request):
            return httpx.Response(204)

        result = run(make_request(method="DELETE"), handler)

        assert result.status == 204
        assert result.body == RawBody(text="")
        assert result.size_bytes == 0

    @pytest.mark.parametrize("status_code", [400, 401, 404, 500, 503])
    def test_error_statuses_are_successful_executions(self, status_code):
        def handler(request):
            return httpx.Response(status_code, json={"error": "nope"})

        result = run(make_request(), handler)

        assert result.status == status_code
        assert not result.is_success

    def test_unknown_status_text_defaults(self):
        def handler(request):
            return httpx.Response(599)

        result = run(make_request(), handler)
        assert result.status_text == "Unknown"

    def test_size_counts_raw_bytes(self):
        text = "héllo wörld"

        def handler(request):
            return httpx.Response(200, content=text.encode("utf-8"), headers={"Content-Type": "text/plain; charset=utf-8"})

        result = run(make_request(), handler)
        assert result.size_bytes == len(text.encode("utf-8"))
        assert result.body == RawBody(text=text)


class TestOutboundRequest:
    """The transmitted request matches the prepared one."""

    def test_headers_sent_in_order_with_duplicates(self):
        captured = {}

        def handler(request):
            captured["headers"] = [
                (k, v) for k, v in request.headers.multi_items() if k in ("x-trace", "accept")
            ]
            return httpx.Response(200)

        headers = [
            HeaderPair(key="X-Trace", value="1"),
            HeaderPair(key="Accept", value="text/plain"),
            HeaderPair(key="X-Trace", value="2"),
        ]
        run(make_request(headers=headers), handler)

        assert captured["headers"] == [("x-trace", "1"), ("accept", "text/plain"), ("x-trace", "2")]

    def test_body_is_sent_for_post(self):
        captured = {}

        def handler(request):
            captured["method"] = request.method
            captured["content"] = request.content
            captured["content_type"] = request.headers.get("content-type")
            return httpx.Response(201, json={"id": 7})

        request = make_request(
            method="POST",
            headers=[HeaderPair(key="Content-Type", value="application/json")],
            body='{"name": "Ada"}'
        )
        result = run(request, handler)

        assert result.status == 201
        assert captured == {
            "method": "POST",
            "content": b'{"name": "Ada"}',
            "content_type": "application/json",
        }

    def test_get_sends_no_body(self):
        captured = {}

        def handler(request):
            captured["content"] = request.content
            return httpx.Response(200)

        run(make_request(), handler)
        assert captured["content"] == b""

    def test_exactly_one_attempt(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        run(make_request(), handler)
        assert len(calls) == 1

    def test_redirects_are_followed(self, monkeypatch):
        monkeypatch.setattr(config, "FOLLOW_REDIRECTS", True)

        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(302, headers={"Location": "https://api.example.com/new"})
            return httpx.Response(200, json={"moved": True})

        result = run(make_request(url="https://api.example.com/old"), handler)

        assert result.status == 200
        assert result.body == JsonBody(value={"moved": True})

    def test_redirects_not_followed_when_disabled(self, monkeypatch):
        monkeypatch.setattr(config, "FOLLOW_REDIRECTS", False)

        def handler(request):
            return httpx.Response(302, headers={"Location": "https://api.example.com/new"})

        result = run(make_request(url="https://api.example.com/old"), handler)
        assert result.status == 302


class TestTransportFailures:
    """Network failures raise, they are never turned into fake HTTP statuses."""

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            run(make_request(), handler)

        assert exc_info.value.error_code == "NETWORK_ERROR"
        assert exc_info.value.status_code == 502

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamTimeoutError) as exc_info:
            run(make_request(), handler, timeout=0.5)

        assert exc_info.value.error_code == "TIMEOUT"
        assert exc_info.value.status_code == 504
        assert "0.5" in exc_info.value.detail

    def test_slow_body_hits_total_deadline(self):
        """A server dripping bytes faster than the read timeout still times out overall."""

        async def drip(reader, writer):
            try:
                await reader.readuntil(b"\r\n\r\n")
                writer.write(b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 8\r\n\r\n")
                await writer.drain()
                for _ in range(8):
                    await asyncio.sleep(0.4)
                    writer.write(b"x")
                    await writer.drain()
            except ConnectionError:
                pass
            finally:
                writer.close()

        async def scenario():
            server = await asyncio.start_server(drip, "127.0.0.1", 0)
            port = server.sockets[0].getsockname()[1]
            try:
                started = asyncio.get_running_loop().time()
                with pytest.raises(UpstreamTimeoutError):
                    await execute_request(make_request(url=f"http://127.0.0.1:{port}/slow"), timeout=1.0)
                return asyncio.get_running_loop().time() - started
            finally:
                server.close()

        elapsed = asyncio.run(scenario())
        assert elapsed < 2.0

    def test_too_many_redirects(self, monkeypatch):
        monkeypatch.setattr(config, "FOLLOW_REDIRECTS", True)

        def handler(request):
            return httpx.Response(302, headers={"Location": str(request.url)})

        with pytest.raises(TransportError):
            run(make_request(), handler)


class TestParseResponseBody:

    @pytest.mark.parametrize("text, expected", [
        ('{"a": 1}', JsonBody(value={"a": 1})),
        ("[1, 2]", JsonBody(value=[1, 2])),
        ("42", JsonBody(value=42)),
        ("null", JsonBody(value=None)),
        ("plain text", RawBody(text="plain text")),
        ("", RawBody(text="")),
        ('{"value": NaN}', RawBody(text='{"value": NaN}')),
        ("[Infinity, -Infinity]", RawBody(text="[Infinity, -Infinity]")),
        ("NaN", RawBody(text="NaN")),
    ])
    def test_parse(self, text, expected):
        assert parse_response_body(text) == expected
