"""
Unit tests for HttpxTransport.

Responses are served by httpx.MockTransport, so requests never leave the
process.
"""

import json

import httpx
import pytest

from betterlog.errors import HttpError, NetworkError, SerializationError
from betterlog.transport import HttpxTransport, with_json_accept

URL = "https://in.logs.betterstack.com"


def make_transport(handler, **client_kwargs) -> tuple[HttpxTransport, list[httpx.Request]]:
    """Build an HttpxTransport whose client routes requests to ``handler``."""
    seen: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler), **client_kwargs)
    return HttpxTransport(client=client), seen


class TestWithJsonAccept:
    """Tests for the forced Accept header."""

    def test_adds_accept(self):
        assert with_json_accept({"X-Test": "1"}) == {"X-Test": "1", "Accept": "application/json"}

    def test_overwrites_caller_accept(self):
        headers = with_json_accept({"Accept": "text/plain", "accept": "text/html"})
        assert headers == {"Accept": "application/json"}

    def test_does_not_mutate_input(self):
        original = {"Accept": "text/plain"}
        with_json_accept(original)
        assert original == {"Accept": "text/plain"}


class TestHttpxTransportPostJson:
    """Tests for HttpxTransport.post_json."""

    @pytest.mark.asyncio
    async def test_sends_post_with_json_body(self):
        transport, seen = make_transport(lambda request: httpx.Response(202))

        await transport.post_json(
            URL,
            {"message": "hello"},
            {"Authorization": "Bearer t", "Content-Type": "application/json"},
        )

        request = seen[0]
        assert request.method == "POST"
        assert request.url.host == "in.logs.betterstack.com"
        assert json.loads(request.content) == {"message": "hello"}
        assert request.headers["Authorization"] == "Bearer t"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_caller_accept_is_overwritten(self):
        transport, seen = make_transport(lambda request: httpx.Response(200))

        await transport.post_json(URL, {}, {"Accept": "text/plain"})

        assert seen[0].headers.get_list("Accept") == ["application/json"]

    @pytest.mark.asyncio
    async def test_empty_success_body_returns_none(self):
        transport, _ = make_transport(lambda request: httpx.Response(202, content=b""))
        assert await transport.post_json(URL, {}, {}) is None

    @pytest.mark.asyncio
    async def test_whitespace_body_returns_none(self):
        transport, _ = make_transport(lambda request: httpx.Response(200, content=b"  \n"))
        assert await transport.post_json(URL, {}, {}) is None

    @pytest.mark.asyncio
    async def test_json_success_body_parsed(self):
        transport, _ = make_transport(
            lambda request: httpx.Response(200, json={"status": "ok", "count": 1})
        )
        assert await transport.post_json(URL, {}, {}) == {"status": "ok", "count": 1}

    @pytest.mark.asyncio
    async def test_malformed_success_body_is_serialization_error(self):
        """A 2xx with an unparseable body is a data contract bug, not an HTTP error."""
        transport, _ = make_transport(lambda request: httpx.Response(200, content=b"not json"))

        with pytest.raises(SerializationError):
            await transport.post_json(URL, {}, {})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 403, 404, 429, 500, 502, 503])
    async def test_non_success_status_is_http_error(self, status):
        transport, _ = make_transport(lambda request: httpx.Response(status))

        with pytest.raises(HttpError) as exc_info:
            await transport.post_json(URL, {}, {})

        assert exc_info.value.status == status
        assert str(status) in exc_info.value.message

    @pytest.mark.asyncio
    async def test_http_error_includes_response_text(self):
        transport, _ = make_transport(
            lambda request: httpx.Response(401, text="Invalid source token")
        )

        with pytest.raises(HttpError) as exc_info:
            await transport.post_json(URL, {}, {})

        assert "Invalid source token" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_http_error_text_truncated(self):
        transport, _ = make_transport(lambda request: httpx.Response(500, text="x" * 5000))

        with pytest.raises(HttpError) as exc_info:
            await transport.post_json(URL, {}, {})

        assert len(exc_info.value.message) < 300

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "exc",
        [
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("read timed out"),
            httpx.ConnectTimeout("connect timed out"),
            httpx.RemoteProtocolError("server disconnected"),
        ],
    )
    async def test_connection_failures_are_network_errors(self, exc):
        def handler(request):
            raise exc

        transport, _ = make_transport(handler)

        with pytest.raises(NetworkError) as exc_info:
            await transport.post_json(URL, {}, {})

        assert exc_info.value.__cause__ is exc

    @pytest.mark.asyncio
    async def test_corrupt_encoded_body_is_serialization_error(self):
        """A 2xx body that fails to decompress is reported, not leaked as an httpx error."""
        transport, _ = make_transport(
            lambda request: httpx.Response(
                200, headers={"Content-Encoding": "gzip"}, content=b"not gzip"
            )
        )

        with pytest.raises(SerializationError) as exc_info:
            await transport.post_json(URL, {}, {})

        assert isinstance(exc_info.value.__cause__, httpx.DecodingError)

    @pytest.mark.asyncio
    async def test_redirect_loop_is_network_error(self):
        transport, _ = make_transport(
            lambda request: httpx.Response(302, headers={"Location": URL}),
            follow_redirects=True,
            max_redirects=3,
        )

        with pytest.raises(NetworkError) as exc_info:
            await transport.post_json(URL, {}, {})

        assert isinstance(exc_info.value.__cause__, httpx.TooManyRedirects)

    @pytest.mark.asyncio
    async def test_unencodable_body_is_serialization_error(self):
        transport, seen = make_transport(lambda request: httpx.Response(200))

        with pytest.raises(SerializationError):
            await transport.post_json(URL, {"when": object()}, {})

        assert seen == []


class TestHttpxTransportLifecycle:
    """Tests for client ownership."""

    @pytest.mark.asyncio
    async def test_creates_client_lazily(self):
        transport = HttpxTransport(timeout=3.0)
        assert transport._client is None

        client = transport._get_client()

        assert isinstance(client, httpx.AsyncClient)
        assert transport._get_client() is client
        assert client.timeout.connect == 3.0
        await transport.aclose()
        assert transport._client is None

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_client(self):
        async with HttpxTransport() as transport:
            client = transport._get_client()
        assert client.is_closed

    @pytest.mark.asyncio
    async def test_injected_client_left_open(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))

        async with HttpxTransport(client=client):
            pass

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_aclose_without_client_is_noop(self):
        await HttpxTransport().aclose()
