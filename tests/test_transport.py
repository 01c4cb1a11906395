import httpx
import pytest

from proxy.dispatcher import dispatch
from tests.helpers import ANTHROPIC_URL, API_BASE, RecordingTransport

HOST = "api.githubcopilot.com"


def ok(request):
    return httpx.Response(200, json={"content": [{"type": "text", "text": "ok"}], "stop_reason": "end_turn"})


async def send(transport, include_credentials):
    response = await transport.send(
        "POST", f"{API_BASE}/v1/messages", headers={}, json_body={}, include_credentials=include_credentials
    )
    await response.aclose()


@pytest.mark.asyncio
async def test_included_credentials_send_cookies():
    transport = RecordingTransport(ok)
    transport.client.cookies.set("sid", "abc", domain=HOST)

    await send(transport, include_credentials=True)
    await send(transport, include_credentials=True)

    assert [r.headers.get("Cookie") for r in transport.requests] == ["sid=abc", "sid=abc"]
    assert transport.client.cookies.get("sid") == "abc"


@pytest.mark.asyncio
async def test_omitted_credentials_strip_cookie_and_clear_jar():
    transport = RecordingTransport(ok)
    transport.client.cookies.set("sid", "abc", domain=HOST)

    await send(transport, include_credentials=False)

    assert "Cookie" not in transport.requests[0].headers
    assert transport.client.cookies.get("sid") is None


@pytest.mark.asyncio
async def test_cookies_set_by_upstream_do_not_leak_when_omitted():
    def set_cookie(request):
        return httpx.Response(200, json={}, headers={"Set-Cookie": "sid=fromserver; Path=/"})

    transport = RecordingTransport(set_cookie)
    await send(transport, include_credentials=False)
    await send(transport, include_credentials=False)

    assert all("Cookie" not in r.headers for r in transport.requests)


@pytest.mark.asyncio
@pytest.mark.parametrize("basic_auth_compat, expected", [(True, "sid=abc"), (False, None)])
async def test_dispatch_follows_basic_auth_compat(make_context, basic_auth_compat, expected):
    context = make_context(ok, basic_auth_compat=basic_auth_compat)
    context.transport.client.cookies.set("sid", "abc", domain=HOST)

    await dispatch({"messages": [{"role": "user", "content": "hi"}], "api_key": "gho_k"}, context)

    [sent] = context.transport.requests_to(ANTHROPIC_URL)
    assert sent.headers.get("Cookie") == expected


@pytest.mark.asyncio
async def test_non_streaming_calls_use_request_timeout():
    import settings

    transport = RecordingTransport(ok)
    response = await transport.send("POST", f"{API_BASE}/v1/messages", headers={}, streaming=False)
    await response.aclose()
    response = await transport.send("POST", f"{API_BASE}/v1/messages", headers={})
    await response.aclose()

    non_streaming, streaming = (r.extensions["timeout"] for r in transport.requests)
    assert non_streaming["read"] == settings.REQUEST_TIMEOUT
    assert non_streaming["connect"] == settings.CONNECT_TIMEOUT
    assert streaming["read"] == settings.READ_TIMEOUT


@pytest.mark.asyncio
@pytest.mark.parametrize("stream, expected_read", [(False, "REQUEST_TIMEOUT"), (True, "READ_TIMEOUT")])
async def test_dispatch_picks_timeout_by_stream_flag(make_context, stream, expected_read):
    import settings

    context = make_context(ok)
    await dispatch({"messages": [{"role": "user", "content": "hi"}], "api_key": "gho_k", "stream": stream}, context)
    [sent] = context.transport.requests
    assert sent.extensions["timeout"]["read"] == getattr(settings, expected_read)
