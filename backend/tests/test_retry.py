"""Tests for fetch_with_retry."""

import httpx
import pytest

from promohunter.core.exceptions import FetchError, RateLimitError
from promohunter.scrapers.utils import fetch_with_retry

URL = "https://www.mercadolivre.com.br/ofertas"


class TestFetchWithRetry:
    """Tests for the retry/backoff schedule and status handling."""

    async def test_success_on_first_attempt(self, make_client, sleep_recorder):
        client = make_client({URL: "<html>ok</html>"})

        response = await fetch_with_retry(URL, client=client, sleep=sleep_recorder)

        assert response.status_code == 200
        assert response.text == "<html>ok</html>"
        assert sleep_recorder.calls == []

    async def test_rate_limited_twice_then_ok(self, make_client, sleep_recorder):
        client = make_client({URL: [429, 429, "<html>ok</html>"]})

        response = await fetch_with_retry(
            URL, max_retries=3, backoff_base=1.5, client=client, sleep=sleep_recorder
        )

        assert response.status_code == 200
        assert client.request_log[URL] == 3
        assert sleep_recorder.calls == pytest.approx([1.5, 3.0])
        assert sleep_recorder.total == pytest.approx(1.5 * 1 + 1.5 * 2)

    async def test_service_unavailable_is_retried(self, make_client, sleep_recorder):
        client = make_client({URL: [503, "<html>ok</html>"]})

        response = await fetch_with_retry(URL, client=client, sleep=sleep_recorder)

        assert response.status_code == 200
        assert sleep_recorder.calls == pytest.approx([1.5])

    async def test_not_found_is_terminal(self, make_client, sleep_recorder):
        client = make_client({URL: 404})

        response = await fetch_with_retry(URL, client=client, sleep=sleep_recorder)

        assert response.status_code == 404
        assert client.request_log[URL] == 1
        assert sleep_recorder.calls == []

    async def test_rate_limit_exhausted_raises(self, make_client, sleep_recorder):
        client = make_client({URL: 429})

        with pytest.raises(RateLimitError) as exc_info:
            await fetch_with_retry(URL, max_retries=3, client=client, sleep=sleep_recorder)

        assert exc_info.value.status_code == 429
        assert client.request_log[URL] == 3
        assert sleep_recorder.calls == pytest.approx([1.5, 3.0])

    async def test_server_error_exhausted_raises(self, make_client, sleep_recorder):
        client = make_client({URL: 500})

        with pytest.raises(FetchError) as exc_info:
            await fetch_with_retry(
                URL, max_retries=2, backoff_base=0.5, client=client, sleep=sleep_recorder
            )

        assert exc_info.value.status_code == 500
        assert client.request_log[URL] == 2
        assert sleep_recorder.calls == pytest.approx([0.5])

    async def test_network_error_then_ok(self, make_client, sleep_recorder):
        client = make_client({URL: [httpx.ConnectError("connection refused"), "<html>ok</html>"]})

        response = await fetch_with_retry(URL, client=client, sleep=sleep_recorder)

        assert response.status_code == 200
        assert sleep_recorder.calls == pytest.approx([1.5])

    async def test_network_error_exhausted_reraises(self, make_client, sleep_recorder):
        client = make_client({URL: httpx.ReadTimeout("timed out")})

        with pytest.raises(httpx.ReadTimeout):
            await fetch_with_retry(URL, client=client, sleep=sleep_recorder)

        assert client.request_log[URL] == 3

    async def test_sends_browser_headers(self, sleep_recorder):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, text="ok")

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        await fetch_with_retry(URL, client=client, sleep=sleep_recorder)

        assert seen["user-agent"].startswith("Mozilla/5.0")
        assert seen["accept-language"].startswith("pt-BR")
