"""Pytest configuration and shared fixtures."""

import json
from typing import Callable, Dict, List, Union

import httpx
import pytest


# ============================================================================
# HTML BUILDERS
# ============================================================================

def poly_card(
    item_id: str,
    title: str,
    fraction: str = "1.299",
    cents: str = "90",
    previous: str = "",
    image: str = "https://http2.mlstatic.com/D_Q_NP_1.webp",
    href: str = "",
) -> str:
    """Render one "poly" layout card."""
    href = href or f"https://produto.mercadolivre.com.br/{item_id}-produto-_JM#position=1&type=item"
    previous_html = (
        f'<s class="andes-money-amount andes-money-amount--previous">'
        f'<span class="andes-money-amount__fraction">{previous}</span></s>'
        if previous
        else ""
    )
    return f"""
    <div class="poly-card">
      <img data-src="{image}" src="data:image/gif;base64,R0lGOD">
      <h3 class="poly-component__title-wrapper">
        <a class="poly-component__title" href="{href}">{title}</a>
      </h3>
      <div class="poly-component__price">
      {previous_html}
      <div class="poly-price__current">
        <span class="andes-money-amount">
          <span class="andes-money-amount__currency-symbol">R$</span>
          <span class="andes-money-amount__fraction">{fraction}</span>
          <span class="andes-money-amount__cents">{cents}</span>
        </span>
      </div>
      </div>
    </div>
    """


def results_page(*cards: str) -> str:
    return f"<html><body><ol>{''.join(cards)}</ol></body></html>"


def state_page(state: Union[Dict, List]) -> str:
    """Render a client-side page carrying only the hydration blob."""
    return (
        "<html><head><script>"
        f"window.__PRELOADED_STATE__ = {json.dumps(state)};"
        "</script></head><body><div id=\"root\"></div></body></html>"
    )


def state_item(item_id: str, title: str, price=199.9, original_price=None) -> Dict:
    return {
        "id": item_id,
        "title": title,
        "permalink": f"https://produto.mercadolivre.com.br/{item_id}-x-_JM?tracking_id=t1",
        "price": {"amount": price, "currency_id": "BRL"},
        "original_price": original_price,
        "thumbnail": f"https://http2.mlstatic.com/{item_id}.webp",
    }


# ============================================================================
# NETWORK / TIME DOUBLES
# ============================================================================

class SleepRecorder:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def html_pages():
    """Helpers for building marketplace pages."""
    return {
        "card": poly_card,
        "results": results_page,
        "state": state_page,
        "item": state_item,
    }


@pytest.fixture
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Build an httpx client backed by a routing table.

    Each route maps a URL to a response, an exception instance, or a list
    of those consumed one per request (the last entry repeats).
    """
    def factory(routes: Dict[str, object]) -> httpx.AsyncClient:
        calls: Dict[str, int] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            count = calls.get(url, 0)
            calls[url] = count + 1
            outcome = routes.get(url)
            if outcome is None:
                return httpx.Response(404, text="not found")
            if isinstance(outcome, list):
                outcome = outcome[min(count, len(outcome) - 1)]
            if isinstance(outcome, Exception):
                raise outcome
            if isinstance(outcome, int):
                return httpx.Response(outcome, text="")
            return httpx.Response(200, text=outcome)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client.request_log = calls
        return client

    return factory
