"""Tests for the HTTP API surface."""

import random

import pytest
from fastapi.testclient import TestClient
from jsonschema import validate

from promohunter.dependencies import get_offer_service
from promohunter.main import app
from promohunter.scrapers import OfferScraper
from promohunter.services import OfferService

SOURCE = "https://www.mercadolivre.com.br/ofertas"

OFFER_SCHEMA = {
    "type": "object",
    "required": ["id", "headline", "title", "price_from", "price", "coupon", "permalink", "image", "discount_pct"],
    "properties": {
        "id": {"type": "string"},
        "headline": {"type": "string"},
        "title": {"type": "string", "minLength": 1},
        "price_from": {"type": ["number", "string"]},
        "price": {"type": ["number", "null"]},
        "coupon": {"type": "string"},
        "permalink": {"type": "string", "pattern": "^https?://"},
        "image": {"type": "string"},
        "discount_pct": {"type": "integer", "minimum": 0, "maximum": 100},
    },
}


@pytest.fixture
def api_client(html_pages, make_client, sleep_recorder):
    """TestClient whose scraper talks to a mocked marketplace."""
    card, page = html_pages["card"], html_pages["results"]
    http_client = make_client(
        {
            SOURCE: page(
                card("MLB-4100000001", "Fone Bluetooth", fraction="150", cents="00", previous="300"),
                card("MLB-4100000002", "Cabo USB", fraction="19", cents="90"),
            )
        }
    )
    scraper = OfferScraper(client=http_client, sleep=sleep_recorder, rng=random.Random(3))
    app.dependency_overrides[get_offer_service] = lambda: OfferService(scraper)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class TestScrapeEndpoint:
    """Tests for POST /api/v1/scrape."""

    def test_scrape_returns_offers(self, api_client):
        response = api_client.post(
            "/api/v1/scrape",
            json={"urls_text": SOURCE, "max_items": 10, "generate_headline": True},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["message"] == "Foram raspados 2 itens com sucesso."
        assert len(body["data"]) == 2
        for offer in body["data"]:
            validate(instance=offer, schema=OFFER_SCHEMA)
            assert offer["headline"]

        by_title = {o["title"]: o for o in body["data"]}
        assert by_title["Fone Bluetooth"]["price"] == 150.0
        assert by_title["Fone Bluetooth"]["price_from"] == 300.0
        assert by_title["Fone Bluetooth"]["discount_pct"] == 50
        assert by_title["Cabo USB"]["price_from"] == ""

    def test_min_discount_filter(self, api_client):
        response = api_client.post(
            "/api/v1/scrape",
            json={"urls_text": SOURCE, "max_items": 10, "min_discount": 30},
        )

        assert response.status_code == 200
        assert [o["title"] for o in response.json()["data"]] == ["Fone Bluetooth"]

    @pytest.mark.parametrize(
        "payload",
        [
            {"urls_text": "", "max_items": 10},
            {"urls_text": SOURCE, "max_items": 5},
            {"urls_text": SOURCE, "max_items": 5000},
            {"urls_text": SOURCE, "min_discount": 101},
        ],
    )
    def test_invalid_requests(self, api_client, payload):
        response = api_client.post("/api/v1/scrape", json=payload)
        assert response.status_code == 422

    def test_blank_lines_only(self, api_client):
        response = api_client.post("/api/v1/scrape", json={"urls_text": " \n \n"})

        assert response.status_code == 422
        assert response.json()["detail"] == "Forneça pelo menos uma URL."


class TestHealthEndpoint:
    """Tests for GET /api/v1/health."""

    def test_health(self):
        response = TestClient(app).get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
