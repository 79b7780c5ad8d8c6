"""Deterministic local headline generator.

Produces a short attention-grabbing prefix for an offer without calling the
AI text service. The same title/price input always yields the same headline,
so re-scraping does not reshuffle the wording of an unchanged offer.
"""

import hashlib
import re
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Sequence, Tuple

import structlog

from promohunter.scrapers.utils.normalizer import PriceNormalizer

logger = structlog.get_logger(__name__)

FALLBACK_HEADLINE = "🔥 Super Oferta!"

WORD_SETS = {
    "smartphone": ["ASTRONÔMICO 📱", "MISSÃO LUNAR 🚀", "FLAGSHIP 💥"],
    "tv": ["CINEMÃO 📺", "TELÃO 🎬", "PIXELS 🔥"],
    "notebook": ["ESTUDOS TURBO 💻", "TRABALHO 🧠", "NOTE BRABO ⚙️"],
    "audio": ["GRAVEZERA 🎧", "SOM CRISTAL 🎵", "OUVIDO FELIZ 🔊"],
    "gaming": ["FPS NAS ALTURAS 🎮", "GG EASY 🏆", "LATÊNCIA ZERO ⚡"],
    "casa": ["CASA CHIQUE 🏠", "UTILIDADE TOP ✨", "LAR UPGRADE 🔧"],
    "cozinha": ["COZINHA PRO 🍳", "RECEITA VAPT-VUPT 🍝", "SUCÃO GELADO 🧊"],
    "fitness": ["METER O SHAPE 🏋️", "CARDIO 💪", "PROJETO VERÃO ☀️"],
    "auto": ["CARRO EQUIPADO 🚗", "GARAGEM TURBO 🛠️", "RODAS FELIZES 🚘"],
    "pet": ["PET FELIZ 🐾", "MIAU + AU-AU 💚", "PET PREMIUM 🐶"],
    "perfumaria": ["CHEIRO DE RICO 💎", "AROMA FINO 🌹", "ASSINATURA ✨"],
    "default": ["ACHADO RARO 🔥", "PEGA ESSA 🎯", "PREÇO QUEBRADO 💣"],
}

# Checked in order; first matching category wins
CATEGORY_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ("smartphone", re.compile(r"\b(galaxy|iphone|redmi|moto|xiaomi|realme|smartphone|celular)\b", re.I)),
    ("tv", re.compile(r"\b(tv|smart\s*tv|oled|qled|uhd|4k|55['’ ]|65['’ ])\b", re.I)),
    ("notebook", re.compile(r"\b(notebook|laptop|macbook)\b", re.I)),
    ("audio", re.compile(r"\b(fone|headset|earbud|airpods|soundbar|caixa de som)\b", re.I)),
    ("gaming", re.compile(r"\b(ps5|xbox|nintendo|rtx|gpu|placa de vídeo|gamer|gaming)\b", re.I)),
    ("cozinha", re.compile(r"\b(fritadeira|air\s*fryer|liquidificador|batedeira|caf[eé]|micro-ondas|forno)\b", re.I)),
    ("fitness", re.compile(r"\b(whey|creatina|bicicleta|esteira|halter|suplemento|gym)\b", re.I)),
    ("auto", re.compile(r"\b(pneu|som automotivo|suporte veicular|carregador veicular|automotivo)\b", re.I)),
    ("pet", re.compile(r"\b(ração|petisco|arranhador|antipulga|areia|pet)\b", re.I)),
    ("perfumaria", re.compile(r"\b(perfume|eau de|parfum|colônia|toilette)\b", re.I)),
    ("casa", re.compile(r"\b(lençol|edredom|travesseiro|luminária|organizador|ferramenta|casa)\b", re.I)),
]

URGENT_HIGH = ["CORRE! ⚡", "RELÂMPAGO ⚡", "ÚLTIMAS UNIDADES ⌛"]
URGENT_MID = ["ACHADO 🔥", "TÁ VOANDO 💨", "PEGA AGORA ✅"]
URGENT_LOW = ["PREÇO BAIXOU 💥", "BOA DEMAIS 💙", "APROVEITA 💫"]


def pick_from(options: Sequence[str], seed: str) -> str:
    """Pick an option deterministically from an md5 digest of ``seed``."""
    digest = hashlib.md5(seed.encode("utf-8")).hexdigest()
    return options[int(digest, 16) % len(options)]


def classify(title: Optional[str]) -> str:
    """Return the headline category for a product title."""
    for category, pattern in CATEGORY_PATTERNS:
        if pattern.search(title or ""):
            return category
    return "default"


def urgent_prefix(discount_pct: int, price: Optional[Decimal], lightning: bool = False) -> str:
    if lightning or discount_pct >= 40:
        options = URGENT_HIGH
    elif discount_pct >= 25:
        options = URGENT_MID
    else:
        options = URGENT_LOW
    return pick_from(options, f"urgent-{discount_pct}-{price}-{lightning}")


def _to_price(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def generate_headline(title: str, price_from: Any, price: Any) -> str:
    """Build a headline such as "ACHADO 🔥 GRAVEZERA 🎧".

    Args:
        title: Offer title, used for category detection
        price_from: Original price (Decimal, number, string or empty)
        price: Current price

    Returns:
        Headline text; a generic fallback if the inputs cannot be used
    """
    try:
        p0 = _to_price(price_from)
        p1 = _to_price(price)
        category = classify(title)
        discount_pct = PriceNormalizer.discount_percentage(p0, p1)

        urgent = urgent_prefix(discount_pct, p1)
        flair = pick_from(
            WORD_SETS.get(category, WORD_SETS["default"]),
            f"{title}-{p0}-{p1}-{discount_pct}-{category}",
        )
        return f"{urgent} {flair}"
    except (ArithmeticError, TypeError, ValueError) as e:
        logger.warning("headline_generation_failed", title=title, error=str(e))
        return FALLBACK_HEADLINE
