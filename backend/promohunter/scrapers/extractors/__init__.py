"""Offer extraction strategies, tried in order by the orchestrator."""

from .dom import extract_from_dom, iter_dom_offers
from .embedded_state import extract_from_embedded_state

__all__ = [
    "extract_from_dom",
    "iter_dom_offers",
    "extract_from_embedded_state",
]
