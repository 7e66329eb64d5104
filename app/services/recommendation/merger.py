import math
from collections.abc import Iterable
from typing import Any

from loguru import logger

from app.core.config import settings
from app.core.constants import MASTER_GENRES
from app.models.catalog import CatalogCandidate
from app.services.recommendation.scorer import normalize_genre


def parse_average_rating(value: Any) -> float | None:
    """Kitsu reports averageRating as a numeric string on a 0-100 scale."""
    if value is None or isinstance(value, bool):
        return None
    try:
        rating = float(value)
    except (TypeError, ValueError):
        return None
    return rating if math.isfinite(rating) else None


def scale_rating(value: Any) -> int | None:
    """0-100 -> 0-10, rounding half up (85 -> 9, 84.9 -> 8)."""
    rating = parse_average_rating(value)
    if rating is None:
        return None
    return math.floor(rating / 10 + 0.5)


def extract_title(attributes: dict[str, Any]) -> str:
    titles = attributes.get("titles") or {}
    return titles.get("en") or titles.get("en_jp") or attributes.get("canonicalTitle") or attributes.get("slug") or ""


def to_candidate(item: dict[str, Any]) -> CatalogCandidate | None:
    item_id = item.get("id")
    if item_id is None:
        return None
    attributes = item.get("attributes") or {}
    poster = attributes.get("posterImage") or {}
    return CatalogCandidate(
        kitsu_id=str(item_id),
        title=extract_title(attributes),
        cover_image=poster.get("small"),
        synopsis=attributes.get("synopsis"),
        rating=scale_rating(attributes.get("averageRating")),
    )


def dedupe(items: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep the first item per ID, preserving order. Items without an ID are dropped."""
    seen: set[str] = set()
    unique = []
    for item in items:
        item_id = item.get("id")
        if item_id is None:
            logger.warning("Skipping catalog item without id")
            continue
        key = str(item_id)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


class ResultMerger:
    """Turns raw catalog items into capped, duplicate-free candidate lists."""

    def __init__(self, cap: int | None = None):
        self.cap = settings.RECOMMENDATION_RESULT_CAP if cap is None else cap

    def merge(self, items: Iterable[dict[str, Any]]) -> list[CatalogCandidate]:
        unique = dedupe(items)[: self.cap]
        return [candidate for candidate in map(to_candidate, unique) if candidate is not None]

    @staticmethod
    def available_genres(discovered: Iterable[str]) -> list[str]:
        """Master genres plus anything scored from the library, alphabetically."""
        genres = {normalize_genre(g) for g in MASTER_GENRES}
        genres.update(normalize_genre(g) for g in discovered if g and g.strip())
        return sorted(genres)
