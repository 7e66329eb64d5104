from collections.abc import Iterable

from app.core.constants import FALLBACK_GENRE, STATUS_BONUS
from app.models.library import LibraryEntry, ReadingStatus


def normalize_genre(genre: str) -> str:
    """Canonical display form: lowercase, then first letter capitalized ("sLICE of Life" -> "Slice of life")."""
    return genre.strip().capitalize()


def status_bonus(status: ReadingStatus | str | None) -> int:
    value = status.value if isinstance(status, ReadingStatus) else status
    return STATUS_BONUS.get(value, 0)


class PreferenceScorer:
    """
    Builds a genre preference ranking from a library snapshot.

    Each entry contributes ``rating**2 + status_bonus`` to every one of its genres,
    so a handful of 9s and 10s outweighs a long tail of lukewarm ratings.
    """

    @staticmethod
    def entry_weight(entry: LibraryEntry) -> int:
        rating = entry.rating or 0
        return rating * rating + status_bonus(entry.status)

    @staticmethod
    def score(entries: Iterable[LibraryEntry]) -> dict[str, int]:
        """
        Accumulate weights per normalized genre.

        Args:
            entries: Library snapshot; not modified.

        Returns:
            Mapping genre -> weight, keys in first-seen order.
        """
        scores: dict[str, int] = {}
        for entry in entries:
            if not entry.genres:
                continue
            weight = PreferenceScorer.entry_weight(entry)
            # Normalize before accumulating so "action" and "Action" share a bucket
            genres = dict.fromkeys(normalize_genre(g) for g in entry.genres if g and g.strip())
            for genre in genres:
                scores[genre] = scores.get(genre, 0) + weight
        return scores

    @staticmethod
    def rank(scores: dict[str, int]) -> list[tuple[str, int]]:
        """Genres by descending weight; sort stability keeps first-seen order on ties."""
        return sorted(scores.items(), key=lambda kv: kv[1], reverse=True)

    @staticmethod
    def select_genre(scores: dict[str, int], override: str | None = None) -> str:
        if override and override.strip():
            return normalize_genre(override)
        ranked = PreferenceScorer.rank(scores)
        if ranked:
            return ranked[0][0]
        return FALLBACK_GENRE
