from typing import Annotated, Literal

from pydantic import Field, field_validator

from app.core.constants import RECOMMENDED_STATUS
from app.models.library import CamelModel, LibraryEntry, LibraryEntryCreate, ReadingStatus


class CatalogCandidate(CamelModel):
    """Uniform shape for catalog items shown as recommendations."""

    kitsu_id: str
    title: str
    cover_image: str | None = None
    synopsis: str | None = None
    status: str = RECOMMENDED_STATUS
    rating: int | None = None  # 0-10 scale


class RecommendationResult(CamelModel):
    selected_genre: str
    available_genres: list[str] = Field(default_factory=list)
    based_on_taste: list[CatalogCandidate] = Field(default_factory=list)
    trending: list[CatalogCandidate] = Field(default_factory=list)


class NewCandidate(CamelModel):
    """A catalog item that is not in the user's library yet."""

    kind: Literal["new"] = "new"
    kitsu_id: str
    title: str
    cover_image: str | None = None
    synopsis: str | None = None
    genres: list[str] = Field(default_factory=list)
    average_rating: float | None = None  # 0-100 scale, as reported by the catalog

    def to_entry(
        self, status: ReadingStatus = ReadingStatus.COMPLETED, rating: int | None = None, user_id: str | None = None
    ) -> LibraryEntryCreate:
        return LibraryEntryCreate(
            kitsu_id=self.kitsu_id,
            title=self.title,
            genres=list(self.genres),
            status=status,
            rating=rating,
            synopsis=self.synopsis,
            cover_image=self.cover_image,
            user_id=user_id,
        )


class OwnedEntry(CamelModel):
    """A catalog item the user already saved; carries the stored entry."""

    kind: Literal["owned"] = "owned"
    entry: LibraryEntry


SearchHit = Annotated[NewCandidate | OwnedEntry, Field(discriminator="kind")]


class SearchPage(CamelModel):
    results: list[SearchHit] = Field(default_factory=list)
    next_offset: int | None = None


class FromCatalogRequest(CamelModel):
    kitsu_id: str = Field(min_length=1)
    status: ReadingStatus = ReadingStatus.COMPLETED
    rating: int | None = Field(default=None, ge=1, le=10)
    user_id: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value):
        return ReadingStatus.parse(value)
