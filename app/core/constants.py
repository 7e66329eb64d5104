"""
Domain constants for scoring and catalog formatting. Tunable limits live in config.
"""

# Added on top of rating**2 for every genre of an entry with this status
STATUS_BONUS: dict[str, int] = {
    "Reading": 5,
    "Completed": 3,
}

FALLBACK_GENRE: str = "Adventure"
RECOMMENDED_STATUS: str = "Recommended"

# Offered for selection even when the library holds no data for them.
# Stored in normalized form (see app.services.recommendation.scorer.normalize_genre).
MASTER_GENRES: tuple[str, ...] = (
    "Action",
    "Adventure",
    "Comedy",
    "Drama",
    "Fantasy",
    "Horror",
    "Mystery",
    "Psychological",
    "Romance",
    "Science fiction",
    "Slice of life",
    "Sports",
    "Supernatural",
    "Thriller",
)
