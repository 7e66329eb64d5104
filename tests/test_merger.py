from app.core.constants import MASTER_GENRES
from app.services.recommendation.merger import ResultMerger, dedupe, extract_title, scale_rating, to_candidate
from tests.fakes import kitsu_item


def test_rating_scales_from_100_to_10_rounding_half_up():
    assert scale_rating(85) == 9
    assert scale_rating("85.23") == 9
    assert scale_rating("84.9") == 8
    assert scale_rating(5) == 1
    assert scale_rating(100) == 10
    assert scale_rating(0) == 0


def test_unusable_ratings_are_absent():
    assert scale_rating(None) is None
    assert scale_rating("") is None
    assert scale_rating("n/a") is None


def test_title_prefers_english_then_romanized_then_canonical():
    assert extract_title({"titles": {"en": "Attack on Titan", "en_jp": "Shingeki no Kyojin"}}) == "Attack on Titan"
    assert extract_title({"titles": {"en_jp": "Shingeki no Kyojin"}}) == "Shingeki no Kyojin"
    assert extract_title({"titles": {}, "canonicalTitle": "Berserk"}) == "Berserk"


def test_candidate_mapping():
    item = kitsu_item(42, en="Vagabond", rating="88.10", poster="https://img/42.jpg", synopsis="A swordsman.")

    candidate = to_candidate(item)

    assert candidate.kitsu_id == "42"
    assert candidate.title == "Vagabond"
    assert candidate.cover_image == "https://img/42.jpg"
    assert candidate.synopsis == "A swordsman."
    assert candidate.rating == 9
    assert candidate.status == "Recommended"


def test_missing_optional_fields_are_absent():
    candidate = to_candidate({"id": "7", "attributes": {"titles": {"en_jp": "Nana"}}})

    assert candidate.cover_image is None
    assert candidate.synopsis is None
    assert candidate.rating is None


def test_candidate_serializes_with_camel_case_keys():
    payload = to_candidate(kitsu_item(1, en="Monster", rating=90)).model_dump(by_alias=True)

    assert payload == {
        "kitsuId": "1",
        "title": "Monster",
        "coverImage": None,
        "synopsis": None,
        "status": "Recommended",
        "rating": 9,
    }


def test_dedupe_keeps_first_occurrence_in_order():
    items = [kitsu_item(1, en="first"), kitsu_item(2), kitsu_item(1, en="second"), kitsu_item(3), kitsu_item(2)]

    unique = dedupe(items)

    assert [item["id"] for item in unique] == ["1", "2", "3"]
    assert unique[0]["attributes"]["titles"]["en"] == "first"


def test_merge_dedupes_before_capping():
    items = [kitsu_item(i % 25) for i in range(60)]

    merged = ResultMerger(cap=20).merge(items)

    assert [c.kitsu_id for c in merged] == [str(i) for i in range(20)]


def test_zero_cap_returns_nothing():
    assert ResultMerger(cap=0).merge([kitsu_item(i) for i in range(5)]) == []


def test_merge_drops_items_without_id():
    merged = ResultMerger().merge([{"attributes": {"titles": {"en": "ghost"}}}, kitsu_item(5)])

    assert [c.kitsu_id for c in merged] == ["5"]


def test_available_genres_union_is_sorted_and_keeps_master_list():
    genres = ResultMerger.available_genres({"Isekai": 10, "action": 3})

    assert genres == sorted(genres)
    assert "Isekai" in genres
    assert genres.count("Action") == 1
    for master in MASTER_GENRES:
        assert master in genres


def test_available_genres_without_library_data():
    assert ResultMerger.available_genres([]) == sorted(MASTER_GENRES)
