from domain.models import SearchType
from services.pagination import (
    MAX_PAGES,
    RESULTS_PER_PAGE,
    build_search_metadata,
    parse_total_results,
    slice_page,
)


def test_parse_total_results_variants():
    assert parse_total_results("1,230,000") == 1230000
    assert parse_total_results("4 521") == 4521
    assert parse_total_results(87) == 87
    assert parse_total_results(None) == 0
    assert parse_total_results("About 1,000") == 0
    assert parse_total_results("") == 0
    assert parse_total_results(float("inf")) == 0


def test_metadata_first_page_of_many():
    meta = build_search_metadata("1,230,000", 1, 0.42, SearchType.WEB)
    assert meta.total_pages == MAX_PAGES
    assert meta.has_next_page is True
    assert meta.has_prev_page is False
    assert meta.results_per_page == RESULTS_PER_PAGE
    assert meta.total_results == "1,230,000"


def test_metadata_caps_next_page_at_ten():
    meta = build_search_metadata(100000, 10, 0.1, SearchType.NEWS)
    assert meta.total_pages == 10
    assert meta.has_next_page is False
    assert meta.has_prev_page is True


def test_metadata_small_result_count():
    meta = build_search_metadata("45", 2, 0.0, SearchType.WEB)
    assert meta.total_pages == 3
    assert meta.has_next_page is True

    last = build_search_metadata("45", 3, 0.0, SearchType.WEB)
    assert last.has_next_page is False


def test_metadata_exact_multiple_and_zero():
    meta = build_search_metadata("40", 2, 0.0, SearchType.WEB)
    assert meta.total_pages == 2
    assert meta.has_next_page is False

    empty = build_search_metadata("0", 1, 0.0, SearchType.WEB)
    assert empty.total_pages == 0
    assert empty.has_next_page is False


def test_metadata_to_dict_shape():
    data = build_search_metadata("21", 1, 1.5, SearchType.BOOKS).to_dict()
    assert data == {
        "total_results": "21",
        "time_taken_displayed": 1.5,
        "search_type": "books",
        "current_page": 1,
        "total_pages": 2,
        "has_next_page": True,
        "has_prev_page": False,
        "results_per_page": 20,
    }


def test_slice_page():
    items = list(range(45))
    assert slice_page(items, 1) == list(range(20))
    assert slice_page(items, 3) == list(range(40, 45))
    assert slice_page(items, 4) == []
