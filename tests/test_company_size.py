import pytest

from app.utils.company_size import (
    COMPANY_SIZE_OPTIONS,
    SizeRange,
    bucket_index,
    buckets_between,
    is_endpoint_removable,
    merge_selections,
    parse_bucket_range,
    split_range_to_selections,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "label,expected",
    [
        ("1-10 employees", SizeRange(1, 10)),
        ("5001-10,000 employees", SizeRange(5001, 10000)),
        ("10,001+ employees", SizeRange(10001, None)),
        ("250", SizeRange(250, 250)),
        ("about fifty", SizeRange(0, None)),
        ("", SizeRange(0, None)),
    ],
)
def test_parse_bucket_range(label, expected):
    assert parse_bucket_range(label) == expected


def test_merge_single_selection_is_unchanged():
    assert merge_selections(["1-10 employees"]) == "1-10 employees"


def test_merge_adjacent_buckets():
    assert merge_selections(["1-10 employees", "11-50 employees"]) == "1-50 employees"


def test_merge_with_unbounded_bucket():
    assert merge_selections(["1001-5000 employees", "10,001+ employees"]) == "1,001+ employees"


def test_merge_formats_thousands():
    assert merge_selections(["501-1000 employees", "5001-10,000 employees"]) == "501-10,000 employees"


def test_merge_empty_and_unparseable():
    assert merge_selections([]) == ""
    assert merge_selections(["n/a", "unknown"]) == ""


def test_split_blank():
    assert split_range_to_selections("") == []
    assert split_range_to_selections("   ") == []


def test_split_catalog_label():
    assert split_range_to_selections(" 51-200 employees ") == ["51-200 employees"]


def test_split_range_into_buckets():
    assert split_range_to_selections("501-10,000 employees") == [
        "501-1000 employees",
        "1001-5000 employees",
        "5001-10,000 employees",
    ]


def test_split_range_includes_top_bucket_when_it_starts_inside():
    assert split_range_to_selections("5001-20,000 employees") == [
        "5001-10,000 employees",
        "10,001+ employees",
    ]


def test_split_plus_range():
    assert split_range_to_selections("1,001+ employees") == [
        "1001-5000 employees",
        "5001-10,000 employees",
        "10,001+ employees",
    ]


def test_split_range_without_matching_bucket_returns_input():
    assert split_range_to_selections("2-3 employees") == ["2-3 employees"]
    assert split_range_to_selections("50,000+ employees") == ["50,000+ employees"]


def test_split_garbage_is_returned_unchanged():
    assert split_range_to_selections("garbage") == ["garbage"]


def test_contiguous_selection_round_trips():
    selection = ["11-50 employees", "51-200 employees", "201-500 employees"]
    assert split_range_to_selections(merge_selections(selection)) == selection


def test_non_contiguous_selection_is_widened():
    selection = ["1-10 employees", "1001-5000 employees"]
    merged = merge_selections(selection)

    assert merged == "1-5,000 employees"
    assert split_range_to_selections(merged) == list(COMPANY_SIZE_OPTIONS[:6])
    assert split_range_to_selections(merged) != selection


def test_bucket_helpers():
    assert bucket_index("201-500 employees") == 3
    assert bucket_index("nope") == -1
    assert buckets_between(5, 3) == [
        "201-500 employees",
        "501-1000 employees",
        "1001-5000 employees",
    ]


def test_only_endpoints_are_removable():
    selection = ["11-50 employees", "51-200 employees", "201-500 employees"]

    assert is_endpoint_removable("11-50 employees", selection)
    assert is_endpoint_removable("201-500 employees", selection)
    assert not is_endpoint_removable("51-200 employees", selection)


def test_single_or_unknown_selection_is_removable():
    assert is_endpoint_removable("1-10 employees", ["1-10 employees"])
    assert is_endpoint_removable("custom", ["custom", "other"])
