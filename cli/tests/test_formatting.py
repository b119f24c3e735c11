from reviewhub_cli.formatting import format_date, format_rating, items_of, truncate


def test_format_date() -> None:
    assert format_date("2025-03-01T09:30:00Z") == "2025-03-01 09:30"
    assert format_date(None) == "-"
    assert format_date("yesterday") == "yesterday"


def test_format_rating() -> None:
    assert format_rating(4.4) == "★★★★☆"
    assert format_rating(None) == "-"


def test_truncate() -> None:
    assert truncate("short") == "short"
    assert truncate("a  b\nc") == "a b c"
    assert truncate("x" * 20, width=10) == "x" * 9 + "…"


def test_items_of() -> None:
    assert items_of([1, 2]) == [1, 2]
    assert items_of({"products": [{"id": 1}], "pagination": {}}, "products") == [{"id": 1}]
    assert items_of({"items": [3]}) == [3]
    assert items_of(None) == []
