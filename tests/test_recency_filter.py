"""Tests for the recency filter."""

from conftest import make_item, ts

from src.feeds.models import ZERO_TIME, effective_timestamp
from src.feeds.recency import MAX_ITEMS, select


class TestEffectiveTimestamp:
    def test_prefers_updated(self):
        item = make_item("a", published=ts(1), updated=ts(5))
        assert effective_timestamp(item) == ts(5)

    def test_falls_back_to_published(self):
        item = make_item("a", published=ts(3))
        assert effective_timestamp(item) == ts(3)

    def test_zero_when_no_timestamps(self):
        assert effective_timestamp(make_item("a")) == ZERO_TIME


class TestSelect:
    def test_sorts_newest_first(self):
        items = [make_item("old", published=ts(1)), make_item("new", published=ts(9)), make_item("mid", published=ts(5))]
        assert [i.title for i in select(items)] == ["new", "mid", "old"]

    def test_updated_outranks_older_published(self):
        items = [make_item("pub", published=ts(5)), make_item("upd", published=ts(1), updated=ts(7))]
        assert [i.title for i in select(items)] == ["upd", "pub"]

    def test_equal_timestamps_keep_source_order(self):
        items = [make_item(name, published=ts(4)) for name in ("a", "b", "c")]
        assert [i.title for i in select(items)] == ["a", "b", "c"]

    def test_undated_items_sort_last_in_source_order(self):
        items = [
            make_item("x"),
            make_item("dated", published=ts(2)),
            make_item("y"),
            make_item("z"),
        ]
        assert [i.title for i in select(items)] == ["dated", "x", "y", "z"]

    def test_fewer_than_limit_returned_whole(self):
        items = [make_item(str(n), published=ts(n + 1)) for n in range(3)]
        assert len(select(items)) == 3

    def test_exactly_ten_items(self):
        items = [make_item(str(n), published=ts(n + 1)) for n in range(10)]
        result = select(items)
        assert len(result) == 10
        assert [i.title for i in result] == [str(n) for n in reversed(range(10))]

    def test_truncates_to_first_ten_of_sorted(self):
        items = [make_item(str(n), published=ts(n + 1)) for n in range(15)]
        result = select(items)
        assert len(result) == MAX_ITEMS
        assert [i.title for i in result] == [str(n) for n in range(14, 4, -1)]

    def test_custom_limit(self):
        items = [make_item(str(n), published=ts(n + 1)) for n in range(5)]
        assert [i.title for i in select(items, limit=2)] == ["4", "3"]

    def test_does_not_mutate_input(self):
        items = [make_item("old", published=ts(1)), make_item("new", published=ts(2))]
        select(items)
        assert [i.title for i in items] == ["old", "new"]

    def test_empty(self):
        assert select([]) == []
