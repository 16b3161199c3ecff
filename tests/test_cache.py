import json

from jlog import cache


class TestMerge:
    def test_fetched_wins(self):
        merged = cache.merge({"A-1": "fresh"}, {"A-1": "stale", "B-2": "kept"})
        assert merged == {"A-1": "fresh", "B-2": "kept"}

    def test_inputs_untouched(self):
        fetched, persisted = {"A-1": "x"}, {"B-2": "y"}
        cache.merge(fetched, persisted)
        assert fetched == {"A-1": "x"}
        assert persisted == {"B-2": "y"}

    def test_empty_sides(self):
        assert cache.merge({}, {"B-2": "y"}) == {"B-2": "y"}
        assert cache.merge({"A-1": "x"}, {}) == {"A-1": "x"}


class TestLookupInsert:
    def test_missing(self):
        assert cache.lookup({}, "A-1") is None

    def test_insert_then_lookup(self):
        tickets = {"A-1": "old"}
        assert cache.insert(tickets, "A-1", "new") is tickets
        assert cache.lookup(tickets, "A-1") == "new"

    def test_insert_is_idempotent(self):
        tickets = {}
        cache.insert(tickets, "A-1", "t")
        cache.insert(tickets, "A-1", "t")
        assert tickets == {"A-1": "t"}


class TestPersistence:
    def test_no_file(self):
        assert cache.load_cached_tickets() == {}

    def test_add_and_load(self, jlog_home):
        cache.add_cached_ticket("A-1", "First")
        cache.add_cached_ticket("B-2", "Second")
        cache.add_cached_ticket("A-1", "Renamed")
        assert cache.load_cached_tickets() == {"A-1": "Renamed", "B-2": "Second"}
        assert json.loads((jlog_home / "tickets.json").read_text())["B-2"] == "Second"

    def test_corrupt_file(self, jlog_home):
        jlog_home.mkdir(parents=True)
        (jlog_home / "tickets.json").write_text("{not json")
        assert cache.load_cached_tickets() == {}

    def test_non_mapping_file(self, jlog_home):
        jlog_home.mkdir(parents=True)
        (jlog_home / "tickets.json").write_text("[1, 2]")
        assert cache.load_cached_tickets() == {}
