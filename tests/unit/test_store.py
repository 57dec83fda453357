"""
Unit tests for the in-memory store.
"""
import logging
import threading

import pytest

from configctl.store import Namespace, Scalar, Store


def test_set_then_get_round_trip(store):
    """A value written with set is returned by get."""
    store.set("HOST", "localhost")

    assert store.get("HOST") == ("localhost", True)


def test_set_overwrites(store):
    store.set("k", "a")
    store.set("k", "b")

    assert store.get("k") == ("b", True)


def test_empty_value_is_found(store):
    store.set("k", "")

    assert store.get("k") == ("", True)


def test_initial_entries():
    store = Store({"CONFIG_CONTROLLER_PORT": "4242"})

    assert store.get("CONFIG_CONTROLLER_PORT") == ("4242", True)


def test_absent_keys(store):
    """Missing keys and prefixes are reported as not found, not as errors."""
    assert store.get("nope") == ("", False)
    assert store.get_for("noprefix", "k") == ("", False)


def test_namespace_isolation(store):
    store.set_for("p1", "k", "a")
    store.set_for("p2", "k", "b")

    assert store.get_for("p1", "k") == ("a", True)
    assert store.get_for("p2", "k") == ("b", True)
    assert store.get_for("p1", "other") == ("", False)


def test_add_appends_with_delimiter(store):
    store.add("k", "x", ",")
    store.add("k", "y", ",")

    assert store.get("k") == ("x,y", True)


def test_add_on_fresh_key_has_no_leading_delimiter(store):
    store.add("k2", "z", ",")

    assert store.get("k2") == ("z", True)


def test_add_for_appends_within_namespace(store):
    store.add_for("svc", "FLAGS", "-v", " ")
    store.add_for("svc", "FLAGS", "-q", " ")
    store.add_for("other", "FLAGS", "-x", " ")

    assert store.get_for("svc", "FLAGS") == ("-v -q", True)
    assert store.get_for("other", "FLAGS") == ("-x", True)


def test_add_with_empty_delimiter(store):
    store.add("k", "a", "")
    store.add("k", "b", "")

    assert store.get("k") == ("ab", True)


class TestShapes:
    """A key holds a scalar or a namespace, never both."""

    def test_scalar_is_not_a_namespace(self, store):
        store.set("k", "v")

        assert store.get_for("k", "anything") == ("", False)
        assert store.dump_env_for("k") == []

    def test_namespace_is_not_a_scalar(self, store):
        store.set_for("p", "k", "v")

        assert store.get("p") == ("", False)
        assert store.dump_env() == []

    def test_set_for_replaces_scalar(self, store):
        store.set("p", "scalar")
        store.set_for("p", "k", "v")

        assert store.get("p") == ("", False)
        assert store.get_for("p", "k") == ("v", True)
        assert isinstance(store._entries["p"], Namespace)

    def test_set_replaces_namespace(self, store):
        store.set_for("p", "k", "v")
        store.set("p", "scalar")

        assert store.get("p") == ("scalar", True)
        assert store.get_for("p", "k") == ("", False)

    def test_add_on_namespace_starts_fresh_scalar(self, store):
        store.set_for("p", "k", "v")
        store.add("p", "x", ",")

        assert store.get("p") == ("x", True)
        assert isinstance(store._entries["p"], Scalar)

    def test_add_for_on_scalar_starts_fresh_namespace(self, store):
        store.set("p", "scalar")
        store.add_for("p", "k", "x", ",")

        assert store.get_for("p", "k") == ("x", True)

    def test_replacing_scalar_is_logged_lazily(self, store, caplog):
        store.set("p", "scalar")

        with caplog.at_level(logging.DEBUG, logger="configctl.store"):
            store.set_for("p", "k", "v")

        record = next(r for r in caplog.records if r.name == "configctl.store")
        assert record.args == ("p",)
        assert record.getMessage() == "Replacing scalar at 'p' with a namespace"


class TestDump:

    @pytest.fixture
    def populated(self, store):
        store.set("a", "1")
        store.set("b", "2")
        store.set("c", "3")
        store.set_for("ns", "x", "10")
        return store

    def test_dump_all_skips_namespaces(self, populated):
        assert sorted(populated.dump_env()) == ["a=1", "b=2", "c=3"]

    def test_dump_filter_keeps_order(self, populated):
        assert populated.dump_env("b", "a") == ["b=2", "a=1"]

    def test_dump_filter_skips_unknown_and_namespaces(self, populated):
        assert populated.dump_env("missing", "ns", "c") == ["c=3"]

    def test_dump_for(self, populated):
        populated.set_for("ns", "y", "20")

        assert sorted(populated.dump_env_for("ns")) == ["x=10", "y=20"]
        assert populated.dump_env_for("ns", "y") == ["y=20"]

    def test_dump_for_missing_prefix(self, populated):
        assert populated.dump_env_for("missing") == []
        assert populated.dump_env_for("missing", "x") == []

    def test_dump_value_with_equals_sign(self, store):
        store.set("DSN", "user=app")

        assert store.dump_env("DSN") == ["DSN=user=app"]


def test_stats(store):
    store.set("a", "1")
    store.set("b", "2")
    store.set_for("ns", "k", "v")

    assert store.stats() == {"scalars": 2, "namespaces": 1}


def test_concurrent_add_loses_no_updates(store):
    """Concurrent appends to one key serialize: every token survives."""
    workers = 32
    per_worker = 25
    barrier = threading.Barrier(workers)

    def append():
        barrier.wait()
        for _ in range(per_worker):
            store.add("k", "1", ",")

    threads = [threading.Thread(target=append) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    value, ok = store.get("k")
    assert ok
    assert value.split(",") == ["1"] * (workers * per_worker)


def test_concurrent_add_for_loses_no_updates(store):
    workers = 16
    barrier = threading.Barrier(workers)

    def append(i):
        barrier.wait()
        store.add_for("ns", "k", str(i), ",")
        store.set_for("ns", f"own-{i}", "x")

    threads = [threading.Thread(target=append, args=(i,)) for i in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    value, ok = store.get_for("ns", "k")
    assert ok
    assert sorted(value.split(","), key=int) == [str(i) for i in range(workers)]
    assert len(store.dump_env_for("ns")) == workers + 1
