"""Tests for observable state fields."""

from __future__ import annotations

from weightview.domains.weight.domain_logic.observable import MutableObservable


class TestObservable:
    def test_initial_value(self):
        field = MutableObservable(3)
        assert field.value == 3

    def test_subscribers_see_updates(self):
        field = MutableObservable(0)
        seen = []
        field.subscribe(seen.append)
        field.set(1)
        field.set(2)
        assert seen == [1, 2]

    def test_unsubscribe(self):
        field = MutableObservable(0)
        seen = []
        unsubscribe = field.subscribe(seen.append)
        field.set(1)
        unsubscribe()
        unsubscribe()
        field.set(2)
        assert seen == [1]


class TestReadOnlyView:
    def test_tracks_source(self):
        field = MutableObservable("a")
        view = field.as_read_only()
        field.set("b")
        assert view.value == "b"

    def test_has_no_setter(self):
        view = MutableObservable(1).as_read_only()
        assert not hasattr(view, "set")

    def test_subscribe_through_view(self):
        field = MutableObservable(1)
        seen = []
        field.as_read_only().subscribe(seen.append)
        field.set(5)
        assert seen == [5]
