"""Tests for state_machine.py - MapViewModel fetch lifecycle and filtering.

Uses python-statemachine directly without a UI listener.
"""

from conftest import InMemorySpotStore, make_spot
from prayerspot_finder.ui.state_machine import MapContext, MapViewModel


class TestInitialLoad:
    def test_starts_loading(self, view_model: tuple[MapViewModel, MapContext]) -> None:
        vm, ctx = view_model
        assert vm.is_loading
        assert vm.get_state_name() == "Loading"
        assert ctx.records == []

    def test_mount_lists_once(self, view_model: tuple[MapViewModel, MapContext], store: InMemorySpotStore) -> None:
        vm, ctx = view_model
        store.rows = [make_spot("a", minutes=1), make_spot("b", minutes=2)]

        vm.mount(store=store)
        vm.mount(store=store)

        assert vm.is_ready
        assert store.list_calls == 1
        assert [s.id for s in ctx.records] == ["b", "a"]

    def test_initial_failure_enters_error(
        self, view_model: tuple[MapViewModel, MapContext], store: InMemorySpotStore
    ) -> None:
        vm, ctx = view_model
        store.fail_next = "service unavailable"

        assert vm.refresh(store=store) is False
        assert vm.is_error
        assert ctx.error == "service unavailable"
        assert not vm.has_stale_data

    def test_retry_after_error(self, view_model: tuple[MapViewModel, MapContext], store: InMemorySpotStore) -> None:
        vm, ctx = view_model
        store.rows = [make_spot("a")]
        store.fail_next = "boom"
        vm.refresh(store=store)

        assert vm.refresh(store=store) is True
        assert vm.is_ready
        assert ctx.error is None
        assert len(ctx.records) == 1


class TestRefreshFailureKeepsData:
    def test_failed_refresh_keeps_previous_records(
        self, view_model: tuple[MapViewModel, MapContext], store: InMemorySpotStore
    ) -> None:
        vm, ctx = view_model
        store.rows = [make_spot("a")]
        vm.refresh(store=store)

        store.fail_next = "timeout"
        vm.refresh(store=store)

        assert vm.is_error
        assert vm.has_stale_data
        assert [s.id for s in ctx.records] == ["a"]


class TestOverlappingFetches:
    """Newer results win regardless of completion order."""

    def test_older_result_after_newer_is_dropped(self, view_model: tuple[MapViewModel, MapContext]) -> None:
        vm, ctx = view_model
        old_token = vm.begin_refresh()
        new_token = vm.begin_refresh()

        assert vm.complete_refresh(token=new_token, records=[make_spot("new")]) is True
        assert vm.complete_refresh(token=old_token, records=[make_spot("old")]) is False

        assert vm.is_ready
        assert [s.id for s in ctx.records] == ["new"]

    def test_older_result_before_newer_is_replaced(self, view_model: tuple[MapViewModel, MapContext]) -> None:
        vm, ctx = view_model
        old_token = vm.begin_refresh()
        new_token = vm.begin_refresh()

        vm.complete_refresh(token=old_token, records=[make_spot("old")])
        vm.complete_refresh(token=new_token, records=[make_spot("new")])

        assert [s.id for s in ctx.records] == ["new"]

    def test_stale_failure_is_ignored(self, view_model: tuple[MapViewModel, MapContext]) -> None:
        vm, ctx = view_model
        old_token = vm.begin_refresh()
        new_token = vm.begin_refresh()

        vm.complete_refresh(token=new_token, records=[make_spot("new")])
        assert vm.fail_refresh(token=old_token, message="late failure") is False

        assert vm.is_ready
        assert ctx.error is None

    def test_duplicate_completion_is_ignored(self, view_model: tuple[MapViewModel, MapContext]) -> None:
        vm, ctx = view_model
        token = vm.begin_refresh()
        vm.complete_refresh(token=token, records=[make_spot("a")])
        assert vm.complete_refresh(token=token, records=[]) is False
        assert len(ctx.records) == 1


class TestFilter:
    def test_filter_does_not_fetch_or_transition(
        self, view_model: tuple[MapViewModel, MapContext], store: InMemorySpotStore
    ) -> None:
        vm, ctx = view_model
        store.rows = [make_spot("a", name="Quiet Room"), make_spot("b", name="Main Hall", minutes=1)]
        vm.refresh(store=store)

        vm.set_filter("quiet")

        assert store.list_calls == 1
        assert vm.is_ready
        assert [s.id for s in ctx.visible_spots] == ["a"]

    def test_filter_keystroke_during_fetch_does_not_cancel_it(
        self, view_model: tuple[MapViewModel, MapContext]
    ) -> None:
        vm, ctx = view_model
        token = vm.begin_refresh()
        vm.set_filter("room")
        assert vm.complete_refresh(token=token, records=[make_spot("a", name="Quiet Room")]) is True
        assert [s.id for s in ctx.visible_spots] == ["a"]

    def test_selection_dropped_when_filtered_out(
        self, view_model: tuple[MapViewModel, MapContext], store: InMemorySpotStore
    ) -> None:
        vm, ctx = view_model
        store.rows = [make_spot("a", name="Quiet Room"), make_spot("b", name="Main Hall", minutes=1)]
        vm.refresh(store=store)
        assert vm.select_spot("b")

        vm.set_filter("quiet")

        assert ctx.selected_spot_id is None

    def test_selection_kept_when_still_visible(
        self, view_model: tuple[MapViewModel, MapContext], store: InMemorySpotStore
    ) -> None:
        vm, ctx = view_model
        store.rows = [make_spot("a", name="Quiet Room")]
        vm.refresh(store=store)
        vm.select_spot("a")

        vm.set_filter("room")

        assert ctx.selected_spot_id == "a"
        assert (ctx.view.lat, ctx.view.lon) == (40.0, -73.0)

    def test_cannot_select_hidden_spot(
        self, view_model: tuple[MapViewModel, MapContext], store: InMemorySpotStore
    ) -> None:
        vm, _ = view_model
        store.rows = [make_spot("a", name="Quiet Room")]
        vm.refresh(store=store)
        vm.set_filter("hall")
        assert vm.select_spot("a") is False


class TestTransitions:
    def test_fail_from_loading_then_ready(self, view_model: tuple[MapViewModel, MapContext]) -> None:
        vm, _ = view_model
        vm.fail_loading(message="x")
        assert vm.is_error
        vm.finish_loading(records=[])
        assert vm.is_ready


    def test_every_state_can_restart_loading(self, view_model: tuple[MapViewModel, MapContext]) -> None:
        vm, _ = view_model
        vm.fail_loading(message="x")
        vm.start_loading()
        vm.finish_loading(records=[])
        vm.start_loading()
        assert vm.is_loading
