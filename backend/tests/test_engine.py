"""Tests for the waiter call state machine."""
import pytest

from table_sync.config import FetchFailurePolicy
from table_sync.engine import Phase, ReconciliationEngine
from table_sync.errors import InvalidIdentifier, TableNotFound, TransientFailure, WriteFailure

from tests.fakes import make_record


@pytest.fixture
def engine(scheduler):
    return ReconciliationEngine(reset_delay=5, scheduler=scheduler)


@pytest.fixture
def idle_engine(engine):
    engine.apply_snapshot(make_record(needs_attention=False))
    return engine


class TestInitialPhase:
    def test_loading_with_identifier(self):
        assert ReconciliationEngine(has_identifier=True).phase == Phase.LOADING

    def test_idle_without_identifier(self):
        engine = ReconciliationEngine(has_identifier=False)
        assert engine.phase == Phase.IDLE
        assert engine.can_call_waiter is False

    def test_snapshot_without_attention_is_idle(self, engine):
        engine.apply_snapshot(make_record(needs_attention=False))
        assert engine.phase == Phase.IDLE
        assert engine.table.code == "7"

    def test_snapshot_with_attention_is_calling(self, engine):
        engine.apply_snapshot(make_record(needs_attention=True))
        assert engine.phase == Phase.CALLING
        assert engine.needs_attention is True


class TestFetchFailure:
    def test_strict_policy_shows_error(self, engine):
        engine.apply_fetch_failure(TableNotFound(), FetchFailurePolicy.STRICT)
        assert engine.phase == Phase.ERROR
        assert engine.error == "Table not found"
        assert engine.can_call_waiter is False
        assert engine.begin_call() is None

    def test_lenient_policy_falls_back_to_menu(self, engine):
        engine.apply_fetch_failure(TransientFailure(), FetchFailurePolicy.LENIENT)
        assert engine.phase == Phase.IDLE
        assert engine.table is None
        assert engine.error is None
        assert engine.can_call_waiter is False

    def test_invalid_identifier_is_error_under_any_policy(self, engine):
        engine.apply_fetch_failure(InvalidIdentifier(), FetchFailurePolicy.LENIENT)
        assert engine.phase == Phase.ERROR

    def test_updates_are_ignored_after_error(self, engine):
        engine.apply_fetch_failure(TableNotFound())
        engine.apply_update(make_record(needs_attention=True))
        assert engine.phase == Phase.ERROR
        assert engine.table is None


class TestUpdates:
    def test_true_moves_to_calling(self, idle_engine):
        idle_engine.apply_update(make_record(needs_attention=True))
        assert idle_engine.phase == Phase.CALLING

    def test_true_twice_is_a_no_op(self, idle_engine, scheduler):
        changes = []
        idle_engine.add_listener(lambda e: changes.append(e.phase))

        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.apply_update(make_record(needs_attention=True))

        assert idle_engine.phase == Phase.CALLING
        assert changes == [Phase.CALLING]
        assert scheduler.timers == []

    def test_true_to_false_edge_is_attended(self, idle_engine, scheduler):
        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.apply_update(make_record(needs_attention=False))

        assert idle_engine.phase == Phase.ATTENDED
        assert len(scheduler.pending) == 1
        assert scheduler.pending[0].delay == 5

    def test_false_to_false_stays_idle(self, idle_engine, scheduler):
        changes = []
        idle_engine.add_listener(lambda e: changes.append(e.phase))

        idle_engine.apply_update(make_record(needs_attention=False))

        assert idle_engine.phase == Phase.IDLE
        assert changes == []
        assert scheduler.timers == []

    def test_duplicate_false_keeps_single_timer(self, idle_engine, scheduler):
        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.apply_update(make_record(needs_attention=False))
        idle_engine.apply_update(make_record(needs_attention=False))

        assert idle_engine.phase == Phase.ATTENDED
        assert len(scheduler.timers) == 1

    def test_uses_latest_flag_not_phase(self, idle_engine):
        # Guest went back to the menu while the call was pending; the staff
        # resolving it is still an attended edge.
        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.back_to_menu()
        assert idle_engine.phase == Phase.IDLE

        idle_engine.apply_update(make_record(needs_attention=False))
        assert idle_engine.phase == Phase.ATTENDED

    def test_remembered_flag_tracks_last_record(self, idle_engine):
        for value in [True, True, False, True, False, False]:
            idle_engine.apply_update(make_record(needs_attention=value))
            assert idle_engine.needs_attention is value

    def test_other_fields_are_refreshed(self, idle_engine):
        idle_engine.apply_update(make_record(needs_attention=False, name="Patio"))
        assert idle_engine.table.name == "Patio"

    def test_update_for_other_table_is_ignored(self, idle_engine):
        idle_engine.apply_update(make_record(needs_attention=True, id=8, code="8"))
        assert idle_engine.phase == Phase.IDLE
        assert idle_engine.table.id == 7


class TestAutoReset:
    def test_timer_returns_to_idle(self, idle_engine, scheduler):
        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.apply_update(make_record(needs_attention=False))

        scheduler.fire_pending()

        assert idle_engine.phase == Phase.IDLE
        assert idle_engine.reset_pending is False

    def test_new_call_cancels_timer(self, idle_engine, scheduler):
        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.apply_update(make_record(needs_attention=False))
        first = scheduler.pending[0]

        idle_engine.apply_update(make_record(needs_attention=True))

        assert first.cancelled
        assert idle_engine.phase == Phase.CALLING
        scheduler.fire_pending()
        assert idle_engine.phase == Phase.CALLING

    def test_second_attended_replaces_timer(self, idle_engine, scheduler):
        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.apply_update(make_record(needs_attention=False))
        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.apply_update(make_record(needs_attention=False))

        assert len(scheduler.timers) == 2
        assert scheduler.timers[0].cancelled
        assert len(scheduler.pending) == 1

        fired = []
        idle_engine.add_listener(lambda e: fired.append(e.phase))
        scheduler.fire_pending()
        assert fired == [Phase.IDLE]

    def test_dispose_cancels_timer(self, idle_engine, scheduler):
        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.apply_update(make_record(needs_attention=False))

        idle_engine.dispose()

        assert scheduler.pending == []
        idle_engine.apply_update(make_record(needs_attention=True))
        assert idle_engine.phase == Phase.ATTENDED


class TestLocalActions:
    def test_begin_call_is_optimistic(self, idle_engine):
        previous = idle_engine.begin_call()
        assert previous == Phase.IDLE
        assert idle_engine.phase == Phase.CALLING
        assert idle_engine.needs_attention is False

    def test_begin_call_while_calling_is_refused(self, idle_engine):
        idle_engine.begin_call()
        assert idle_engine.begin_call() is None

    def test_begin_call_while_loading_is_refused(self, engine):
        assert engine.begin_call() is None
        assert engine.phase == Phase.LOADING

    def test_begin_call_from_attended_cancels_timer(self, idle_engine, scheduler):
        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.apply_update(make_record(needs_attention=False))

        assert idle_engine.begin_call() == Phase.ATTENDED
        assert scheduler.pending == []

    def test_stale_false_does_not_undo_optimistic_call(self, idle_engine):
        idle_engine.begin_call()
        idle_engine.apply_update(make_record(needs_attention=False))
        assert idle_engine.phase == Phase.CALLING

    def test_revert_call(self, idle_engine):
        previous = idle_engine.begin_call()
        idle_engine.revert_call(previous, WriteFailure())

        assert idle_engine.phase == Phase.IDLE
        assert idle_engine.error == WriteFailure.message
        assert idle_engine.can_call_waiter

    def test_revert_after_push_confirmed_keeps_calling(self, idle_engine):
        previous = idle_engine.begin_call()
        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.revert_call(previous, WriteFailure())
        assert idle_engine.phase == Phase.CALLING

    def test_back_to_menu_only_from_calling(self, idle_engine):
        idle_engine.back_to_menu()
        assert idle_engine.phase == Phase.IDLE

        idle_engine.apply_update(make_record(needs_attention=True))
        idle_engine.back_to_menu()
        assert idle_engine.phase == Phase.IDLE
        assert idle_engine.needs_attention is True
