"""Tests for the simulation core: clock, events, phases and field geometry."""

import pytest

from pocketqb.simulation.core import (
    EventBus,
    EventType,
    InvalidPhaseTransition,
    PhaseStateMachine,
    PlayPhase,
    Scheduler,
    SchedulerClosed,
    Vec2,
)
from pocketqb.simulation.core.field import (
    FieldZone,
    assert_on_field,
    cap_depth,
    describe_yard_line,
    is_on_field,
    qb_position,
)


# =============================================================================
# Scheduler
# =============================================================================


class TestScheduler:
    """Timers fire on simulation time, independent of tick size."""

    def test_timer_fires_when_due(self):
        sched = Scheduler()
        fired = []
        sched.schedule(0.5, lambda: fired.append(sched.now), name="half")

        sched.advance(0.4)
        assert fired == []
        sched.advance(0.2)
        assert fired == [0.5]
        assert sched.now == pytest.approx(0.6)

    def test_same_result_for_any_tick_size(self):
        """One big step and many small steps fire the same timers in order."""
        def run(steps):
            sched = Scheduler()
            order = []
            sched.schedule(0.3, lambda: order.append("a"))
            sched.schedule(0.1, lambda: order.append("b"))
            sched.schedule(0.3, lambda: order.append("c"))
            for dt in steps:
                sched.advance(dt)
            return order

        assert run([1.0]) == run([0.05] * 20) == ["b", "a", "c"]

    def test_chained_timer_fires_in_same_advance(self):
        sched = Scheduler()
        fired = []

        def first():
            fired.append("first")
            sched.schedule(0.1, lambda: fired.append("second"))

        sched.schedule(0.1, first)
        assert sched.advance(1.0) == 2
        assert fired == ["first", "second"]

    def test_cancelled_timer_does_not_fire(self):
        sched = Scheduler()
        fired = []
        handle = sched.schedule(0.1, lambda: fired.append(1))
        handle.cancel()

        sched.advance(1.0)

        assert fired == []
        assert not handle.is_pending

    def test_close_cancels_and_refuses(self):
        sched = Scheduler()
        sched.schedule(0.1, lambda: None)
        sched.schedule(0.2, lambda: None)

        assert sched.close() == 2
        assert sched.pending == []
        with pytest.raises(SchedulerClosed):
            sched.schedule(0.1, lambda: None)
        assert sched.advance(1.0) == 0

    def test_pending_in_firing_order(self):
        sched = Scheduler()
        sched.schedule(0.5, lambda: None, name="late")
        sched.schedule(0.1, lambda: None, name="early")
        assert [h.name for h in sched.pending] == ["early", "late"]

    def test_negative_step_fails(self):
        with pytest.raises(AssertionError):
            Scheduler().advance(-0.1)


# =============================================================================
# Events
# =============================================================================


class TestEventBus:
    """Pub/sub delivery and history."""

    def test_typed_and_global_subscribers(self):
        bus = EventBus()
        typed, everything = [], []
        bus.subscribe(EventType.SNAP, typed.append)
        bus.subscribe_all(everything.append)

        bus.emit_simple(EventType.SNAP, 0.0, 1, "snap")
        bus.emit_simple(EventType.THROW, 1.0, 1, "throw", target_index=2)

        assert [e.type for e in typed] == [EventType.SNAP]
        assert len(everything) == 2
        assert everything[1].data == {"target_index": 2}

    def test_unsubscribe(self):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.SNAP, seen.append)
        bus.unsubscribe(EventType.SNAP, seen.append)
        bus.emit_simple(EventType.SNAP, 0.0)
        assert seen == []

    def test_history_limit(self):
        bus = EventBus(history_limit=3)
        for i in range(5):
            bus.emit_simple(EventType.PHASE_CHANGE, float(i))
        assert len(bus) == 3
        assert bus.history[0].time == 2.0

    def test_empty_bus_is_truthy(self):
        assert EventBus()

    def test_format_history(self):
        bus = EventBus()
        bus.emit_simple(EventType.TOUCHDOWN, 4.25, 3, "TD!")
        assert bus.format_history() == "[4.25s] #3 touchdown - TD!"


# =============================================================================
# Phases
# =============================================================================


class TestPhaseStateMachine:
    """Transitions outside the table are refused."""

    def test_full_passing_play(self):
        fsm = PhaseStateMachine()
        for phase in (
            PlayPhase.SNAP,
            PlayPhase.DROPBACK,
            PlayPhase.READ,
            PlayPhase.THROW,
            PlayPhase.BALL_FLIGHT,
            PlayPhase.CATCH,
            PlayPhase.RESULT,
            PlayPhase.PRE_SNAP,
        ):
            fsm.transition_to(phase)
        assert fsm.phase == PlayPhase.PRE_SNAP
        assert len(fsm.history) == 8

    @pytest.mark.parametrize("phase", [PlayPhase.SNAP, PlayPhase.DROPBACK, PlayPhase.READ])
    def test_sack_from_pocket_phases(self, phase):
        fsm = PhaseStateMachine(phase)
        fsm.transition_to(PlayPhase.RESULT, reason="sack")
        assert fsm.phase == PlayPhase.RESULT

    def test_cannot_skip_ball_flight(self):
        fsm = PhaseStateMachine(PlayPhase.THROW)
        with pytest.raises(InvalidPhaseTransition) as exc:
            fsm.transition_to(PlayPhase.CATCH)
        assert exc.value.from_phase == PlayPhase.THROW
        assert fsm.phase == PlayPhase.THROW

    def test_no_sack_once_ball_is_thrown(self):
        fsm = PhaseStateMachine(PlayPhase.BALL_FLIGHT)
        assert not fsm.can_transition_to(PlayPhase.RESULT)

    def test_game_over_is_terminal(self):
        fsm = PhaseStateMachine(PlayPhase.GAME_OVER)
        assert fsm.is_terminal
        for phase in PlayPhase:
            assert not fsm.can_transition_to(phase)

    def test_convenience_queries(self):
        fsm = PhaseStateMachine()
        assert fsm.is_pre_snap and not fsm.is_active
        fsm.transition_to(PlayPhase.SNAP)
        assert fsm.is_active and fsm.in_pocket
        for phase in (PlayPhase.DROPBACK, PlayPhase.READ, PlayPhase.THROW, PlayPhase.BALL_FLIGHT):
            fsm.transition_to(phase)
        assert fsm.ball_in_air and not fsm.in_pocket
        fsm.transition_to(PlayPhase.CATCH)
        assert not fsm.is_active

    def test_callbacks_receive_transition(self):
        fsm = PhaseStateMachine()
        seen = []
        fsm.on_transition(seen.append)
        fsm.transition_to(PlayPhase.SNAP, reason="snap", tick=3, time=1.5)
        assert seen[0].from_phase == PlayPhase.PRE_SNAP
        assert seen[0].time == 1.5

        fsm.clear_callbacks()
        fsm.transition_to(PlayPhase.DROPBACK)
        assert len(seen) == 1


# =============================================================================
# Field
# =============================================================================


class TestField:
    """Coordinate helpers."""

    def test_qb_sets_up_behind_the_line(self):
        assert qb_position(25) == Vec2(0.0, 20.0)

    def test_depth_is_capped_at_end_lines(self):
        assert cap_depth(130) == 110
        assert cap_depth(-20) == -10

    def test_off_field_position_fails(self):
        with pytest.raises(AssertionError):
            assert_on_field(Vec2(30.0, 50.0))
        with pytest.raises(AssertionError):
            assert_on_field(Vec2(0.0, 111.0))

    def test_is_on_field(self):
        assert is_on_field(Vec2(0.0, 105.0))
        assert is_on_field(Vec2(-26.0, -10.0))
        assert not is_on_field(Vec2(30.0, 50.0))
        assert not is_on_field(Vec2(0.0, 500.0))

    @pytest.mark.parametrize("yard_line,text", [(25, "own 25"), (50, "50"), (90, "opp 10")])
    def test_describe_yard_line(self, yard_line, text):
        assert describe_yard_line(yard_line) == text

    def test_field_zones(self):
        assert FieldZone.for_yard_line(10) == FieldZone.OWN_REDZONE
        assert FieldZone.for_yard_line(50) == FieldZone.MIDFIELD
        assert FieldZone.for_yard_line(85) == FieldZone.OPP_REDZONE
