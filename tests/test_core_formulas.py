"""
Formula-focused unit tests for the circuit engine.

Covers the phase table, target scaling, the work/rest state machine and
completion marks.  Expected values are hand-computed from the bundled
catalog so the tests double as documentation of the numbers a user sees.
"""

import copy

import pytest

from circuit_coach.core.catalog import ProgramCatalog, get_catalog, load_catalog_yaml
from circuit_coach.core.circuit import (
    CircuitStateMachine,
    JumpToStep,
    PlanChanged,
    Reconfigure,
    Start,
    apply_command,
    apply_tick,
    initial_state,
)
from circuit_coach.core.clock import IntervalClock, ManualClock
from circuit_coach.core.completion import CompletionTracker
from circuit_coach.core.config import MAX_WEEK, MIN_WEEK
from circuit_coach.core.errors import (
    CatalogError,
    InvalidIndex,
    OutOfRangeWeek,
    UnknownExercise,
)
from circuit_coach.core.models import REST, WORK, CircuitTiming
from circuit_coach.core.scaling import build_plan, scaled_target

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _ex(key: str):
    return get_catalog().exercise_by_key(key)


def _catalog_data() -> dict:
    return copy.deepcopy(load_catalog_yaml())


def _machine(plan_length: int = 3, work: int = 3, rest: int = 2, rounds: int = 2) -> CircuitStateMachine:
    return CircuitStateMachine(plan_length, CircuitTiming(work_seconds=work, rest_seconds=rest, rounds=rounds))


def _ticks(machine: CircuitStateMachine, n: int) -> None:
    for _ in range(n):
        machine.tick()


# ===========================================================================
# Phase table
# ===========================================================================


class TestPhaseTable:

    def test_every_week_has_exactly_one_phase(self):
        """Each week 1-8 maps to exactly one phase."""
        catalog = get_catalog()
        for week in range(MIN_WEEK, MAX_WEEK + 1):
            matches = [p for p in catalog.phases if p.contains(week)]
            assert len(matches) == 1
            assert catalog.phase_for_week(week) is matches[0]

    def test_phases_partition_weeks_without_gaps(self):
        weeks = [w for p in get_catalog().phases for w in p.weeks]
        assert sorted(weeks) == list(range(1, 9))

    @pytest.mark.parametrize(
        "week, rounds, rest, bump",
        [
            (1, 3, 90, 0.0),
            (2, 3, 90, 0.0),
            (3, 4, 60, 0.25),
            (6, 4, 50, 0.5),
            (8, 5, 40, 0.75),
        ],
    )
    def test_phase_values(self, week, rounds, rest, bump):
        phase = get_catalog().phase_for_week(week)
        assert (phase.rounds, phase.rest_seconds, phase.bump) == (rounds, rest, bump)

    @pytest.mark.parametrize("week", [0, 9, -1])
    def test_out_of_range_week_raises(self, week):
        with pytest.raises(OutOfRangeWeek):
            get_catalog().phase_for_week(week)


# ===========================================================================
# Catalog validation
# ===========================================================================


class TestCatalogValidation:

    def test_bundled_catalog_loads(self):
        catalog = get_catalog()
        assert len(catalog.exercises) == 15
        assert catalog.day_ids == ["A", "B", "C"]

    def test_template_order_preserved(self):
        assert get_catalog().template_for_day("C") == (
            "burpees", "pushups", "jumpSquats", "plankTaps", "hollowHold",
        )

    def test_exercise_by_key_unknown(self):
        with pytest.raises(UnknownExercise):
            get_catalog().exercise_by_key("handstand")

    def test_template_with_unknown_key_fails_at_load(self):
        """A template naming a missing exercise fails when the catalog is built."""
        data = _catalog_data()
        data["days"]["B"]["exercises"].append("handstand")
        with pytest.raises(UnknownExercise):
            ProgramCatalog.from_dict(data)

    def test_phase_gap_fails_at_load(self):
        data = _catalog_data()
        data["phases"] = [p for p in data["phases"] if p["weeks"] != [5, 6]]
        with pytest.raises(CatalogError, match="not covered"):
            ProgramCatalog.from_dict(data)

    def test_phase_overlap_fails_at_load(self):
        data = _catalog_data()
        data["phases"][1]["weeks"] = [2, 4]
        with pytest.raises(CatalogError, match="more than one phase"):
            ProgramCatalog.from_dict(data)

    def test_bad_exercise_kind_fails_at_load(self):
        data = _catalog_data()
        data["exercises"]["plank"]["kind"] = "distance"
        with pytest.raises(CatalogError):
            ProgramCatalog.from_dict(data)

    def test_missing_day_fails_at_load(self):
        data = _catalog_data()
        del data["days"]["C"]
        with pytest.raises(CatalogError):
            ProgramCatalog.from_dict(data)

    @pytest.mark.parametrize(
        "section, key, value",
        [
            ("days", "B", ["invertedRows", "pullups"]),
            ("exercises", "plank", "30 seconds"),
            ("phases", 0, "weeks 1-2"),
        ],
    )
    def test_non_mapping_entry_fails_at_load(self, section, key, value):
        """A day, exercise or phase entry that is not a mapping is a CatalogError."""
        data = _catalog_data()
        data[section][key] = value
        with pytest.raises(CatalogError, match="mapping"):
            ProgramCatalog.from_dict(data)

    @pytest.mark.parametrize("section", ["days", "exercises", "phases"])
    def test_malformed_section_fails_at_load(self, section):
        """A top-level section of the wrong type is a CatalogError."""
        data = _catalog_data()
        data[section] = "missing"
        with pytest.raises(CatalogError, match=section):
            ProgramCatalog.from_dict(data)


# ===========================================================================
# Target scaling: base × (1 + bump)
# ===========================================================================


class TestScaledTarget:

    def test_week1_is_base(self):
        assert scaled_target(_ex("pushups"), 1) == 12
        assert scaled_target(_ex("plank"), 1) == 30

    def test_week3_reps(self):
        # 12 × 1.25 = 15
        assert scaled_target(_ex("pushups"), 3) == 15

    def test_week3_time_rounds_to_five(self):
        # 30 × 1.25 = 37.5 → 37.5 / 5 = 7.5 → 8 × 5 = 40
        assert scaled_target(_ex("plank"), 3) == 40

    def test_week7_reps(self):
        # 12 × 1.75 = 21
        assert scaled_target(_ex("pushups"), 7) == 21

    def test_reps_round_half_up(self):
        """Rep targets round .5 upwards."""
        # 10 × 1.25 = 12.5 → 13 (not banker's 12)
        assert scaled_target(_ex("chairDips"), 3) == 13
        # 5 × 1.25 = 6.25 → 6
        assert scaled_target(_ex("pullups"), 4) == 6
        # 5 × 1.75 = 8.75 → 9
        assert scaled_target(_ex("pullups"), 8) == 9

    def test_time_targets_are_multiples_of_five(self):
        """Timed targets are always whole 5-second steps."""
        for week in range(1, 9):
            for key in ("plank", "mountainClimbers", "sidePlank", "hollowHold"):
                assert scaled_target(_ex(key), week) % 5 == 0

    def test_week7_plank(self):
        # 30 × 1.75 = 52.5 → 10.5 → 11 × 5 = 55
        assert scaled_target(_ex("plank"), 7) == 55

    def test_side_plank_week5(self):
        # 20 × 1.5 = 30
        assert scaled_target(_ex("sidePlank"), 5) == 30

    @pytest.mark.parametrize("week", [0, 9])
    def test_out_of_range_week(self, week):
        with pytest.raises(OutOfRangeWeek):
            scaled_target(_ex("pushups"), week)

    def test_out_of_range_week_is_value_error(self):
        with pytest.raises(ValueError):
            scaled_target(_ex("pushups"), 12)

    def test_pure(self):
        """Same inputs, same target."""
        ex = _ex("jumpLunges")
        assert scaled_target(ex, 5) == scaled_target(ex, 5) == 18  # 12 × 1.5


class TestBuildPlan:

    def test_day_a_week3(self):
        plan = build_plan("A", 3)
        assert [e.exercise_key for e in plan] == [
            "pushups", "pikePushups", "chairDips", "mountainClimbers", "plank",
        ]
        # 12×1.25=15, 8×1.25=10, 10×1.25=12.5→13, 30×1.25=37.5→40, 37.5→40
        assert [e.target for e in plan] == [15, 10, 13, 40, 40]

    def test_plan_entry_labels(self):
        plan = build_plan("B", 1)
        assert plan[0].target_label == "8 reps"
        assert plan[4].target_label == "20s"

    def test_plan_carries_cues_and_diagram(self):
        pushups = build_plan("A", 1)[0]
        assert pushups.cues[0] == "Hands slightly wider than shoulders."
        assert pushups.diagram is not None and "plank" in pushups.diagram

    def test_unknown_day(self):
        with pytest.raises(ValueError):
            build_plan("D", 1)


# ===========================================================================
# State machine
# ===========================================================================


class TestCircuitTransitions:

    def test_initial_state(self):
        m = _machine()
        s = m.state
        assert (s.mode, s.step_index, s.round_index, s.remaining_seconds, s.running) == (WORK, 0, 1, 3, False)

    def test_tick_ignored_while_stopped(self):
        """Ticks do nothing until the timer is started."""
        m = _machine()
        before = m.state
        m.tick()
        assert m.state == before

    def test_work_to_rest(self):
        m = _machine()
        m.start()
        _ticks(m, 2)
        assert m.state.mode == WORK and m.state.remaining_seconds == 1
        m.tick()
        assert m.state.mode == REST
        assert m.state.remaining_seconds == 2

    def test_rest_to_next_step(self):
        m = _machine()
        m.start()
        _ticks(m, 3 + 2)
        s = m.state
        assert (s.mode, s.step_index, s.round_index, s.remaining_seconds) == (WORK, 1, 1, 3)

    def test_last_step_rest_starts_next_round(self):
        m = _machine()
        m.start()
        _ticks(m, 3 * (3 + 2))
        s = m.state
        assert (s.mode, s.step_index, s.round_index, s.remaining_seconds) == (WORK, 0, 2, 3)

    def test_runs_to_terminal_state(self):
        """The last rest of the last round stops the timer."""
        # 3 steps × 2 rounds × (3 + 2) s = 30 ticks
        m = _machine()
        m.start()
        _ticks(m, 29)
        assert m.running
        m.tick()
        s = m.state
        assert not s.running
        assert (s.mode, s.step_index, s.round_index, s.remaining_seconds) == (REST, 2, 2, 0)
        assert m.finished
        assert s != initial_state(m.timing)

    @pytest.mark.parametrize("plan_length, rounds", [(1, 1), (3, 2), (5, 3), (4, 5)])
    def test_work_segments_equal_steps_times_rounds(self, plan_length, rounds):
        """A full run has one WORK and one REST segment per step per round."""
        m = _machine(plan_length=plan_length, work=2, rest=1, rounds=rounds)
        m.start()
        modes = [m.state.mode]
        ticks = 0
        while m.running:
            prev = m.state
            m.tick()
            ticks += 1
            if m.running and (m.state.mode != prev.mode or m.state.step_index != prev.step_index):
                modes.append(m.state.mode)
        assert modes.count(WORK) == plan_length * rounds
        assert modes == [WORK, REST] * (plan_length * rounds)
        assert ticks == plan_length * rounds * 3

    def test_start_after_finish_stops_again(self):
        """Starting a finished circuit does not restart it."""
        m = _machine(plan_length=1, rounds=1)
        m.start()
        _ticks(m, 5)
        finished = m.state
        m.start()
        assert m.running
        m.tick()
        assert m.state == finished

    def test_pause_and_resume_keeps_position(self):
        m = _machine()
        m.start()
        m.tick()
        m.pause()
        paused = m.state
        assert not paused.running and paused.remaining_seconds == 2
        m.tick()
        assert m.state == paused
        m.start()
        assert m.state.remaining_seconds == 2 and m.running

    def test_start_rearms_from_never_started(self):
        """Start loads the current work length only from the never-started state."""
        m = _machine(work=3)
        m.reconfigure(work_seconds=7, rest_seconds=2, rounds=2)
        # Not retroactive
        assert m.state.remaining_seconds == 3
        m.start()
        assert m.state.remaining_seconds == 7
        assert m.state.mode == WORK

    def test_start_when_running_is_noop(self):
        m = _machine()
        m.start()
        m.tick()
        before = m.state
        m.start()
        assert m.state == before

    def test_reset_from_any_state(self):
        """reset() returns the initial state wherever the timer is."""
        m = _machine()
        m.start()
        for n in range(0, 31, 7):
            m.reset()
            m.start()
            _ticks(m, n)
            m.reset()
            assert m.state == initial_state(m.timing)

    def test_reset_uses_current_work_seconds(self):
        m = _machine(work=3)
        m.reconfigure(work_seconds=9, rest_seconds=2, rounds=2)
        m.reset()
        assert m.state.remaining_seconds == 9

    def test_jump_keeps_mode_and_remaining(self):
        """Jumping changes only the step."""
        m = _machine()
        m.start()
        _ticks(m, 4)  # REST, 1 s left
        m.jump_to_step(2)
        s = m.state
        assert (s.mode, s.step_index, s.remaining_seconds, s.round_index, s.running) == (REST, 2, 1, 1, True)

    @pytest.mark.parametrize("step", [-1, 3, 10])
    def test_jump_out_of_range(self, step):
        m = _machine()
        before = m.state
        with pytest.raises(InvalidIndex):
            m.jump_to_step(step)
        assert m.state == before

    def test_reconfigure_applies_to_next_segment(self):
        """New durations are not retroactive."""
        m = _machine(work=3, rest=2)
        m.start()
        m.reconfigure(work_seconds=3, rest_seconds=6, rounds=2)
        assert m.state.remaining_seconds == 3
        _ticks(m, 3)
        assert m.state.mode == REST and m.state.remaining_seconds == 6

    def test_reconfigure_clamps_round(self):
        m = _machine()
        m.start()
        _ticks(m, 15)  # round 2
        assert m.state.round_index == 2
        m.reconfigure(work_seconds=3, rest_seconds=2, rounds=1)
        assert m.state.round_index == 1

    def test_plan_shrink_clamps_step(self):
        """A shorter plan clamps step_index to its last step."""
        for step in range(5):
            for new_length in range(1, 6):
                m = _machine(plan_length=5)
                m.jump_to_step(step)
                m.on_plan_changed(new_length)
                assert 0 <= m.state.step_index < new_length
                assert m.state.step_index == min(step, new_length - 1)

    def test_plan_change_rejects_empty_plan(self):
        with pytest.raises(ValueError):
            _machine().on_plan_changed(0)

    def test_empty_plan_rejected(self):
        with pytest.raises(ValueError):
            _machine(plan_length=0)


class TestPureTransitions:

    def test_apply_functions_do_not_mutate(self):
        """Transition functions return new states."""
        timing = CircuitTiming(work_seconds=2, rest_seconds=2, rounds=1)
        s0 = initial_state(timing)
        s1 = apply_command(s0, Start(), timing, 2)
        s2 = apply_tick(s1, timing, 2)
        assert s0.running is False and s0.remaining_seconds == 2
        assert s1.running is True and s1.remaining_seconds == 2
        assert s2.remaining_seconds == 1

    def test_reconfigure_command_only_touches_round(self):
        timing = CircuitTiming(work_seconds=4, rest_seconds=2, rounds=3)
        s = apply_command(initial_state(timing), Start(), timing, 2)
        new = CircuitTiming(work_seconds=8, rest_seconds=8, rounds=3)
        assert apply_command(s, Reconfigure(new), timing, 2) == s

    def test_jump_command_validates(self):
        timing = CircuitTiming(work_seconds=4, rest_seconds=2, rounds=3)
        with pytest.raises(InvalidIndex):
            apply_command(initial_state(timing), JumpToStep(2), timing, 2)

    def test_plan_changed_command(self):
        timing = CircuitTiming(work_seconds=4, rest_seconds=2, rounds=3)
        s = apply_command(initial_state(timing), JumpToStep(4), timing, 5)
        assert apply_command(s, PlanChanged(2), timing, 5).step_index == 1


# ===========================================================================
# Completion marks
# ===========================================================================


class TestCompletionTracker:

    def test_toggle_twice_is_noop(self):
        """Toggling the same mark twice restores it."""
        t = CompletionTracker(plan_length=5, rounds=3)
        assert t.toggle(2, 3) is True
        assert t.is_done(2, 3)
        assert t.toggle(2, 3) is False
        assert not t.is_done(2, 3)

    def test_default_not_done(self):
        assert not CompletionTracker(5, 3).is_done(0, 1)

    def test_snapshot_keys(self):
        t = CompletionTracker(5, 3)
        t.toggle(0, 1)
        t.toggle(4, 2)
        assert t.snapshot() == {"0_1": True, "4_2": True}

    def test_loaded_marks(self):
        t = CompletionTracker(5, 3, {"1_2": True, "2_2": False})
        assert t.is_done(1, 2)
        assert not t.is_done(2, 2)
        assert t.done_count() == 1

    @pytest.mark.parametrize("step, rnd", [(-1, 1), (5, 1), (0, 0), (0, 4)])
    def test_toggle_out_of_range(self, step, rnd):
        t = CompletionTracker(5, 3)
        with pytest.raises(InvalidIndex):
            t.toggle(step, rnd)
        assert t.snapshot() == {}

    def test_done_count_respects_bounds(self):
        """Marks outside the current rounds are kept but not counted."""
        t = CompletionTracker(5, 3)
        t.toggle(0, 3)
        t.toggle(1, 1)
        t.resize(5, 2)
        assert t.done_count() == 1
        assert t.snapshot() == {"0_3": True, "1_1": True}


# ===========================================================================
# Clocks
# ===========================================================================


class TestClocks:

    def test_manual_clock_delivers_ticks(self):
        clock = ManualClock()
        seen = []
        clock.start(lambda: seen.append(1))
        assert clock.advance(4) == 4
        assert len(seen) == 4

    def test_manual_clock_single_tick_source(self):
        """A running clock cannot be started a second time."""
        clock = ManualClock()
        clock.start(lambda: None)
        with pytest.raises(RuntimeError):
            clock.start(lambda: None)

    def test_manual_clock_stops_early(self):
        clock = ManualClock()
        seen = []

        def on_tick():
            seen.append(1)
            if len(seen) == 3:
                clock.stop()

        clock.start(on_tick)
        assert clock.advance(10) == 3
        assert not clock.running

    def test_manual_clock_idle_delivers_nothing(self):
        assert ManualClock().advance(5) == 0

    def test_interval_clock_runs_until_stopped(self):
        clock = IntervalClock(interval=0)
        seen = []

        def on_tick():
            seen.append(1)
            if len(seen) == 5:
                clock.stop()

        clock.start(on_tick)
        assert len(seen) == 5
        assert not clock.running

    def test_interval_clock_rejects_second_start(self):
        """A nested start raises and the clock ends stopped."""
        clock = IntervalClock(interval=0)
        with pytest.raises(RuntimeError):
            clock.start(lambda: clock.start(lambda: None))
        assert not clock.running

    def test_interval_clock_negative_interval(self):
        with pytest.raises(ValueError):
            IntervalClock(interval=-1)
