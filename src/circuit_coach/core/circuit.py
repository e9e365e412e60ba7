"""
Work/rest interval state machine.

The timer walks every step of the Circuit Plan once per round:

    WORK(step 0) → REST → WORK(step 1) → REST → … → WORK(last) → REST
    → next round … → after the last round's final REST: stop

Transitions are pure functions over CircuitState (apply_tick,
apply_command).  CircuitStateMachine holds the single live state plus the
timing and plan length those functions need; hosts call its methods and
read .state, they never build CircuitState themselves.

Running is orthogonal to mode: a paused machine keeps its mode, step,
round and remaining seconds and resumes from them.
"""

from dataclasses import dataclass, replace

from .errors import InvalidIndex
from .models import REST, WORK, CircuitState, CircuitTiming

# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class JumpToStep:
    step_index: int


@dataclass(frozen=True)
class Reconfigure:
    timing: CircuitTiming


@dataclass(frozen=True)
class PlanChanged:
    plan_length: int


Command = Start | Pause | Reset | JumpToStep | Reconfigure | PlanChanged


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------


def initial_state(timing: CircuitTiming) -> CircuitState:
    """Canonical never-started state: first step, first round, armed for work."""
    return CircuitState(
        mode=WORK,
        step_index=0,
        round_index=1,
        remaining_seconds=timing.work_seconds,
        running=False,
        started=False,
    )


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def apply_tick(state: CircuitState, timing: CircuitTiming, plan_length: int) -> CircuitState:
    """
    Advance the timer by one second.

    Ticks delivered while not running are ignored.  When the countdown hits
    zero the segment ends immediately: WORK hands over to REST; REST moves
    to the next step, then to the next round, and after the last round's
    final rest the machine stops where it is.
    """
    if not state.running:
        return state

    remaining = max(0, state.remaining_seconds - 1)
    if remaining > 0:
        return replace(state, remaining_seconds=remaining)

    if state.mode == WORK:
        return replace(state, mode=REST, remaining_seconds=timing.rest_seconds)

    if state.step_index < plan_length - 1:
        return replace(
            state,
            mode=WORK,
            step_index=state.step_index + 1,
            remaining_seconds=timing.work_seconds,
        )
    if state.round_index < timing.rounds:
        return replace(
            state,
            mode=WORK,
            step_index=0,
            round_index=state.round_index + 1,
            remaining_seconds=timing.work_seconds,
        )
    return replace(state, remaining_seconds=0, running=False)


def apply_command(
    state: CircuitState,
    command: Command,
    timing: CircuitTiming,
    plan_length: int,
) -> CircuitState:
    """
    Apply a user command and return the next state.

    For Reconfigure, command.timing is the new timing; the caller must use
    it for subsequent transitions.

    Raises:
        InvalidIndex: JumpToStep outside [0, plan_length) (state unchanged)
        ValueError: PlanChanged with a non-positive length
    """
    if isinstance(command, Start):
        if state.running:
            return state
        if not state.started:
            # Re-arm: work length may have changed since the last reset
            return replace(
                state,
                mode=WORK,
                remaining_seconds=timing.work_seconds,
                running=True,
                started=True,
            )
        return replace(state, running=True)

    if isinstance(command, Pause):
        return replace(state, running=False)

    if isinstance(command, Reset):
        return initial_state(timing)

    if isinstance(command, JumpToStep):
        i = command.step_index
        if not 0 <= i < plan_length:
            raise InvalidIndex(f"Step {i} out of range (0-{plan_length - 1})")
        # Mode and remaining seconds stay as they are: a manual override
        return replace(state, step_index=i)

    if isinstance(command, Reconfigure):
        # Durations apply from the next segment on; only the round bound is enforced now
        return replace(
            state,
            round_index=_clamp(state.round_index, 1, command.timing.rounds),
        )

    if isinstance(command, PlanChanged):
        if command.plan_length <= 0:
            raise ValueError("plan_length must be positive")
        return replace(
            state,
            step_index=_clamp(state.step_index, 0, command.plan_length - 1),
            round_index=_clamp(state.round_index, 1, timing.rounds),
        )

    raise TypeError(f"Unknown command: {command!r}")


# ---------------------------------------------------------------------------
# Stateful wrapper
# ---------------------------------------------------------------------------


class CircuitStateMachine:
    """
    Owner of the single live CircuitState.

    Every mutation goes through tick() or one of the command methods, which
    delegate to the pure transitions above.
    """

    def __init__(self, plan_length: int, timing: CircuitTiming):
        if plan_length <= 0:
            raise ValueError("plan_length must be positive")
        self._plan_length = plan_length
        self._timing = timing
        self._state = initial_state(timing)

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def timing(self) -> CircuitTiming:
        return self._timing

    @property
    def plan_length(self) -> int:
        return self._plan_length

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def finished(self) -> bool:
        """True once the last round's final rest has elapsed."""
        s = self._state
        return (
            s.started
            and not s.running
            and s.mode == REST
            and s.remaining_seconds == 0
            and s.step_index == self._plan_length - 1
            and s.round_index == self._timing.rounds
        )

    def _apply(self, command: Command) -> CircuitState:
        self._state = apply_command(self._state, command, self._timing, self._plan_length)
        return self._state

    def tick(self) -> CircuitState:
        self._state = apply_tick(self._state, self._timing, self._plan_length)
        return self._state

    def start(self) -> CircuitState:
        return self._apply(Start())

    def pause(self) -> CircuitState:
        return self._apply(Pause())

    def reset(self) -> CircuitState:
        return self._apply(Reset())

    def jump_to_step(self, step_index: int) -> CircuitState:
        return self._apply(JumpToStep(step_index))

    def reconfigure(self, work_seconds: int, rest_seconds: int, rounds: int) -> CircuitState:
        """Change durations and round count for future transitions."""
        timing = CircuitTiming(work_seconds=work_seconds, rest_seconds=rest_seconds, rounds=rounds)
        self._apply(Reconfigure(timing))
        self._timing = timing
        return self._state

    def on_plan_changed(self, plan_length: int) -> CircuitState:
        """Clamp step and round into the bounds of a new plan."""
        self._apply(PlanChanged(plan_length))
        self._plan_length = plan_length
        return self._state
