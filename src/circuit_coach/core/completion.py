"""Per-round completion marks for one (week, day) circuit."""

from .errors import InvalidIndex


def mark_id(step_index: int, round_index: int) -> str:
    """Composite key for one (step, round) coordinate, e.g. '2_3'."""
    return f"{step_index}_{round_index}"


class CompletionTracker:
    """
    Done/not-done flags keyed by (step_index, round_index).

    step_index is 0-based, round_index 1-based, the same coordinates the
    timer uses.  The tracker is independent of the timer; the host swaps in
    a fresh tracker (loaded from a different storage key) when the week or
    day changes.
    """

    def __init__(self, plan_length: int, rounds: int, marks: dict[str, bool] | None = None):
        self.plan_length = plan_length
        self.rounds = rounds
        self._marks: dict[str, bool] = dict(marks or {})

    def resize(self, plan_length: int, rounds: int) -> None:
        """Update the index bounds; existing marks are kept."""
        self.plan_length = plan_length
        self.rounds = rounds

    def _check(self, step_index: int, round_index: int) -> None:
        if not 0 <= step_index < self.plan_length:
            raise InvalidIndex(f"Step {step_index} out of range (0-{self.plan_length - 1})")
        if not 1 <= round_index <= self.rounds:
            raise InvalidIndex(f"Round {round_index} out of range (1-{self.rounds})")

    def toggle(self, step_index: int, round_index: int) -> bool:
        """
        Flip the mark for (step_index, round_index).

        Returns:
            The new value

        Raises:
            InvalidIndex: If either index is outside the current bounds
        """
        self._check(step_index, round_index)
        key = mark_id(step_index, round_index)
        self._marks[key] = not self._marks.get(key, False)
        return self._marks[key]

    def is_done(self, step_index: int, round_index: int) -> bool:
        return self._marks.get(mark_id(step_index, round_index), False)

    def done_count(self) -> int:
        """Number of marked coordinates inside the current bounds."""
        return sum(
            1
            for step in range(self.plan_length)
            for rnd in range(1, self.rounds + 1)
            if self.is_done(step, rnd)
        )

    def snapshot(self) -> dict[str, bool]:
        """Copy of all marks, for persistence."""
        return dict(self._marks)
