"""
Circuit engine: program catalog, target scaling, interval state machine
and completion tracking.
"""

from .catalog import ProgramCatalog, get_catalog
from .circuit import CircuitStateMachine, apply_command, apply_tick, initial_state
from .completion import CompletionTracker
from .errors import CatalogError, CircuitError, InvalidIndex, OutOfRangeWeek, UnknownExercise
from .scaling import build_plan, scaled_target

__all__ = [
    "ProgramCatalog",
    "get_catalog",
    "CircuitStateMachine",
    "apply_command",
    "apply_tick",
    "initial_state",
    "CompletionTracker",
    "CatalogError",
    "CircuitError",
    "InvalidIndex",
    "OutOfRangeWeek",
    "UnknownExercise",
    "build_plan",
    "scaled_target",
]
