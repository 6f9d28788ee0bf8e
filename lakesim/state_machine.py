"""State machine abstractions for explicit state management.

Both the predator decision engine and the fight resolver are driven by
explicit state machines:
- All valid states are enumerated
- Valid transitions are defined in a table
- Invalid transitions return an Err instead of corrupting state
- State history can be tracked for debugging

Usage:
------
    machine = create_behavior_state_machine()
    machine.try_transition(BehaviorState.INVESTIGATING, frame=12)  # Ok
    machine.try_transition(BehaviorState.HOOKED, frame=13)         # Err, not STRIKING
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, List, TypeVar

from lakesim.result import Err, Ok, Result

S = TypeVar("S", bound=Enum)


@dataclass
class StateTransition(Generic[S]):
    """Record of a state transition for debugging.

    Attributes:
        from_state: The state before transition
        to_state: The state after transition
        frame: The simulation frame when transition occurred
        reason: Optional description of why transition happened
    """

    from_state: S
    to_state: S
    frame: int
    reason: str = ""


class StateMachine(Generic[S]):
    """A generic state machine with explicit transition validation."""

    def __init__(
        self,
        initial_state: S,
        valid_transitions: Dict[S, List[S]],
        track_history: bool = False,
        max_history: int = 100,
    ) -> None:
        """Initialize the state machine.

        Args:
            initial_state: The starting state
            valid_transitions: Map of state -> list of valid target states
            track_history: Whether to record transition history
            max_history: Maximum number of transitions to keep in history
        """
        if initial_state not in valid_transitions:
            raise ValueError(
                f"Initial state {initial_state} not in valid_transitions. "
                f"Valid states: {list(valid_transitions.keys())}"
            )
        self._state = initial_state
        self._transitions = valid_transitions
        self._track_history = track_history
        self._max_history = max_history
        self._history: List[StateTransition[S]] = []

    @property
    def state(self) -> S:
        """Get the current state."""
        return self._state

    @property
    def history(self) -> List[StateTransition[S]]:
        """Get transition history (empty if tracking disabled)."""
        return self._history.copy()

    def can_transition(self, target: S) -> bool:
        return target in self._transitions.get(self._state, [])

    def try_transition(self, target: S, frame: int = 0, reason: str = "") -> Result[S, str]:
        """Attempt to transition to a new state.

        Returns:
            Ok(new_state) if the table allows it, Err(message) otherwise.
            On Err the current state is unchanged.
        """
        if not self.can_transition(target):
            valid_targets = self._transitions.get(self._state, [])
            return Err(
                f"Invalid transition: {self._state.name} -> {target.name}. "
                f"Valid targets from {self._state.name}: {[t.name for t in valid_targets]}"
            )

        old_state = self._state
        self._state = target
        if self._track_history:
            self._record_transition(old_state, target, frame, reason)
        return Ok(target)

    def transition(self, target: S, frame: int = 0, reason: str = "") -> S:
        """Transition to a new state, raising ValueError on an invalid one."""
        result = self.try_transition(target, frame, reason)
        if result.is_err():
            raise ValueError(result.error)
        return result.unwrap()

    def force_state(self, state: S, frame: int = 0, reason: str = "forced") -> None:
        """Force a state change without validation.

        Reserved for restoring snapshots and for resetting a predator whose
        bookkeeping became inconsistent.
        """
        old_state = self._state
        self._state = state
        if self._track_history:
            self._record_transition(old_state, state, frame, f"[FORCED] {reason}")

    def _record_transition(self, from_state: S, to_state: S, frame: int, reason: str) -> None:
        self._history.append(
            StateTransition(from_state=from_state, to_state=to_state, frame=frame, reason=reason)
        )
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history :]

    def get_valid_transitions(self) -> List[S]:
        """Get list of valid target states from current state."""
        return list(self._transitions.get(self._state, []))

    def __repr__(self) -> str:
        return f"StateMachine(state={self._state.name})"


# ============================================================================
# Predator Behavior State Machine
# ============================================================================


class BehaviorState(Enum):
    """Behavioral states of a predator.

    Values are lowercase strings so they serialize directly into sonar
    snapshots and predator snapshots.
    """

    IDLE = "idle"
    INVESTIGATING = "investigating"  # Lure sighted, sizing it up
    CHASING = "chasing"  # Committed to the lure
    STRIKING = "striking"  # Strike window open, waiting on a hookset
    HOOKED = "hooked"  # Owned by the fight resolver
    HUNTING_PREY = "hunting_prey"  # Committed to a school or solitary prey
    FEEDING = "feeding"  # Just ate, digesting
    MIGRATING = "migrating"  # Leaving the area for good


BEHAVIOR_TRANSITIONS: Dict[BehaviorState, List[BehaviorState]] = {
    BehaviorState.IDLE: [
        BehaviorState.INVESTIGATING,
        BehaviorState.HUNTING_PREY,
        BehaviorState.MIGRATING,
    ],
    BehaviorState.INVESTIGATING: [
        BehaviorState.CHASING,
        BehaviorState.IDLE,
        BehaviorState.MIGRATING,
    ],
    BehaviorState.CHASING: [
        BehaviorState.STRIKING,
        BehaviorState.IDLE,
        BehaviorState.MIGRATING,
    ],
    BehaviorState.STRIKING: [
        BehaviorState.HOOKED,
        BehaviorState.IDLE,
        BehaviorState.CHASING,  # Frenzy re-strike
        BehaviorState.MIGRATING,
    ],
    # A hooked fish is either landed (removed) or released back to IDLE
    BehaviorState.HOOKED: [BehaviorState.IDLE],
    BehaviorState.HUNTING_PREY: [
        BehaviorState.FEEDING,
        BehaviorState.IDLE,
        BehaviorState.MIGRATING,
    ],
    BehaviorState.FEEDING: [BehaviorState.IDLE, BehaviorState.MIGRATING],
    BehaviorState.MIGRATING: [],  # Terminal, removed once off the map
}

# States the lure-interest pipeline runs through
LURE_STATES = frozenset(
    {BehaviorState.INVESTIGATING, BehaviorState.CHASING, BehaviorState.STRIKING}
)


def create_behavior_state_machine(
    initial_state: BehaviorState = BehaviorState.IDLE,
    track_history: bool = False,
) -> StateMachine[BehaviorState]:
    """Create a state machine for one predator's decision loop.

    Args:
        initial_state: Starting state (IDLE except when restoring a snapshot)
        track_history: Whether to track transition history
    """
    return StateMachine(
        initial_state=initial_state,
        valid_transitions=BEHAVIOR_TRANSITIONS,
        track_history=track_history,
    )


# ============================================================================
# Fight State Machine
# ============================================================================


class FightState(Enum):
    """Lifecycle of a fight session."""

    HOOKED = "hooked"
    FIGHTING = "fighting"
    CAUGHT = "caught"
    ESCAPED = "escaped"
    LINE_BROKEN = "line_broken"


FIGHT_TRANSITIONS: Dict[FightState, List[FightState]] = {
    FightState.HOOKED: [FightState.FIGHTING, FightState.ESCAPED],
    FightState.FIGHTING: [FightState.CAUGHT, FightState.ESCAPED, FightState.LINE_BROKEN],
    FightState.CAUGHT: [],
    FightState.ESCAPED: [],
    FightState.LINE_BROKEN: [],
}

TERMINAL_FIGHT_STATES = frozenset(
    {FightState.CAUGHT, FightState.ESCAPED, FightState.LINE_BROKEN}
)


def create_fight_state_machine(track_history: bool = True) -> StateMachine[FightState]:
    """Create a state machine for a fight session (history on by default)."""
    return StateMachine(
        initial_state=FightState.HOOKED,
        valid_transitions=FIGHT_TRANSITIONS,
        track_history=track_history,
    )
