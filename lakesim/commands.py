"""Player input commands.

Input arrives between ticks and is applied at the start of the next tick,
so every pass of a tick sees the same lure and the same pending hookset.
"""

from dataclasses import dataclass
from typing import List, Union

from lakesim.math_utils import Vector2


@dataclass(frozen=True)
class AttemptHookset:
    pass


@dataclass(frozen=True)
class Reel:
    intensity: float = 1.0


@dataclass(frozen=True)
class SetDrag:
    setting: float


@dataclass(frozen=True)
class RetrieveLure:
    direction: Vector2
    speed: float


@dataclass(frozen=True)
class DropLure:
    x: float
    y: float


@dataclass(frozen=True)
class LiftLure:
    pass


Command = Union[AttemptHookset, Reel, SetDrag, RetrieveLure, DropLure, LiftLure]


class CommandQueue:
    """FIFO of input commands waiting for the next tick."""

    def __init__(self) -> None:
        self._pending: List[Command] = []

    def push(self, command: Command) -> None:
        self._pending.append(command)

    def drain(self) -> List[Command]:
        """Return pending commands in arrival order and clear the queue."""
        commands = self._pending
        self._pending = []
        return commands

    def __len__(self) -> int:
        return len(self._pending)
