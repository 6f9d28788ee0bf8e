"""Type-safe organism and school identifiers.

Organisms live in arena storage: a dense slot list where freed slots are
reused. An ``OrganismId`` therefore pairs the slot index with a generation
counter, so a handle to an organism that was eaten cannot silently resolve
to whatever later spawned into the same slot.

Usage:
------
    pike = registry.get(OrganismId(3, 1))   # None once the pike is gone
    print(OrganismId(3, 1))                  # "Organism#3.1"
    print(SchoolId(7))                       # "School#7"

Design Notes:
- IDs are immutable (frozen dataclass) and hashable
- IDs order by (index, generation), which is registry order
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class OrganismId:
    """Stable handle to an organism slot in the registry arena."""

    index: int
    generation: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.index, int) or not isinstance(self.generation, int):
            raise TypeError("OrganismId fields must be int")
        if self.index < 0 or self.generation < 0:
            raise ValueError(f"OrganismId fields must be non-negative, got {self.index}.{self.generation}")

    def __str__(self) -> str:
        return f"Organism#{self.index}.{self.generation}"

    def to_list(self) -> list:
        return [self.index, self.generation]

    @classmethod
    def from_list(cls, raw: list) -> "OrganismId":
        return cls(int(raw[0]), int(raw[1]))


@dataclass(frozen=True, order=True)
class SchoolId:
    """Identifier of a school of prey."""

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int):
            raise TypeError(f"SchoolId value must be int, got {type(self.value).__name__}")
        if self.value < 0:
            raise ValueError(f"SchoolId value must be non-negative, got {self.value}")

    def __str__(self) -> str:
        return f"School#{self.value}"
