"""Domain events emitted by the simulation core.

These are the notifications collaborators receive (catch, escape,
feeding, plus a few gameplay cues). They are data-only frozen dataclasses
carrying everything a handler needs; nobody calls back into the core.
"""

from __future__ import annotations

from dataclasses import dataclass

from lakesim.entity_ids import OrganismId, SchoolId
from lakesim.snapshots import PredatorSnapshot


@dataclass(frozen=True)
class CatchEvent:
    """A hooked fish was landed.

    Attributes:
        snapshot: The predator as it was when landed
        fight_ticks: How long the fight lasted
        frame: Simulation frame when this occurred
    """

    snapshot: PredatorSnapshot
    fight_ticks: int
    frame: int


@dataclass(frozen=True)
class EscapeEvent:
    """A hooked fish got away.

    Attributes:
        snapshot: The predator as it was when released
        reason: "line_broken", "spool_empty", "hook_spit" or "predator_lost"
        frame: Simulation frame when this occurred
    """

    snapshot: PredatorSnapshot
    reason: str
    frame: int


@dataclass(frozen=True)
class FeedingEvent:
    """Something ate something.

    Attributes:
        eater_id: The predator or schooling prey that ate
        prey_id: The prey organism or food resource consumed
        nutrition: Hunger removed from the eater
        frame: Simulation frame when this occurred
    """

    eater_id: OrganismId
    prey_id: OrganismId
    nutrition: float
    frame: int


@dataclass(frozen=True)
class StrikeEvent:
    """A predator struck at the lure; the hookset window is open."""

    predator_id: OrganismId
    frame: int


@dataclass(frozen=True)
class StrikeMissedEvent:
    """A strike window closed without a hookset."""

    predator_id: OrganismId
    frame: int


@dataclass(frozen=True)
class HooksetEvent:
    """A fight started.

    Attributes:
        predator_id: The hooked predator
        species_id: Its species
        quality: Hookset quality ("barely", "bad", "good", "great")
        frame: Simulation frame when this occurred
    """

    predator_id: OrganismId
    species_id: str
    quality: str
    frame: int


@dataclass(frozen=True)
class LureBumpedEvent:
    """A chasing fish brushed the lure (a cue to get ready)."""

    predator_id: OrganismId
    frame: int


@dataclass(frozen=True)
class MigratedEvent:
    """A predator left the playable area for good."""

    predator_id: OrganismId
    species_id: str
    frame: int


@dataclass(frozen=True)
class SchoolDisbandedEvent:
    """The last member of a school is gone."""

    school_id: SchoolId
    species_id: str
    frame: int


@dataclass(frozen=True)
class FrenzyEvent:
    """An idle predator joined the excitement of the fish around it.

    Attributes:
        predator_id: The predator now in a frenzy
        excited_neighbors: How many excited predators set it off
        intensity: Frenzy intensity (0-1)
        frame: Simulation frame when this occurred
    """

    predator_id: OrganismId
    excited_neighbors: int
    intensity: float
    frame: int
