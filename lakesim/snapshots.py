"""Read-only snapshots of simulation state.

Three kinds of snapshot leave the core:

- ``PredatorSnapshot``: a frozen summary attached to catch/escape events
- ``SonarSnapshot``: per-tick positions, depths, states and visual interest
  of every visible organism, for the rendering/sonar collaborator
- full predator state dicts (``predator_to_dict`` / ``dumps_predator``):
  every field the decision engine reads, so a predator rebuilt from one
  behaves identically on the following ticks given identical inputs

Serialization goes through orjson.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

import orjson

from lakesim.entities.organism import Organism
from lakesim.entities.predator import Predator, SizeClass
from lakesim.entities.targets import target_from_dict, target_to_dict
from lakesim.entity_ids import OrganismId, SchoolId
from lakesim.exceptions import SnapshotError
from lakesim.math_utils import Vector2
from lakesim.state_machine import BehaviorState, create_behavior_state_machine

if TYPE_CHECKING:
    from lakesim.config.species import SpeciesCatalog
    from lakesim.entities.lure import Lure
    from lakesim.registry import OrganismRegistry

SNAPSHOT_VERSION = 2


@dataclass(frozen=True)
class PredatorSnapshot:
    """Summary of a predator for scoring and notification collaborators."""

    predator_id: Optional[OrganismId]
    species_id: str
    name: str
    weight: float
    size_class: str
    hunger: float
    health: float
    state: str
    x: float
    y: float
    depth_ft: float

    @classmethod
    def from_predator(cls, predator: Predator, depth_scale: float) -> "PredatorSnapshot":
        return cls(
            predator_id=predator.id,
            species_id=predator.species_id,
            name=predator.traits.name or predator.species_id,
            weight=predator.weight,
            size_class=predator.size_class.value,
            hunger=predator.hunger,
            health=predator.health,
            state=predator.state.value,
            x=predator.pos.x,
            y=predator.pos.y,
            depth_ft=predator.depth_ft(depth_scale),
        )


@dataclass(frozen=True)
class OrganismView:
    organism_id: OrganismId
    kind: str
    species_id: str
    x: float
    y: float
    depth_ft: float
    state: Optional[str]
    visual_interest: float


@dataclass(frozen=True)
class LureView:
    x: float
    y: float
    depth_ft: float
    in_water: bool
    owned: bool


@dataclass(frozen=True)
class SonarSnapshot:
    """Everything the sonar/rendering collaborator draws for one tick."""

    frame: int
    lure: LureView
    organisms: Tuple[OrganismView, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frame": self.frame,
            "lure": asdict(self.lure),
            "organisms": [
                {**asdict(view), "organism_id": view.organism_id.to_list()}
                for view in self.organisms
            ],
        }

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())


def _view(organism: Organism, depth_scale: float) -> OrganismView:
    if isinstance(organism, Predator):
        state: Optional[str] = organism.state.value
        interest = organism.visual_interest
    else:
        state = "panicking" if getattr(organism, "panicking", False) else None
        interest = 0.0
    return OrganismView(
        organism_id=organism.id,
        kind=organism.kind.value,
        species_id=organism.species_id,
        x=organism.pos.x,
        y=organism.pos.y,
        depth_ft=organism.depth_ft(depth_scale),
        state=state,
        visual_interest=interest,
    )


def build_sonar_snapshot(
    frame: int,
    registry: "OrganismRegistry",
    lure: "Lure",
    depth_scale: float,
) -> SonarSnapshot:
    """Collect views of every live, visible organism in registry order."""
    views = tuple(
        _view(organism, depth_scale)
        for organism in registry.iter_live()
        if organism.visible
    )
    lure_view = LureView(
        x=lure.pos.x,
        y=lure.pos.y,
        depth_ft=lure.pos.y / depth_scale if depth_scale > 0 else 0.0,
        in_water=lure.in_water,
        owned=lure.is_owned,
    )
    return SonarSnapshot(frame=frame, lure=lure_view, organisms=views)


# ============================================================================
# Full predator state
# ============================================================================


def predator_to_dict(predator: Predator) -> Dict[str, Any]:
    """Every field needed to continue a predator deterministically."""
    return {
        "version": SNAPSHOT_VERSION,
        "id": predator.id.to_list() if predator.id else None,
        "species_id": predator.species_id,
        "pos": [predator.pos.x, predator.pos.y],
        "weight": predator.weight,
        "size_class": predator.size_class.value,
        "hunger": predator.hunger,
        "health": predator.health,
        "state": predator.state.value,
        "target": target_to_dict(predator.target),
        "commitment_ticks": predator.commitment_ticks,
        "abandon_cooldowns": [
            [school_id.value, ticks]
            for school_id, ticks in sorted(predator.abandon_cooldowns.items())
        ],
        "last_sighting_frame": predator.last_sighting_frame,
        "wary_ticks": predator.wary_ticks,
        "strike_window_ticks": predator.strike_window_ticks,
        "patience_ticks": predator.patience_ticks,
        "feeding_ticks": predator.feeding_ticks,
        "anchor": [predator.anchor.x, predator.anchor.y],
        "migration_direction": predator.migration_direction,
        "visual_interest": predator.visual_interest,
        "bumped": predator.bumped,
        "last_meal_frame": predator.last_meal_frame,
        "biology_ticks": predator.biology_ticks,
        "frenzy_ticks": predator.frenzy_ticks,
        "frenzy_intensity": predator.frenzy_intensity,
        "frenzy_school": (
            predator.frenzy_school.value if predator.frenzy_school is not None else None
        ),
        "extra_strikes": predator.extra_strikes,
        "speed": predator.speed,
        "heading": predator.heading,
        "age": predator.age,
        "visible": predator.visible,
    }


def predator_from_dict(raw: Dict[str, Any], catalog: "SpeciesCatalog") -> Predator:
    """Rebuild a predator from ``predator_to_dict`` output.

    Raises:
        SnapshotError: If the dict is missing fields or holds bad values
    """
    try:
        if raw.get("version") != SNAPSHOT_VERSION:
            raise SnapshotError(f"unsupported snapshot version {raw.get('version')!r}")
        traits = catalog.get(raw["species_id"])
        state = BehaviorState(raw["state"])
        predator = Predator(
            traits=traits,
            pos=Vector2(*raw["pos"]),
            weight=float(raw["weight"]),
            size_class=SizeClass(raw["size_class"]),
            hunger=float(raw["hunger"]),
            health=float(raw["health"]),
            machine=create_behavior_state_machine(initial_state=state),
        )
        predator.id = OrganismId.from_list(raw["id"]) if raw.get("id") else None
        predator.target = target_from_dict(raw["target"])
        predator.commitment_ticks = int(raw["commitment_ticks"])
        predator.abandon_cooldowns = {
            SchoolId(int(school)): int(ticks) for school, ticks in raw["abandon_cooldowns"]
        }
        predator.last_sighting_frame = int(raw["last_sighting_frame"])
        predator.wary_ticks = int(raw["wary_ticks"])
        predator.strike_window_ticks = int(raw["strike_window_ticks"])
        predator.patience_ticks = int(raw["patience_ticks"])
        predator.feeding_ticks = int(raw["feeding_ticks"])
        predator.anchor = Vector2(*raw["anchor"])
        predator.migration_direction = int(raw["migration_direction"])
        predator.visual_interest = float(raw["visual_interest"])
        predator.bumped = bool(raw["bumped"])
        predator.last_meal_frame = int(raw["last_meal_frame"])
        predator.biology_ticks = int(raw["biology_ticks"])
        predator.frenzy_ticks = int(raw["frenzy_ticks"])
        predator.frenzy_intensity = float(raw["frenzy_intensity"])
        frenzy_school = raw["frenzy_school"]
        predator.frenzy_school = SchoolId(int(frenzy_school)) if frenzy_school is not None else None
        predator.extra_strikes = int(raw["extra_strikes"])
        predator.speed = float(raw["speed"])
        predator.heading = float(raw["heading"])
        predator.age = int(raw["age"])
        predator.visible = bool(raw["visible"])
    except SnapshotError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotError(f"malformed predator snapshot: {exc}") from exc
    return predator


def dumps_predator(predator: Predator) -> bytes:
    return orjson.dumps(predator_to_dict(predator))


def loads_predator(data: bytes, catalog: "SpeciesCatalog") -> Predator:
    """Decode ``dumps_predator`` output back into a predator."""
    try:
        raw = orjson.loads(data)
    except orjson.JSONDecodeError as exc:
        raise SnapshotError(f"predator snapshot is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise SnapshotError("predator snapshot must decode to an object")
    return predator_from_dict(raw, catalog)
