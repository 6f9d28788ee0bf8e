"""Predator target as a tagged variant.

A predator has exactly one target kind at a time. Modelling the target as
a union of frozen dataclasses (instead of several nullable fields) makes
"lure and prey at once" unrepresentable.

Usage:
------
    predator.target = SchoolTarget(school_id=SchoolId(4))
    if isinstance(predator.target, LureTarget):
        ...
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from lakesim.entity_ids import OrganismId, SchoolId


@dataclass(frozen=True)
class NoTarget:
    kind = "none"


@dataclass(frozen=True)
class LureTarget:
    """The player's lure."""

    kind = "lure"


@dataclass(frozen=True)
class SchoolTarget:
    """A whole school, with the member currently being run down.

    Attributes:
        school_id: The committed school
        focus_id: Nearest member chosen this tick, or None before one is picked
    """

    school_id: SchoolId
    focus_id: Optional[OrganismId] = None

    kind = "school"


@dataclass(frozen=True)
class MemberTarget:
    """A single prey organism (used for solitary prey)."""

    organism_id: OrganismId

    kind = "member"


Target = Union[NoTarget, LureTarget, SchoolTarget, MemberTarget]

NO_TARGET = NoTarget()
LURE_TARGET = LureTarget()


def prey_focus(target: Target) -> Optional[OrganismId]:
    """The prey organism a target points at right now, if any."""
    if isinstance(target, SchoolTarget):
        return target.focus_id
    if isinstance(target, MemberTarget):
        return target.organism_id
    return None


def target_to_dict(target: Target) -> Dict[str, Any]:
    if isinstance(target, SchoolTarget):
        return {
            "kind": target.kind,
            "school_id": target.school_id.value,
            "focus_id": target.focus_id.to_list() if target.focus_id else None,
        }
    if isinstance(target, MemberTarget):
        return {"kind": target.kind, "organism_id": target.organism_id.to_list()}
    return {"kind": target.kind}


def target_from_dict(raw: Dict[str, Any]) -> Target:
    kind = raw.get("kind", "none")
    if kind == "lure":
        return LURE_TARGET
    if kind == "school":
        focus = raw.get("focus_id")
        return SchoolTarget(
            school_id=SchoolId(int(raw["school_id"])),
            focus_id=OrganismId.from_list(focus) if focus else None,
        )
    if kind == "member":
        return MemberTarget(organism_id=OrganismId.from_list(raw["organism_id"]))
    if kind == "none":
        return NO_TARGET
    raise ValueError(f"unknown target kind {kind!r}")
