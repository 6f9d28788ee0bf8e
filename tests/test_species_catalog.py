"""Tests for species trait validation and the eat rule."""

import logging

import pytest

from lakesim.config.species import (
    OrganismKind,
    SpeciesCatalog,
    can_eat,
    default_catalog,
    diet_preference,
)


class TestSpeciesCatalog:
    def test_bundled_catalog_loads(self, catalog: SpeciesCatalog) -> None:
        assert "lake_trout" in catalog
        assert catalog.get("alewife").kind is OrganismKind.PREY
        assert catalog.get("zooplankton").kind is OrganismKind.FOOD

    def test_unknown_species_gets_conservative_defaults(self, catalog, caplog) -> None:
        """An unknown id never raises; it gets a hard-to-provoke default fish."""
        with caplog.at_level(logging.WARNING, logger="lakesim.config.species"):
            traits = catalog.get("coelacanth")
        assert traits.species_id == "coelacanth"
        assert traits.aggressiveness == pytest.approx(0.2)
        assert "coelacanth" in caplog.text
        assert catalog.get("coelacanth") is traits

    def test_malformed_record_falls_back(self, caplog) -> None:
        """A record failing validation is replaced instead of raising."""
        with caplog.at_level(logging.WARNING, logger="lakesim.config.species"):
            catalog = SpeciesCatalog.from_mapping(
                {
                    "broken": {"aggressiveness": 5.0},
                    "upside_down": {"depth_range": {"min_ft": 90, "max_ft": 10}},
                    "not_a_dict": 42,
                }
            )
        assert catalog.get("broken").aggressiveness == pytest.approx(0.2)
        assert catalog.get("upside_down").depth_range.min_ft == 0.0
        assert catalog.get("not_a_dict").species_id == "not_a_dict"
        assert "broken" in caplog.text

    def test_valid_record_keeps_values(self) -> None:
        catalog = SpeciesCatalog.from_mapping(
            {"walleye": {"aggressiveness": 0.75, "vision": {"horizontal_range": 210}}}
        )
        traits = catalog.get("walleye")
        assert traits.aggressiveness == pytest.approx(0.75)
        assert traits.vision.horizontal_range == pytest.approx(210)
        assert catalog.species_ids() == ["walleye"]
        assert len(catalog) == 1


class TestEatRule:
    def test_eater_side_declaration(self, catalog) -> None:
        """Lake trout eat bait; alewife is in the bait category."""
        assert catalog.can_eat(catalog.get("lake_trout"), catalog.get("alewife"))

    def test_prey_side_declaration(self, catalog) -> None:
        """Sculpin declares lake trout as a predator; trout's own list omits it."""
        trout = catalog.get("lake_trout")
        sculpin = catalog.get("slimy_sculpin")
        assert "sculpin" not in trout.diet.can_eat
        assert can_eat(trout, sculpin)

    def test_not_reversible(self, catalog) -> None:
        assert not catalog.can_eat(catalog.get("alewife"), catalog.get("lake_trout"))

    def test_same_species_never(self, catalog) -> None:
        trout = catalog.get("lake_trout")
        assert not can_eat(trout, trout)

    def test_prey_eats_plankton(self, catalog) -> None:
        assert catalog.can_eat(catalog.get("alewife"), catalog.get("zooplankton"))

    def test_diet_preference(self, catalog) -> None:
        trout = catalog.get("lake_trout")
        assert diet_preference(trout, catalog.get("cisco")) == pytest.approx(1.0)
        assert diet_preference(trout, catalog.get("alewife")) == pytest.approx(0.8)
        assert diet_preference(catalog.get("alewife"), catalog.get("zooplankton")) == 1.0


def test_default_catalog_is_fresh_each_call() -> None:
    assert default_catalog() is not default_catalog()
