"""Tests for SystemRegistry ordering and management."""

import pytest

from lakesim.exceptions import SimulationError
from lakesim.system_registry import SystemRegistry
from lakesim.systems.base import BaseSystem, SystemResult
from lakesim.update_phases import UpdatePhase, get_system_phase, runs_in_phase


@runs_in_phase(UpdatePhase.FLOCKING)
class EarlySystem(BaseSystem):
    def __init__(self) -> None:
        super().__init__("Early")

    def _do_update(self, frame: int) -> SystemResult:
        return SystemResult(entities_affected=frame)


@runs_in_phase(UpdatePhase.FIGHT)
class LateSystem(BaseSystem):
    def __init__(self) -> None:
        super().__init__("Late")

    def _do_update(self, frame: int) -> SystemResult:
        return SystemResult(details={"n": 1})


class UndecoratedSystem(BaseSystem):
    def _do_update(self, frame: int) -> SystemResult:
        return SystemResult.empty()


class TestSystemRegistry:
    def test_registers_in_phase_order(self) -> None:
        registry = SystemRegistry()
        registry.register(EarlySystem())
        registry.register(LateSystem())
        assert [s.name for s in registry] == ["Early", "Late"]
        assert len(registry) == 2
        assert "Early" in repr(registry)

    def test_rejects_out_of_order(self) -> None:
        registry = SystemRegistry()
        registry.register(LateSystem())
        with pytest.raises(SimulationError):
            registry.register(EarlySystem())

    def test_rejects_undecorated(self) -> None:
        with pytest.raises(SimulationError):
            SystemRegistry().register(UndecoratedSystem("Loose"))

    def test_enable_disable(self) -> None:
        registry = SystemRegistry()
        early = EarlySystem()
        registry.register(early)
        assert registry.set_enabled("Early", False)
        assert early.update(3).skipped
        assert early.update_count == 0
        assert not registry.set_enabled("Missing", True)

    def test_debug_info(self) -> None:
        registry = SystemRegistry()
        registry.register(EarlySystem())
        info = registry.get_debug_info()
        assert info["Early"]["phase"] == "FLOCKING"
        assert get_system_phase(registry.get("Early")) is UpdatePhase.FLOCKING


class TestSystemResult:
    def test_addition_sums_numeric_details(self) -> None:
        total = SystemResult(entities_affected=2, details={"meals": 1}) + SystemResult(
            entities_affected=3, details={"meals": 2, "phase": "x"}
        )
        assert total.entities_affected == 5
        assert total.details == {"meals": 3, "phase": "x"}

    def test_skipped_is_identity(self) -> None:
        result = SystemResult(entities_removed=1)
        assert (result + SystemResult.skipped_result()) is result
        assert (SystemResult.skipped_result() + result) is result
