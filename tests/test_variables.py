from __future__ import annotations

import pytest

from logicruntime.core.config import MAX_TRAVERSAL_DEPTH, InterpreterConfig
from logicruntime.core.models import ActorContext
from logicruntime.core.variables import VariableRegistry, constrain_value


def _registry() -> VariableRegistry:
    registry = VariableRegistry()
    registry.load_definitions(
        "Ball",
        {
            "variables": {
                "speed": {"type": "number", "default": 600, "min": 0, "max": 1200},
                "trail": {"type": "list", "default": []},
                "name": {"type": "string", "default": "ball"},
                "broken": "not-a-definition",
            }
        },
    )
    return registry


def test_load_definitions_skips_malformed_entries() -> None:
    registry = _registry()

    assert sorted(registry.all_definitions("Ball")) == ["name", "speed", "trail"]
    assert registry.get_definition("Ball", "speed")["max"] == 1200
    assert registry.get_definition("Ball", "broken") is None
    assert registry.get_definition("Paddle", "speed") is None


def test_create_instance_copies_defaults_per_instance() -> None:
    registry = _registry()

    first = registry.create_instance("Ball")
    second = registry.create_instance("Ball")
    first["trail"].append((1, 2))

    assert second == {"speed": 600, "trail": [], "name": "ball"}
    assert registry.create_instance("Paddle") == {}


def test_constrain_clamps_only_numeric_definitions() -> None:
    registry = _registry()

    assert registry.constrain("Ball", "speed", -5) == 0
    assert registry.constrain("Ball", "speed", 5000) == 1200
    assert registry.constrain("Ball", "speed", "fast") == "fast"
    assert registry.constrain("Ball", "name", 5000) == 5000
    assert constrain_value(None, 99) == 99
    assert constrain_value({"type": "number", "min": 1}, True) is True


def test_spawn_seeds_variables_start_position_and_tag() -> None:
    actor = ActorContext.spawn("Ball", 540, 960, registry=_registry())

    assert actor.variables["speed"] == 600
    assert (actor.start_x, actor.start_y) == (540, 960)
    assert actor.tag == "ball"
    assert ActorContext.spawn("Wall", tag="solid").tag == "solid"


def test_actor_set_variable_clamps_and_get_variable_defaults() -> None:
    actor = ActorContext.spawn("Ball", registry=_registry())

    assert actor.set_variable("speed", 9999) == 1200
    assert actor.get_variable("speed") == 1200
    assert actor.get_variable("missing", 3) == 3
    actor.set_variable("free", -1)
    assert actor.variables["free"] == -1


def test_config_overrides_and_validation() -> None:
    config = InterpreterConfig()
    tuned = config.with_overrides(max_exec_depth=8, strict_node_ids=False)

    assert config.max_exec_depth == 64
    assert tuned.max_exec_depth == 8
    assert tuned.strict_node_ids is False
    assert tuned.to_dict()["default_delta_time"] == 0.016

    with pytest.raises(ValueError):
        InterpreterConfig(max_exec_depth=0)
    with pytest.raises(ValueError):
        InterpreterConfig(max_pull_depth=-1)


@pytest.mark.parametrize("field_name", ["max_exec_depth", "max_pull_depth"])
def test_depth_limits_are_capped_below_the_python_stack(field_name: str) -> None:
    assert getattr(InterpreterConfig(**{field_name: MAX_TRAVERSAL_DEPTH}), field_name) == MAX_TRAVERSAL_DEPTH

    with pytest.raises(ValueError):
        InterpreterConfig(**{field_name: 5000})
    with pytest.raises(ValueError):
        InterpreterConfig().with_overrides(**{field_name: MAX_TRAVERSAL_DEPTH + 1})


def test_serialize_snapshots_variables_and_fills_declared_defaults() -> None:
    registry = _registry()
    actor = ActorContext.spawn("Ball", registry=registry)
    actor.variables["speed"] = 900
    del actor.variables["name"]
    actor.variables["extra"] = {"hits": 2}

    snapshot = registry.serialize("Ball", actor.variables)
    actor.variables["extra"]["hits"] = 99

    assert snapshot == {"speed": 900, "trail": [], "name": "ball", "extra": {"hits": 2}}
    assert registry.serialize("Paddle", {"x": 1}) == {"x": 1}


def test_deserialize_restores_through_the_declared_range() -> None:
    registry = _registry()
    actor = ActorContext.spawn("Ball", registry=registry)

    restored = registry.deserialize("Ball", {"speed": 5000, "name": "saved", "lives": -1}, actor.variables)

    assert restored is actor.variables
    assert actor.variables == {"speed": 1200, "trail": [], "name": "saved", "lives": -1}
    with pytest.raises(TypeError):
        registry.deserialize("Ball", ["speed"], actor.variables)
