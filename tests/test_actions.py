from __future__ import annotations

from typing import Any, List, Tuple

import pytest

from logicruntime.core.config import InterpreterConfig
from logicruntime.core.interpreter import LogicInterpreter
from logicruntime.core.models import ActorContext, EngineContext
from logicruntime.core.variables import VariableRegistry


def _node(node_id: str, kind: str, subtype: str, **properties) -> dict:
    return {"id": node_id, "type": kind, "subtype": subtype, "properties": properties}


def _wire(src: str, out: str, dst: str, inp: str) -> dict:
    return {"from": {"nodeId": src, "outputId": out}, "to": {"nodeId": dst, "inputId": inp}}


def _run_action(
    subtype: str,
    actor: ActorContext,
    *,
    engine: EngineContext | None = None,
    config: InterpreterConfig | None = None,
    delta_time: float = 0.016,
    **properties,
) -> ActorContext:
    sheet = {
        "nodes": [_node("ev", "event", "OnUpdate"), _node("act", "action", subtype, **properties)],
        "connections": [_wire("ev", "exec", "act", "exec")],
    }
    interpreter = LogicInterpreter(config=config)
    interpreter.load_graph(actor.actor_id, sheet)
    interpreter.on_tick(actor.actor_id, actor, delta_time, engine)
    return actor


class RecordingAudio:
    def __init__(self):
        self.calls: List[Tuple[Any, float]] = []

    def play_effect(self, sound_id: Any, volume: float) -> None:
        self.calls.append((sound_id, volume))


def test_move_scales_by_engine_delta_time() -> None:
    actor = _run_action("Move", ActorContext("Ball", x=10, y=10), engine=EngineContext(delta_time=0.5), dx=4, dy=-2)

    assert actor.x == pytest.approx(12)
    assert actor.y == pytest.approx(9)


def test_move_uses_tick_delta_time_without_engine_context() -> None:
    actor = _run_action("Move", ActorContext("Ball"), delta_time=0.1, dx=10)

    assert actor.x == pytest.approx(1.0)
    assert actor.y == 0


def test_move_falls_back_to_default_frame_time() -> None:
    actor = _run_action("Move", ActorContext("Ball"), engine=EngineContext(), dx=100, dy=50)

    assert actor.x == pytest.approx(1.6)
    assert actor.y == pytest.approx(0.8)


def test_set_position_keeps_coordinates_that_are_not_supplied() -> None:
    actor = _run_action("SetPosition", ActorContext("Ball", x=1, y=2), x=30)

    assert (actor.x, actor.y) == (30, 2)


def test_set_variable_add_then_clamps_to_max() -> None:
    actor = _run_action(
        "SetVariable",
        ActorContext("Ball", variables={"lives": 3}),
        variableName="lives",
        operation="add",
        value=2,
        max=4,
    )

    assert actor.variables["lives"] == 4


def test_set_variable_multiply_then_clamps_to_min() -> None:
    actor = _run_action(
        "SetVariable",
        ActorContext("Ball", variables={"speed": 5}),
        variableName="speed",
        operation="multiply",
        value=-2,
        min=0,
    )

    assert actor.variables["speed"] == 0


def test_set_variable_set_stores_non_numeric_values_unclamped() -> None:
    actor = _run_action("SetVariable", ActorContext("Ball"), variableName="mode", value="idle", max=1)

    assert actor.variables["mode"] == "idle"


def test_set_variable_add_treats_missing_variable_as_zero() -> None:
    actor = _run_action("SetVariable", ActorContext("Ball"), variableName="hits", operation="add", value=1)

    assert actor.variables["hits"] == 1


def test_set_variable_respects_declared_range() -> None:
    registry = VariableRegistry()
    registry.load_definitions("Ball", {"variables": {"speed": {"type": "number", "default": 600, "min": 0, "max": 1200}}})
    actor = ActorContext.spawn("Ball", registry=registry)

    _run_action("SetVariable", actor, variableName="speed", operation="multiply", value=3)

    assert actor.variables["speed"] == 1200


def test_flip_variable_negates_numbers_and_booleans() -> None:
    actor = ActorContext("Ball", variables={"directionX": 1, "active": True, "name": "b"})

    _run_action("FlipVariable", actor, variableName="directionX")
    _run_action("FlipVariable", actor, variableName="active")
    _run_action("FlipVariable", actor, variableName="name")

    assert actor.variables == {"directionX": -1, "active": False, "name": "b"}


def test_play_sound_reaches_audio_sink_with_default_volume() -> None:
    audio = RecordingAudio()

    _run_action("PlaySound", ActorContext("Ball"), engine=EngineContext(audio=audio), soundId="hit")
    _run_action("PlaySound", ActorContext("Ball"), engine=EngineContext(audio=audio), soundId="score", volume=0.9)

    assert audio.calls == [("hit", 0.5), ("score", 0.9)]


def test_play_sound_without_audio_sink_is_a_no_op() -> None:
    actor = _run_action("PlaySound", ActorContext("Ball"), soundId="hit")

    assert actor.variables == {}


def test_add_score_increments_game_state() -> None:
    state = {"score": 10}

    _run_action("AddScore", ActorContext("Ball"), engine=EngineContext(game_state=state))
    _run_action("AddScore", ActorContext("Ball"), engine=EngineContext(game_state=state), target="p2", amount=3)

    assert state == {"score": 11, "p2": 3}


def test_reset_position_prefers_node_then_spawn_point_then_config() -> None:
    explicit = _run_action("ResetPosition", ActorContext("Ball", x=5, y=5, start_x=1, start_y=2), x=100, y=200)
    assert (explicit.x, explicit.y) == (100, 200)

    spawned = ActorContext.spawn("Ball", 7, 8)
    spawned.x, spawned.y = 300, 400
    _run_action("ResetPosition", spawned)
    assert (spawned.x, spawned.y) == (7, 8)

    fallback = _run_action("ResetPosition", ActorContext("Ball", x=5, y=5), config=InterpreterConfig(reset_x=11, reset_y=22))
    assert (fallback.x, fallback.y) == (11, 22)


def test_reset_position_restores_speed_and_direction() -> None:
    actor = ActorContext("Ball", variables={"speed": 900, "defaultSpeed": 450, "directionY": 1})

    _run_action("ResetPosition", actor, resetSpeed=True, newDirectionY=-1)

    assert actor.variables["speed"] == 450
    assert actor.variables["directionY"] == -1

    other = _run_action("ResetPosition", ActorContext("Ball", variables={"speed": 900}), resetSpeed=True)
    assert other.variables["speed"] == 600


@pytest.mark.parametrize(
    "axis,expected",
    [
        ("x", {"directionX": -1, "directionY": 1}),
        ("y", {"directionX": 1, "directionY": -1}),
        ("both", {"directionX": -1, "directionY": -1}),
        (None, {"directionX": 1, "directionY": 1}),
    ],
)
def test_bounce_flips_direction_on_requested_axis(axis, expected: dict) -> None:
    actor = ActorContext("Ball", variables={"directionX": 1, "directionY": 1})

    _run_action("Bounce", actor, axis=axis)

    assert actor.variables == expected


def test_bounce_treats_missing_direction_as_one() -> None:
    actor = _run_action("Bounce", ActorContext("Ball"), axis="x")

    assert actor.variables == {"directionX": -1}


def test_unknown_action_subtype_still_continues_the_exec_chain() -> None:
    sheet = {
        "nodes": [
            _node("ev", "event", "OnUpdate"),
            _node("mystery", "action", "Teleport"),
            _node("set", "action", "SetVariable", variableName="after", value=True),
        ],
        "connections": [_wire("ev", "exec", "mystery", "exec"), _wire("mystery", "exec", "set", "exec")],
    }
    interpreter = LogicInterpreter()
    interpreter.load_graph("Ball", sheet)
    actor = ActorContext("Ball")

    interpreter.on_tick("Ball", actor, 0.016)

    assert actor.variables == {"after": True}
