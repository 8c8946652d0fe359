"""Per-subtype node semantics shared by the walker (push) and the resolver (pull).

Behaviours never traverse the graph themselves. They receive a `pull` callable
(`input_id -> value or None`) for their data inputs and report back what the
traversal should do next (Flow returns the exec ports to walk, Cast returns
the outputs to cache). Missing values fall back per call site:
wired input, then node property (pin default), then the operator's own default.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Dict, Optional, Tuple

from ..core.config import InterpreterConfig
from ..core.models import ActorContext, EngineContext
from ..logging import get_logger
from .models import LogicNode
from .templates import TAG_CASTS, node_property

logger = get_logger(__name__)

Pull = Callable[[str], Any]

_NUMBER_PREFIX_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def to_number(value: Any, default: float = 0) -> Any:
    """Best-effort numeric coercion (parse failures and NaN become `default`)."""
    if value is None:
        return default
    if isinstance(value, bool):
        # Booleans count as 1/0 everywhere, ToNumber included.
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return default if math.isnan(value) else value
    if isinstance(value, str):
        # Leading numeric prefix, like parseFloat: "12px" -> 12.0
        m = _NUMBER_PREFIX_RE.match(value)
        if m is None:
            return default
        return float(m.group(0))
    return default


def is_truthy(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def to_text(value: Any) -> str:
    # An unset value renders as the empty string, not "None".
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def pull_or_property(node: LogicNode, pull: Pull, pin_id: str, default: Any = None) -> Any:
    value = pull(pin_id)
    if value is None:
        value = node_property(node, pin_id)
    return default if value is None else value


# ---------------------------------------------------------------------------
# Logic (pure)
# ---------------------------------------------------------------------------


def _binary_inputs(node: LogicNode, pull: Pull) -> Tuple[Any, Any]:
    return pull_or_property(node, pull, "a", 0), pull_or_property(node, pull, "b", 0)


def logic_add(node: LogicNode, pull: Pull) -> Any:
    a, b = _binary_inputs(node, pull)
    return to_number(a) + to_number(b)


def logic_subtract(node: LogicNode, pull: Pull) -> Any:
    a, b = _binary_inputs(node, pull)
    return to_number(a) - to_number(b)


def logic_multiply(node: LogicNode, pull: Pull) -> Any:
    a, b = _binary_inputs(node, pull)
    return to_number(a) * to_number(b)


def logic_divide(node: LogicNode, pull: Pull) -> Any:
    """Divide a by b; dividing by zero yields 0."""
    a, b = _binary_inputs(node, pull)
    divisor = to_number(b)
    if divisor == 0:
        return 0
    return to_number(a) / divisor


def logic_compare(node: LogicNode, pull: Pull) -> bool:
    """Strict equality: a bool never equals a number (`True != 1`)."""
    a, b = _binary_inputs(node, pull)
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return bool(a == b)


def logic_greater_than(node: LogicNode, pull: Pull) -> bool:
    a, b = _binary_inputs(node, pull)
    return to_number(a) > to_number(b)


def logic_less_than(node: LogicNode, pull: Pull) -> bool:
    a, b = _binary_inputs(node, pull)
    return to_number(a) < to_number(b)


def logic_clamp(node: LogicNode, pull: Pull) -> Any:
    value = to_number(pull_or_property(node, pull, "value", 0))
    lo = to_number(pull_or_property(node, pull, "min", 0))
    hi = to_number(pull_or_property(node, pull, "max", 1))
    return max(lo, min(hi, value))


def logic_lerp(node: LogicNode, pull: Pull) -> Any:
    a, b = _binary_inputs(node, pull)
    t = to_number(pull_or_property(node, pull, "t", 0))
    a, b = to_number(a), to_number(b)
    return a + (b - a) * t


def logic_not(node: LogicNode, pull: Pull) -> bool:
    return not is_truthy(pull_or_property(node, pull, "a", False))


def logic_and(node: LogicNode, pull: Pull) -> bool:
    a, b = _binary_inputs(node, pull)
    return is_truthy(a) and is_truthy(b)


def logic_or(node: LogicNode, pull: Pull) -> bool:
    a, b = _binary_inputs(node, pull)
    return is_truthy(a) or is_truthy(b)


LOGIC_OPERATORS: Dict[str, Callable[[LogicNode, Pull], Any]] = {
    "Add": logic_add,
    "Subtract": logic_subtract,
    "Multiply": logic_multiply,
    "Divide": logic_divide,
    "Compare": logic_compare,
    "Equal": logic_compare,
    "GreaterThan": logic_greater_than,
    "LessThan": logic_less_than,
    "Clamp": logic_clamp,
    "Lerp": logic_lerp,
    "Not": logic_not,
    "And": logic_and,
    "Or": logic_or,
}


def evaluate_logic(node: LogicNode, pull: Pull) -> Any:
    operator = LOGIC_OPERATORS.get(node.subtype)
    if operator is None:
        logger.debug("Unknown logic subtype", node_id=node.id, subtype=node.subtype)
        return 0
    return operator(node, pull)


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------


def read_variable(node: LogicNode, actor: ActorContext) -> Any:
    """GetVariable: live actor value, else the node's `defaultValue`, else 0."""
    name = node_property(node, "variableName")
    value = actor.variables.get(name) if name is not None else None
    if value is None:
        value = node_property(node, "defaultValue")
    return 0 if value is None else value


# ---------------------------------------------------------------------------
# Actions (side effects on ActorContext / EngineContext)
# ---------------------------------------------------------------------------


def action_move(node: LogicNode, pull: Pull, actor: ActorContext, engine: EngineContext, config: InterpreterConfig) -> None:
    dx = to_number(pull_or_property(node, pull, "dx", 0))
    dy = to_number(pull_or_property(node, pull, "dy", 0))
    dt = engine.delta_time or config.default_delta_time
    actor.x += dx * dt
    actor.y += dy * dt


def action_set_position(node: LogicNode, pull: Pull, actor: ActorContext, engine: EngineContext, config: InterpreterConfig) -> None:
    x = pull_or_property(node, pull, "x")
    y = pull_or_property(node, pull, "y")
    if x is not None:
        actor.x = x
    if y is not None:
        actor.y = y


def apply_variable_operation(current: Any, operation: str, value: Any) -> Any:
    if operation == "add":
        return to_number(current) + to_number(value)
    if operation == "multiply":
        return to_number(current) * to_number(value)
    return value


def action_set_variable(node: LogicNode, pull: Pull, actor: ActorContext, engine: EngineContext, config: InterpreterConfig) -> None:
    """SetVariable: apply set/add/multiply, then clamp to `max`, then to `min`."""
    name = node_property(node, "variableName")
    if name is None:
        logger.debug("SetVariable without variableName", node_id=node.id)
        return
    operation = str(node_property(node, "operation", "set"))
    value = pull_or_property(node, pull, "value")
    current = actor.get_variable(name, 0)

    new_value = apply_variable_operation(current, operation, value)

    hi = node_property(node, "max")
    lo = node_property(node, "min")
    if _is_number(new_value):
        if _is_number(hi):
            new_value = min(new_value, hi)
        if _is_number(lo):
            new_value = max(new_value, lo)

    actor.set_variable(name, new_value)


def action_flip_variable(node: LogicNode, pull: Pull, actor: ActorContext, engine: EngineContext, config: InterpreterConfig) -> None:
    name = node_property(node, "variableName")
    if name is None:
        return
    current = actor.variables.get(name)
    if isinstance(current, bool):
        actor.set_variable(name, not current)
    elif _is_number(current):
        actor.set_variable(name, -current)


def action_play_sound(node: LogicNode, pull: Pull, actor: ActorContext, engine: EngineContext, config: InterpreterConfig) -> None:
    if engine.audio is None:
        return
    volume = node_property(node, "volume", config.default_volume)
    engine.audio.play_effect(node_property(node, "soundId"), volume)


def action_add_score(node: LogicNode, pull: Pull, actor: ActorContext, engine: EngineContext, config: InterpreterConfig) -> None:
    if engine.game_state is None:
        return
    target = node_property(node, "target") or "score"
    amount = node_property(node, "amount") or 1
    engine.game_state[target] = (engine.game_state.get(target) or 0) + amount


def action_reset_position(node: LogicNode, pull: Pull, actor: ActorContext, engine: EngineContext, config: InterpreterConfig) -> None:
    x = node_property(node, "x")
    y = node_property(node, "y")
    actor.x = x if x is not None else (actor.start_x if actor.start_x is not None else config.reset_x)
    actor.y = y if y is not None else (actor.start_y if actor.start_y is not None else config.reset_y)

    if is_truthy(node_property(node, "resetSpeed")):
        actor.set_variable("speed", actor.variables.get("defaultSpeed") or config.default_speed)
    direction_y = node_property(node, "newDirectionY")
    if direction_y is not None:
        actor.set_variable("directionY", direction_y)


def action_bounce(node: LogicNode, pull: Pull, actor: ActorContext, engine: EngineContext, config: InterpreterConfig) -> None:
    axis = node_property(node, "axis")
    if axis in ("x", "both"):
        actor.set_variable("directionX", -(actor.variables.get("directionX") or 1))
    if axis in ("y", "both"):
        actor.set_variable("directionY", -(actor.variables.get("directionY") or 1))


ActionHandler = Callable[[LogicNode, Pull, ActorContext, EngineContext, InterpreterConfig], None]

ACTION_HANDLERS: Dict[str, ActionHandler] = {
    "Move": action_move,
    "SetPosition": action_set_position,
    "SetVariable": action_set_variable,
    "FlipVariable": action_flip_variable,
    "PlaySound": action_play_sound,
    "AddScore": action_add_score,
    "ResetPosition": action_reset_position,
    "Bounce": action_bounce,
}


def run_action(node: LogicNode, pull: Pull, actor: ActorContext, engine: EngineContext, config: InterpreterConfig) -> None:
    handler = ACTION_HANDLERS.get(node.subtype)
    if handler is None:
        logger.debug("Unknown action subtype", node_id=node.id, subtype=node.subtype)
        return
    handler(node, pull, actor, engine, config)


# ---------------------------------------------------------------------------
# Flow
# ---------------------------------------------------------------------------


def route_flow(node: LogicNode, pull: Pull) -> Tuple[str, ...]:
    """Exec outputs to walk, in order."""
    if node.subtype == "Branch":
        condition = pull_or_property(node, pull, "condition", False)
        return ("true",) if is_truthy(condition) else ("false",)
    if node.subtype == "Sequence":
        return ("out1", "out2")
    logger.debug("Unknown flow subtype", node_id=node.id, subtype=node.subtype)
    return ()


# ---------------------------------------------------------------------------
# Casts
# ---------------------------------------------------------------------------


def tag_of(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, dict):
        tag = value.get("tag")
    else:
        tag = getattr(value, "tag", None)
    return tag if isinstance(tag, str) else None


def run_cast(node: LogicNode, pull: Pull) -> Dict[str, Any]:
    """Compute a cast node's outputs (port id -> value)."""
    tag_cast = TAG_CASTS.get(node.subtype)
    if tag_cast is not None:
        required_tag, pin_id = tag_cast
        candidate = pull("actor")
        ok = tag_of(candidate) == required_tag
        return {"isValid": ok, pin_id: candidate if ok else None}
    if node.subtype == "ToString":
        return {"text": to_text(pull_or_property(node, pull, "value"))}
    if node.subtype == "ToNumber":
        return {"number": to_number(pull_or_property(node, pull, "value"), 0)}
    logger.debug("Unknown cast subtype", node_id=node.id, subtype=node.subtype)
    return {}
