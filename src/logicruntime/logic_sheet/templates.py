"""Node templates: the typed pin layout and default properties of every known subtype.

This mirrors the editor palette. Evaluation never requires a template (unknown
subtypes are fail-soft), but templates are used to:
- merge per-subtype default properties at read time (`node_property`)
- classify ports as exec or data (`port_type`, used by validation)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .models import LogicNode, NodeKind

EXEC = "execution"

# Exec pin ids used by the walker.
EXEC_IN = "exec"
EXEC_OUT = "exec"


@dataclass(frozen=True)
class PinSpec:
    id: str
    type: str

    @property
    def is_exec(self) -> bool:
        return self.type == EXEC


@dataclass(frozen=True)
class NodeTemplate:
    kind: NodeKind
    subtype: str
    description: str = ""
    inputs: Tuple[PinSpec, ...] = ()
    outputs: Tuple[PinSpec, ...] = ()
    defaults: Dict[str, Any] = field(default_factory=dict)

    def input(self, pin_id: str) -> Optional[PinSpec]:
        for pin in self.inputs:
            if pin.id == pin_id:
                return pin
        return None

    def output(self, pin_id: str) -> Optional[PinSpec]:
        for pin in self.outputs:
            if pin.id == pin_id:
                return pin
        return None


def _pins(*specs: Tuple[str, str]) -> Tuple[PinSpec, ...]:
    return tuple(PinSpec(pid, ptype) for pid, ptype in specs)


_EXEC_PIN = (EXEC_IN, EXEC)

_TEMPLATES = [
    # Events (entry points)
    NodeTemplate(NodeKind.EVENT, "OnUpdate", "Called every frame", outputs=_pins(_EXEC_PIN, ("deltaTime", "number"))),
    NodeTemplate(NodeKind.EVENT, "OnStart", "Called when the scene starts", outputs=_pins(_EXEC_PIN)),
    NodeTemplate(
        NodeKind.EVENT,
        "OnCollision",
        "Triggered on collision",
        outputs=_pins(_EXEC_PIN, ("collider", "actor"), ("other", "actor")),
    ),
    NodeTemplate(
        NodeKind.EVENT,
        "OnTouch",
        "Touch/click detected",
        outputs=_pins(_EXEC_PIN, ("touchX", "number"), ("touchY", "number")),
    ),
    NodeTemplate(NodeKind.EVENT, "OnOutOfBounds", "Actor left the playfield", outputs=_pins(_EXEC_PIN, ("edge", "string"))),
    # Actions
    NodeTemplate(
        NodeKind.ACTION,
        "Move",
        "Move actor by velocity * deltaTime",
        inputs=_pins(_EXEC_PIN, ("dx", "number"), ("dy", "number")),
        outputs=_pins(_EXEC_PIN),
    ),
    NodeTemplate(
        NodeKind.ACTION,
        "SetPosition",
        "Set position",
        inputs=_pins(_EXEC_PIN, ("x", "number"), ("y", "number")),
        outputs=_pins(_EXEC_PIN),
    ),
    NodeTemplate(
        NodeKind.ACTION,
        "SetVariable",
        "Write a variable",
        inputs=_pins(_EXEC_PIN, ("value", "any")),
        outputs=_pins(_EXEC_PIN),
        defaults={"operation": "set"},
    ),
    NodeTemplate(NodeKind.ACTION, "FlipVariable", "Negate a variable", inputs=_pins(_EXEC_PIN), outputs=_pins(_EXEC_PIN)),
    NodeTemplate(NodeKind.ACTION, "PlaySound", "Play sound effect", inputs=_pins(_EXEC_PIN), outputs=_pins(_EXEC_PIN)),
    NodeTemplate(
        NodeKind.ACTION,
        "AddScore",
        "Add to score",
        inputs=_pins(_EXEC_PIN),
        outputs=_pins(_EXEC_PIN),
        defaults={"target": "score", "amount": 1},
    ),
    NodeTemplate(
        NodeKind.ACTION,
        "ResetPosition",
        "Reset to start position",
        inputs=_pins(_EXEC_PIN),
        outputs=_pins(_EXEC_PIN),
        defaults={"resetSpeed": False},
    ),
    NodeTemplate(NodeKind.ACTION, "Bounce", "Reverse direction", inputs=_pins(_EXEC_PIN), outputs=_pins(_EXEC_PIN)),
    # Variables
    NodeTemplate(NodeKind.VARIABLE, "GetVariable", "Read a variable", outputs=_pins(("value", "any"))),
    # Logic (pure)
    NodeTemplate(NodeKind.LOGIC, "Clamp", "Clamp value to range",
                 inputs=_pins(("value", "number"), ("min", "number"), ("max", "number")), outputs=_pins(("result", "number"))),
    NodeTemplate(NodeKind.LOGIC, "Lerp", "Linear interpolate",
                 inputs=_pins(("a", "number"), ("b", "number"), ("t", "number")), outputs=_pins(("result", "number"))),
    NodeTemplate(NodeKind.LOGIC, "Not", "Boolean negation", inputs=_pins(("a", "boolean")), outputs=_pins(("result", "boolean"))),
    # Flow
    NodeTemplate(
        NodeKind.FLOW,
        "Branch",
        "If/else branch",
        inputs=_pins(_EXEC_PIN, ("condition", "boolean")),
        outputs=_pins(("true", EXEC), ("false", EXEC)),
    ),
    NodeTemplate(
        NodeKind.FLOW,
        "Sequence",
        "Run out1 then out2",
        inputs=_pins(_EXEC_PIN),
        outputs=_pins(("out1", EXEC), ("out2", EXEC)),
    ),
    # Casts (pull targets that may also sit inline in an exec chain)
    NodeTemplate(NodeKind.CAST, "ToString", "Convert to string",
                 inputs=_pins(_EXEC_PIN, ("value", "any")), outputs=_pins(_EXEC_PIN, ("text", "string"))),
    NodeTemplate(NodeKind.CAST, "ToNumber", "Convert to number",
                 inputs=_pins(_EXEC_PIN, ("value", "any")), outputs=_pins(_EXEC_PIN, ("number", "number"))),
]

for _subtype, _result_type in (
    ("Add", "number"),
    ("Subtract", "number"),
    ("Multiply", "number"),
    ("Divide", "number"),
    ("Compare", "boolean"),
    ("Equal", "boolean"),
    ("GreaterThan", "boolean"),
    ("LessThan", "boolean"),
    ("And", "boolean"),
    ("Or", "boolean"),
):
    _TEMPLATES.append(
        NodeTemplate(NodeKind.LOGIC, _subtype, inputs=_pins(("a", "any"), ("b", "any")), outputs=_pins(("result", _result_type)))
    )

# Tag casts: subtype -> (required tag, typed output pin)
TAG_CASTS: Dict[str, Tuple[str, str]] = {
    "IsPlayer": ("player", "player"),
    "IsBall": ("ball", "ball"),
    "IsEnemy": ("enemy", "enemy"),
}

for _subtype, (_tag, _pin) in TAG_CASTS.items():
    _TEMPLATES.append(
        NodeTemplate(
            NodeKind.CAST,
            _subtype,
            f"Check if actor is tagged '{_tag}'",
            inputs=_pins(_EXEC_PIN, ("actor", "actor")),
            outputs=_pins(_EXEC_PIN, ("isValid", "boolean"), (_pin, "actor")),
        )
    )

NODE_TEMPLATES: Dict[Tuple[NodeKind, str], NodeTemplate] = {(t.kind, t.subtype): t for t in _TEMPLATES}


def get_template(kind: NodeKind, subtype: str) -> Optional[NodeTemplate]:
    return NODE_TEMPLATES.get((kind, subtype))


def node_property(node: LogicNode, key: str, default: Any = None) -> Any:
    """Read a node property, falling back to the subtype default, then `default`."""
    value = node.properties.get(key)
    if value is not None:
        return value
    template = get_template(node.kind, node.subtype)
    if template is not None:
        value = template.defaults.get(key)
        if value is not None:
            return value
    return default


def port_spec(node: LogicNode, port_id: str, *, output: bool) -> Optional[PinSpec]:
    """Declared pin of a node port, or None when the template does not know it."""
    template = get_template(node.kind, node.subtype)
    if template is None:
        return None
    return template.output(port_id) if output else template.input(port_id)


def port_type(node: LogicNode, port_id: str, *, output: bool) -> Optional[str]:
    pin = port_spec(node, port_id, output=output)
    return pin.type if pin is not None else None
