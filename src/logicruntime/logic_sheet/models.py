"""Stdlib-only models for the logic-sheet JSON schema.

These are intentionally permissive:
- Unknown/extra fields are ignored.
- Malformed nodes and connections are dropped (with a warning), never raised.
- Connections that point at unknown nodes or ports are kept; traversal skips them.

The walker/resolver code is responsible for interpreting node subtypes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from ..logging import get_logger

logger = get_logger(__name__)


class NodeKind(str, Enum):
    EVENT = "event"
    VARIABLE = "variable"
    LOGIC = "logic"
    FLOW = "flow"
    ACTION = "action"
    CAST = "cast"


class PortRef(NamedTuple):
    node_id: str
    port_id: str

    def __str__(self) -> str:
        return f"{self.node_id}.{self.port_id}"


@dataclass(frozen=True)
class LogicNode:
    id: str
    kind: NodeKind
    subtype: str
    properties: Dict[str, Any] = field(default_factory=dict)
    # Editor pin lists, kept verbatim for tooling; evaluation uses the templates.
    inputs: List[Dict[str, Any]] = field(default_factory=list)
    outputs: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class Connection:
    from_port: PortRef
    to_port: PortRef


@dataclass(frozen=True)
class LogicSheet:
    nodes: List[LogicNode] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    name: str = ""


def _coerce_kind(value: Any) -> Optional[NodeKind]:
    if isinstance(value, NodeKind):
        return value
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return None
    s = value.strip().lower()
    # Pydantic (and other serializers) may stringify enums as "NodeKind.X".
    if s.startswith("nodekind.") and "." in s:
        s = s.split(".", 1)[1]
    try:
        return NodeKind(s)
    except ValueError:
        return None


def _str_id(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value.strip() if isinstance(value, str) else ""


def _pins(raw: Any) -> List[Dict[str, Any]]:
    if not isinstance(raw, list):
        return []
    return [dict(p) for p in raw if isinstance(p, dict)]


def _port_ref(raw: Any, port_key: str) -> Optional[PortRef]:
    if not isinstance(raw, dict):
        return None
    node_id = _str_id(raw.get("nodeId"))
    port_id = _str_id(raw.get(port_key))
    if not node_id or not port_id:
        return None
    return PortRef(node_id, port_id)


def load_logic_sheet_json(raw: Any) -> LogicSheet:
    """Parse a logic-sheet document into stdlib dataclasses.

    Accepts a dict, a JSON string, or Pydantic-like models (`model_dump()` / `dict()`).
    """
    if isinstance(raw, (str, bytes)):
        raw = json.loads(raw)
    elif hasattr(raw, "model_dump"):
        raw = raw.model_dump()  # type: ignore[assignment]
    elif hasattr(raw, "dict") and not isinstance(raw, dict):
        raw = raw.dict()  # type: ignore[assignment]

    if not isinstance(raw, dict):
        raise TypeError("Logic sheet must be a JSON object (dict)")

    name = str(raw.get("name") or raw.get("actorId") or "")

    nodes: list[LogicNode] = []
    nodes_raw = raw.get("nodes")
    if isinstance(nodes_raw, list):
        for position, n in enumerate(nodes_raw):
            if not isinstance(n, dict):
                continue
            nid = _str_id(n.get("id"))
            if not nid:
                logger.warning("Dropped node without id", sheet=name, position=position)
                continue
            kind = _coerce_kind(n.get("type"))
            if kind is None:
                logger.warning("Dropped node with unknown type", sheet=name, node_id=nid, type=n.get("type"))
                continue
            props = n.get("properties")
            nodes.append(
                LogicNode(
                    id=nid,
                    kind=kind,
                    subtype=str(n.get("subtype") or "").strip(),
                    properties=dict(props) if isinstance(props, dict) else {},
                    inputs=_pins(n.get("inputs")),
                    outputs=_pins(n.get("outputs")),
                )
            )

    connections: list[Connection] = []
    conns_raw = raw.get("connections")
    if isinstance(conns_raw, list):
        for position, c in enumerate(conns_raw):
            if not isinstance(c, dict):
                continue
            src = _port_ref(c.get("from"), "outputId")
            dst = _port_ref(c.get("to"), "inputId")
            # Connections are defined by both ends; skip malformed ones.
            if src is None or dst is None:
                logger.warning("Dropped malformed connection", sheet=name, position=position)
                continue
            connections.append(Connection(from_port=src, to_port=dst))

    return LogicSheet(nodes=nodes, connections=connections, name=name)
