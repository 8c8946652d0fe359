"""Lookup structures built once per loaded logic sheet.

- `nodes`: node id -> LogicNode
- `outgoing`: source PortRef -> ordered destination PortRefs (connection-list order)

Both are plain dicts, so iteration order is insertion order. The reverse lookup
(`find_source`) is a linear scan over `outgoing`; with several producers wired
into one input, the first match of that scan wins: source ports in the order they
were first recorded, then destinations in list order.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from ..logging import get_logger
from .errors import DuplicateNodeIdError
from .models import LogicNode, LogicSheet, NodeKind, PortRef

logger = get_logger(__name__)


class GraphIndex:
    def __init__(self, actor_id: str, sheet: LogicSheet, nodes: Dict[str, LogicNode], outgoing: Dict[PortRef, List[PortRef]]):
        self.actor_id = actor_id
        self.sheet = sheet
        self.nodes = nodes
        self.outgoing = outgoing

    @classmethod
    def build(cls, actor_id: str, sheet: LogicSheet, *, strict_node_ids: bool = True) -> "GraphIndex":
        nodes: Dict[str, LogicNode] = {}
        duplicates: list[str] = []
        for node in sheet.nodes:
            if node.id in nodes and node.id not in duplicates:
                duplicates.append(node.id)
            nodes[node.id] = node

        if duplicates:
            if strict_node_ids:
                raise DuplicateNodeIdError(actor_id, duplicates)
            logger.warning("Duplicate node ids shadowed by later nodes", actor_id=actor_id, node_ids=duplicates)

        outgoing: Dict[PortRef, List[PortRef]] = {}
        for conn in sheet.connections:
            outgoing.setdefault(conn.from_port, []).append(conn.to_port)

        return cls(actor_id, sheet, nodes, outgoing)

    def node(self, node_id: str) -> Optional[LogicNode]:
        return self.nodes.get(node_id)

    def destinations(self, node_id: str, port_id: str) -> List[PortRef]:
        return self.outgoing.get(PortRef(node_id, port_id), [])

    def find_source(self, node_id: str, input_id: str) -> Optional[PortRef]:
        """Reverse lookup: which output feeds `(node_id, input_id)`? O(E) per call."""
        target = PortRef(node_id, input_id)
        for source, targets in self.outgoing.items():
            for dest in targets:
                if dest == target:
                    return source
        return None

    def event_nodes(self, subtype: str) -> List[LogicNode]:
        """Event nodes of `subtype` in sheet order (shadowed duplicates included)."""
        return [n for n in self.sheet.nodes if n.kind == NodeKind.EVENT and n.subtype == subtype]

    def __repr__(self) -> str:
        return f"GraphIndex(actor_id={self.actor_id!r}, nodes={len(self.nodes)}, sources={len(self.outgoing)})"
