"""Structural checks for logic sheets (editor/loader tooling; never raises).

Errors are defects the interpreter refuses or cannot interpret deterministically
(duplicate node ids). Warnings are tolerated at runtime but probably unintended:
dangling connections, unknown subtypes, exec/data pin mismatches, and data
inputs with more than one producer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .models import LogicSheet, PortRef
from .templates import get_template, port_spec


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0


def validate_logic_sheet(sheet: LogicSheet) -> ValidationResult:
    result = ValidationResult()

    nodes = {}
    for node in sheet.nodes:
        if node.id in nodes:
            result.errors.append(f"Duplicate node id '{node.id}'")
        nodes[node.id] = node
        if get_template(node.kind, node.subtype) is None:
            result.warnings.append(f"Node '{node.id}' has unknown subtype '{node.subtype}' for kind '{node.kind.value}'")

    # Producers per data input, in the order the resolver's reverse scan meets them.
    outgoing: Dict[PortRef, List[PortRef]] = {}
    for conn in sheet.connections:
        outgoing.setdefault(conn.from_port, []).append(conn.to_port)
    producers: Dict[PortRef, List[PortRef]] = {}
    for source, targets in outgoing.items():
        for dest in targets:
            producers.setdefault(dest, []).append(source)

    for conn in sheet.connections:
        src, dst = conn.from_port, conn.to_port
        src_node = nodes.get(src.node_id)
        dst_node = nodes.get(dst.node_id)
        if src_node is None:
            result.warnings.append(f"Connection {src} -> {dst} starts at unknown node '{src.node_id}'")
        if dst_node is None:
            result.warnings.append(f"Connection {src} -> {dst} ends at unknown node '{dst.node_id}'")
        if src_node is None or dst_node is None:
            continue
        src_pin = port_spec(src_node, src.port_id, output=True)
        dst_pin = port_spec(dst_node, dst.port_id, output=False)
        if src_pin is None or dst_pin is None:
            continue
        if src_pin.is_exec != dst_pin.is_exec:
            result.warnings.append(f"Connection {src} -> {dst} mixes exec and data pins")

    for dest, sources in producers.items():
        dest_node = nodes.get(dest.node_id)
        dest_pin = port_spec(dest_node, dest.port_id, output=False) if dest_node is not None else None
        if dest_pin is not None and dest_pin.is_exec:
            # Exec fan-in is legal.
            continue
        if len(sources) > 1:
            names = ", ".join(str(s) for s in sources)
            result.warnings.append(f"Input {dest} has {len(sources)} producers ({names}); '{sources[0]}' wins")

    return result
