"""Logic-sheet graph support: document models, indices and the two traversals."""

from .errors import (
    DataCycleError,
    DuplicateNodeIdError,
    ExecCycleError,
    ExecDepthError,
    PullDepthError,
    TraversalAborted,
)
from .index import GraphIndex
from .models import Connection, LogicNode, LogicSheet, NodeKind, PortRef, load_logic_sheet_json
from .templates import NODE_TEMPLATES, NodeTemplate, PinSpec, get_template, node_property, port_spec
from .validation import ValidationResult, validate_logic_sheet

__all__ = [
    "LogicSheet",
    "LogicNode",
    "Connection",
    "NodeKind",
    "PortRef",
    "load_logic_sheet_json",
    "GraphIndex",
    "NODE_TEMPLATES",
    "NodeTemplate",
    "PinSpec",
    "get_template",
    "node_property",
    "port_spec",
    "ValidationResult",
    "validate_logic_sheet",
    "DuplicateNodeIdError",
    "TraversalAborted",
    "ExecCycleError",
    "ExecDepthError",
    "DataCycleError",
    "PullDepthError",
]
