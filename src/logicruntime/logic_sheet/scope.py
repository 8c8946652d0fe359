"""Per-dispatch traversal state shared by the walker and the resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..core.models import ActorContext, EngineContext
from .index import GraphIndex


@dataclass
class ExecutionScope:
    """Everything one event dispatch needs, plus the active traversal stacks.

    `exec_path` holds the node ids currently being executed (push side) and
    `pulling` the Logic node ids currently being evaluated (pull side). A node
    found on its own stack means the graph is cyclic.
    """

    actor_id: str
    index: GraphIndex
    actor: ActorContext
    engine: EngineContext
    exec_path: List[str] = field(default_factory=list)
    pulling: List[str] = field(default_factory=list)
