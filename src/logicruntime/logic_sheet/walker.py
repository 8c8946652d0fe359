"""Push evaluation: follow exec wires depth-first from an output port.

Fan-out is legal: every destination of an exec output runs, in connection-list
order, each subtree to completion before the next starts. Node kinds behave as:

- Action: run the side effect, then continue from its own `exec` output.
- Flow: Branch walks exactly one of `true`/`false`; Sequence walks `out1` then `out2`.
- Cast: compute and cache outputs, then continue from its own `exec` output.
- Logic: evaluated and cached when walked into, never propagates.
- Variable / Event: ignored when walked into.

Exec cycles and runaway depth raise `TraversalAborted` subclasses instead of
recursing without bound; the interpreter turns them into diagnostics.
"""

from __future__ import annotations

from ..core.cache import ValueCache
from ..core.config import InterpreterConfig
from ..logging import get_logger
from . import behaviors
from .errors import ExecCycleError, ExecDepthError
from .models import LogicNode, NodeKind
from .resolver import PortResolver
from .scope import ExecutionScope
from .templates import EXEC_OUT

logger = get_logger(__name__)


class GraphWalker:
    def __init__(self, resolver: PortResolver, cache: ValueCache, config: InterpreterConfig):
        self._resolver = resolver
        self._cache = cache
        self._config = config

    def walk_from_output(self, scope: ExecutionScope, node_id: str, exec_port_id: str) -> None:
        for dest in scope.index.destinations(node_id, exec_port_id):
            target = scope.index.node(dest.node_id)
            if target is None:
                logger.debug(
                    "Skipping exec wire to unknown node",
                    actor_id=scope.actor_id,
                    source=f"{node_id}.{exec_port_id}",
                    target=dest.node_id,
                )
                continue
            self.execute_node(scope, target)

    def execute_node(self, scope: ExecutionScope, node: LogicNode) -> None:
        if node.id in scope.exec_path:
            raise ExecCycleError(
                f"Exec cycle re-entered node '{node.id}' (path: {' -> '.join(scope.exec_path)})",
                actor_id=scope.actor_id,
                node_id=node.id,
            )
        if len(scope.exec_path) >= self._config.max_exec_depth:
            raise ExecDepthError(
                f"Exec depth exceeded {self._config.max_exec_depth} at node '{node.id}'",
                actor_id=scope.actor_id,
                node_id=node.id,
            )

        scope.exec_path.append(node.id)
        try:
            self._dispatch(scope, node)
        finally:
            scope.exec_path.pop()

    def _dispatch(self, scope: ExecutionScope, node: LogicNode) -> None:
        kind = node.kind
        if kind == NodeKind.ACTION:
            pull = self._resolver.puller(scope, node.id)
            behaviors.run_action(node, pull, scope.actor, scope.engine, self._config)
            self.walk_from_output(scope, node.id, EXEC_OUT)
        elif kind == NodeKind.FLOW:
            pull = self._resolver.puller(scope, node.id)
            for port_id in behaviors.route_flow(node, pull):
                self.walk_from_output(scope, node.id, port_id)
        elif kind == NodeKind.CAST:
            pull = self._resolver.puller(scope, node.id)
            for port_id, value in behaviors.run_cast(node, pull).items():
                self._cache.set_output(scope.actor_id, node.id, port_id, value)
            self.walk_from_output(scope, node.id, EXEC_OUT)
        elif kind == NodeKind.LOGIC:
            self._resolver.evaluate_logic(scope, node)
        elif kind == NodeKind.VARIABLE:
            logger.debug("Exec wire into variable node ignored", actor_id=scope.actor_id, node_id=node.id)
        elif kind == NodeKind.EVENT:
            logger.debug("Exec wire into event node ignored", actor_id=scope.actor_id, node_id=node.id)
        else:
            raise ValueError(f"Unhandled node kind: {kind!r}")
