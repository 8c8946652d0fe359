"""Pull evaluation: answer "what value feeds this input?".

Resolution order for the producer found by the reverse scan:
1. Variable/GetVariable -> live read from the actor (never cached).
2. Logic -> evaluated right now, on every pull (results may depend on actor
   state changed earlier in the same tick).
3. Anything else -> the ValueCache. Such outputs only exist once their node ran
   along some exec path this tick; before that the pull returns None.

The resolver never walks exec wires.
"""

from __future__ import annotations

from typing import Any

from ..core.cache import ValueCache
from ..core.config import InterpreterConfig
from ..logging import get_logger
from . import behaviors
from .errors import DataCycleError, PullDepthError
from .models import LogicNode, NodeKind
from .scope import ExecutionScope

logger = get_logger(__name__)

LOGIC_RESULT = "result"


class PortResolver:
    def __init__(self, cache: ValueCache, config: InterpreterConfig):
        self._cache = cache
        self._config = config

    def puller(self, scope: ExecutionScope, node_id: str) -> behaviors.Pull:
        """Bind `resolve_input` to one consumer node (the `pull` handed to behaviours)."""

        def pull(input_id: str) -> Any:
            return self.resolve_input(scope, node_id, input_id)

        return pull

    def resolve_input(self, scope: ExecutionScope, node_id: str, input_id: str) -> Any:
        source = scope.index.find_source(node_id, input_id)
        if source is None:
            return None

        source_node = scope.index.node(source.node_id)
        if source_node is not None:
            if source_node.kind == NodeKind.VARIABLE and source_node.subtype == "GetVariable":
                return behaviors.read_variable(source_node, scope.actor)
            if source_node.kind == NodeKind.LOGIC:
                return self.evaluate_logic(scope, source_node)

        return self._cache.get_output(scope.actor_id, source.node_id, source.port_id)

    def evaluate_logic(self, scope: ExecutionScope, node: LogicNode) -> Any:
        if node.id in scope.pulling:
            raise DataCycleError(
                f"Data cycle through logic node '{node.id}'",
                actor_id=scope.actor_id,
                node_id=node.id,
            )
        if len(scope.pulling) >= self._config.max_pull_depth:
            raise PullDepthError(
                f"Pull depth exceeded {self._config.max_pull_depth} at logic node '{node.id}'",
                actor_id=scope.actor_id,
                node_id=node.id,
            )

        scope.pulling.append(node.id)
        try:
            result = behaviors.evaluate_logic(node, self.puller(scope, node.id))
        finally:
            scope.pulling.pop()

        # Written for observability only; pulls from logic nodes never read it back.
        self._cache.set_output(scope.actor_id, node.id, LOGIC_RESULT, result)
        return result
