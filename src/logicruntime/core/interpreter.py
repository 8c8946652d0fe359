"""logicruntime.core.interpreter

Host-facing entry points for running logic sheets.

Key semantics:
- `load_graph()` replaces an actor's logic sheet wholesale (no merging).
- `on_tick()` / `on_collision()` / `on_out_of_bounds()` (plus `on_start()` and
  `on_touch()`) fire every matching event node of the actor's sheet, in node
  order, each one walked to completion before the next.
- `clear_tick()` wipes the shared value cache. The host calls it once per tick,
  before dispatching any event; the interpreter never clears it on its own.

Execution is synchronous and single-threaded: an entry point returns only after
every walked node and every nested pull has finished.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Union

from ..logging import get_logger
from ..logic_sheet.errors import TraversalAborted
from ..logic_sheet.index import GraphIndex
from ..logic_sheet.models import LogicNode, LogicSheet, load_logic_sheet_json
from ..logic_sheet.resolver import PortResolver
from ..logic_sheet.scope import ExecutionScope
from ..logic_sheet.templates import EXEC_OUT, node_property
from ..logic_sheet.walker import GraphWalker
from .cache import ValueCache
from .config import InterpreterConfig
from .models import ActorContext, EngineContext

logger = get_logger(__name__)

EventFilter = Callable[[LogicNode], bool]


class LogicInterpreter:
    """Per-actor logic-sheet interpreter."""

    def __init__(self, *, config: Optional[InterpreterConfig] = None, cache: Optional[ValueCache] = None):
        self._config: InterpreterConfig = config or InterpreterConfig()
        self._cache: ValueCache = cache if cache is not None else ValueCache()
        self._graphs: Dict[str, GraphIndex] = {}
        self._resolver = PortResolver(self._cache, self._config)
        self._walker = GraphWalker(self._resolver, self._cache, self._config)

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------

    @property
    def config(self) -> InterpreterConfig:
        return self._config

    @property
    def cache(self) -> ValueCache:
        """The shared per-tick value cache."""
        return self._cache

    def load_graph(self, actor_id: str, document: Union[LogicSheet, Dict[str, Any], str, Any]) -> GraphIndex:
        """Load (or replace) the logic sheet for `actor_id`.

        Cached values of a previous sheet are not invalidated; call
        `clear_tick()` if they must not leak into the next dispatch.
        On a rejected document the previously loaded sheet stays active.
        """
        sheet = document if isinstance(document, LogicSheet) else load_logic_sheet_json(document)
        index = GraphIndex.build(actor_id, sheet, strict_node_ids=self._config.strict_node_ids)
        self._graphs[actor_id] = index
        logger.info(
            "Loaded logic sheet",
            actor_id=actor_id,
            nodes=len(sheet.nodes),
            connections=len(sheet.connections),
        )
        return index

    def unload_graph(self, actor_id: str) -> bool:
        return self._graphs.pop(actor_id, None) is not None

    def has_graph(self, actor_id: str) -> bool:
        return actor_id in self._graphs

    def get_graph(self, actor_id: str) -> Optional[GraphIndex]:
        return self._graphs.get(actor_id)

    def clear_tick(self) -> None:
        self._cache.clear()

    def on_tick(
        self,
        actor_id: str,
        actor: ActorContext,
        delta_time: float,
        engine: Optional[EngineContext] = None,
    ) -> int:
        """Fire `OnUpdate` events; their `deltaTime` output is seeded with `delta_time`."""
        if engine is None:
            engine = EngineContext(delta_time=delta_time)
        return self._dispatch(actor_id, actor, engine, "OnUpdate", outputs={"deltaTime": delta_time})

    def on_collision(
        self,
        actor_id: str,
        actor: ActorContext,
        other: Any,
        tag: str,
        engine: Optional[EngineContext] = None,
    ) -> int:
        """Fire `OnCollision` events whose `targetTag` (if any) equals `tag`."""

        def matches(node: LogicNode) -> bool:
            target_tag = node_property(node, "targetTag")
            return not target_tag or target_tag == tag

        # `collider` is the runtime pin name, `other` the editor palette's.
        return self._dispatch(
            actor_id,
            actor,
            engine,
            "OnCollision",
            outputs={"collider": other, "other": other},
            matches=matches,
        )

    def on_out_of_bounds(
        self,
        actor_id: str,
        actor: ActorContext,
        edge: str,
        engine: Optional[EngineContext] = None,
    ) -> int:
        """Fire `OnOutOfBounds` events whose `edge` (if any) equals `edge`."""

        def matches(node: LogicNode) -> bool:
            target_edge = node_property(node, "edge")
            return not target_edge or target_edge == edge

        return self._dispatch(actor_id, actor, engine, "OnOutOfBounds", outputs={"edge": edge}, matches=matches)

    def on_start(self, actor_id: str, actor: ActorContext, engine: Optional[EngineContext] = None) -> int:
        return self._dispatch(actor_id, actor, engine, "OnStart", outputs={})

    def on_touch(
        self,
        actor_id: str,
        actor: ActorContext,
        x: float,
        y: float,
        engine: Optional[EngineContext] = None,
    ) -> int:
        return self._dispatch(actor_id, actor, engine, "OnTouch", outputs={"touchX": x, "touchY": y})

    # ---------------------------------------------------------------------
    # Internal
    # ---------------------------------------------------------------------

    def _dispatch(
        self,
        actor_id: str,
        actor: ActorContext,
        engine: Optional[EngineContext],
        subtype: str,
        *,
        outputs: Dict[str, Any],
        matches: Optional[EventFilter] = None,
    ) -> int:
        """Run every matching event node; returns how many fired."""
        index = self._graphs.get(actor_id)
        if index is None:
            logger.debug("No logic sheet loaded", actor_id=actor_id, event=subtype)
            return 0
        if engine is None:
            engine = EngineContext()

        fired = 0
        for node in index.event_nodes(subtype):
            if matches is not None and not matches(node):
                continue

            for port_id, value in outputs.items():
                self._cache.set_output(actor_id, node.id, port_id, value)

            scope = ExecutionScope(actor_id=actor_id, index=index, actor=actor, engine=engine)
            fired += 1
            try:
                self._walker.walk_from_output(scope, node.id, EXEC_OUT)
            except TraversalAborted as e:
                logger.error(
                    "Logic traversal aborted",
                    actor_id=actor_id,
                    event=subtype,
                    event_node=node.id,
                    node_id=e.node_id,
                    error=str(e),
                )
            except RecursionError as e:
                # Exec and pull depth combined can still outgrow the Python stack.
                logger.error(
                    "Logic traversal aborted",
                    actor_id=actor_id,
                    event=subtype,
                    event_node=node.id,
                    node_id=None,
                    error=str(e),
                )
        return fired
