"""Errors raised while loading or traversing logic sheets."""

from __future__ import annotations

from typing import Sequence


class DuplicateNodeIdError(ValueError):
    def __init__(self, actor_id: str, node_ids: Sequence[str]):
        self.actor_id = actor_id
        self.node_ids = list(node_ids)
        super().__init__(f"Logic sheet for '{actor_id}' has duplicate node ids: {', '.join(self.node_ids)}")


class TraversalAborted(RuntimeError):
    """A traversal hit a safety limit; the current event's walk is abandoned."""

    def __init__(self, message: str, *, actor_id: str, node_id: str):
        self.actor_id = actor_id
        self.node_id = node_id
        super().__init__(message)


class ExecCycleError(TraversalAborted):
    pass


class ExecDepthError(TraversalAborted):
    pass


class DataCycleError(TraversalAborted):
    pass


class PullDepthError(TraversalAborted):
    pass
