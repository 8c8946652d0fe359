"""logicruntime.core.cache

Per-tick node output storage shared by all actors.

Keys are actor-qualified (`CacheKey(actor_id, node_id, port_id)`), but storage is
a single map: `clear()` wipes every actor at once. The host owns the lifecycle
and must call `clear()` once per tick before dispatching events, otherwise
values written during an earlier tick are still returned.
"""

from __future__ import annotations

from typing import Any, Dict, NamedTuple, Optional


class CacheKey(NamedTuple):
    actor_id: str
    node_id: str
    port_id: str


class ValueCache:
    def __init__(self):
        self._values: Dict[CacheKey, Any] = {}

    def set_output(self, actor_id: str, node_id: str, port_id: str, value: Any) -> None:
        # Last write wins (a node executed twice in one tick overwrites itself).
        self._values[CacheKey(actor_id, node_id, port_id)] = value

    def get_output(self, actor_id: str, node_id: str, port_id: str) -> Any:
        """Stored value, or None when nothing was written this tick."""
        return self._values.get(CacheKey(actor_id, node_id, port_id))

    def has_output(self, actor_id: str, node_id: str, port_id: str) -> bool:
        return CacheKey(actor_id, node_id, port_id) in self._values

    def clear(self) -> None:
        self._values.clear()

    def snapshot(self, actor_id: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
        """Debug view: `{actor_id: {"node_id.port_id": value}}` (optionally one actor)."""
        out: Dict[str, Dict[str, Any]] = {}
        for key, value in self._values.items():
            if actor_id is not None and key.actor_id != actor_id:
                continue
            out.setdefault(key.actor_id, {})[f"{key.node_id}.{key.port_id}"] = value
        return out

    def __len__(self) -> int:
        return len(self._values)
