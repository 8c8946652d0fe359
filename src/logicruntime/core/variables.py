"""logicruntime.core.variables

Per-actor variable definitions (`<actor>.variables.json`).

A definitions document looks like:

    {"variables": {"speed": {"type": "number", "default": 600, "min": 0, "max": 1200}}}

The registry seeds fresh variable stores for actor instances and clamps numeric
writes to their declared range. It does not own runtime values: those live on
each `ActorContext`.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional

from ..logging import get_logger

logger = get_logger(__name__)

VariableDefinitions = Dict[str, Dict[str, Any]]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def constrain_value(definition: Optional[Dict[str, Any]], value: Any) -> Any:
    """Clamp a numeric value to a definition's min/max (other types pass through)."""
    if not isinstance(definition, dict) or definition.get("type") != "number":
        return value
    if not _is_number(value):
        return value
    lo = definition.get("min")
    hi = definition.get("max")
    if _is_number(lo):
        value = max(lo, value)
    if _is_number(hi):
        value = min(hi, value)
    return value


class VariableRegistry:
    def __init__(self):
        self._definitions: Dict[str, VariableDefinitions] = {}

    def load_definitions(self, actor_id: str, data: Any) -> VariableDefinitions:
        """Replace the definitions for `actor_id` from a parsed variables document."""
        raw = data.get("variables") if isinstance(data, dict) else None
        definitions: VariableDefinitions = {}
        if isinstance(raw, dict):
            for name, definition in raw.items():
                if not isinstance(name, str) or not name:
                    continue
                if not isinstance(definition, dict):
                    logger.warning("Ignoring malformed variable definition", actor_id=actor_id, variable=name)
                    continue
                definitions[name] = dict(definition)
        self._definitions[actor_id] = definitions
        logger.debug("Loaded variable definitions", actor_id=actor_id, count=len(definitions))
        return definitions

    def create_instance(self, actor_id: str) -> Dict[str, Any]:
        """Fresh variable store for one actor instance, filled with declared defaults."""
        definitions = self._definitions.get(actor_id)
        if definitions is None:
            logger.warning("No variable definitions for actor", actor_id=actor_id)
            return {}
        # Defaults may be lists/dicts; instances must not share them.
        return {name: copy.deepcopy(d.get("default")) for name, d in definitions.items()}

    def get_definition(self, actor_id: str, name: str) -> Optional[Dict[str, Any]]:
        return self._definitions.get(actor_id, {}).get(name)

    def all_definitions(self, actor_id: str) -> VariableDefinitions:
        return dict(self._definitions.get(actor_id, {}))

    def constrain(self, actor_id: str, name: str, value: Any) -> Any:
        return constrain_value(self.get_definition(actor_id, name), value)

    def serialize(self, actor_id: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """Save-game snapshot of one actor's variables.

        Declared variables missing from `variables` are written with their
        default so a restore always yields a complete store.
        """
        snapshot = {name: copy.deepcopy(d.get("default")) for name, d in self._definitions.get(actor_id, {}).items()}
        snapshot.update(copy.deepcopy(variables))
        return snapshot

    def deserialize(self, actor_id: str, data: Any, variables: Dict[str, Any]) -> Dict[str, Any]:
        """Restore a snapshot into `variables`, clamping each value to its declared range."""
        if not isinstance(data, dict):
            raise TypeError("Variable snapshot must be a dict")
        for name, value in data.items():
            variables[name] = self.constrain(actor_id, name, copy.deepcopy(value))
        return variables
