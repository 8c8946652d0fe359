"""logicruntime.core.models

Host-facing state objects handed to every entry point.

- `ActorContext`: the actor a logic sheet runs for (position, variables, tag).
- `EngineContext`: per-call engine services (frame time and side-effect sinks).

Only Action nodes mutate these objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from .variables import VariableDefinitions, VariableRegistry, constrain_value


class AudioSink(Protocol):
    def play_effect(self, sound_id: Any, volume: float) -> Any: ...


@dataclass
class ActorContext:
    """Mutable runtime state of one actor instance.

    `tag` is the type tag checked by the IsPlayer/IsBall/IsEnemy casts; when
    omitted it defaults to the lower-cased `actor_id`. `start_x`/`start_y` are
    the spawn position restored by ResetPosition (None = unknown).
    """

    actor_id: str
    x: float = 0.0
    y: float = 0.0
    variables: Dict[str, Any] = field(default_factory=dict)
    tag: Optional[str] = None
    start_x: Optional[float] = None
    start_y: Optional[float] = None
    definitions: VariableDefinitions = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.tag is None:
            self.tag = str(self.actor_id or "").lower()

    @classmethod
    def spawn(
        cls,
        actor_id: str,
        x: float = 0.0,
        y: float = 0.0,
        *,
        registry: Optional[VariableRegistry] = None,
        tag: Optional[str] = None,
    ) -> "ActorContext":
        """Create an actor at its start position with variables seeded from `registry`."""
        variables: Dict[str, Any] = {}
        definitions: VariableDefinitions = {}
        if registry is not None:
            variables = registry.create_instance(actor_id)
            definitions = registry.all_definitions(actor_id)
        return cls(
            actor_id=actor_id,
            x=x,
            y=y,
            variables=variables,
            tag=tag,
            start_x=x,
            start_y=y,
            definitions=definitions,
        )

    def get_variable(self, name: Any, default: Any = None) -> Any:
        value = self.variables.get(name)
        return default if value is None else value

    def set_variable(self, name: Any, value: Any) -> Any:
        """Write a variable, clamped to its declared range when one is known."""
        value = constrain_value(self.definitions.get(name), value)
        self.variables[name] = value
        return value


@dataclass
class EngineContext:
    """Engine services for one entry-point call.

    `delta_time` is the frame time seen by Move; `audio` receives PlaySound;
    `game_state` is the dict AddScore increments.
    """

    delta_time: Optional[float] = None
    audio: Optional[AudioSink] = None
    game_state: Optional[Dict[str, Any]] = None
