"""logicruntime.core.config

Interpreter configuration (traversal limits and behaviour defaults).

`InterpreterConfig` centralizes the constants that the node behaviours fall back
to when neither a wired input nor a node property supplies a value, plus the
safety limits applied to exec and data traversal.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict

DEFAULT_DELTA_TIME = 0.016

# Each exec hop or pull level costs several Python frames; limits above this
# would hit the interpreter recursion limit before the traversal guards fire.
MAX_TRAVERSAL_DEPTH = 256


@dataclass(frozen=True)
class InterpreterConfig:
    """Configuration for a `LogicInterpreter`.

    Attributes:
        default_delta_time: Frame time used by Move when the engine context has none (or 0).
        max_exec_depth: Maximum number of nested exec hops in one traversal.
        max_pull_depth: Maximum number of nested pure-node evaluations in one pull.
        strict_node_ids: Reject logic sheets with duplicate node ids instead of shadowing.
        default_volume: PlaySound volume when the node does not set one.
        reset_x: ResetPosition x fallback when neither the node nor the actor has one.
        reset_y: ResetPosition y fallback when neither the node nor the actor has one.
        default_speed: Speed restored by ResetPosition(resetSpeed) without `defaultSpeed`.

    Example:
        >>> config = InterpreterConfig(max_exec_depth=32)
        >>> config.with_overrides(strict_node_ids=False).max_exec_depth
        32
    """

    # Frame timing
    default_delta_time: float = DEFAULT_DELTA_TIME

    # Traversal limits
    max_exec_depth: int = 64
    max_pull_depth: int = 64

    # Loader policy
    strict_node_ids: bool = True

    # Behaviour defaults
    default_volume: float = 0.5
    reset_x: float = 540
    reset_y: float = 960
    default_speed: float = 600

    def __post_init__(self) -> None:
        for name in ("max_exec_depth", "max_pull_depth"):
            value = int(getattr(self, name))
            if not 1 <= value <= MAX_TRAVERSAL_DEPTH:
                raise ValueError(f"{name} must be between 1 and {MAX_TRAVERSAL_DEPTH}")

    def with_overrides(self, **changes: Any) -> "InterpreterConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
