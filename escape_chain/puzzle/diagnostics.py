from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict

class DiagnosticReason(Enum):
    GENERATION_STUCK = auto()
    REWARD_POOL_EXHAUSTED = auto()
    TERMINAL_GATE_MISCONFIGURED = auto()
    INVALID_SOLVE_REQUEST = auto()
    TARGET_CLAMPED = auto()

@dataclass
class Diagnostic:
    """A recoverable problem: the reason plus a snapshot of the state that caused it."""
    reason: DiagnosticReason
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def __str__(self):
        return f"[{self.reason.name}] {self.message}"
