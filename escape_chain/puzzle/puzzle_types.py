from dataclasses import dataclass, field
from typing import Any, List, Optional

from .common import PuzzleState, RewardCategory
from .requirements import Requirement

@dataclass(frozen=True)
class PuzzleDefinition:
    """Catalog entry. Immutable for the lifetime of the process."""
    id: str
    name: str
    description: str = ""
    requirement: Requirement = field(default_factory=Requirement)
    reward_category: RewardCategory = RewardCategory.NONE
    restricted: bool = False # Only eligible for the higher tiers
    signal: Optional[str] = None # Signal raised on solve (SIGNAL category only)
    behavior: Any = None # Opaque to the core, driven by the collaborator layer

    def __post_init__(self):
        if self.reward_category == RewardCategory.SIGNAL and not self.signal:
            raise ValueError(f"Puzzle '{self.id}' grants a signal but does not name one.")

    def is_terminal(self) -> bool:
        return self.reward_category == RewardCategory.VICTORY


class PuzzleInstance:
    """Per-game copy of a definition with its assigned reward and unlock state."""

    def __init__(self, definition: PuzzleDefinition,
                 assigned_reward: Optional[str] = None,
                 requirement: Optional[Requirement] = None):
        self.definition = definition
        self.requirement = requirement if requirement is not None else definition.requirement
        self.assigned_reward = assigned_reward
        self.state = PuzzleState.LOCKED
        self.progress: List[Any] = [] # Scratch space for multi-step behaviors

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def reward_category(self) -> RewardCategory:
        return self.definition.reward_category

    @property
    def behavior(self):
        return self.definition.behavior

    @property
    def is_solved(self) -> bool:
        return self.state == PuzzleState.SOLVED

    def is_terminal(self) -> bool:
        return self.definition.is_terminal()

    def hint_text(self) -> str:
        """Default hint shown by the world object for this puzzle."""
        if self.requirement.is_empty():
            return self.definition.description or self.name
        return f"{self.name} (needs {self.requirement.describe()})"

    def __repr__(self):
        reward = f" -> {self.assigned_reward}" if self.assigned_reward else ""
        return f"<PuzzleInstance {self.id} [{self.state.name}]{reward}>"
