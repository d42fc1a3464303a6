from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Set, Union
import logging

from .common import ITEM_PREFIX, CLUE_PREFIX

logger = logging.getLogger(__name__)

# --- Atoms ---

@dataclass(frozen=True, order=True)
class HasItemClass:
    prefix: str

    def is_met(self, state) -> bool:
        return state.has_class(self.prefix)

    def __str__(self):
        return self.prefix

@dataclass(frozen=True, order=True)
class HasClueClass:
    prefix: str

    def is_met(self, state) -> bool:
        return state.has_class(self.prefix)

    def __str__(self):
        return self.prefix

@dataclass(frozen=True, order=True)
class SignalSet:
    name: str

    def is_met(self, state) -> bool:
        return state.has_signal(self.name)

    def __str__(self):
        return self.name

Atom = Union[HasItemClass, HasClueClass, SignalSet]


def reward_class(reward_id: str) -> str:
    """Strips instance detail from a concrete id: 'Clue_Codigo_Safe (123)' -> 'Clue_Codigo_Safe'."""
    return reward_id.strip().split(" ")[0]


def atom_from_string(token: str) -> Atom:
    """Maps the string notation used in the catalog to an atom."""
    name = reward_class(token)
    if name.startswith(ITEM_PREFIX):
        return HasItemClass(name)
    if name.startswith(CLUE_PREFIX):
        return HasClueClass(name)
    return SignalSet(name)


class Requirement:
    """An implicit AND over zero or more atoms. Empty means always satisfied."""

    def __init__(self, atoms: Iterable[Atom] = ()):
        self.atoms: FrozenSet[Atom] = frozenset(atoms)

    @classmethod
    def parse(cls, value: Union[None, str, Iterable[str]]) -> "Requirement":
        """Builds a requirement from None, a single token or a list of tokens."""
        if value is None:
            return cls()
        if isinstance(value, str):
            value = [value]
        return cls(atom_from_string(token) for token in value)

    def is_empty(self) -> bool:
        return not self.atoms

    def __iter__(self):
        return iter(self.atoms)

    def __len__(self):
        return len(self.atoms)

    def __eq__(self, other):
        return isinstance(other, Requirement) and self.atoms == other.atoms

    def __hash__(self):
        return hash(self.atoms)

    def __repr__(self):
        return f"Requirement({sorted(str(a) for a in self.atoms)})"

    def describe(self) -> str:
        if not self.atoms:
            return "nothing"
        return ", ".join(sorted(str(a) for a in self.atoms))


# --- Evaluation states ---

class SimulationState:
    """Hypothetical inventory/signal set accumulated during chain generation."""

    def __init__(self):
        self.classes: Set[str] = set()
        self.signals: Set[str] = set()

    def add_reward(self, reward_id: str):
        self.classes.add(reward_class(reward_id))

    def set_signal(self, name: str):
        self.signals.add(name)

    def has_class(self, prefix: str) -> bool:
        return any(held.startswith(prefix) for held in self.classes)

    def has_signal(self, name: str) -> bool:
        return name in self.signals

    def snapshot(self) -> List[str]:
        return sorted(self.classes) + sorted(self.signals)


class LiveState:
    """Live view over the inventory collaborator plus the session's signals."""

    def __init__(self, inventory, signals: Optional[Set[str]] = None):
        self.inventory = inventory
        self.signals: Set[str] = signals if signals is not None else set()

    def set_signal(self, name: str):
        # Signals are one-way for the lifetime of a game
        self.signals.add(name)

    def has_class(self, prefix: str) -> bool:
        return self.inventory.has_class(prefix)

    def has_signal(self, name: str) -> bool:
        return name in self.signals


# --- Resolver ---

@dataclass
class Evaluation:
    satisfied: bool
    missing_atoms: List[Atom] = field(default_factory=list)

    @property
    def missing(self) -> List[str]:
        return [str(atom) for atom in self.missing_atoms]


class RequirementResolver:
    """Evaluates requirements against a live or simulated state. Stateless."""

    @staticmethod
    def evaluate(requirement: Optional[Requirement], state) -> Evaluation:
        if requirement is None or requirement.is_empty():
            return Evaluation(True, [])
        # Every atom is checked so hint text can list all of them
        missing = sorted((atom for atom in requirement if not atom.is_met(state)),
                         key=lambda atom: (type(atom).__name__, str(atom)))
        return Evaluation(not missing, missing)
