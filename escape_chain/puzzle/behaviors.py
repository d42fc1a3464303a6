from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, List, Optional, Sequence, Tuple
import logging

from .requirements import HasItemClass, HasClueClass
from .rewards import extract_payload

logger = logging.getLogger(__name__)

class InteractionOutcome(Enum):
    SOLVED = auto()
    PROGRESS = auto()       # A step of a multi-step puzzle was accepted
    NEEDS_INPUT = auto()    # The collaborator should open a code modal or minigame
    BLOCKED = auto()        # Requirement missing or wrong item selected
    ALREADY_SOLVED = auto()

# --- Base Class ---

class Behavior(ABC):
    """Per-puzzle-kind interaction logic.

    Behaviors never touch global state. Everything goes through the session passed in:
    check_requirement, solve_puzzle, show_hint, consume_item, find_held and inventory.
    """

    kind = "abstract"

    @abstractmethod
    def on_interact(self, instance, session, selected_item: Optional[str] = None) -> InteractionOutcome:
        pass

    def on_submit(self, instance, session, value: Any) -> bool:
        """Input from a modal or minigame. Most puzzles take none."""
        logger.debug(f"{instance.id} ({self.kind}) ignores submitted input {value!r}")
        return False

    # --- Shared helpers ---

    def _already_solved(self, instance, session) -> bool:
        if instance.is_solved:
            session.show_hint(f"{instance.name} is already solved.")
            return True
        return False

    def _blocked(self, instance, session) -> bool:
        """Shows the complete list of missing atoms when the requirement is unmet."""
        evaluation = session.check_requirement(instance.requirement)
        if not evaluation.satisfied:
            session.show_hint(f"{instance.name}: you need {', '.join(evaluation.missing)}.")
            return True
        return False

    def __repr__(self):
        return f"<{type(self).__name__}>"


# --- Concrete Behaviors ---

class DirectActionBehavior(Behavior):
    """Press, lift or move something. Solves on the first unblocked interaction."""

    kind = "direct"

    def __init__(self, done_text: str):
        self.done_text = done_text

    def on_interact(self, instance, session, selected_item=None):
        if self._already_solved(instance, session):
            return InteractionOutcome.ALREADY_SOLVED
        if self._blocked(instance, session):
            return InteractionOutcome.BLOCKED
        if not session.solve_puzzle(instance.id):
            return InteractionOutcome.BLOCKED
        session.show_hint(self.done_text)
        return InteractionOutcome.SOLVED


class KeyLockBehavior(Behavior):
    """Opens when the required item is selected. The item is used up."""

    kind = "key_lock"

    def __init__(self, open_text: str, consume: bool = True):
        self.open_text = open_text
        self.consume = consume

    def on_interact(self, instance, session, selected_item=None):
        if self._already_solved(instance, session):
            return InteractionOutcome.ALREADY_SOLVED
        if self._blocked(instance, session):
            return InteractionOutcome.BLOCKED

        keys = [a.prefix for a in instance.requirement if isinstance(a, HasItemClass)]
        if keys and not (selected_item and any(selected_item.startswith(k) for k in keys)):
            session.show_hint(f"Select the {keys[0]} from your inventory to use it here.")
            return InteractionOutcome.BLOCKED

        if not session.solve_puzzle(instance.id):
            return InteractionOutcome.BLOCKED
        if self.consume and selected_item:
            session.consume_item(selected_item)
        session.show_hint(self.open_text)
        return InteractionOutcome.SOLVED


class MultiStepBehavior(Behavior):
    """Ordered item steps (open the vent, then light it). Items are consumed only once all steps are done."""

    kind = "multi_step"

    def __init__(self, steps: Sequence[Tuple[str, str]], done_text: str, consumed: Sequence[str] = ()):
        if not steps:
            raise ValueError("MultiStepBehavior needs at least one step")
        self.steps = list(steps) # (item prefix, text shown when the step succeeds)
        self.done_text = done_text
        self.consumed = set(consumed)

    def on_interact(self, instance, session, selected_item=None):
        if self._already_solved(instance, session):
            return InteractionOutcome.ALREADY_SOLVED

        step_prefix, step_text = self.steps[len(instance.progress)]
        if not (selected_item and selected_item.startswith(step_prefix)):
            if session.find_held(step_prefix):
                session.show_hint(f"Select the {step_prefix} to continue.")
            else:
                session.show_hint(f"{instance.name}: you need {step_prefix}.")
            return InteractionOutcome.BLOCKED

        instance.progress.append(selected_item)
        if len(instance.progress) < len(self.steps):
            session.show_hint(step_text)
            return InteractionOutcome.PROGRESS

        if not session.solve_puzzle(instance.id):
            # Steps done but the requirement no longer holds; let the player retry the last step
            instance.progress.pop()
            return InteractionOutcome.BLOCKED
        for used in instance.progress:
            if any(used.startswith(prefix) for prefix in self.consumed):
                session.consume_item(used)
        session.show_hint(self.done_text)
        return InteractionOutcome.SOLVED


class CodeEntryBehavior(Behavior):
    """Modal code or word entry.

    The answer is either fixed, or built by concatenating the payloads of held clues
    in the order given by ``clue_classes`` (e.g. safe code + vent code).
    """

    kind = "code_entry"

    def __init__(self, prompt: str, answer: Optional[str] = None,
                 clue_classes: Sequence[str] = (), case_sensitive: bool = False):
        if answer is None and not clue_classes:
            raise ValueError("CodeEntryBehavior needs a fixed answer or clue classes to derive one")
        self.prompt = prompt
        self.answer = answer
        self.clue_classes = list(clue_classes)
        self.case_sensitive = case_sensitive

    def expected_answer(self, session) -> Optional[str]:
        if self.answer is not None:
            return self.answer
        parts: List[str] = []
        for clue_class in self.clue_classes:
            payload = extract_payload(session.find_held(clue_class))
            if payload is None:
                logger.warning(f"Could not read a code from clue class {clue_class}")
                return None
            parts.append(payload)
        return "".join(parts)

    def _normalize(self, value: Any) -> str:
        text = str(value).strip()
        return text if self.case_sensitive else text.lower()

    def on_interact(self, instance, session, selected_item=None):
        if self._already_solved(instance, session):
            return InteractionOutcome.ALREADY_SOLVED
        if self._blocked(instance, session):
            return InteractionOutcome.BLOCKED
        session.show_hint(self.prompt)
        return InteractionOutcome.NEEDS_INPUT

    def on_submit(self, instance, session, value):
        if instance.is_solved or self._blocked(instance, session):
            return False
        expected = self.expected_answer(session)
        if expected is None:
            session.show_hint("The clue is unreadable.")
            return False
        if self._normalize(value) != self._normalize(expected):
            session.show_hint("Incorrect code.")
            return False
        if not session.solve_puzzle(instance.id):
            return False
        session.show_hint("Correct!")
        return True


class SequenceBehavior(Behavior):
    """Ordered presses (coloured buttons, book order). A wrong press resets the attempt."""

    kind = "sequence"

    def __init__(self, sequence: Sequence[str], done_text: str):
        if not sequence:
            raise ValueError("SequenceBehavior needs a non-empty sequence")
        self.sequence = [s.lower() for s in sequence]
        self.done_text = done_text

    def on_interact(self, instance, session, selected_item=None):
        if self._already_solved(instance, session):
            return InteractionOutcome.ALREADY_SOLVED
        if self._blocked(instance, session):
            return InteractionOutcome.BLOCKED
        return InteractionOutcome.NEEDS_INPUT

    def on_submit(self, instance, session, value):
        """Submits a single press. Returns True when the press was the expected one."""
        if instance.is_solved or self._blocked(instance, session):
            return False
        expected = self.sequence[len(instance.progress)]
        if str(value).strip().lower() != expected:
            instance.progress.clear()
            session.show_hint("Wrong sequence. Try again.")
            return False

        instance.progress.append(expected)
        if len(instance.progress) < len(self.sequence):
            session.show_hint(f"Correct ({len(instance.progress)}/{len(self.sequence)}). Next...")
            return True
        if not session.solve_puzzle(instance.id):
            instance.progress.clear()
            return False
        session.show_hint(self.done_text)
        return True


class MinigameBehavior(Behavior):
    """Hands off to an external minigame and solves on its success signal."""

    kind = "minigame"

    def __init__(self, minigame_id: str, success_text: str):
        self.minigame_id = minigame_id
        self.success_text = success_text

    def on_interact(self, instance, session, selected_item=None):
        if self._already_solved(instance, session):
            return InteractionOutcome.ALREADY_SOLVED
        if self._blocked(instance, session):
            return InteractionOutcome.BLOCKED
        logger.info(f"Triggering minigame: {self.minigame_id}")
        return InteractionOutcome.NEEDS_INPUT

    def on_submit(self, instance, session, value):
        if not value:
            logger.info(f"Minigame {self.minigame_id} reported failure for {instance.id}")
            return False
        if not session.solve_puzzle(instance.id):
            return False
        session.show_hint(self.success_text)
        return True


class ExitDoorBehavior(Behavior):
    """The Terminal Gate. Item requirements need the item selected; clue requirements only need it held."""

    kind = "exit_door"

    def on_interact(self, instance, session, selected_item=None):
        if self._already_solved(instance, session):
            return InteractionOutcome.ALREADY_SOLVED
        if self._blocked(instance, session):
            return InteractionOutcome.BLOCKED

        used: List[str] = []
        for atom in instance.requirement:
            if isinstance(atom, HasItemClass):
                if not (selected_item and selected_item.startswith(atom.prefix)):
                    session.show_hint(f"Select the {atom.prefix} to use it on the door.")
                    return InteractionOutcome.BLOCKED
                used.append(selected_item)
            elif isinstance(atom, HasClueClass):
                used.append(session.find_held(atom.prefix))

        if not session.solve_puzzle(instance.id):
            return InteractionOutcome.BLOCKED
        for held in used:
            if held:
                session.consume_item(held)
        session.show_hint("The exit door is unlocked!")
        return InteractionOutcome.SOLVED
