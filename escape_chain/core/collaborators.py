from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

Position = Tuple[float, float, float]

# --- Abstract Collaborators ---

class Inventory(ABC):
    """Player inventory. Owned outside the core; the core writes only through grants and consumption."""

    @abstractmethod
    def has_class(self, prefix: str) -> bool:
        pass

    @abstractmethod
    def add_clue(self, clue_id: str) -> bool:
        pass

    @abstractmethod
    def remove_item(self, item_id: str) -> bool:
        pass

    @abstractmethod
    def list(self) -> List[str]:
        pass


class World(ABC):
    """Scene layer: pickups and static puzzle objects."""

    @abstractmethod
    def spawn_pickup(self, reward_id: str, position: Position) -> Any:
        pass

    @abstractmethod
    def configure_static_puzzle_object(self, instance_id: str, requirement, hint_text: str) -> None:
        pass


class GameEvents(ABC):
    """UI/Audio sink. Purely for display, never queried for decisions."""

    @abstractmethod
    def on_hint_changed(self, text: str) -> None:
        pass

    @abstractmethod
    def on_puzzle_solved(self, instance_id: str, count: int, total: int) -> None:
        pass

    @abstractmethod
    def on_generation_diagnostic(self, message: str) -> None:
        pass

    @abstractmethod
    def on_game_completed(self) -> None:
        pass


# --- Concrete Implementations ---

class InMemoryInventory(Inventory):
    """Reference inventory: ordered ids, no duplicates, optional selection."""

    def __init__(self, items: Optional[List[str]] = None):
        self._items: List[str] = []
        self.selected_item: Optional[str] = None
        for item in items or []:
            self.add_item(item)

    def add_item(self, item_id: str) -> bool:
        if not item_id:
            logger.warning("add_item called with an empty id")
            return False
        if item_id in self._items:
            logger.warning(f"Attempted to add duplicate item: {item_id}")
            return False
        self._items.append(item_id)
        logger.info(f"Item added to inventory: {item_id}")
        return True

    def add_clue(self, clue_id: str) -> bool:
        # Clues are stored alongside items
        return self.add_item(clue_id)

    def remove_item(self, item_id: str) -> bool:
        if item_id not in self._items:
            logger.warning(f"Attempted to remove item not in inventory: {item_id}")
            return False
        self._items.remove(item_id)
        if self.selected_item == item_id:
            self.selected_item = None
        logger.info(f"Removed from inventory: {item_id}")
        return True

    def has_class(self, prefix: str) -> bool:
        return any(item.startswith(prefix) for item in self._items)

    def list(self) -> List[str]:
        return list(self._items)

    def select(self, item_id: Optional[str]) -> bool:
        if item_id is not None and item_id not in self._items:
            return False
        self.selected_item = item_id
        return True

    def clear(self):
        self._items = []
        self.selected_item = None
        logger.info("Inventory cleared.")
