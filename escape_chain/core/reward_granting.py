from typing import Any, Optional
import logging

from ..puzzle.common import RewardCategory
from ..puzzle.puzzle_types import PuzzleInstance
from ..puzzle.requirements import reward_class
from ..puzzle.rewards import reward_category
from .collaborators import Position

logger = logging.getLogger(__name__)

class RewardGranter:
    """Materializes an instance's assigned reward: items become world pickups, clues go straight to the inventory."""

    PICKUP_OFFSET: Position = (0.0, 0.2, 0.0)
    DEFAULT_PICKUP_POSITION: Position = (0.0, 0.5, 0.0)

    def __init__(self, inventory, world, events=None):
        self.inventory = inventory
        self.world = world
        self.events = events

    def grant(self, instance: PuzzleInstance, position: Optional[Position] = None) -> Any:
        """Returns the pickup handle for items, True/False for clues, None when nothing was granted."""
        reward = instance.assigned_reward
        if not reward:
            logger.warning(f"Cannot grant reward: no assigned reward for puzzle {instance.id}")
            return None

        logger.info(f"Granting reward for {instance.id}: {reward}")
        category = reward_category(reward)
        if category == RewardCategory.ITEM:
            spawn_at = self._spawn_position(position)
            handle = self.world.spawn_pickup(reward, spawn_at)
            self._hint(f"You found {reward_class(reward)}! Look around to pick it up.")
            return handle
        if category == RewardCategory.CLUE:
            added = self.inventory.add_clue(reward)
            if added:
                self._hint(f"Clue added to inventory: {reward_class(reward)}")
            return added

        logger.warning(f"Unknown reward type assigned to {instance.id}: {reward}")
        return None

    def _spawn_position(self, position: Optional[Position]) -> Position:
        if position is None:
            return self.DEFAULT_PICKUP_POSITION
        return tuple(p + o for p, o in zip(position, self.PICKUP_OFFSET))

    def _hint(self, text: str):
        if self.events is not None:
            self.events.on_hint_changed(text)
