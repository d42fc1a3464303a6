# Make 'core' a package
from .collaborators import Inventory, World, GameEvents, InMemoryInventory, Position
from .reward_granting import RewardGranter
from .game_state import GameSession
from .logging_config import configure_logging
