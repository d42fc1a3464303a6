# Make 'escape_chain' a package
# Expose key classes for shorter imports
from .puzzle import (DifficultyTier, PuzzleState, RewardCategory, Requirement, PuzzleDefinition,
                     PuzzleInstance, ChainGenerator, ChainVerifier, Diagnostic, DiagnosticReason,
                     RewardPool, PUZZLE_CATALOG)
from .core import GameSession, InMemoryInventory, GameEvents, World, Inventory, configure_logging

__version__ = "0.1.0"
