# Make 'puzzle' a package
# Expose key classes for shorter imports
from .common import RewardCategory, PuzzleState, DifficultyTier
from .requirements import (HasItemClass, HasClueClass, SignalSet, Requirement,
                           RequirementResolver, SimulationState, LiveState, Evaluation)
from .puzzle_types import PuzzleDefinition, PuzzleInstance
from .diagnostics import Diagnostic, DiagnosticReason
from .rewards import RewardPool
from .catalog import PUZZLE_CATALOG, get_puzzle_definition, get_terminal_gate
from .generator import ChainGenerator, GenerationResult, filter_catalog
from .verifier import ChainVerifier
