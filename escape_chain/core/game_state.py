from typing import Any, Dict, Iterable, List, Optional, Union
import logging

from ..puzzle.common import DifficultyTier, PuzzleState, RewardCategory
from ..puzzle.catalog import PUZZLE_CATALOG
from ..puzzle.diagnostics import Diagnostic, DiagnosticReason
from ..puzzle.generator import ChainGenerator, filter_catalog
from ..puzzle.puzzle_types import PuzzleDefinition, PuzzleInstance
from ..puzzle.requirements import Evaluation, LiveState, Requirement, RequirementResolver
from ..puzzle.rewards import RewardPool
from ..puzzle.verifier import ChainVerifier
from ..puzzle.behaviors import InteractionOutcome
from .collaborators import GameEvents, Inventory, Position, World
from .reward_granting import RewardGranter

logger = logging.getLogger(__name__)

class GameSession:
    """Active puzzle chain for one game and the runtime state machine driving it.

    Every collaborator is injected. Processing is single threaded: one interaction runs
    refresh -> solve -> grant to completion before the next one is handled.
    """

    def __init__(self, inventory: Inventory, world: World, events: GameEvents,
                 generator: Optional[ChainGenerator] = None,
                 catalog: Optional[Iterable[PuzzleDefinition]] = None,
                 verify_chains: bool = True):
        self.inventory = inventory
        self.world = world
        self.events = events
        self.generator = generator if generator is not None else ChainGenerator()
        self.catalog: List[PuzzleDefinition] = list(catalog if catalog is not None else PUZZLE_CATALOG)
        self.verify_chains = verify_chains
        self.granter = RewardGranter(inventory, world, events)

        self.tier: Optional[DifficultyTier] = None
        self.live_state = LiveState(inventory)
        self.instances: List[PuzzleInstance] = []
        self._by_id: Dict[str, PuzzleInstance] = {}
        self.solved_count = 0
        self.completed = False
        self.diagnostics: List[Diagnostic] = []

    # --- Lifecycle ---

    def select_puzzles(self, difficulty: Union[DifficultyTier, str, int],
                       reward_pool: Union[RewardPool, Iterable[str], None] = None) -> "GameSession":
        """Generates and commits a new chain. Any previous game state is discarded."""
        self.reset()
        self.tier = DifficultyTier.parse(difficulty)
        logger.info(f"--- Selecting puzzles ({self.tier.name}) ---")

        eligible = filter_catalog(self.catalog, self.tier)
        gate = next((d for d in self.catalog if d.is_terminal()), None)
        result = self.generator.generate(eligible, self.tier.target_count, reward_pool, terminal_gate=gate)

        # Commit only once generation finished; an abandoned generate() leaves no trace
        self.instances = list(result.instances)
        self._by_id = {i.id: i for i in self.instances}
        for diagnostic in result.diagnostics:
            self._emit_diagnostic(diagnostic)

        if self.verify_chains:
            _, problems = ChainVerifier(self.instances, self.generator.default_door_requirement).verify()
            for problem in problems:
                logger.warning(f"Chain verification: {problem}")

        for instance in self.instances:
            self.refresh(instance)
            try:
                self.world.configure_static_puzzle_object(instance.id, instance.requirement, instance.hint_text())
            except Exception as e:
                logger.error(f"Error during setup for puzzle {instance.id}: {e}", exc_info=True)

        logger.info(f"Active puzzles ({len(self.instances)}): {self.instances}")
        return self

    def reset(self):
        """Back to the main menu: drops instances, signals and counters. The inventory is left to its owner."""
        self.instances = []
        self._by_id = {}
        self.live_state = LiveState(self.inventory)
        self.solved_count = 0
        self.completed = False
        self.diagnostics = []
        self.tier = None

    # --- Queries ---

    def check_requirement(self, requirement: Optional[Requirement]) -> Evaluation:
        return RequirementResolver.evaluate(requirement, self.live_state)

    def get_active_instances(self) -> List[PuzzleInstance]:
        return list(self.instances)

    def get_instance(self, instance_id: str) -> Optional[PuzzleInstance]:
        return self._by_id.get(instance_id)

    def get_solved_count(self) -> int:
        return self.solved_count

    def get_total_count(self) -> int:
        return len(self.instances)

    def find_held(self, prefix: str) -> Optional[str]:
        """First inventory id of the given class, if any."""
        return next((held for held in self.inventory.list() if held.startswith(prefix)), None)

    # --- State machine ---

    def refresh(self, instance: PuzzleInstance) -> PuzzleState:
        """Re-evaluates LOCKED <-> AVAILABLE against live state. SOLVED never changes."""
        if instance.state == PuzzleState.SOLVED:
            return instance.state
        satisfied = self.check_requirement(instance.requirement).satisfied
        new_state = PuzzleState.AVAILABLE if satisfied else PuzzleState.LOCKED
        if new_state != instance.state:
            logger.debug(f"{instance.id}: {instance.state.name} -> {new_state.name}")
            instance.state = new_state
        return instance.state

    def refresh_all(self):
        for instance in self.instances:
            self.refresh(instance)

    def solve_puzzle(self, instance_id: str, position: Optional[Position] = None) -> bool:
        """Solves an AVAILABLE instance. Returns False (a no-op) for solved, locked or unknown ids."""
        instance = self._by_id.get(instance_id)
        if instance is None:
            self._emit_diagnostic(Diagnostic(DiagnosticReason.INVALID_SOLVE_REQUEST,
                                             f"Attempted to solve unknown puzzle {instance_id}.",
                                             {"instance_id": instance_id}))
            return False
        if instance.state == PuzzleState.SOLVED:
            logger.info(f"Puzzle {instance_id} was already marked as solved.")
            return False

        self.refresh(instance)
        if instance.state != PuzzleState.AVAILABLE:
            missing = self.check_requirement(instance.requirement).missing
            self._emit_diagnostic(Diagnostic(DiagnosticReason.INVALID_SOLVE_REQUEST,
                                             f"Attempted to solve locked puzzle {instance_id}.",
                                             {"instance_id": instance_id, "missing": missing}))
            return False

        try:
            self._distribute_reward(instance, position)
        except Exception as e:
            # State and counter only change once the reward is out
            logger.error(f"Reward distribution failed for {instance_id}: {e}", exc_info=True)
            return False

        instance.state = PuzzleState.SOLVED
        self.solved_count += 1
        logger.info(f"Puzzle \"{instance.name}\" marked solved. Total solved: {self.solved_count}/{self.get_total_count()}")
        self.refresh_all()
        self.events.on_puzzle_solved(instance.id, self.solved_count, self.get_total_count())
        if instance.is_terminal():
            self.completed = True
            logger.info("Terminal gate solved. Game complete.")
            self.events.on_game_completed()
        return True

    def _distribute_reward(self, instance: PuzzleInstance, position: Optional[Position]):
        category = instance.reward_category
        if category == RewardCategory.SIGNAL:
            self.live_state.set_signal(instance.definition.signal)
            logger.info(f"Signal {instance.definition.signal} set by {instance.id}")
        elif category != RewardCategory.VICTORY:
            self.granter.grant(instance, position)

    # --- Collaborator entry points ---

    def interact(self, instance_id: str, selected_item: Optional[str] = None) -> Optional[InteractionOutcome]:
        """Dispatches a player interaction to the puzzle's behavior."""
        instance = self._by_id.get(instance_id)
        if instance is None or instance.behavior is None:
            logger.warning(f"No interactive puzzle with id {instance_id}")
            return None
        try:
            return instance.behavior.on_interact(instance, self, selected_item)
        except Exception as e:
            logger.error(f"Error during interaction with {instance_id}: {e}", exc_info=True)
            return InteractionOutcome.BLOCKED

    def submit(self, instance_id: str, value: Any) -> bool:
        """Forwards modal input or a minigame result to the puzzle's behavior."""
        instance = self._by_id.get(instance_id)
        if instance is None or instance.behavior is None:
            logger.warning(f"No interactive puzzle with id {instance_id}")
            return False
        try:
            return instance.behavior.on_submit(instance, self, value)
        except Exception as e:
            logger.error(f"Error submitting {value!r} to {instance_id}: {e}", exc_info=True)
            return False

    def show_hint(self, text: str):
        self.events.on_hint_changed(text)

    def consume_item(self, item_id: str) -> bool:
        """Uses up an inventory entry and re-checks every lock, since removal can re-lock puzzles."""
        removed = self.inventory.remove_item(item_id)
        if removed:
            self.refresh_all()
        return removed

    def _emit_diagnostic(self, diagnostic: Diagnostic):
        self.diagnostics.append(diagnostic)
        if diagnostic.reason == DiagnosticReason.INVALID_SOLVE_REQUEST:
            # Generation diagnostics are already logged by the generator
            logger.warning(f"{diagnostic} {diagnostic.context}")
        self.events.on_generation_diagnostic(str(diagnostic))
