import logging

from PyQt6.QtCore import QObject, pyqtSignal

from ..core.collaborators import GameEvents

logger = logging.getLogger(__name__)

class GameSignals(QObject):
    """Qt signals for the game widgets (hint bar, progress label, diagnostics log, victory dialog)."""

    hint_changed = pyqtSignal(str)
    puzzle_solved = pyqtSignal(str, int, int) # instance id, solved count, total
    generation_diagnostic = pyqtSignal(str)
    game_completed = pyqtSignal()


class QtGameEvents(GameEvents):
    """GameEvents sink that re-emits every event as a Qt signal.

    Connect widgets to ``events.signals``. Emission is synchronous for direct connections.
    """

    def __init__(self, signals: GameSignals = None):
        self.signals = signals if signals is not None else GameSignals()

    def on_hint_changed(self, text: str) -> None:
        self.signals.hint_changed.emit(text)

    def on_puzzle_solved(self, instance_id: str, count: int, total: int) -> None:
        logger.debug(f"Relaying solve of {instance_id} ({count}/{total})")
        self.signals.puzzle_solved.emit(instance_id, count, total)

    def on_generation_diagnostic(self, message: str) -> None:
        self.signals.generation_diagnostic.emit(message)

    def on_game_completed(self) -> None:
        self.signals.game_completed.emit()
