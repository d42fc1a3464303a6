import pytest

QtCore = pytest.importorskip("PyQt6.QtCore")

from escape_chain.ui.signals import GameSignals, QtGameEvents


@pytest.fixture(scope="module")
def qapp():
    app = QtCore.QCoreApplication.instance()
    if app is None:
        app = QtCore.QCoreApplication([])
    yield app


@pytest.fixture
def qt_events(qapp):
    return QtGameEvents()


class TestQtGameEvents:
    def test_relays_every_event(self, qt_events):
        received = []
        qt_events.signals.hint_changed.connect(lambda text: received.append(("hint", text)))
        qt_events.signals.puzzle_solved.connect(lambda i, c, t: received.append(("solved", i, c, t)))
        qt_events.signals.generation_diagnostic.connect(lambda m: received.append(("diag", m)))
        qt_events.signals.game_completed.connect(lambda: received.append(("done",)))

        qt_events.on_hint_changed("Look up.")
        qt_events.on_puzzle_solved("button", 1, 5)
        qt_events.on_generation_diagnostic("[GENERATION_STUCK] stuck")
        qt_events.on_game_completed()

        assert received == [
            ("hint", "Look up."),
            ("solved", "button", 1, 5),
            ("diag", "[GENERATION_STUCK] stuck"),
            ("done",),
        ]

    def test_shared_signal_object(self, qapp):
        signals = GameSignals()
        assert QtGameEvents(signals).signals is signals

    def test_session_drives_widgets(self, qt_events, make_session, room_chain, inventory):
        progress = []
        qt_events.signals.puzzle_solved.connect(lambda i, c, t: progress.append(f"{c}/{t}"))
        session = make_session(room_chain, game_events=qt_events)
        session.solve_puzzle("button")
        inventory.add_item("Item_Key")
        session.solve_puzzle("chest")
        assert progress == ["1/5", "2/5"]
