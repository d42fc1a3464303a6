# Make 'ui' a package
from .signals import GameSignals, QtGameEvents
