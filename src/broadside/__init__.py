"""broadside: a Battleship rules engine with an automated opponent."""

__version__ = "0.1.0"
