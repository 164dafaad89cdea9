from __future__ import annotations


class IllegalMoveError(ValueError):
    """Raised when a move is not in the current legal move set.

    The position it was attempted on is left untouched.
    """


class InvalidPositionError(ValueError):
    """Raised when an imported position is malformed or structurally impossible."""
