"""Exception types raised by the engine and the game session."""


class TicTacToeError(Exception):
    pass


class InvalidStateError(TicTacToeError, ValueError):
    """A search was requested on a full or already decided board."""


class IllegalMoveError(TicTacToeError, ValueError):
    """A move broke the session rules (wrong turn, occupied or out-of-range cell)."""


class BoardFormatError(TicTacToeError, ValueError):
    """Board text or cell sequence could not be parsed."""
