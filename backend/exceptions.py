# backend/exceptions.py


class GameError(Exception):
    """Base class for errors raised by the game core."""


class InvalidCoordinate(GameError, ValueError):
    def __init__(self, row, col, rows, cols):
        super().__init__(f"({row}, {col}) is outside the {rows}x{cols} board")
        self.row = row
        self.col = col


class StaleEpoch(GameError):
    """
    Raised when a timer callback scheduled under an old session epoch fires
    after reinit(). The callback must be dropped, never applied.
    """

    def __init__(self, scheduled_epoch, live_epoch):
        super().__init__(f"callback from epoch {scheduled_epoch} fired during epoch {live_epoch}")
        self.scheduled_epoch = scheduled_epoch
        self.live_epoch = live_epoch
