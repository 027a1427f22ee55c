"""Custom exceptions. Every layer raises a subclass of GameError, so callers can catch the top-level one."""


class GameError(Exception):
    """Base class for all errors raised by the game backend."""


class GameStateError(GameError):
    """The game (or a snapshot of it) is in a state that does not allow the requested operation."""


class OutOfBoundsError(GameError):
    """A coordinate does not lie on the terrain."""


class UnknownPlayerError(GameError):
    """The player id is not part of this game."""


class CommandRejectedError(GameError):
    """The engine refused a command (unparsable text, empty commit, game over...)."""


class RepositoryError(GameError):
    """Problem with retrieving/storing a game."""


class InvalidRequestError(GameError):
    """A request coming in from the API layer did not pass validation."""
