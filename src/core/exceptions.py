"""Custom exceptions. Every layer raises a subclass of GameError, so the API layer only needs to know the families."""


class GameError(Exception):
    """Base class for all errors raised by this application."""


# --- STATE / TURN ORDER ---
class GameStateError(GameError):
    """Operation is not allowed on the current screen or in the current phase."""


class NotYourTurnError(GameError):
    """A seat attempted to act while it is the other seat's turn."""


# --- DRAFT ---
class DraftError(GameError):
    """Character selection cannot proceed."""


class UnknownCharacterError(DraftError):
    """Character id is not part of the roster / pool."""


class CharacterUnavailableError(DraftError):
    """Character has already been picked."""


# --- ACTIONS / REQUESTS ---
class InvalidActionError(GameError):
    """Board action is not recognised or its parameters do not fit."""


class InvalidRequestError(GameError):
    """Request data failed validation."""


# --- PERSISTENCE ---
class RepositoryError(GameError):
    """Persistence layer could not satisfy the request."""


class SessionNotFoundError(RepositoryError):
    """No session stored under the requested id."""
