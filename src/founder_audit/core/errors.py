"""Domain exceptions raised by the service layer.

Routes translate these into HTTP status codes; the engine modules never
raise them.
"""


class FounderAuditError(Exception):
    """Base class for service-level errors."""


class SessionNotFoundError(FounderAuditError):
    """Raised when a session id has never been started."""


class SessionAlreadyExistsError(FounderAuditError):
    """Raised when starting a session id that is already tracked."""
