class IronTrackError(Exception):
    """Base class for everything the training core raises."""


class ValidationError(IronTrackError):
    """User-correctable input problem. The message is shown as-is."""


class SessionError(IronTrackError):
    pass


class NoActiveRoutineError(SessionError):
    pass


class RoutineNotStartableError(SessionError):
    pass


class SessionClosedError(SessionError):
    pass
