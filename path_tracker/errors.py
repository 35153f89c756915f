class PathTrackerError(Exception):
    """Base class for errors raised by the path tracking core."""


class PreconditionError(PathTrackerError, ValueError):
    """Input rejected before it reaches the control law."""


class EmptyPathError(PreconditionError):
    pass


class NonFinitePoseError(PreconditionError):
    pass


class PathTooShortError(PreconditionError):
    pass


class InvalidParametersError(PathTrackerError, ValueError):
    """Controller parameter update rejected; the previous set stays active."""


class FrameMismatchError(PreconditionError):
    pass


class TransformUnavailableError(PathTrackerError):
    pass
