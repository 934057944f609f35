class SchedulerError(Exception):
    """Base class for errors raised by the scheduling engine."""


class NotFound(SchedulerError):
    def __init__(self, kind, ident):
        self.kind = kind
        self.ident = ident
        super().__init__(f"{kind} not found: {ident}")


class InvalidGrade(SchedulerError, ValueError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"invalid grade {value!r}, expected 0 (again), 1 (hard) or 2 (easy)")


class CacheUnavailable(SchedulerError):
    """The cache path failed or ran past its deadline."""
