class SchedulerError(Exception):
    """Base class for errors raised while scheduling reviews or tracking activity."""


class InvalidGrade(SchedulerError):
    pass


class InvalidDuration(SchedulerError):
    pass


class NotFound(SchedulerError):
    pass


class AlreadyExists(SchedulerError):
    pass


class ConflictError(SchedulerError):
    """Another writer advanced the record's version; reload and retry."""


class LanguageMismatch(SchedulerError):
    pass
