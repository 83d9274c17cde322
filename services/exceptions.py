"""Error types raised by the learning engine and its persistence layer"""


class InvalidInputError(ValueError):
    """Malformed input rejected before any computation takes place"""


class EmptyQuizAttemptError(InvalidInputError):
    """Quiz attempt with zero answered questions (correct ratio undefined)"""


class PersistenceError(RuntimeError):
    """Storage failure surfaced unchanged to the caller; never retried here"""


class NotFoundError(LookupError):
    """Referenced concept, resource or record does not exist"""
