from __future__ import annotations

"""Typed failures raised by the quiz core.

Every operation either returns a result or raises one of these. Callers
(CLI, an HTTP layer) decide how to surface them.
"""


class QuizError(Exception):
    # Base class for domain errors (intended, meaningful failures).
    pass


class NotFoundError(QuizError):
    # Unknown session or question.
    pass


class ValidationError(QuizError):
    # Malformed request input or an answer token illegal for the question type.
    pass


class ConflictError(QuizError):
    # Duplicate session creation.
    pass


class SessionLockedError(ConflictError):
    # Write attempted on a completed session while completion locking is on.
    pass
