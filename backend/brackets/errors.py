"""
Bracket error taxonomy.

NotFound, NotReady and AlreadyGenerated are expected outcomes of a roster change and are
reported through RosterChangeOutcome, not raised. The classes below are the failures.
"""


class BracketError(Exception):
    """Base exception for bracket generation errors"""

    pass


class GenerationInvariantViolation(BracketError):
    """Generator produced the wrong number of matches"""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Expected {expected} matches, generated {actual}")
        self.expected = expected
        self.actual = actual


class PersistenceInvariantViolation(BracketError):
    """Match store reported a different number of created ids than matches submitted"""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Expected to create {expected} matches, created {actual}")
        self.expected = expected
        self.actual = actual


class CollaboratorFailure(BracketError):
    """A group lookup, existence check or bulk write failed"""

    def __init__(self, step: str, cause: Exception):
        super().__init__(f"{step} failed: {cause}")
        self.step = step
        self.cause = cause
