"""
errors.py — Engine Error Taxonomy
===================================
Every exception the engine raises on purpose lives here.

    EngineError
      ├── InvalidInputError (ValueError)     – rejected at run-start, before any snapshot
      │     ├── UnknownAlgorithmError
      │     ├── InvalidArrayError
      │     ├── InvalidGraphError
      │     ├── InvalidBoardError
      │     └── InvalidSpeedError
      └── InvariantViolationError (RuntimeError) – defensive, aborts the run

RunCancelled is NOT an error: it is the signal a cancellable generator
raises when it observes its cancel token.  The runner turns it into the
`cancelled` status.
"""


class EngineError(Exception):
    """Base class for engine exceptions."""


class InvalidInputError(EngineError, ValueError):
    """Raised when algorithm input or options are malformed."""


class UnknownAlgorithmError(InvalidInputError):
    """Raised when an algorithm id does not resolve to a registry entry."""


class InvalidArrayError(InvalidInputError):
    """Raised when an array input holds non-numeric or missing values."""


class InvalidGraphError(InvalidInputError):
    """Raised when a graph has duplicate node ids or dangling edges."""


class InvalidBoardError(InvalidInputError):
    """Raised when a board size or board layout is out of range."""


class InvalidSpeedError(InvalidInputError):
    """Raised when a speed value falls outside 0..100."""


class InvariantViolationError(EngineError, RuntimeError):
    """Raised when a structural invariant breaks mid-run."""


class RunCancelled(Exception):
    """Raised inside a generator that observed its cancel token."""
