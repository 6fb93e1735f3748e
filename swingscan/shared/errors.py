"""
Error taxonomy for the swing engine.

InvalidInput is raised at the boundary before any computation.
UpstreamFailure wraps errors from the bar store or ticker directory.

NotFound and InsufficientHistory name the expected, recoverable outcomes.
The engine never raises them: the evaluator and the service report those
cases as failing EvaluationResult / ScanOutcome values whose reasons carry
the message. They exist so that embedding code (an HTTP layer, a batch job)
can map a non-pass result onto the same taxonomy.
"""


class SwingError(Exception):
    """Base class for all swing engine errors."""
    pass


class NotFound(SwingError):
    """
    Unknown ticker, or requested date absent from the fetched window.

    Taxonomy label only; the engine reports this as a failing result.
    """
    pass


class InsufficientHistory(SwingError):
    """
    Fewer bars than an indicator's minimum lookback.

    Taxonomy label only; the engine reports this as a failing result.
    """
    pass


class InvalidInput(SwingError, ValueError):
    """Malformed preset or override payload."""
    pass


class UpstreamFailure(SwingError):
    """A bar-store or ticker-directory call failed."""
    pass
