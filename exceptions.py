"""Error kinds raised by the analysis engine.

Every error derives from ``AnalysisError`` (itself a ``ValueError``), so
callers can branch on the concrete kind or catch them all at once.
"""


class AnalysisError(ValueError):
    """Base class for all engine errors"""


class InsufficientData(AnalysisError):
    """Series shorter than the minimum the method requires"""


class InsufficientOverlap(AnalysisError):
    """Too few aligned dates between two series for a pairwise method"""


class NotFound(AnalysisError):
    """Referenced symbol absent from the provided set of stocks"""


class MalformedInput(AnalysisError):
    """Input text or series that cannot be parsed or violates series invariants"""


class InvalidParameters(AnalysisError):
    """Non-positive period, order or horizon"""


class DegenerateInput(AnalysisError):
    """Zero variance or zero denominator.

    Degenerate cases are normally absorbed with an epsilon and reported
    through result metadata; this is raised only when a caller asks for
    strict handling.
    """
