"""
Error taxonomy for suitability analysis.
"""


class AnalysisError(Exception):
    """Base class for failures that abort a suitability analysis."""


class ProviderUnavailable(AnalysisError):
    """A data provider could not be reached or answered with a failure."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class InvalidCoordinate(AnalysisError):
    """Coordinate outside the lat/lon domain, or not on land."""
