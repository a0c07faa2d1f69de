"""
Exception hierarchy for Horizon.
"""


class HorizonError(Exception):
    """Base class for all Horizon errors."""


class InvalidInputError(HorizonError, ValueError):
    """Raised when rows handed to the aggregator are not a sequence of sequences."""


class AIClientError(HorizonError):
    """The AI service could not be reached or returned an error status."""


class AIResponseError(AIClientError):
    """The AI service replied, but the reply could not be used."""
