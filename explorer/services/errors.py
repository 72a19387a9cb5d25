# explorer/services/errors.py


class ExplorerError(Exception):
    """Base class for failures surfaced to callers of the explorer services."""


class RateLimitExceeded(ExplorerError):
    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)


class GenerationFailure(ExplorerError):
    """The model call failed, or its output could not be used."""


class MalformedResponse(GenerationFailure):
    """The model answered, but not with parseable or valid JSON."""
