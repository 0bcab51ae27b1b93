class AskifyError(Exception):
    """Base class for errors raised below the route layer."""


class HashingError(AskifyError):
    pass


class ConflictError(AskifyError):
    pass


class ExtractionError(AskifyError):
    pass


class GenerationError(AskifyError):
    """The completion service failed or replied with something unusable.

    ``status_code`` is the upstream HTTP status when there was one.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
