"""Custom exception classes for the API."""


class ValidationError(Exception):
    """Raised when input validation fails before any work starts."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class GenerationFailure(Exception):
    """Raised when a model call fails during drafting or humanization.

    No partial document accompanies this error.
    """

    def __init__(self, stage: str, message: str):
        self.stage = stage
        self.message = message
        super().__init__(f"{stage} failed: {message}")


class DeliveryFailure(Exception):
    """Raised by a delivery channel when a document cannot be sent."""

    def __init__(self, message: str, destination: str | None = None):
        self.message = message
        self.destination = destination
        super().__init__(message)


class InvalidStageTransition(Exception):
    """Raised when a pipeline run is asked to make an illegal stage move."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move pipeline from '{current}' to '{target}'")


class JobNotFoundError(Exception):
    """Raised when a pipeline job is not found."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job with ID '{job_id}' not found")


class FileTooLargeError(Exception):
    """Raised when an uploaded file exceeds the maximum size limit."""

    def __init__(self, file_size: int, max_size: int):
        self.file_size = file_size
        self.max_size = max_size
        super().__init__(
            f"File size ({file_size} bytes) exceeds maximum allowed size ({max_size} bytes)"
        )


class InvalidFileTypeError(Exception):
    """Raised when an uploaded file has an unsupported type."""

    def __init__(self, file_type: str, allowed_types: list[str]):
        self.file_type = file_type
        self.allowed_types = allowed_types
        super().__init__(
            f"File type '{file_type}' is not supported. "
            f"Allowed types: {', '.join(allowed_types)}"
        )


class StoredFileNotFoundError(Exception):
    """Raised when a stored reference document does not exist."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"File '{key}' not found")


class InvalidSignatureError(Exception):
    """Raised when a signed download URL is tampered with or expired."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Download link for '{key}' is not valid: {reason}")
