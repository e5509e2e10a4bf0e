class LocalCooksError(Exception):
    """Base exception for the application wizard."""

    pass

class UploadError(LocalCooksError):
    """Raised when a document could not be uploaded ahead of the submission."""

    def __init__(self, filename: str, reason: str, status_code: int | None = None):
        super().__init__(f"Upload of '{filename}' failed: {reason}")
        self.filename = filename
        self.reason = reason
        self.status_code = status_code

class AuthenticationError(LocalCooksError):
    """Raised when the identity provider refuses a sign-in."""

    pass

class ApplicationLookupError(LocalCooksError):
    """Raised when the applicant's existing applications cannot be fetched."""

    pass

class SubmissionInProgressError(LocalCooksError, RuntimeError):
    """Raised when a second submission is started while one is in flight."""

    pass
