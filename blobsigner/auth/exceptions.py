"""
Signing exceptions for blobsigner.

Every failure detected locally surfaces as a distinct, named condition.
Errors raised by collaborators (timestamp provider, date parser,
authentication primitive) are never wrapped and reach the caller unchanged.
"""


class SigningError(Exception):
    """Base exception for request signing errors."""
    
    def __init__(self, message: str, error_code: str = "SigningFailed"):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class MissingArgumentError(SigningError, ValueError):
    """Raised when a required argument (container, name, blob, options) is absent."""
    
    def __init__(self, argument: str):
        self.argument = argument
        super().__init__(f"{argument} is required", "MissingArgument")


class UnresolvableContentLengthError(SigningError):
    """Raised when a write is requested for a blob whose size cannot be determined."""
    
    def __init__(self, blob_name: str):
        self.blob_name = blob_name
        super().__init__(
            f"Cannot determine content length of blob '{blob_name}'",
            "UnresolvableContentLength"
        )


class InvalidAccountKeyError(SigningError):
    """Raised when the account key is not valid base64."""
    
    def __init__(self, message: str = "Account key must be base64-encoded"):
        super().__init__(message, "InvalidAccountKey")
