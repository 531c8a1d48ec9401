"""
Errors raised by the marketplace client.
"""


class ClientError(Exception):
    """Base exception for all client-side errors."""


class ApiConnectionError(ClientError):
    """The request was made but no response came back."""


class ApiError(ClientError):
    """The server answered with a non-2xx status."""

    def __init__(self, message, status_code=None, error_code=None, details=None):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(message)

    def __str__(self):
        if self.status_code:
            return f"{self.status_code}: {self.message}"
        return self.message

    @classmethod
    def from_response(cls, response):
        """Build the error from a response carrying the server's error envelope."""
        error_code = None
        details = None
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            message = body.get('message') or body.get('error') or body.get('detail')
            error_code = body.get('error_code')
            details = body.get('details')
        else:
            message = None

        return cls(
            message or response.text or response.reason or "Request failed",
            status_code=response.status_code,
            error_code=error_code,
            details=details,
        )


class UnauthorizedError(ApiError):
    """The server rejected the credentials; the stored token has been dropped."""


class RoleError(ClientError):
    """The signed-in account's role does not allow the operation."""


class FormValidationError(ClientError):
    """A form failed validation before anything was sent."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))
