"""
Exceptions raised by the Monzo API client.
"""


class MonzoError(Exception):
    """Base exception for Monzo client errors."""

    pass


class MonzoAPIError(MonzoError):
    """API returned an error response."""

    def __init__(
        self,
        status_code: int,
        message: str,
        response_body: str | None = None,
        code: str | None = None,
    ):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body
        # Monzo error code, e.g. "unauthorized.bad_access_token"
        self.code = code

        detail = f"{code}: {message}" if code else message
        super().__init__(f"Monzo API error {status_code}: {detail}")


class MonzoConnectionError(MonzoError):
    """Failed to connect to Monzo."""

    pass


class MonzoCredentialsError(MonzoError):
    """Credentials required for the operation are missing."""

    pass


class InvalidIdError(MonzoError, ValueError):
    """String is not a recognised Monzo identifier."""

    def __init__(self, value: str, prefix: str | None = None):
        self.value = value
        self.prefix = prefix
        if prefix:
            super().__init__(f"Invalid id {value!r}: expected prefix '{prefix}_'")
        else:
            super().__init__(f"Invalid id {value!r}: no known prefix")
