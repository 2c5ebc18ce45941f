from __future__ import annotations

RESTART_LOGIN_HINT = "Please restart the login flow at /auth/login."


class CredentialError(RuntimeError):
    error_code = "credential_error"
    status_code = 400


class InvalidCallbackError(CredentialError):
    error_code = "invalid_request"

    def __init__(self, message: str = "Missing code or state parameter.") -> None:
        super().__init__(message)


class ProviderDeniedError(CredentialError):
    error_code = "access_denied"

    def __init__(self, error: str) -> None:
        super().__init__(f"Spotify authorization returned an error: {error}")
        self.error = error


class PendingAuthNotFoundError(CredentialError):
    error_code = "invalid_state"

    def __init__(self) -> None:
        super().__init__(f"Unknown or already used state. {RESTART_LOGIN_HINT}")


class PendingAuthExpiredError(CredentialError):
    error_code = "expired_state"

    def __init__(self) -> None:
        super().__init__(f"Authorization session expired. {RESTART_LOGIN_HINT}")


class TokenRequestError(CredentialError):
    """Token endpoint answered with a non-2xx status, an unusable body, or not at all."""

    action = "Token request"

    def __init__(self, status_code: int | None, body: str) -> None:
        if status_code is None:
            message = f"{self.action} failed: {body}"
        else:
            message = f"{self.action} failed with status {status_code}: {body}"
        super().__init__(message)
        self.response_status = status_code
        self.body = body


class ExchangeFailedError(TokenRequestError):
    error_code = "token_exchange_failed"
    action = "Token exchange"


class NotAuthenticatedError(CredentialError):
    error_code = "not_authenticated"
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Not authenticated with Spotify; visit /auth/login.")


class RefreshUnavailableError(CredentialError):
    error_code = "refresh_unavailable"
    status_code = 401

    def __init__(self) -> None:
        super().__init__("No refresh token available; visit /auth/login.")


class RefreshFailedError(TokenRequestError):
    error_code = "refresh_failed"
    status_code = 401
    action = "Token refresh"
