# server/core/errors.py


class HonkError(Exception):
    """Base class for every error the core reports to its callers."""

    message = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class AuthenticationFailure(HonkError):
    # never says whether the username or the password was wrong
    message = "Incorrect username or password"


class UsernameTaken(HonkError):
    message = "Username is already taken"


class NotFound(HonkError):
    message = "Not found"


class ValidationError(HonkError):
    message = "Invalid input"


class StoreError(HonkError):
    message = "Record store failure"


class DerivationError(HonkError):
    message = "Password derivation failed"
