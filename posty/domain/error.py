"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Required input is missing or malformed."""

    pass


class ConflictError(DomainError):
    """A unique field (email, platform identity) is already taken."""

    pass


class AuthenticationError(DomainError):
    """Credentials did not match.

    Deliberately carries the same message whether the email is unknown or
    the password is wrong.
    """

    def __init__(self, message: str = "Email or password is incorrect."):
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvalidCodeError(DomainError):
    """One-time code is unknown or already consumed."""

    def __init__(self, message: str = "Invalid code"):
        super().__init__(message)


class InvalidOrExpiredCodeError(InvalidCodeError):
    """Password reset code is unknown, consumed, or has nothing staged."""

    def __init__(self, message: str = "Invalid or expired code"):
        super().__init__(message)


class AccountNotVerifiedError(DomainError):
    """Raised when an unverified account attempts a protected action."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} has not verified their account")


class CipherError(DomainError):
    """The password hashing primitive failed."""

    pass


class NotificationError(DomainError):
    """A notification could not be delivered."""

    pass
