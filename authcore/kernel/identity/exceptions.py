"""Identity exceptions raised by the credential store."""


class IdentityError(Exception):
    """Base exception for identity errors."""

    def __init__(self, message: str = "Identity error"):
        self.message = message
        super().__init__(self.message)


class EmailAlreadyExistsError(IdentityError):
    """Raised when the store rejects a second account for an email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already registered: {email}")
