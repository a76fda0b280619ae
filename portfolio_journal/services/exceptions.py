# portfolio_journal/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
Global handlers in main.py map them to HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    ├── NotFoundError
    │   ├── InvestmentNotFoundError
    │   ├── InvestmentTypeNotFoundError
    │   └── JournalEntryNotFoundError
    ├── RecordStoreError
    ├── AuthenticationError
    │   ├── NotAuthenticatedError
    │   ├── InvalidCredentialsError
    │   └── TokenExpiredError
    └── AuthorizationError
        └── PermissionDeniedError

Numeric anomalies in stored records are NOT errors: the analytics engine
coerces them to zero and carries on.
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when programmatic validation fails.

    Request-body validation is handled by Pydantic; this covers rules the
    service enforces itself (e.g. a zero initial quantity).

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Investment")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: int | str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class InvestmentNotFoundError(NotFoundError):
    """Raised when an investment cannot be found."""

    def __init__(self, investment_id: int) -> None:
        self.investment_id = investment_id
        super().__init__(
            f"Investment {investment_id} not found",
            resource_type="Investment",
            resource_id=investment_id,
        )


class InvestmentTypeNotFoundError(NotFoundError):
    """Raised when an investment references an unknown investment type."""

    def __init__(self, investment_type_id: int) -> None:
        self.investment_type_id = investment_type_id
        super().__init__(
            f"Investment type {investment_type_id} not found",
            resource_type="InvestmentType",
            resource_id=investment_type_id,
        )


class JournalEntryNotFoundError(NotFoundError):
    """Raised when a journal entry cannot be found."""

    def __init__(self, entry_id: int) -> None:
        self.entry_id = entry_id
        super().__init__(
            f"Journal entry {entry_id} not found",
            resource_type="JournalEntry",
            resource_id=entry_id,
        )


# =============================================================================
# RECORD STORE ERRORS
# =============================================================================


class RecordStoreError(ServiceError):
    """
    Raised when the record store cannot be read or written.

    Attributes:
        operation: Name of the store operation that failed
    """

    def __init__(self, operation: str, reason: str | None = None) -> None:
        self.operation = operation
        self.reason = reason
        message = f"Record store operation '{operation}' failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


# =============================================================================
# AUTHENTICATION ERRORS
# =============================================================================


class AuthenticationError(ServiceError):
    """Base exception for authentication failures."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class NotAuthenticatedError(AuthenticationError):
    """
    Raised when an operation is invoked without a verified user identity.

    Every analytics and mutation entry point fails closed with this error
    instead of computing for an empty user.
    """

    def __init__(self) -> None:
        super().__init__("Not authenticated")


class InvalidCredentialsError(AuthenticationError):
    """Raised when an access token is malformed or signed with the wrong key."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """
    Raised when an access token has expired.

    Attributes:
        token_type: Type of token that expired
    """

    def __init__(self, message: str = "Token has expired", token_type: str = "access") -> None:
        self.token_type = token_type
        super().__init__(message)


# =============================================================================
# AUTHORIZATION ERRORS
# =============================================================================


class AuthorizationError(ServiceError):
    """Base exception for authorization failures."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class PermissionDeniedError(AuthorizationError):
    """
    Raised when a user targets a record owned by someone else.

    Attributes:
        resource_type: Type of resource (e.g., "Investment")
        resource_id: ID of the resource
    """

    def __init__(
            self,
            resource_type: str,
            resource_id: int | str,
            message: str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            message or f"You don't have permission to access this {resource_type.lower()}"
        )
