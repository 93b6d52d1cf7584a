class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a record does not exist (or was soft-deleted)."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class CompanyNotSelectedError(DomainError):
    """Raised when a company-scoped action runs without a selected company."""

    def __init__(self, message: str = "Nenhuma empresa selecionada"):
        super().__init__(message)


class BackendError(DomainError):
    """Raised when the database or one of its procedures fails."""

    def __init__(self, message: str, *, procedure: str | None = None):
        super().__init__(message)
        self.procedure = procedure
