"""Domain errors raised by services and translated to JSON responses by the app.

Messages are user-facing (Portuguese); no internal codes reach the client.
"""


class DomainError(Exception):
    """Base for errors that map to an HTTP status with a user-facing message."""

    status_code = 400
    default_message = "Dados inválidos"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(DomainError):
    status_code = 401
    default_message = "Não autenticado"


class Forbidden(DomainError):
    status_code = 403
    default_message = "Acesso negado"


class AdminLimitExceeded(Forbidden):
    """Raised when a province would reach the maximum number of admin accounts."""

    def __init__(self, limit: int = 5) -> None:
        self.limit = limit
        super().__init__(
            f"Limite máximo de {limit} administradores por província atingido"
        )


class NotFound(DomainError):
    status_code = 404
    default_message = "Não encontrado"


class InvalidData(DomainError):
    """Schema violation; the field-level detail is not surfaced."""

    default_message = "Dados inválidos"


class BadRequest(DomainError):
    """Rejected request with a specific message (wrong password, missing fields, ...)."""


class Conflict(DomainError):
    """Uniqueness violation (BI number, email, username). Reported as 400."""


class EmailDeliveryError(DomainError):
    status_code = 500
    default_message = "Erro ao enviar email. Tente novamente mais tarde."


class UnscopedQueryError(RuntimeError):
    """A scoped query was invoked without a caller scope. Programming error, never a fallback."""
