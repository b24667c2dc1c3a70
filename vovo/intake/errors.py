"""Failures the intake workflow and the admin console can run into."""
from typing import Optional

GENERIC_SERVER_MESSAGE = "Não foi possível concluir o pedido. Tente novamente."
CONNECTIVITY_MESSAGE = "Erro de conexão. Verifique sua internet e tente novamente."


class IntakeError(Exception):
    """Base class; `message` is what the customer sees."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LocalValidationError(IntakeError):
    """Rejected before any request was made."""

    kind = "validation"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class ServerRejectedError(IntakeError):
    """The store answered with a non-success status."""

    kind = "server"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message or GENERIC_SERVER_MESSAGE)
        self.status_code = status_code


class TransportError(IntakeError):
    """No usable response: connection refused, DNS, timeout."""

    kind = "transport"

    def __init__(self, message: str = CONNECTIVITY_MESSAGE, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
