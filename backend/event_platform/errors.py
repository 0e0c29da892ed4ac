"""Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``main`` renders them as ``{error, code, details?}``
with the status code carried on the exception.
"""
from typing import Any, Optional


class AppError(Exception):
    code = "internal-error"
    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class Unauthenticated(AppError):
    code = "unauthenticated"
    status_code = 401


class InvalidInput(AppError):
    code = "invalid-input"
    status_code = 400


class NoOrganization(AppError):
    code = "no-organization"
    status_code = 400


class InvalidOwner(AppError):
    code = "invalid-owner"
    status_code = 400


class PayoutRequired(AppError):
    code = "payout-required"
    status_code = 400


class PayoutUnverified(AppError):
    code = "payout-unverified"
    status_code = 400


class AccessDenied(AppError):
    code = "access-denied"
    status_code = 403


class NotFoundOrDenied(AppError):
    """Absent and forbidden rows look the same to the caller."""

    code = "access-denied-or-not-found"
    status_code = 404


class TemplateNotFound(NotFoundOrDenied):
    pass


class EventNotFound(NotFoundOrDenied):
    pass


class NotFound(AppError):
    code = "not-found"
    status_code = 404


class Conflict(AppError):
    code = "conflict"
    status_code = 409


class TemplateNameTaken(Conflict):
    code = "template-name-taken"


class StoreFailure(AppError):
    code = "store-failure"
    status_code = 500
