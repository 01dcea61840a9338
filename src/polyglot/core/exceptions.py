"""Centralized error taxonomy for request handlers.

Handlers raise (or return inside ``R.from_result``) one of four variants:
- CodeError: a known business code, message comes from the catalog
- CodeWithParamsError: a business code plus placeholder values
- SystemFailure: an unexpected fault, never shown to the caller
- ValidationFailure: structured per-field rule violations

``polyglot.resp.errors.map_error`` turns each of them into a numeric code and
a localized message. Exception handlers in main.py build the envelope.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, NamedTuple

from polyglot.core.codes import Code


class FieldViolation(NamedTuple):
    """One failed rule on one field, e.g. ``("length", {"min": 1, "max": 10})``."""

    rule: str
    params: Mapping[str, Any] = MappingProxyType({})


class AppError(Exception):
    """Base exception for all errors that end up in a response envelope."""

    code: int = Code.INTERNAL_SERVER_ERROR

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a dict for structured logging."""
        return {"error": type(self).__name__, "code": int(self.code)}


class CodeError(AppError):
    """A business error identified only by its code."""

    def __init__(self, code: int):
        self.code = int(code)
        super().__init__(f"E({self.code})")


class CodeWithParamsError(CodeError):
    """A business error whose message template needs placeholder values."""

    def __init__(self, code: int, params: Mapping[str, Any] | None = None):
        super().__init__(code)
        self.params: dict[str, str] = {
            name: str(value) for name, value in (params or {}).items()
        }
        self.args = (f"E({self.code}, {self.params!r})",)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["params"] = self.params
        return result


class SystemFailure(AppError):
    """Wraps an unexpected internal fault.

    The cause is logged server-side only; callers see the generic
    internal-error message.
    """

    code = Code.INTERNAL_SERVER_ERROR

    def __init__(self, cause: BaseException | str):
        self.cause = cause
        super().__init__(str(cause))
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["cause"] = repr(self.cause)
        return result


class ValidationFailure(AppError):
    """Request parameters failed one or more field rules."""

    code = Code.ILLEGAL_PARAM

    def __init__(
        self,
        field_errors: Mapping[str, list[FieldViolation | tuple[str, Mapping[str, Any]] | str]]
        | None = None,
    ):
        self.field_errors: dict[str, list[FieldViolation]] = {}
        for field, violations in (field_errors or {}).items():
            self.field_errors[field] = [_coerce_violation(v) for v in violations]
        super().__init__(f"ValidationFailure({list(self.field_errors)})")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["fields"] = {
            field: [v.rule for v in violations]
            for field, violations in self.field_errors.items()
        }
        return result


class NotFoundError(CodeWithParamsError):
    """Requested resource does not exist."""

    def __init__(self, resource: str):
        super().__init__(Code.NOT_FOUND, {"resource": resource})


class ForbiddenError(CodeError):
    """Caller lacks permission for this action."""

    def __init__(self) -> None:
        super().__init__(Code.FORBIDDEN)


class BadRequestError(CodeError):
    """Request is malformed in a way not covered by field validation."""

    def __init__(self) -> None:
        super().__init__(Code.BAD_REQUEST)


class CatalogError(Exception):
    """A message catalog source could not be read or parsed."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


def _coerce_violation(
    value: FieldViolation | tuple[str, Mapping[str, Any]] | str,
) -> FieldViolation:
    if isinstance(value, FieldViolation):
        return value
    if isinstance(value, str):
        return FieldViolation(value)
    rule, params = value
    return FieldViolation(rule, dict(params))
