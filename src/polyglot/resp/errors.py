"""Maps application errors to a business code and a localized message."""

from collections.abc import Iterable, Mapping
from typing import Any

from polyglot.core.codes import Code
from polyglot.core.exceptions import (
    CodeError,
    CodeWithParamsError,
    FieldViolation,
    SystemFailure,
    ValidationFailure,
)
from polyglot.core.logging import get_logger
from polyglot.i18n.translator import render

logger = get_logger(__name__)

# loc prefixes FastAPI adds in front of the field path
_REQUEST_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})


def map_error(err: BaseException, lang: str) -> tuple[int, str]:
    """Convert an error into ``(code, message)`` rendered in ``lang``.

    Exceptions that are not part of the AppError taxonomy are treated as
    system failures.
    """
    if isinstance(err, CodeWithParamsError):
        return err.code, render(lang, str(err.code), err.params)

    if isinstance(err, CodeError):
        return err.code, render(lang, str(err.code))

    if isinstance(err, ValidationFailure):
        logger.warning("validation_failure", **err.to_dict())
        return int(Code.ILLEGAL_PARAM), format_validation(err, lang)

    cause = err.cause if isinstance(err, SystemFailure) else err
    logger.error(
        "system_failure",
        error_type=type(cause).__name__,
        error=str(cause),
        exc_info=cause if isinstance(cause, BaseException) else None,
    )
    code = Code.INTERNAL_SERVER_ERROR
    return int(code), render(lang, str(code))


def format_validation(err: ValidationFailure, lang: str) -> str:
    """One ``"<field>: <problem>"`` line per violated rule, joined by ``"; "``.

    Falls back to the localized illegal-parameter message when the failure
    carries no field errors.
    """
    lines = [
        f"{field}: {describe_rule(violation)}"
        for field, violations in err.field_errors.items()
        for violation in violations
    ]
    if not lines:
        return render(lang, str(Code.ILLEGAL_PARAM))
    return "; ".join(lines)


def describe_rule(violation: FieldViolation) -> str:
    rule, params = violation.rule, violation.params

    if rule == "required":
        return "is required"
    if rule == "length":
        return _bounds_text("length must be", params)
    if rule == "range":
        return _bounds_text("must be", params)
    if rule == "email":
        return "must be a valid email"
    if rule == "url":
        return "must be a valid url"
    return f"invalid ({rule})"


def _bounds_text(prefix: str, params: Mapping[str, Any]) -> str:
    # min/max are inclusive, gt/lt exclusive
    low, high, equal = params.get("min"), params.get("max"), params.get("equal")
    if equal is not None:
        return f"{prefix} exactly {equal}"
    if low is not None and high is not None:
        return f"{prefix} between {low} and {high}"

    bounds = []
    if low is not None:
        bounds.append(f"at least {low}")
    elif params.get("gt") is not None:
        bounds.append(f"greater than {params['gt']}")
    if high is not None:
        bounds.append(f"at most {high}")
    elif params.get("lt") is not None:
        bounds.append(f"less than {params['lt']}")

    if not bounds:
        return f"{prefix} within bounds"
    return f"{prefix} {' and '.join(bounds)}"


def validation_failure_from_pydantic(
    errors: Iterable[Mapping[str, Any]],
) -> ValidationFailure:
    """Build a ValidationFailure from pydantic / FastAPI ``errors()`` output."""
    field_errors: dict[str, list[FieldViolation]] = {}
    for error in errors:
        field = _field_name(error.get("loc", ()))
        field_errors.setdefault(field, []).append(_violation_of(error))
    return ValidationFailure(field_errors)


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(parts) or "request"


def _violation_of(error: Mapping[str, Any]) -> FieldViolation:
    error_type = str(error.get("type", "value_error"))
    ctx = error.get("ctx") or {}

    if error_type == "missing":
        return FieldViolation("required")
    if error_type in ("string_too_short", "too_short"):
        return FieldViolation("length", {"min": ctx.get("min_length")})
    if error_type in ("string_too_long", "too_long"):
        return FieldViolation("length", {"max": ctx.get("max_length")})
    if error_type == "greater_than_equal":
        return FieldViolation("range", {"min": ctx.get("ge")})
    if error_type == "greater_than":
        return FieldViolation("range", {"gt": ctx.get("gt")})
    if error_type == "less_than_equal":
        return FieldViolation("range", {"max": ctx.get("le")})
    if error_type == "less_than":
        return FieldViolation("range", {"lt": ctx.get("lt")})
    if error_type.startswith("url_"):
        return FieldViolation("url")
    if error_type == "value_error" and "email" in str(error.get("msg", "")).lower():
        return FieldViolation("email")
    return FieldViolation(error_type, dict(ctx))
