"""Response envelopes and error mapping."""

from polyglot.resp.envelope import R, status_code_for
from polyglot.resp.errors import (
    describe_rule,
    format_validation,
    map_error,
    validation_failure_from_pydantic,
)

__all__ = [
    "R",
    "describe_rule",
    "format_validation",
    "map_error",
    "status_code_for",
    "validation_failure_from_pydantic",
]
