"""Uniform response envelope ``{"code", "message", "data"}``.

Business failures travel as HTTP 200 with a non-OK ``code``. Only the
internal-error code is sent with HTTP 500.
"""

from typing import Any, Generic, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from polyglot.core.codes import Code
from polyglot.core.config import settings
from polyglot.i18n.context import get_locale
from polyglot.i18n.translator import message_of
from polyglot.resp.errors import map_error

T = TypeVar("T")


class R(BaseModel, Generic[T]):
    """Response envelope returned by every endpoint.

    Example:
        @router.get("/ping")
        async def ping() -> R[Ping]:
            return R.ok(Ping(pong=True))
    """

    code: int
    message: str
    data: T | None = None

    @classmethod
    def ok(cls, data: T | None = None, message: str | None = None) -> "R[T]":
        """Success envelope, message localized for the request unless given."""
        code = int(Code.OK)
        return cls(
            code=code,
            message=message_of(code) if message is None else message,
            data=data,
        )

    @classmethod
    def err(cls, err: BaseException, lang: str | None = None) -> "R[T]":
        """Error envelope for any AppError (or unexpected exception)."""
        locale = lang or get_locale(settings.DEFAULT_LANGUAGE)
        code, message = map_error(err, locale)
        return cls(code=code, message=message, data=None)

    @classmethod
    def from_result(cls, result: Any) -> "R[T]":
        """Wrap a handler result that is either a value or an exception."""
        if isinstance(result, BaseException):
            return cls.err(result)
        return cls.ok(result)

    @property
    def is_ok(self) -> bool:
        return self.code == Code.OK

    @property
    def status_code(self) -> int:
        return status_code_for(self.code)

    def to_response(self, headers: dict[str, str] | None = None) -> JSONResponse:
        """Serialize with the HTTP status matching ``code``."""
        return JSONResponse(
            status_code=self.status_code,
            content=self.model_dump(mode="json"),
            headers=headers,
        )


def status_code_for(code: int) -> int:
    """HTTP status for a business code: 500 for internal errors, else 200."""
    return 500 if code == Code.INTERNAL_SERVER_ERROR else 200
