"""Business response codes.

Every code doubles as the catalog key of its localized message, so
``str(Code.NOT_FOUND)`` must resolve in each translation file.
"""

from enum import IntEnum


class Code(IntEnum):
    """Numeric codes carried in the ``code`` field of every envelope."""

    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500
    MISSING_PARAM = 901
    ILLEGAL_PARAM = 902

    def __str__(self) -> str:
        return str(self.value)
