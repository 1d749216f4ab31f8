"""
Transport-level error codes and operation labels.
"""

from http import HTTPStatus


class Code(int):
    """
    Opaque classification code, conventionally an HTTP status.
    Zero means unset.
    """

    def __repr__(self) -> str:
        return f"Code({int(self)})"


class Op(str):
    """
    Name of the operation that failed, e.g. "db.Insert".
    Distinguishes an operation label from a plain error message.
    """

    def __repr__(self) -> str:
        return f"Op({str.__repr__(self)})"


CODE_BAD_REQUEST = Code(HTTPStatus.BAD_REQUEST)  # Request was malformed.
CODE_SERVER_ERROR = Code(HTTPStatus.INTERNAL_SERVER_ERROR)  # Unspecified server error.
CODE_INVALID = Code(HTTPStatus.UNPROCESSABLE_ENTITY)  # A business logic related error.
CODE_UNAUTHORIZED = Code(HTTPStatus.UNAUTHORIZED)  # The user has not been authenticated.
CODE_FORBIDDEN = Code(HTTPStatus.FORBIDDEN)  # The user is not authorized.
CODE_NOT_FOUND = Code(HTTPStatus.NOT_FOUND)  # The resource was not found.
