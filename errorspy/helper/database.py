"""
Database error helpers.
Classifies psycopg exceptions into error kinds.
"""

from typing import List, Optional, Tuple, Type

import psycopg
from psycopg import errors

from ..model.kind import Kind

# Message of Go's database/sql ErrNoRows. Errors relayed from Go services
# carry it verbatim, there is no structured equivalent to test for.
NO_ROWS_MESSAGE = "no rows in result set"

# Checked in order, subclasses before their bases.
_DATABASE_KINDS: List[Tuple[Type[BaseException], Kind]] = [
    (errors.UniqueViolation, Kind.DUPLICATE_KEY),
    (errors.QueryCanceled, Kind.CANCELED),
    (errors.InsufficientPrivilege, Kind.PERMISSION),
    (psycopg.DataError, Kind.INVALID),
    (errors.DeadlockDetected, Kind.DATABASE),
    (errors.SerializationFailure, Kind.DATABASE),
    (errors.TransactionRollback, Kind.DATABASE),
    (psycopg.OperationalError, Kind.IO),
    (psycopg.Error, Kind.DATABASE),
]


def is_no_rows(err: Optional[BaseException]) -> bool:
    """
    Report whether err says a query returned no rows.

    This matches on message text only and breaks if the wording changes.
    Prefer checking the query result where possible.
    """
    if err is None:
        return False
    return NO_ROWS_MESSAGE in str(err)


def kind_from_database_error(err: Optional[BaseException]) -> Kind:
    """
    Map a psycopg exception to a Kind.

    :param err: Any exception.
    :returns: The matching kind, Kind.OTHER if err is not a database error.
    """
    for error_class, kind in _DATABASE_KINDS:
        if isinstance(err, error_class):
            return kind
    return Kind.OTHER
