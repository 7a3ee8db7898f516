"""
Typed errors raised by the time-accounting engine.

All of them derive from ValueError so callers that already treat bad input
as a ValueError keep working; the ``code`` attribute is what the API puts in
its error body.
"""


class TimeEngineError(ValueError):
    """Base class for engine input errors."""

    code = "INVALID_REQUEST"


class InvalidDate(TimeEngineError):
    code = "INVALID_DATE"


class InvalidTime(TimeEngineError):
    code = "INVALID_TIME"


class NonPositiveDuration(TimeEngineError):
    code = "NON_POSITIVE_DURATION"


class MalformedRecord(TimeEngineError):
    """A stored record that cannot be used for accounting."""

    code = "MALFORMED_RECORD"


class UnsupportedUnit(TimeEngineError):
    code = "UNSUPPORTED_UNIT"
