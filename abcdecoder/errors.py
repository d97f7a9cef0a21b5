"""Exception hierarchy raised while decoding ABC documents."""


class AbcError(Exception):
    """Base class for every error raised by the decoder."""


class StreamError(AbcError, EOFError):
    """The underlying byte stream ran out before a read could complete."""


class FormatError(AbcError, ValueError):
    """The input is not well-formed ABC; decoding of the document is aborted."""


class NotAnAbcFile(FormatError):
    """Missing or malformed ``%abc`` line, or a file header without its blank line."""


class MissingReferenceNumber(FormatError):
    """A tune header did not start with an ``X:`` field."""


class MissingTitle(FormatError):
    """The second field of a tune header was not a ``T:`` field."""


class MalformedMeter(FormatError):
    """An ``M:`` value without a ``/`` or with non-integer parts."""


class MalformedDuration(FormatError):
    """A note length with ``/`` but no denominator digits."""


class MalformedPitch(FormatError):
    """A note token that does not start with a pitch letter."""


class InvalidReferenceNumber(FormatError):
    """An ``X:`` value that is not an unsigned integer."""


class NoPrecedingUnit(FormatError):
    """A broken-rhythm marker with no unit before it in the same note group."""


class MisplacedField(FormatError):
    """An information field that is not allowed where it appeared."""
