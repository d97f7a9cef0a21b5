"""abcdecoder: decode ABC music notation into a structured document model."""

__version__ = "0.1.0"

from abcdecoder.decoder import Decoder, decode, decode_file  # noqa: E402,F401
from abcdecoder.errors import (  # noqa: E402,F401
    AbcError,
    FormatError,
    StreamError,
)
from abcdecoder.models import (  # noqa: E402,F401
    Chord,
    Document,
    Measure,
    Note,
    NoteGroup,
    Rest,
    Tune,
)
