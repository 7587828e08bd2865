"""Core primitives: flag codec, errors, logging and settings.

Nothing in ``bitcolumn.core`` depends on SQLAlchemy; the codec is usable on
plain integers.
"""

from bitcolumn.core.codec import (
    FlagList,
    SingleFlag,
    decode_all,
    encode_name_or_list,
    is_set,
    normalize,
    set_bit,
)
from bitcolumn.core.errors import (
    AccessorCollisionWarning,
    BitColumnError,
    BitWidthExceededError,
    ErrorCategory,
    ErrorContext,
    InvalidBitFieldSpecError,
    InvalidFlagValueError,
    UnknownFlagError,
)

__all__ = [
    "AccessorCollisionWarning",
    "BitColumnError",
    "BitWidthExceededError",
    "ErrorCategory",
    "ErrorContext",
    "FlagList",
    "InvalidBitFieldSpecError",
    "InvalidFlagValueError",
    "SingleFlag",
    "UnknownFlagError",
    "decode_all",
    "encode_name_or_list",
    "is_set",
    "normalize",
    "set_bit",
]
