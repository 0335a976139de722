"""
Primitive Selector
==================
Maps (key length, block mode) to exactly one AES primitive.

    key length   strength
    ----------   --------
    16 bytes     AES-128
    24 bytes     AES-192
    32 bytes     AES-256

Every key length supports all five modes, so the table holds 15 entries.
It is built once, at import time. A valid key length with no entry is a
bug in this module, not a caller error, and trips an assertion.

    CBC, ECB    block-aligned, PKCS#7 padded
    CFB         128-bit feedback, no padding
    OFB, CTR    keystream modes, no padding. Never reuse a (key, IV) pair.

Dependencies: cryptography >= 41.0 (CFB/OFB taken from hazmat.decrepit when present)
"""

import enum
from dataclasses import dataclass
from typing import Dict, Tuple, Union

from cryptography.hazmat.primitives.ciphers import modes

# CFB and OFB moved to the decrepit namespace; the old location warns and
# is slated for removal. Releases without the decrepit modes still carry them.
try:
    from cryptography.hazmat.decrepit.ciphers.modes import CFB, OFB
except ImportError:
    from cryptography.hazmat.primitives.ciphers.modes import CFB, OFB

from ..errors import InvalidKey

KEY_SIZES  = (16, 24, 32)
IV_SIZE    = 16   # AES block, every mode that takes one
BLOCK_SIZE = 16


class BlockMode(enum.Enum):
    CBC = "cbc"
    ECB = "ecb"
    CFB = "cfb"
    OFB = "ofb"
    CTR = "ctr"

    @classmethod
    def coerce(cls, mode: Union["BlockMode", str]) -> "BlockMode":
        if isinstance(mode, cls):
            return mode
        try:
            return cls(str(mode).lower())
        except ValueError:
            raise ValueError(
                f"Unknown block mode {mode!r}; expected one of "
                f"{', '.join(m.value for m in cls)}."
            ) from None

    @property
    def is_stream(self) -> bool:
        """True for keystream modes where (key, IV) reuse leaks plaintext."""
        return self in (BlockMode.OFB, BlockMode.CTR)


@dataclass(frozen=True)
class Primitive:
    """One concrete transform: a key size bound to a block mode."""

    name:     str
    key_size: int
    mode:     BlockMode
    padded:   bool

    @property
    def key_bits(self) -> int:
        return self.key_size * 8

    def make_mode(self, iv: bytes) -> modes.Mode:
        """Build the `cryptography` mode object. May raise ValueError on a bad IV."""
        if self.mode is BlockMode.CBC:
            return modes.CBC(iv)
        if self.mode is BlockMode.ECB:
            return modes.ECB()
        if self.mode is BlockMode.CFB:
            return CFB(iv)
        if self.mode is BlockMode.OFB:
            return OFB(iv)
        return modes.CTR(iv)

    def __str__(self):
        return self.name


_PADDED_MODES = (BlockMode.CBC, BlockMode.ECB)


def _build_table() -> Dict[Tuple[int, BlockMode], Primitive]:
    table = {}
    for key_size in KEY_SIZES:
        for mode in BlockMode:
            table[(key_size, mode)] = Primitive(
                name=f"aes-{key_size * 8}-{mode.value}",
                key_size=key_size,
                mode=mode,
                padded=mode in _PADDED_MODES,
            )
    return table


PRIMITIVES: Dict[Tuple[int, BlockMode], Primitive] = _build_table()


def resolve_primitive(key_length: int, mode: Union[BlockMode, str]) -> Primitive:
    """
    Resolve the primitive for a key of `key_length` bytes in `mode`.
    Raises InvalidKey before the mode is even looked at.
    """
    if key_length not in KEY_SIZES:
        raise InvalidKey("AES key must be 16, 24 or 32 bytes.")
    mode = BlockMode.coerce(mode)
    primitive = PRIMITIVES.get((key_length, mode))
    assert primitive is not None, f"no primitive registered for {key_length}B/{mode.value}"
    return primitive
