"""
Errors raised by the block-cipher engine.

    CipherError
    ├── InvalidKey          key length not in {16, 24, 32}
    ├── CipherInitError     context could not be created for a direction
    ├── CipherUpdateError   a streaming transform step failed
    ├── CipherFinishError   flush / padding step failed, or nothing to finish
    └── CipherProcessError  one-shot encrypt()/decrypt() failed (carries .reason)

None of these are transient. Nothing is retried.
"""


class CipherError(Exception):
    """Base class for every engine failure."""

    def __init__(self, reason: str = ""):
        super().__init__(reason)
        self.reason = reason


class InvalidKey(CipherError, ValueError):
    pass


class CipherInitError(CipherError):
    pass


class CipherUpdateError(CipherError):
    pass


class CipherFinishError(CipherError):
    pass


class CipherProcessError(CipherError):
    """Normalised failure of a one-shot call. The cause is chained."""
