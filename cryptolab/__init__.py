"""
cryptolab — AES block-mode engine
=================================
Streaming AES encryption and decryption over the five classic modes.

Components:
    selector   (key length, mode) → one of 15 AES primitives
    session    stateful encrypt/decrypt engine, update* → finish
    streaming  encrypt-only / decrypt-only views for incremental input
    aes        AESCipher facade
    errors     InvalidKey, CipherInitError, CipherUpdateError,
               CipherFinishError, CipherProcessError

Keys and IVs are always supplied by the caller.
"""

__version__ = "1.0.0"

from .errors           import (CipherError, InvalidKey, CipherInitError,
                               CipherUpdateError, CipherFinishError,
                               CipherProcessError)
from .block.selector   import BlockMode, Primitive, resolve_primitive
from .block.session    import CipherSession, SessionState
from .block.streaming  import StreamEncryptor, StreamDecryptor
from .aes              import AESCipher

__all__ = [
    "AESCipher",
    "BlockMode",
    "Primitive",
    "resolve_primitive",
    "CipherSession",
    "SessionState",
    "StreamEncryptor",
    "StreamDecryptor",
    "CipherError",
    "InvalidKey",
    "CipherInitError",
    "CipherUpdateError",
    "CipherFinishError",
    "CipherProcessError",
]
