"""
AES block-mode cipher
=====================
AES-128/192/256 in CBC, ECB, CFB, OFB or CTR.

The key size picks the strength, the mode picks the chaining:

    key:  16, 24 or 32 bytes, supplied by the caller, never generated here
    IV:   16 bytes (ignored by ECB)
    CBC/ECB output: PKCS#7 padded, always a whole number of 16-byte blocks
    CFB/OFB/CTR output: same length as the input

These modes are NOT authenticated. Tampering goes undetected unless you
add a MAC on top.

Dependencies: cryptography >= 41.0
"""

from typing import Union

from .block.selector import BlockMode, Primitive
from .block.session import CipherSession
from .block.streaming import StreamDecryptor, StreamEncryptor


class AESCipher:
    """AES in one of the five classic block modes."""

    def __init__(self, key: bytes, iv: bytes, mode: Union[BlockMode, str] = BlockMode.CBC):
        """
        Raises InvalidKey if the key is not 16, 24 or 32 bytes.
        OFB and CTR: never encrypt two messages under the same key and IV.
        """
        self._session = CipherSession(key, iv, mode)

    @property
    def key(self) -> bytes:
        return self._session.key

    @property
    def iv(self) -> bytes:
        return self._session.iv

    @property
    def mode(self) -> BlockMode:
        return self._session.mode

    @property
    def primitive(self) -> Primitive:
        return self._session.primitive

    def encrypt(self, plaintext: bytes) -> bytes:
        """Raises CipherProcessError on failure."""
        return self._session.encrypt(plaintext)

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Raises CipherProcessError on failure, including bad padding."""
        return self._session.decrypt(ciphertext)

    def make_block_encryptor(self) -> StreamEncryptor:
        return self._session.make_stream_encryptor()

    def make_block_decryptor(self) -> StreamDecryptor:
        return self._session.make_stream_decryptor()

    def __repr__(self):
        return f"AESCipher({self._session.primitive})"
