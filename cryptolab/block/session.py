"""
Cipher Session
==============
Stateful AES engine over one resolved primitive.

A session owns two independent sub-machines, one per direction:

    IDLE ──update()/init──▶ ACTIVE ──finish()──▶ FINISHED ──update()──▶ ACTIVE
                              │
                           failure ──▶ FAILED ──init()──▶ ACTIVE

A FAILED direction rejects update and finish until it is explicitly
re-initialised; the one-shot encrypt()/decrypt() calls always re-initialise.

Each direction holds its own `cryptography` cipher context, padding context
and output accumulator. Contexts are created lazily, on the first update of a
run, and dropped on finish, on any failure, or when the session is closed.

finish() always returns every byte produced since the run began: the
concatenation of all update outputs followed by the final flush.

Encryption grows output in whole blocks for CBC/ECB (the last partial block
is held back until finish, where PKCS#7 padding is applied). Decryption holds
back the last block until finish because the padding can only be stripped
once the end of the ciphertext is known.

Not thread-safe. Drive each direction from one thread at a time.

Dependencies: cryptography >= 41.0
"""

import enum
import logging
from typing import Union

from cryptography.exceptions import AlreadyFinalized, UnsupportedAlgorithm
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from ..errors import (
    CipherError,
    CipherFinishError,
    CipherInitError,
    CipherProcessError,
    CipherUpdateError,
)
from .selector import BLOCK_SIZE, BlockMode, Primitive, resolve_primitive

logger = logging.getLogger(__name__)

_BACKEND_ERRORS = (ValueError, TypeError, AlreadyFinalized, UnsupportedAlgorithm)
_BYTES_LIKE     = (bytes, bytearray, memoryview)


class SessionState(enum.Enum):
    IDLE     = "idle"
    ACTIVE   = "active"
    FINISHED = "finished"
    FAILED   = "failed"


_STARTABLE = (SessionState.IDLE, SessionState.FINISHED)


class _Direction:
    """One direction of a session. Subclasses supply the transform and flush."""

    name = ""

    def __init__(self, primitive: Primitive):
        self._primitive = primitive
        self._context   = None
        self._padding   = None
        self._output    = bytearray()
        self.state      = SessionState.IDLE
        self.runs       = 0

    @property
    def bytes_out(self) -> int:
        """Bytes produced so far in the current (or last) run."""
        return len(self._output)

    @property
    def active(self) -> bool:
        return self.state is SessionState.ACTIVE

    def begin(self, key: bytes, iv: bytes):
        if self.active:
            logger.warning(f"{self._primitive} {self.name}: abandoning unfinished run")
        self.release()
        self._output = bytearray()
        try:
            cipher = Cipher(algorithms.AES(key), self._primitive.make_mode(iv))
            self._context, self._padding = self._open(cipher)
        except _BACKEND_ERRORS as exc:
            self._fail()
            raise CipherInitError(f"{self.name} init failed: {exc}") from exc
        self.state = SessionState.ACTIVE
        self.runs += 1
        logger.debug(f"{self._primitive} {self.name}: run {self.runs} started")

    def update(self, chunk: bytes):
        if self.state is SessionState.FAILED:
            raise CipherUpdateError(f"{self.name} failed earlier; re-initialise first")
        if not self.active:
            raise CipherUpdateError(f"{self.name} update outside an active run")
        try:
            out = self._transform(chunk)
        except _BACKEND_ERRORS as exc:
            self._fail()
            raise CipherUpdateError(f"{self.name} update failed: {exc}") from exc
        self._output += out
        logger.debug(f"{self._primitive} {self.name}: {len(chunk)}B in, {len(out)}B out")

    def finish(self) -> bytes:
        if self.state is SessionState.FAILED:
            raise CipherFinishError(f"{self.name} failed earlier; re-initialise first")
        if not self.active:
            raise CipherFinishError(f"{self.name} invalid or missing parameters")
        try:
            tail = self._flush()
        except _BACKEND_ERRORS as exc:
            self._fail()
            raise CipherFinishError(f"{self.name} finish failed: {exc}") from exc
        self._output += tail
        result = bytes(self._output)
        self.release()
        self.state = SessionState.FINISHED
        logger.debug(f"{self._primitive} {self.name}: finished, {len(result)}B total")
        return result

    def release(self):
        """Drop the cipher context. Safe to call in any state."""
        self._context = None
        self._padding = None
        if self.active:
            self.state = SessionState.IDLE

    def _fail(self):
        self._context = None
        self._padding = None
        self.state = SessionState.FAILED
        logger.debug(f"{self._primitive} {self.name}: run failed")

    def _open(self, cipher: Cipher):
        raise NotImplementedError

    def _transform(self, chunk: bytes) -> bytes:
        raise NotImplementedError

    def _flush(self) -> bytes:
        raise NotImplementedError


class _EncryptionDirection(_Direction):
    name = "encryption"

    def _open(self, cipher):
        padder = padding.PKCS7(BLOCK_SIZE * 8).padder() if self._primitive.padded else None
        return cipher.encryptor(), padder

    def _transform(self, chunk):
        if self._padding is not None:
            chunk = self._padding.update(chunk)
        return self._context.update(chunk)

    def _flush(self):
        out = b""
        if self._padding is not None:
            out = self._context.update(self._padding.finalize())
        return out + self._context.finalize()


class _DecryptionDirection(_Direction):
    name = "decryption"

    def _open(self, cipher):
        unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder() if self._primitive.padded else None
        return cipher.decryptor(), unpadder

    def _transform(self, chunk):
        out = self._context.update(chunk)
        if self._padding is not None:
            out = self._padding.update(out)
        return out

    def _flush(self):
        # Step 1: flush the decryptor. Fails on a ciphertext that is not
        # block-aligned for CBC/ECB.
        recovered = self._context.finalize()
        if self._padding is None:
            return recovered
        # Step 2: strip PKCS#7 from the held-back final block.
        valid = self._padding.update(recovered) + self._padding.finalize()
        logger.debug(f"{self._primitive} decryption: {len(valid)}B valid after unpadding")
        return valid


class CipherSession:
    """
    AES session bound to one (key, IV, mode).

    The key length picks the primitive and is checked here. The IV is not:
    it must be exactly 16 bytes for every mode except ECB (which ignores it),
    and a wrong length surfaces as CipherInitError on first use.
    """

    def __init__(self, key: bytes, iv: bytes, mode: Union[BlockMode, str]):
        if not isinstance(key, _BYTES_LIKE):
            raise TypeError(f"AES key must be bytes-like, not {type(key).__name__}.")
        if not isinstance(iv, _BYTES_LIKE):
            raise TypeError(f"IV must be bytes-like, not {type(iv).__name__}.")
        key = bytes(key)
        self._primitive = resolve_primitive(len(key), mode)
        self._key = key
        self._iv  = bytes(iv)
        self._enc = _EncryptionDirection(self._primitive)
        self._dec = _DecryptionDirection(self._primitive)
        logger.info(f"CipherSession {self._primitive} ready")

    @property
    def key(self) -> bytes:
        return self._key

    @property
    def iv(self) -> bytes:
        return self._iv

    @property
    def mode(self) -> BlockMode:
        return self._primitive.mode

    @property
    def primitive(self) -> Primitive:
        return self._primitive

    @property
    def encryption_state(self) -> SessionState:
        return self._enc.state

    @property
    def decryption_state(self) -> SessionState:
        return self._dec.state

    @property
    def encryption_bytes_out(self) -> int:
        return self._enc.bytes_out

    @property
    def decryption_bytes_out(self) -> int:
        """Plaintext released so far; CBC/ECB hold the last block until finish."""
        return self._dec.bytes_out

    # ── encryption ───────────────────────────────────────────────────────────

    def init_encryption(self):
        if self._enc.runs and self.mode.is_stream:
            # Same key and IV again: the keystream repeats.
            logger.warning(f"{self._primitive}: re-encrypting with the same key and IV")
        self._enc.begin(self._key, self._iv)

    def update_encryption(self, chunk: bytes):
        """Encrypt `chunk` into the session's buffer, starting a run if needed."""
        if self._enc.state in _STARTABLE:
            self.init_encryption()
        self._enc.update(chunk)

    def finish_encryption(self) -> bytes:
        """Flush and pad the final block. Returns the whole run's ciphertext."""
        return self._enc.finish()

    def release_encryption(self):
        self._enc.release()

    def encrypt(self, data: bytes) -> bytes:
        """One-shot: init, update(data), finish."""
        try:
            self.init_encryption()
            self._enc.update(data)
            return self._enc.finish()
        except CipherError as exc:
            raise CipherProcessError("encryption failed") from exc

    # ── decryption ───────────────────────────────────────────────────────────

    def init_decryption(self):
        self._dec.begin(self._key, self._iv)

    def update_decryption(self, chunk: bytes):
        if self._dec.state in _STARTABLE:
            self.init_decryption()
        self._dec.update(chunk)

    def finish_decryption(self) -> bytes:
        """
        Flush the decryptor and strip padding. Returns the whole run's
        plaintext. Raises CipherFinishError on truncated input or bad padding.
        """
        return self._dec.finish()

    def release_decryption(self):
        self._dec.release()

    def decrypt(self, data: bytes) -> bytes:
        """One-shot: init, update(data), finish."""
        try:
            self.init_decryption()
            self._dec.update(data)
            return self._dec.finish()
        except CipherError as exc:
            raise CipherProcessError("decryption failed") from exc

    # ── streaming views / scope ──────────────────────────────────────────────

    def make_stream_encryptor(self) -> "StreamEncryptor":
        from .streaming import StreamEncryptor
        return StreamEncryptor(self)

    def make_stream_decryptor(self) -> "StreamDecryptor":
        from .streaming import StreamDecryptor
        return StreamDecryptor(self)

    def close(self):
        """Release both directions' contexts."""
        self._enc.release()
        self._dec.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self):
        return (f"CipherSession({self._primitive}, enc={self._enc.state.value}, "
                f"dec={self._dec.state.value})")
