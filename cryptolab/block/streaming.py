"""
Streaming views over one CipherSession direction.

    with session.make_stream_encryptor() as enc:
        for chunk in iter(lambda: f.read(65536), b""):
            enc.update(chunk)
        ciphertext = enc.finish()

Leaving the block without finish() releases the context.
"""

from .session import CipherSession


class StreamEncryptor:
    """Encryption path of a session, nothing else."""

    def __init__(self, session: CipherSession):
        self._session = session

    def update(self, chunk: bytes):
        self._session.update_encryption(chunk)

    @property
    def bytes_out(self) -> int:
        return self._session.encryption_bytes_out

    def finish(self) -> bytes:
        return self._session.finish_encryption()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self._session.release_encryption()
        return False


class StreamDecryptor:
    """Decryption path of a session, nothing else."""

    def __init__(self, session: CipherSession):
        self._session = session

    def update(self, chunk: bytes):
        self._session.update_decryption(chunk)

    @property
    def bytes_out(self) -> int:
        return self._session.decryption_bytes_out

    def finish(self) -> bytes:
        return self._session.finish_decryption()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self._session.release_decryption()
        return False
