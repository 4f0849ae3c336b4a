# server/core/credentials.py

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import NamedTuple
from passlib.crypto.digest import pbkdf2_hmac
from passlib.utils import consteq, getrandbytes, rng
from core.errors import DerivationError


logger = logging.getLogger(__name__)

KDF_DIGEST = "sha256"


class Credential(NamedTuple):
    hash: bytes
    salt: bytes


class CredentialStore:
    """
    Derives and verifies PBKDF2-HMAC-SHA256 password keys.

    Derivation is deliberately slow, so it runs on a small worker pool and
    gives up with `DerivationError` once `timeout` seconds have passed.
    A timed-out derivation that already started keeps its worker until it
    finishes; `workers` has to leave room for those stragglers.
    """

    def __init__(self, iterations: int = 310_000, salt_bytes: int = 16, key_length: int = 32,
                 workers: int = 4, timeout: float = 10.0):
        self.iterations = iterations
        self.salt_bytes = salt_bytes
        self.key_length = key_length
        self.timeout = timeout
        self._pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="kdf")
        self._dummy = Credential(hash=bytes(key_length), salt=bytes(salt_bytes))

    @classmethod
    def from_settings(cls, settings) -> "CredentialStore":
        return cls(
            iterations=settings.kdf_iterations,
            salt_bytes=settings.kdf_salt_bytes,
            key_length=settings.kdf_key_length,
            workers=settings.kdf_workers,
            timeout=settings.kdf_timeout_seconds,
        )

    def derive(self, password: str) -> Credential:
        salt = getrandbytes(rng, self.salt_bytes)
        return Credential(hash=self._derive_key(password, salt), salt=salt)

    def verify(self, password: str, stored: Credential) -> bool:
        key = self._derive_key(password, stored.salt)
        return consteq(key, stored.hash)

    def verify_dummy(self, password: str) -> bool:
        # same cost as a real check, so an unknown username can't be told apart by latency
        self.verify(password, self._dummy)
        return False

    def shutdown(self):
        self._pool.shutdown(wait=False)

    def _derive_key(self, password: str, salt: bytes) -> bytes:
        future = self._pool.submit(
            pbkdf2_hmac, KDF_DIGEST, password.encode("utf-8"), salt, self.iterations, self.key_length
        )
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout as e:
            future.cancel()
            logger.error("Key derivation did not finish within %.1fs", self.timeout)
            raise DerivationError("Password derivation timed out") from e
        except Exception as e:
            logger.exception("Key derivation failed")
            raise DerivationError() from e
