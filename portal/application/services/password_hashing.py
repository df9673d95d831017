"""Password hashing strategies."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor

from werkzeug.security import check_password_hash, generate_password_hash

from portal.domain.users.repositories import PasswordHasher
from portal.shared.logging import logger


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted KDF hashes in werkzeug's ``method$salt$digest`` format."""

    def __init__(self, method: str = "scrypt", salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        return str(
            generate_password_hash(password, method=self._method, salt_length=self._salt_length)
        )

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError):
            logger.warning("password_hasher: stored hash is malformed")
            return False


class PooledPasswordHasher(PasswordHasher):
    """Runs a hasher on a worker pool so request threads only wait on a future."""

    def __init__(self, inner: PasswordHasher, *, max_workers: int = 4) -> None:
        self._inner = inner
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="password-hasher"
        )

    def submit_hash(self, password: str) -> Future[str]:
        return self._executor.submit(self._inner.hash, password)

    def submit_verify(self, password: str, hashed: str) -> Future[bool]:
        return self._executor.submit(self._inner.verify, password, hashed)

    def hash(self, password: str) -> str:
        return self.submit_hash(password).result()

    def verify(self, password: str, hashed: str) -> bool:
        return self.submit_verify(password, hashed).result()

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
        logger.debug("password_hasher: worker pool stopped")


__all__ = ["PooledPasswordHasher", "WerkzeugPasswordHasher"]
