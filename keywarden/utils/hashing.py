import hashlib
import secrets

from passlib.context import CryptContext

from keywarden.utils.settings.auth import AuthSettings

SECRET_BYTES: int = 32  # 256 bits of entropy per generated secret

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=AuthSettings().BCRYPT_ROUNDS,
)


def _prepare(plain: str) -> str:
    # bcrypt truncates inputs at 72 bytes, so pre-hash long secrets
    if len(plain.encode("utf-8")) > 72:
        return hashlib.sha256(plain.encode("utf-8")).hexdigest()
    return plain


class HashingService:
    """Generation and one-way verification of credential secrets.

    Plaintext never leaves the caller of :meth:`generate`; only the bcrypt
    verification form is meant to be stored.
    """

    @staticmethod
    def generate_secret() -> str:
        """
        Produce a URL-safe random secret.

        Raises whatever the OS entropy source raises; callers must not retry.
        """
        return secrets.token_urlsafe(SECRET_BYTES)

    @staticmethod
    def hash_secret(plain: str) -> str:
        """
        Hash a secret using bcrypt with salt.

        Args:
            plain: The plain text secret to hash

        Returns:
            The verification form as a string
        """
        return pwd_context.hash(_prepare(plain))

    @classmethod
    def generate(cls) -> tuple[str, str]:
        """Return a fresh ``(plaintext, verification_form)`` pair."""
        plain = cls.generate_secret()
        return plain, cls.hash_secret(plain)

    @staticmethod
    def verify_secret(candidate: str, verification_form: str) -> bool:
        """
        Verify a candidate secret against its stored verification form.

        Never raises: empty, malformed or non-string input returns False.
        """
        if not isinstance(candidate, str) or not isinstance(verification_form, str):
            return False
        if not candidate or not verification_form:
            return False
        try:
            return pwd_context.verify(_prepare(candidate), verification_form)
        except (ValueError, TypeError):
            return False
