"""
Access key credentials used to sign SMS requests.
"""

from dataclasses import dataclass, field

from .exceptions import ConfigurationError

# Characters that would break the Authorization header layout
_FORBIDDEN_KEY_ID_CHARS = frozenset(",;=")


@dataclass(frozen=True)
class Credential:
    """
    Immutable AccessKey pair.

    The secret is excluded from ``repr()`` so it never ends up in logs or
    tracebacks.

    Raises:
        ConfigurationError: If either value is missing or the key id contains
            characters that cannot be embedded in the Authorization header
    """

    access_key_id: str
    access_key_secret: str = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.access_key_id, str) or not self.access_key_id:
            raise ConfigurationError("access_key_id cannot be empty")

        if not isinstance(self.access_key_secret, str) or not self.access_key_secret:
            raise ConfigurationError("access_key_secret cannot be empty")

        try:
            self.access_key_secret.encode('utf-8')
        except UnicodeEncodeError:
            raise ConfigurationError("access_key_secret is not valid UTF-8") from None

        for char in self.access_key_id:
            if char in _FORBIDDEN_KEY_ID_CHARS or char.isspace() or not char.isprintable():
                raise ConfigurationError(
                    f"access_key_id contains an invalid character: {char!r}"
                )

    @property
    def secret_bytes(self) -> bytes:
        """UTF-8 bytes of the secret, used as the HMAC key."""
        return self.access_key_secret.encode('utf-8')
