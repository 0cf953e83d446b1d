"""
API key resolution.

The key comes from exactly one authoritative source per provider mode:

- ``env``: the CONTENTIZER_API_KEY environment variable
- ``keychain`` / ``local``: the OS secure store (via keyring), falling back
  to the environment variable in non-production builds only
"""

import logging
import os
from typing import Mapping, Optional

import keyring
from keyring.errors import KeyringError

from ..config.loader import API_KEY_ENV
from ..errors import CredentialMissing, InvalidCredential, StoreIOError, UnknownProviderMode

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "contentizer"
KEYRING_ACCOUNT = "api_key"


class SecretStore:
    """Single named secret in the OS secure store.

    Thin wrapper over ``keyring`` so callers can substitute a fake.
    """

    def __init__(self, service: str = KEYRING_SERVICE, account: str = KEYRING_ACCOUNT):
        self.service = service
        self.account = account

    def get(self) -> Optional[str]:
        try:
            return keyring.get_password(self.service, self.account)
        except KeyringError as e:
            logger.warning("Secure store read failed for %s: %s", self.service, e)
            return None

    def set(self, value: str) -> None:
        try:
            keyring.set_password(self.service, self.account, value)
        except KeyringError as e:
            raise StoreIOError(f"Failed to write API key to secure store: {e}") from e


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CredentialResolver:
    """Resolves and stores the provider API key."""

    def __init__(
        self,
        secret_store: Optional[SecretStore] = None,
        environ: Optional[Mapping[str, str]] = None,
        production: bool = False,
    ):
        self.secret_store = secret_store if secret_store is not None else SecretStore()
        self.environ = os.environ if environ is None else environ
        self.production = production

    def _from_env(self) -> Optional[str]:
        return _clean(self.environ.get(API_KEY_ENV))

    def resolve(self, provider_mode: str) -> str:
        """Return the API key for ``provider_mode``.

        Raises:
            CredentialMissing: If no key is available from the mode's source
            UnknownProviderMode: If the mode isn't env, keychain or local
        """
        if provider_mode == "env":
            key = self._from_env()
            if key is None:
                raise CredentialMissing(
                    f"API key not set. Set {API_KEY_ENV} in your environment."
                )
            return key

        if provider_mode in ("keychain", "local"):
            key = _clean(self.secret_store.get())
            if key is not None:
                return key
            if not self.production:
                key = self._from_env()
                if key is not None:
                    logger.debug("Secure store empty; using %s (development build)", API_KEY_ENV)
                    return key
            raise CredentialMissing("API key not set. Save an API key in Settings first.")

        raise UnknownProviderMode(provider_mode)

    def has_key(self, provider_mode: str) -> bool:
        try:
            self.resolve(provider_mode)
        except (CredentialMissing, UnknownProviderMode):
            return False
        return True

    def store(self, value: str) -> None:
        """Overwrite the secure store entry with the trimmed ``value``.

        Raises:
            InvalidCredential: If ``value`` is empty after trimming
            StoreIOError: If the secure store rejects the write
        """
        key = _clean(value)
        if key is None:
            raise InvalidCredential()
        self.secret_store.set(key)
        logger.info("API key saved to secure store")
