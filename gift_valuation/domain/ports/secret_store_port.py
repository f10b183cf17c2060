"""
Port (interface) for secret stores holding the market data credential.
Infrastructure adapters (e.g. SecretsManagerAdapter) must implement this interface.
"""

from abc import ABC, abstractmethod


class ISecretStore(ABC):
    @abstractmethod
    def get_secret(self, secret_id: str) -> dict[str, str]:
        """Fetch a secret by id or ARN and return it as key-value pairs."""
        ...
