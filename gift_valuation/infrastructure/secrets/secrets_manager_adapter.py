"""
Infrastructure adapter: AWS Secrets Manager -> ISecretStore.

load_into_env() is called once by the composition root, before settings are
read, so the market data credential can live in Secrets Manager instead of .env.
"""

import json
import os
from typing import Any

import boto3

from gift_valuation.domain.ports.secret_store_port import ISecretStore

API_KEY_ENV = "MASSIVE_API_KEY"


class SecretsManagerAdapter(ISecretStore):
    """Fetches secrets from AWS Secrets Manager."""

    def __init__(self, region: str | None = None, client: Any = None) -> None:
        self._client = client or boto3.client(
            "secretsmanager",
            region_name=region or os.environ.get("AWS_DEFAULT_REGION", "us-east-1"),
        )

    def get_secret(self, secret_id: str) -> dict[str, str]:
        """Fetch a secret by id or ARN.

        A JSON object secret is returned as-is (values stringified); a plain
        string secret is treated as the market data API key.
        """
        raw = self._client.get_secret_value(SecretId=secret_id)["SecretString"]
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return {API_KEY_ENV: raw.strip()}
        if not isinstance(parsed, dict):
            return {API_KEY_ENV: raw.strip()}
        return {key: str(value) for key, value in parsed.items()}

    def load_into_env(self, secret_id: str, environ: dict[str, str] | None = None) -> None:
        """Export every key of the secret into *environ* (default: os.environ)."""
        target = os.environ if environ is None else environ
        for key, value in self.get_secret(secret_id).items():
            target[key] = value
