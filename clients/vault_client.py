"""
Database URL lookup, from the environment or from HashiCorp Vault.

DATABASE_URL wins when set (local development). Otherwise one AppRole
login is made and invoices/database.url is read from KV v2, then cached
for the life of the process. Missing Vault configuration fails fast.
"""

import os
import logging

import hvac
from hvac.exceptions import Forbidden, InvalidPath, Unauthorized, VaultError

logger = logging.getLogger(__name__)

_SECRET_PATH = "invoices/database"
_SECRET_FIELD = "url"

_database_url: str | None = None


def _login() -> hvac.Client:
    """AppRole login using VAULT_ADDR / VAULT_ROLE_ID / VAULT_SECRET_ID."""
    vault_addr = os.getenv("VAULT_ADDR")
    role_id = os.getenv("VAULT_ROLE_ID")
    secret_id = os.getenv("VAULT_SECRET_ID")

    if not vault_addr:
        raise ValueError("DATABASE_URL or VAULT_ADDR environment variable is required")
    if not role_id or not secret_id:
        raise ValueError(
            "VAULT_ROLE_ID and VAULT_SECRET_ID environment variables are required"
        )

    client = hvac.Client(url=vault_addr, namespace=os.getenv("VAULT_NAMESPACE"))
    try:
        client.auth.approle.login(role_id=role_id, secret_id=secret_id)
    except VaultError as e:
        logger.error(f"AppRole authentication failed: {e}")
        raise PermissionError(f"AppRole authentication failed: {e}")

    if not client.is_authenticated():
        raise PermissionError("Vault authentication failed")
    return client


def _read_database_url(client: hvac.Client) -> str:
    try:
        response = client.secrets.kv.v2.read_secret_version(
            path=_SECRET_PATH, raise_on_deleted_version=True
        )
    except InvalidPath:
        raise PermissionError(f"Secret path '{_SECRET_PATH}' not found in Vault")
    except (Unauthorized, Forbidden) as e:
        raise PermissionError(f"Access denied to secret '{_SECRET_PATH}': {e}")

    secret = response["data"]["data"]
    if _SECRET_FIELD not in secret:
        raise KeyError(f"Field '{_SECRET_FIELD}' not found in secret '{_SECRET_PATH}'")
    return secret[_SECRET_FIELD]


def get_database_url() -> str:
    """
    PostgreSQL connection URL.

    Raises:
        ValueError: Neither DATABASE_URL nor the Vault settings are configured
        PermissionError: Vault login failed or the secret is not readable
        KeyError: The secret has no url field
    """
    global _database_url

    override = os.getenv("DATABASE_URL")
    if override:
        return override

    if _database_url is None:
        _database_url = _read_database_url(_login())
        logger.info(f"Database URL loaded from Vault ({_SECRET_PATH})")
    return _database_url
