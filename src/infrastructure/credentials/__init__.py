"""Credential repositories."""

from src.infrastructure.credentials.settings_credential_repository import (
    SettingsCredentialRepository,
)

__all__ = ["SettingsCredentialRepository"]
