"""Unit tests for SettingsCredentialRepository.

Tests cover:
- Lookup by raw key (hashed) and by id
- Disabled keys
- Duplicate detection at construction
"""

import pytest

from src.domain.entities import hash_api_key
from src.infrastructure.credentials.settings_credential_repository import (
    SettingsCredentialRepository,
)
from tests.conftest import TEST_API_KEY


@pytest.mark.unit
class TestLookup:
    """Test find_by_key() and find_by_id()."""

    def test_find_by_raw_key(self, credentials, usage_plan):
        """Test the presented key resolves to its credential and plan."""
        credential = credentials.find_by_key(TEST_API_KEY)

        assert credential is not None
        assert credential.id == "tester"
        assert credential.plan == usage_plan
        assert credential.key_hash == hash_api_key(TEST_API_KEY)

    def test_raw_key_is_not_retained(self, credentials):
        """Test only the digest is stored."""
        assert credentials.find_by_id("tester").key_hash != TEST_API_KEY

    def test_unknown_key(self, credentials):
        """Test an unprovisioned key resolves to nothing."""
        assert credentials.find_by_key("not-a-key") is None

    def test_disabled_key_is_refused(self, credentials):
        """Test disabled keys cannot authenticate but stay addressable by id."""
        assert credentials.find_by_key("retired-key") is None
        assert credentials.find_by_id("retired").enabled is False
        assert len(credentials) == 2


@pytest.mark.unit
class TestProvisioning:
    """Test construction-time validation."""

    def test_duplicate_id(self, usage_plan):
        """Test a key id may be provisioned once."""
        with pytest.raises(ValueError, match="Duplicate API key id"):
            SettingsCredentialRepository([("web", "a"), ("web", "b")], usage_plan)

    def test_duplicate_raw_key(self, usage_plan):
        """Test two ids cannot share a raw key."""
        with pytest.raises(ValueError, match="duplicates another key"):
            SettingsCredentialRepository([("web", "same"), ("ios", "same")], usage_plan)
