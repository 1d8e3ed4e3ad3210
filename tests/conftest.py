"""Shared fixtures for credential_guard tests."""
import pytest

from credential_guard.vault import (
    CredentialGuard,
    StaticDeviceInfo,
    VaultConfig,
    set_default_guard,
)

TEST_FINGERPRINT = "Linux-6.1-x86_64|en_US|24|0|8"


@pytest.fixture(scope="session")
def config():
    """Default vault configuration."""
    return VaultConfig()


@pytest.fixture(scope="session")
def device():
    """Fixed device fingerprint."""
    return StaticDeviceInfo(TEST_FINGERPRINT)


@pytest.fixture(scope="session")
def shared_guard(config, device):
    """Guard whose key is derived once for the whole test session."""
    return CredentialGuard(config=config, device=device)


@pytest.fixture
def guard(config, device):
    """Fresh guard with an empty key cache."""
    return CredentialGuard(config=config, device=device)


@pytest.fixture
def default_guard(shared_guard):
    """Install the shared guard as the process-wide default."""
    set_default_guard(shared_guard)
    yield shared_guard
    set_default_guard(None)
