"""Shared fixtures for Spendy tests."""

from datetime import datetime

import pytest

from spendy.audit import AuditLogger
from spendy.config import StorageSettings
from spendy.ledger import CategoryRegistry, TransactionLedger
from spendy.orchestrator import WalletStore
from spendy.services.storage import InMemoryGateway
from tests.helpers import local_noon


@pytest.fixture
def now() -> datetime:
    return local_noon(2025, 3, 15)


@pytest.fixture
def ledger(now) -> TransactionLedger:
    return TransactionLedger(clock=lambda: now, display_date_format="{month}/{day}/{year}")


@pytest.fixture
def registry() -> CategoryRegistry:
    return CategoryRegistry()


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def keys() -> StorageSettings:
    return StorageSettings()


@pytest.fixture
def store(gateway, keys, now) -> WalletStore:
    return WalletStore(
        gateway=gateway,
        audit_logger=AuditLogger(history_size=100),
        storage_settings=keys,
        clock=lambda: now,
        display_date_format="{month}/{day}/{year}",
        default_theme="light",
    )
