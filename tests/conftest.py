"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import webhook` to work when
running tests, simulating the Lambda environment where code is deployed
from the src/ directory.
"""

import os
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add repository root AND src/ to sys.path if missing.

    The src/ directory is added to simulate Lambda's import behavior,
    where Code.from_asset("src") makes src/ the root of the package.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"

    root_str = str(repo_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Offline-friendly defaults so nothing reaches AWS or the store.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("ENVIRONMENT", "dev")

# Lambda environment variables used by handlers
os.environ.setdefault("BC_STORE_HASH", "abc123")
os.environ.setdefault("BC_API_TOKEN", "test-token-1234")
os.environ.setdefault("DATE_ATTRIBUTE_ID", "7")
os.environ.setdefault("VIP_GROUP_ID", "2")
os.environ.setdefault("MIN_QUANTITY", "5")

from models.customer import Customer, QualificationRecord  # noqa: E402
from models.order import LineItem, Order  # noqa: E402
from utils.error_handling import DirectoryError  # noqa: E402

ATTRIBUTE_ID = 7
VIP_GROUP = 2
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeDirectory:
    """
    In-memory stand-in for the store API.

    Records every write in ``calls``; ``fail`` maps a method name to the
    DirectoryError it should raise.
    """

    def __init__(self):
        self.customers: Dict[int, int] = {}
        self.orders: Dict[int, Optional[int]] = {}
        self.line_items: Dict[int, List[int]] = {}
        self.records: Dict[int, QualificationRecord] = {}
        self.calls: List[tuple] = []
        self.fail: Dict[str, DirectoryError] = {}
        self._next_record_id = 100

    def _check(self, name):
        if name in self.fail:
            raise self.fail[name]

    # seeding helpers
    def add_customer(self, customer_id: int, group_id: int = 0) -> None:
        self.customers[customer_id] = group_id

    def add_order(self, order_id: int, customer_id: Optional[int], quantities: List[int]) -> None:
        self.orders[order_id] = customer_id
        self.line_items[order_id] = quantities

    def add_record(self, customer_id: int, value: str) -> QualificationRecord:
        self._next_record_id += 1
        record = QualificationRecord(
            id=self._next_record_id, customer_id=customer_id, attribute_id=ATTRIBUTE_ID, value=value
        )
        self.records[customer_id] = record
        return record

    def writes(self) -> List[tuple]:
        return [c for c in self.calls if c[0] in ("upsert", "set_group", "delete")]

    # directory contract
    def fetch_customer(self, customer_id):
        self._check("fetch_customer")
        if customer_id not in self.customers:
            return None
        return Customer(id=customer_id, customer_group_id=self.customers[customer_id])

    def fetch_order(self, order_id):
        self._check("fetch_order")
        if order_id not in self.orders:
            return None
        return Order(id=order_id, customer_id=self.orders[order_id])

    def fetch_order_line_items(self, order_id):
        self._check("fetch_order_line_items")
        return [LineItem(name=f"item-{i}", quantity=q) for i, q in enumerate(self.line_items.get(order_id, []))]

    def fetch_qualification_attribute(self, customer_id):
        self._check("fetch_qualification_attribute")
        return self.records.get(customer_id)

    def upsert_qualification_attribute(self, customer_id, qualified_on: date):
        self.calls.append(("upsert", customer_id, qualified_on.isoformat()))
        self._check("upsert_qualification_attribute")
        existing = self.records.get(customer_id)
        if existing:
            self.records[customer_id] = existing.model_copy(update={"value": qualified_on.isoformat()})
        else:
            self.add_record(customer_id, qualified_on.isoformat())

    def delete_qualification_attribute(self, record_id):
        self.calls.append(("delete", record_id))
        self._check("delete_qualification_attribute")
        for customer_id, record in list(self.records.items()):
            if record.id == record_id:
                del self.records[customer_id]

    def set_customer_group(self, customer_id, group_id):
        self.calls.append(("set_group", customer_id, group_id))
        self._check("set_customer_group")
        self.customers[customer_id] = group_id

    def fetch_all_qualification_attributes(self):
        self._check("fetch_all_qualification_attributes")
        return list(self.records.values())


@pytest.fixture
def directory():
    return FakeDirectory()


@pytest.fixture
def config():
    from utils.config import AppConfig

    return AppConfig(
        store_hash="abc123",
        api_token="test-token-1234",
        date_attribute_id=ATTRIBUTE_ID,
        vip_group_id=VIP_GROUP,
        min_quantity=5,
        discount_days=90,
        verify_delay_seconds=0,
    )


@pytest.fixture
def service_context(config, directory):
    """Install a context backed by the fake directory for handler tests."""
    from services import context as context_module

    ctx = context_module.ServiceContext.build(config, directory=directory, sleep=lambda s: None)
    context_module.set_context(ctx)
    yield ctx
    context_module.set_context(None)
