"""
Pytest configuration and shared fixtures for the purchase entry test suite.
"""
import asyncio
import os
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from models.result import GatewayAck, GatewayError

PROJECT_ROOT = Path(__file__).parent.parent
os.chdir(PROJECT_ROOT)


class RecordingGateway:
    """Deterministic gateway fake: answers immediately and remembers what it saw."""

    def __init__(self, result=None):
        self.result = result or GatewayAck(reference="PUR-TEST", recorded_at="2024-01-15T10:00:00+00:00")
        self.snapshots = []
        self.states_seen = []
        self.controller = None      # set by tests that want to observe state mid-call

    async def submit(self, snapshot):
        self.snapshots.append(snapshot)
        if self.controller is not None:
            self.states_seen.append(self.controller.state)
        return self.result


class BlockingGateway:
    """Gateway fake that stays outstanding until release() is called."""

    def __init__(self):
        self.calls = 0
        self._released = asyncio.Event()

    async def submit(self, snapshot):
        self.calls += 1
        await self._released.wait()
        return GatewayAck(reference=f"PUR-BLOCK-{self.calls}", recorded_at="2024-01-15T10:00:00+00:00")

    def release(self):
        self._released.set()


class RaisingGateway:
    """Gateway fake whose backend blows up."""

    async def submit(self, snapshot):
        raise ConnectionError("storage unavailable")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files."""
    tmp_path = tempfile.mkdtemp(prefix="purchase_test_")
    yield Path(tmp_path)
    shutil.rmtree(tmp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path, monkeypatch) -> "Config":
    """Provide a test configuration with isolated directories and no delays."""
    from config import Config

    monkeypatch.setenv("CONFIG_DIR", str(temp_dir / "config"))
    monkeypatch.setenv("SUPPLIERS_CSV", str(temp_dir / "suppliers.csv"))
    monkeypatch.setenv("PRODUCTS_CSV", str(temp_dir / "products.csv"))
    monkeypatch.setenv("SIMULATED_DELAY", "0")
    for name in ("CURRENCY_SYMBOL", "DEFAULT_PAYMENT_MODE", "NOTICE_TEMPLATE", "GATEWAY_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    (temp_dir / "config").mkdir(parents=True, exist_ok=True)

    return Config()


@pytest.fixture
def sample_suppliers_csv(temp_dir: Path) -> Path:
    """Create a sample suppliers CSV file."""
    csv_path = temp_dir / "suppliers.csv"
    content = """id,name,aliases
SUP-001,Acme Pharma Distributors,Acme Pharma|ACME
SUP-002,Sunrise Medical Supplies,Sunrise Medicals
SUP-003,Green Valley Traders,"""
    csv_path.write_text(content, encoding="utf-8")
    return csv_path


@pytest.fixture
def sample_products_csv(temp_dir: Path) -> Path:
    """Create a sample products CSV file."""
    csv_path = temp_dir / "products.csv"
    content = """sku,name,mrp,cost_price
MED-001,Paracetamol 500mg Tablet,35.00,22.50
MED-002,Amoxicillin 250mg Capsule,120.00,84.00
MED-003,Cough Syrup 100ml,95.00,
MED-004,Vitamin C Chewable,,40.00"""
    csv_path.write_text(content, encoding="utf-8")
    return csv_path


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def controller(gateway, test_config):
    """A controller wired to the recording gateway."""
    from purchasing.controller import OrderFormController
    return OrderFormController(gateway, test_config)


@pytest.fixture
def blocking_gateway() -> BlockingGateway:
    return BlockingGateway()


@pytest.fixture
def raising_gateway() -> RaisingGateway:
    return RaisingGateway()


@pytest.fixture
def failing_gateway() -> RecordingGateway:
    return RecordingGateway(result=GatewayError(message="Inventory service unavailable", retryable=True))


def _fill_valid_order(controller, supplier="Acme Pharma Distributors"):
    """Turn the controller's single blank item into a submittable order."""
    item_id = controller.order.items[0].id
    controller.update_metadata_field("supplier_name", supplier)
    controller.update_item(item_id, "product_name", "Paracetamol 500mg Tablet")
    controller.update_item(item_id, "quantity", "3")
    controller.update_item(item_id, "cost_price", "150.50")
    return item_id


@pytest.fixture
def fill_valid_order():
    """Provide the helper that makes a controller's order submittable."""
    return _fill_valid_order


# Configure pytest markers
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
