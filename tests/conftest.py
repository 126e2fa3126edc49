import pytest

from receipt_pipeline.core.config import get_settings

E2E_RECEIPT = "Cafe Corner\nSubtotal: Rs 100.00\nTax: Rs 10.00\nCash\n12/01/2024"


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    # Tests mutate env vars; never leak a cached Settings instance across tests.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def e2e_receipt() -> str:
    return E2E_RECEIPT
