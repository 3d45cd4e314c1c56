from __future__ import annotations

import pytest

from tests.vouchers.fakes import FakeVoucherDatabase


@pytest.fixture
def fake_db() -> FakeVoucherDatabase:
    database = FakeVoucherDatabase()
    database.add_campaign(1, min_vouchers=3, min_brands=2)
    database.add_brand(1, "Alfa")
    database.add_brand(2, "Beta")
    database.add_brand(3, "Gamma")
    return database
