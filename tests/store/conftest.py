import json

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def store_bed():
    from store.domain import store
    from store.utils.db import drop_db, setup_db

    bed = DomainFixture(store)
    bed.setup()
    setup_db(store)
    yield bed
    drop_db(store)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(store_bed):
    with store_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Seeding helpers
# ---------------------------------------------------------------------------
@pytest.fixture()
def register_user():
    from store.account.registration import RegisterUser

    def _register(name="Mona Adel", email="mona@example.com"):
        return current_domain.process(RegisterUser(name=name, email=email), asynchronous=False)

    return _register


@pytest.fixture()
def add_product():
    from store.catalog.listing import AddProduct

    def _add(name="Linen Shirt", price=100.0, stock=10, discount=0.0, sizes=None, availability=True):
        return current_domain.process(
            AddProduct(
                name=name,
                price=price,
                stock=stock,
                discount=discount,
                sizes=json.dumps(sizes) if sizes is not None else None,
                availability=availability,
            ),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def shipping_address():
    return {
        "full_name": "Mona Adel",
        "phone": "+20 1001234567",
        "address": "12 Tahrir St",
        "city": "Cairo",
        "postal_code": "11511",
    }
