import mongomock
import pytest

from schemas import Address, Customer, Order, PaymentType, Product
from store import CustomerStore

ADDRESS = {
    "street_name": "Main Street",
    "street_number": "12",
    "zip_code": "10115",
    "city": "Berlin",
    "country": "DE",
}


@pytest.fixture
def collection():
    return mongomock.MongoClient().db.customer


@pytest.fixture
def store(collection):
    return CustomerStore(collection)


@pytest.fixture
def address_factory():
    def make(**overrides):
        return Address(**{**ADDRESS, **overrides})
    return make


@pytest.fixture
def order_factory(address_factory):
    def make(order_id="o1", customer_id="c1", **overrides):
        fields = {
            "id": order_id,
            "customer_id": customer_id,
            "payment_method": PaymentType.CREDIT_CARD,
            "payment_details": "tok_1",
            "shipping_address": address_factory(),
            "products": [
                Product(id="p1", name="Widget", manufacturer_name="Acme", price=9.99, quantity=2),
            ],
        }
        fields.update(overrides)
        return Order(**fields)
    return make


@pytest.fixture
def customer_factory(address_factory):
    def make(**overrides):
        fields = {"first_name": "Ada", "last_name": "Lovelace", "billing_address": address_factory()}
        fields.update(overrides)
        return Customer(**fields)
    return make


@pytest.fixture
def saved_customer(store, customer_factory):
    return store.save(customer_factory())
