from bson import ObjectId

from identifiers import new_identifier, prepare_for_write


def test_new_identifier_is_an_object_id():
    assert ObjectId.is_valid(new_identifier())
    assert new_identifier() != new_identifier()


def test_missing_billing_address_id_is_assigned(customer_factory):
    customer = customer_factory()

    prepared = prepare_for_write(customer)

    assert prepared.billing_address.id
    assert customer.billing_address.id is None


def test_empty_billing_address_id_is_assigned(customer_factory, address_factory):
    customer = customer_factory(billing_address=address_factory(id=""))

    assert prepare_for_write(customer).billing_address.id


def test_existing_billing_address_id_is_kept(customer_factory, address_factory):
    customer = customer_factory(billing_address=address_factory(id="addr-1"))

    assert prepare_for_write(customer) is customer


def test_prepare_for_write_is_idempotent(customer_factory):
    once = prepare_for_write(customer_factory())
    twice = prepare_for_write(once)

    assert twice.billing_address.id == once.billing_address.id


def test_shipping_addresses_are_left_alone(customer_factory, order_factory):
    customer = customer_factory(orders=[order_factory("o1")])

    prepared = prepare_for_write(customer)

    assert prepared.orders["o1"].shipping_address.id is None
