"""
Identifier assignment applied to a Customer right before it is written.
"""

from bson import ObjectId

from schemas import Customer


def new_identifier() -> str:
    return str(ObjectId())


def prepare_for_write(customer: Customer) -> Customer:
    """
    Return the customer with a billing address id, generating one when it
    is empty or missing. The input is never mutated and an already assigned
    id is kept, so running this twice changes nothing.

    Shipping addresses of embedded orders are left as they are.
    """
    address = customer.billing_address
    if address.id:
        return customer
    address = address.model_copy(update={"id": new_identifier()})
    return customer.model_copy(update={"billing_address": address})
