"""
Order operations on a customer's embedded orders.

Orders have no storage of their own. Every operation loads the whole
Customer, works on its `orders` mapping in memory and saves the whole
Customer back in a single write.
"""

import logging
from typing import List

from errors import ConcurrencyFailure, InvalidArgument, InvalidCustomer, OrderNotFound
from schemas import Customer, Order
from store import ConcurrencyConflict, CustomerStore

logger = logging.getLogger(__name__)

ENTITY_NAME = "order"


def _require_customer_id(customer_id: str) -> None:
    if not customer_id or not customer_id.strip():
        raise InvalidArgument("No Customer", ENTITY_NAME, "noid")


def _require_owner(customer_id: str, order: Order) -> None:
    if order.customer_id != customer_id:
        raise InvalidArgument(
            f"Order {order.id} belongs to customer {order.customer_id}, not {customer_id}",
            ENTITY_NAME,
            "customermismatch",
        )


def _load_customer(store: CustomerStore, customer_id: str) -> Customer:
    customer = store.load(customer_id)
    if customer is None:
        raise InvalidCustomer(ENTITY_NAME)
    return customer


def save_customer(store: CustomerStore, customer: Customer) -> Customer:
    result = store.save(customer)
    if isinstance(result, ConcurrencyConflict):
        raise ConcurrencyFailure(result.customer_id, result.expected_version, result.stored_version)
    return result


def create_order(store: CustomerStore, customer_id: str, order: Order) -> Order:
    """
    Add `order` to the customer's orders and save the customer.

    An order whose id is already present is left untouched, so creating a
    duplicate id changes nothing.
    """
    logger.debug("Request to save Order %s for Customer %s", order.id, customer_id)
    _require_customer_id(customer_id)
    _require_owner(customer_id, order)
    customer = _load_customer(store, customer_id)
    orders = dict(customer.orders)
    orders.setdefault(order.id, order)
    save_customer(store, customer.model_copy(update={"orders": orders}))
    return order


def update_order(store: CustomerStore, customer_id: str, order: Order) -> Order:
    """
    Replace the customer's order carrying `order.id` with `order` and save.

    When no order has that id the order is added.
    """
    logger.debug("Request to update Order %s for Customer %s", order.id, customer_id)
    _require_customer_id(customer_id)
    _require_owner(customer_id, order)
    customer = _load_customer(store, customer_id)
    orders = {
        order_id: order if order_id == order.id else existing
        for order_id, existing in customer.orders.items()
    }
    orders.setdefault(order.id, order)
    save_customer(store, customer.model_copy(update={"orders": orders}))
    return order


def list_orders(store: CustomerStore, customer_id: str) -> List[Order]:
    logger.debug("Request to get all Orders for Customer %s", customer_id)
    _require_customer_id(customer_id)
    customer = _load_customer(store, customer_id)
    return list(customer.orders.values())


def get_order(store: CustomerStore, customer_id: str, order_id: str) -> Order:
    logger.debug("Request to get Order %s for Customer %s", order_id, customer_id)
    _require_customer_id(customer_id)
    customer = _load_customer(store, customer_id)
    order = customer.orders.get(order_id)
    if order is None:
        raise OrderNotFound(order_id)
    return order


def delete_order(store: CustomerStore, customer_id: str, order_id: str) -> None:
    """Remove the order from the customer. Deleting an unknown id succeeds."""
    logger.debug("Request to delete Order %s for Customer %s", order_id, customer_id)
    _require_customer_id(customer_id)
    customer = _load_customer(store, customer_id)
    orders = {key: existing for key, existing in customer.orders.items() if existing.id != order_id}
    save_customer(store, customer.model_copy(update={"orders": orders}))
