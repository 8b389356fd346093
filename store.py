"""
Aggregate store for Customer documents.

The store is the only place that reads or writes the "customer" collection.
A Customer is always loaded whole and saved whole. Writes are guarded by the
document's `version` field: an update only applies when the stored version
still equals the one the caller loaded.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError

from errors import CustomerNotFound, ValidationFailure, violations
from identifiers import prepare_for_write
from schemas import Customer

logger = logging.getLogger(__name__)

COLLECTION_NAME = "customer"


@dataclass(frozen=True)
class ConcurrencyConflict:
    """Returned by `CustomerStore.save` when the stored version moved on."""
    customer_id: Optional[str]
    expected_version: Optional[int]
    stored_version: Optional[int]


def document_key(customer_id: str) -> Any:
    if ObjectId.is_valid(customer_id):
        return ObjectId(customer_id)
    return customer_id


def utc_now() -> datetime:
    # BSON dates hold milliseconds
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _as_utc(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_document(customer: Customer) -> Dict[str, Any]:
    doc = customer.model_dump(mode="json", exclude={"id", "created_at", "updated_at"})
    # Keep timestamps as BSON dates
    doc["created_at"] = customer.created_at
    doc["updated_at"] = customer.updated_at
    for stored, order in zip(doc["orders"], customer.orders.values()):
        stored["created_at"] = order.created_at
        stored["updated_at"] = order.updated_at
    return doc


def from_document(doc: Dict[str, Any]) -> Customer:
    doc = dict(doc)
    if doc.get("_id") is not None:
        doc["id"] = str(doc.pop("_id"))
    # Clients built without tz_aware hand back naive UTC
    for field in ("created_at", "updated_at"):
        doc[field] = _as_utc(doc.get(field))
    doc["orders"] = [
        {**order, "created_at": _as_utc(order.get("created_at")), "updated_at": _as_utc(order.get("updated_at"))}
        for order in doc.get("orders", [])
    ]
    return Customer.model_validate(doc)


class CustomerStore:
    def __init__(self, collection):
        self.collection = collection

    def load(self, customer_id: str) -> Optional[Customer]:
        doc = self.collection.find_one({"_id": document_key(customer_id)})
        if not doc:
            return None
        return from_document(doc)

    def list(self, limit: int = 50) -> List[Customer]:
        return [from_document(doc) for doc in self.collection.find({}).limit(limit)]

    def save(self, customer: Customer) -> Union[Customer, ConcurrencyConflict]:
        """
        Write the whole customer document and return the stored state.

        Raises ValidationFailure when any field of the customer or its
        embedded orders, products or addresses violates a constraint.
        A version mismatch is returned as a ConcurrencyConflict and nothing
        is written. The argument itself is never modified.
        """
        customer = self._validated(customer)
        customer = prepare_for_write(customer)
        now = utc_now()
        if customer.id is None or customer.version is None:
            return self._insert(customer, now)
        return self._update(customer, now)

    def _validated(self, customer: Customer) -> Customer:
        try:
            return Customer.model_validate(customer.model_dump())
        except ValidationError as exc:
            raise ValidationFailure("customer", violations(exc.errors())) from exc

    def _insert(self, customer: Customer, now: datetime) -> Union[Customer, ConcurrencyConflict]:
        saved = customer.model_copy(update={"version": 0, "created_at": now, "updated_at": now})
        doc = to_document(saved)
        if customer.id is not None:
            doc["_id"] = document_key(customer.id)
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            current = self.collection.find_one({"_id": doc["_id"]}, {"version": 1})
            logger.warning("Customer %s already exists, insert rejected", customer.id)
            return ConcurrencyConflict(customer.id, None, current.get("version") if current else None)
        customer_id = str(result.inserted_id)
        logger.debug("Inserted Customer %s", customer_id)
        return saved.model_copy(update={"id": customer_id})

    def _update(self, customer: Customer, now: datetime) -> Union[Customer, ConcurrencyConflict]:
        expected = customer.version
        saved = customer.model_copy(update={"version": expected + 1, "updated_at": now})
        doc = to_document(saved)
        # created_at is written once, on insert
        doc.pop("created_at")
        key = document_key(customer.id)
        result = self.collection.update_one({"_id": key, "version": expected}, {"$set": doc})
        if result.matched_count == 0:
            current = self.collection.find_one({"_id": key}, {"version": 1})
            if current is None:
                raise CustomerNotFound(customer.id)
            logger.warning(
                "Version conflict on Customer %s: expected %s, stored %s",
                customer.id, expected, current.get("version"),
            )
            return ConcurrencyConflict(customer.id, expected, current.get("version"))
        logger.debug("Updated Customer %s to version %s", customer.id, saved.version)
        return saved
