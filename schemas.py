"""
Database Schemas for the Customer service

Define MongoDB document schemas using Pydantic models.
Customer is the only collection ("customer"). Orders, Products and
Addresses are embedded inside the Customer document.

Attribute names are snake_case, which is also how they are stored.
HTTP payloads use the camelCase aliases.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())


def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be blank")
    return v


NotBlank = Annotated[str, AfterValidator(_not_blank)]


# Enums
class OrderStatus(str, Enum):
    CREATED = "CREATED"
    DELIVERING = "DELIVERING"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    DELETED = "DELETED"
    RETURNING = "RETURNING"
    RETURNED = "RETURNED"


class PaymentType(str, Enum):
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    PAYPAL = "PAYPAL"
    BANK_TRANSFER = "BANK_TRANSFER"
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"


class HealthStatus(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


class Health(BaseModel):
    status: HealthStatus = HealthStatus.UP


# Addresses
class Address(DocumentModel):
    id: Optional[str] = Field(None, description="Assigned on save when missing (billing address)")
    street_name: NotBlank = Field(..., min_length=1)
    street_number: NotBlank = Field(..., min_length=1)
    additional_info: Optional[str] = None
    zip_code: NotBlank = Field(..., min_length=1)
    city: NotBlank = Field(..., min_length=1)
    state: Optional[str] = None
    country: NotBlank = Field(..., min_length=1)


# Products (embedded in an order)
class Product(DocumentModel):
    id: NotBlank = Field(..., min_length=1)
    name: NotBlank = Field(..., min_length=1)
    description: Optional[str] = None
    model_number: Optional[str] = None
    manufacturer_name: NotBlank = Field(..., min_length=1)
    price: float = Field(..., ge=0, description="Price cannot be less than zero")
    detail_info: Optional[str] = None
    image_url: Optional[str] = None
    quantity: int = Field(..., ge=0, description="Quantity cannot be less than zero")


# Orders (embedded in a customer)
class Order(DocumentModel):
    """
    An order embedded in a Customer document.

    Identity is the order id alone: two orders with the same id are the
    same order, whatever their other fields hold.
    """
    id: NotBlank = Field(..., min_length=1, description="Caller supplied order id")
    customer_id: NotBlank = Field(..., min_length=1, description="Id of the owning customer")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    status: OrderStatus = OrderStatus.CREATED
    payment_status: bool = False
    version: Optional[int] = None
    payment_method: PaymentType
    payment_details: NotBlank = Field(..., min_length=1)
    shipping_address: Address
    products: List[Product] = Field(..., min_length=1)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Order):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


# Customers (aggregate root, collection "customer")
class Customer(DocumentModel):
    """
    Customers collection schema
    Collection name: "customer"

    id, created_at, updated_at and version belong to the store; callers
    never set them.
    """
    id: Optional[str] = None
    first_name: NotBlank = Field(..., min_length=1, description="First name")
    middle_name: Optional[str] = None
    last_name: NotBlank = Field(..., min_length=1, description="Last name")
    payment_details: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    version: Optional[int] = Field(None, ge=0)
    billing_address: Address
    orders: Dict[str, Order] = Field(default_factory=dict, description="Orders keyed by order id")

    @field_validator("orders", mode="before")
    @classmethod
    def key_orders_by_id(cls, v):
        # Stored documents and payloads carry orders as an array
        if not isinstance(v, (list, tuple, set)):
            return v
        keyed = {}
        for item in v:
            order_id = item.get("id") if isinstance(item, dict) else getattr(item, "id", None)
            keyed.setdefault(order_id, item)
        return keyed

    @field_serializer("orders")
    def orders_as_array(self, orders: Dict[str, Order]) -> List[Order]:
        return list(orders.values())
