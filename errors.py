"""
Service errors

Every error carries the entity it concerns and a short error key so
clients can tell failures apart without parsing the message.
"""

from typing import Any, Dict, List, Optional

ERR_CONCURRENCY_FAILURE = "error.concurrencyFailure"
ERR_VALIDATION = "error.validation"


def violations(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error entries into field / message pairs."""
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in errors
    ]


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message: str, entity_name: str, error_key: str):
        super().__init__(message)
        self.message = message
        self.entity_name = entity_name
        self.error_key = error_key

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "entity": self.entity_name, "error_key": self.error_key}


class InvalidArgument(ServiceError):
    """A required path parameter is missing or blank."""


class InvalidCustomer(ServiceError):
    """The referenced customer does not exist."""

    def __init__(self, entity_name: str):
        super().__init__("Invalid Customer", entity_name, "invalidcustomer")


class OrderNotFound(ServiceError):
    status_code = 404

    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found", "order", "notfound")


class CustomerNotFound(ServiceError):
    status_code = 404

    def __init__(self, customer_id: str):
        super().__init__(f"Customer {customer_id} not found", "customer", "notfound")


class ValidationFailure(ServiceError):
    """Lists every violated constraint, not only the first one."""

    def __init__(self, entity_name: str, errors: List[Dict[str, Any]]):
        super().__init__(f"{len(errors)} constraint violation(s)", entity_name, ERR_VALIDATION)
        self.errors = errors

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class ConcurrencyFailure(ServiceError):
    status_code = 409

    def __init__(self, customer_id: str, expected_version: int, stored_version: Optional[int]):
        super().__init__(
            f"Customer {customer_id} was modified concurrently "
            f"(expected version {expected_version}, stored {stored_version})",
            "customer",
            ERR_CONCURRENCY_FAILURE,
        )
        self.expected_version = expected_version
        self.stored_version = stored_version
