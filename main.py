import logging
import os
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import Field

from database import db
from errors import CustomerNotFound, ServiceError, ValidationFailure, violations
from orders import create_order, delete_order, get_order, list_orders, save_customer, update_order
from schemas import Address, Customer, DocumentModel, Health, HealthStatus, NotBlank, Order
from store import COLLECTION_NAME, CustomerStore

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

app = FastAPI(title=os.getenv("APP_NAME", "Customer Service"))

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Helpers
def get_store() -> CustomerStore:
    if db is None:
        raise HTTPException(status_code=500, detail="Database not configured")
    return CustomerStore(db[COLLECTION_NAME])


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    failure = ValidationFailure("request", violations(exc.errors()))
    return JSONResponse(status_code=failure.status_code, content=failure.to_dict())


@app.get("/")
def root():
    return {"message": "Customer Service is running"}


@app.get("/api/v1/health", response_model=Health)
def health():
    logger.debug("Request to get the Health Status")
    return Health(status=HealthStatus.UP)


# ---------------- Customers ----------------
class CustomerPayload(DocumentModel):
    first_name: NotBlank = Field(..., min_length=1)
    middle_name: Optional[str] = None
    last_name: NotBlank = Field(..., min_length=1)
    payment_details: Optional[str] = None
    billing_address: Address


@app.post("/api/v1/customers", response_model=Customer)
def create_customer(payload: CustomerPayload, store: CustomerStore = Depends(get_store)):
    logger.debug("Request to save Customer %s %s", payload.first_name, payload.last_name)
    return save_customer(store, Customer(**payload.model_dump()))


@app.get("/api/v1/customers", response_model=List[Customer])
def list_customers(limit: int = Query(50, ge=1, le=200), store: CustomerStore = Depends(get_store)):
    return store.list(limit)


@app.get("/api/v1/customers/{customer_id}", response_model=Customer)
def get_customer(customer_id: str, store: CustomerStore = Depends(get_store)):
    customer = store.load(customer_id)
    if customer is None:
        raise CustomerNotFound(customer_id)
    return customer


# ---------------- Customer orders ----------------
@app.post("/api/v1/customerOrders/{customer_id}", response_model=Order)
def create_customer_order(customer_id: str, order: Order, store: CustomerStore = Depends(get_store)):
    return create_order(store, customer_id, order)


@app.put("/api/v1/customerOrders/{customer_id}", response_model=Order)
def update_customer_order(customer_id: str, order: Order, store: CustomerStore = Depends(get_store)):
    return update_order(store, customer_id, order)


@app.get("/api/v1/customerOrders/{customer_id}", response_model=List[Order])
def list_customer_orders(customer_id: str, store: CustomerStore = Depends(get_store)):
    return list_orders(store, customer_id)


@app.get("/api/v1/customerOrders/{customer_id}/{order_id}", response_model=Order)
def get_customer_order(customer_id: str, order_id: str, store: CustomerStore = Depends(get_store)):
    return get_order(store, customer_id, order_id)


@app.delete("/api/v1/customerOrders/{customer_id}/{order_id}", status_code=204)
def delete_customer_order(customer_id: str, order_id: str, store: CustomerStore = Depends(get_store)):
    delete_order(store, customer_id, order_id)
    return Response(status_code=204)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
