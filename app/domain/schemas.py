# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from app.domain.order_status import OrderStatus


# ---------- cart ----------

class CartItemIn(BaseModel):
    """Dodanie wariantu do koszyka."""

    variant_id: int = Field(..., gt=0, description="ID wariantu (musi byc > 0)")
    quantity: int = Field(..., gt=0, description="Ilosc (musi byc > 0)")


class CartItemUpdateIn(BaseModel):
    quantity: int = Field(..., gt=0, description="Nowa ilosc (musi byc > 0)")


class CartItemOut(BaseModel):
    id: int
    variant_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class CartOut(BaseModel):
    cart_id: int
    user_id: int
    version: int
    items: List[CartItemOut]
    total: Decimal

    model_config = ConfigDict(from_attributes=True)


class CartSummaryOut(BaseModel):
    item_count: int
    subtotal: Decimal
    tax: Decimal
    shipping_cost: Decimal
    total: Decimal
    free_shipping_threshold: Decimal
    amount_for_free_shipping: Decimal


# ---------- orders ----------

class OrderCreate(BaseModel):
    """Checkout aktywnego koszyka uzytkownika."""

    address_id: int = Field(..., gt=0, description="ID adresu dostawy uzytkownika")
    notes: Optional[str] = Field(None, max_length=1000)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    tracking_number: Optional[str] = Field(None, max_length=255)
    carrier: Optional[str] = Field(None, max_length=100)


class AddressSnapshotOut(BaseModel):
    street: str
    city: str
    state: Optional[str] = None
    zip_code: str
    country: str


class OrderItemOut(BaseModel):
    id: int
    variant_id: int
    quantity: int
    price: Decimal
    product_name: str

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    order_number: int
    user_id: int
    status: OrderStatus
    subtotal: Decimal
    tax: Decimal
    shipping_cost: Decimal
    total: Decimal
    shipping_address_snapshot: AddressSnapshotOut
    notes: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    items: List[OrderItemOut]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------- payments ----------

class PaymentCreate(BaseModel):
    provider: str = Field(..., min_length=1, max_length=32)


class PaymentProcess(BaseModel):
    success: bool
    transaction_id: Optional[str] = Field(None, max_length=100)
    error_message: Optional[str] = Field(None, max_length=500)


class PaymentOut(BaseModel):
    id: int
    order_id: int
    provider: str
    amount: Decimal
    status: str
    transaction_id: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentMethodOut(BaseModel):
    id: str
    name: str
    available: bool = True
