# textile_orders/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, BeforeValidator, field_validator
from typing import Annotated, List, Optional
from decimal import Decimal, InvalidOperation
from datetime import date, datetime

from textile_orders.domain.line_item import ProductType
from textile_orders.domain.money import MAX_AMOUNT, in_range, parse_amount, round_currency
from textile_orders.domain.payment import ChequeStatus, PaymentMode, PaymentStatus


def _amount(raw) -> Decimal:
    value = parse_amount(raw)
    if not in_range(value):
        raise ValueError(f"Amount cannot exceed {MAX_AMOUNT}")
    return value


def _optional_amount(raw):
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    return _amount(raw)


def _stock_level(raw) -> int:
    #catalog sends numbers, numeric strings or nothing at all
    if raw is None or raw == "":
        return 0
    try:
        return max(0, int(Decimal(str(raw))))
    except (InvalidOperation, ValueError, OverflowError):
        return 0


Amount = Annotated[Decimal, BeforeValidator(_amount)]
OptionalAmount = Annotated[Optional[Decimal], BeforeValidator(_optional_amount)]
StockLevel = Annotated[int, BeforeValidator(_stock_level)]


class CatalogProduct(BaseModel):
    """One entry of the product catalog, decoded at the client edge."""

    id: int = Field(..., gt=0)
    product_type: ProductType
    display_name: str = Field("", alias="displayName")
    available_quantity: StockLevel = Field(0, alias="availableQuantity")
    unit_price: Amount = Field(Decimal("0"), alias="unitPrice")
    inventory_reference: Optional[int] = Field(None, alias="inventoryReference")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("unit_price")
    @classmethod
    def round_price(cls, value: Decimal) -> Decimal:
        return round_currency(value)


class DraftCreate(BaseModel):
    """Schema for opening a new draft order."""

    customer_name: str = Field(..., min_length=1, max_length=200, description="Customer name")
    customer_id: Optional[int] = Field(None, gt=0, description="Existing customer ID, if known")
    delivery_date: Optional[date] = None
    delivery_address: Optional[str] = Field(None, max_length=500)
    remarks: Optional[str] = Field(None, max_length=1000)

    @field_validator("customer_name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Customer name is required")
        return value

    @field_validator("delivery_date")
    @classmethod
    def not_in_past(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value < date.today():
            raise ValueError("Delivery date cannot be in the past")
        return value


class ItemIn(BaseModel):
    """Schema for adding a product line to a draft."""

    product_type: ProductType
    product_id: int = Field(..., gt=0, description="Catalog product ID (must be > 0)")
    quantity: int = Field(..., description="Quantity sold, checked against available stock")
    unit_price: OptionalAmount = Field(None, description="Sale price, defaults to the catalog price")
    discount: Amount = Decimal("0")
    tax: Amount = Decimal("0")


class AdjustmentsIn(BaseModel):
    order_discount: Amount = Decimal("0")
    order_tax: Amount = Decimal("0")


class PaymentIn(BaseModel):
    """Schema for payment changes. Only the fields sent are applied."""

    status: Optional[PaymentStatus] = None
    amount: OptionalAmount = None
    mode: Optional[PaymentMode] = None
    cheque_number: Optional[str] = Field(None, max_length=64)
    bank: Optional[str] = Field(None, max_length=128)
    branch: Optional[str] = Field(None, max_length=128)
    cheque_status: Optional[ChequeStatus] = None


class LineItemOut(BaseModel):
    index: int
    product_type: ProductType
    product_id: int
    display_name: str
    inventory_reference: Optional[int] = None
    quantity: int
    unit_price: Decimal
    discount: Decimal
    tax: Decimal
    subtotal: Decimal
    available_quantity: int


class TotalsOut(BaseModel):
    items_subtotal: Decimal
    order_discount: Decimal
    order_tax: Decimal
    total: Decimal


class PaymentOut(BaseModel):
    status: PaymentStatus
    amount: Decimal
    mode: PaymentMode
    cheque_number: Optional[str] = None
    bank: Optional[str] = None
    branch: Optional[str] = None
    cheque_status: Optional[ChequeStatus] = None
    balance_due: Decimal


class DraftOut(BaseModel):
    """Schema for a draft order (response)."""

    draft_id: int
    status: str
    version: int
    customer_name: str
    customer_id: Optional[int] = None
    delivery_date: Optional[date] = None
    delivery_address: Optional[str] = None
    remarks: Optional[str] = None
    items: List[LineItemOut]
    totals: TotalsOut
    payment: PaymentOut
    expires_at: Optional[datetime] = None


class OrderItemOut(BaseModel):
    product_type: ProductType
    product_id: int
    display_name: Optional[str] = None
    inventory_reference: Optional[int] = None
    quantity: int
    unit_price: Decimal
    discount: Decimal
    tax: Decimal
    subtotal: Decimal

    model_config = ConfigDict(from_attributes=True)


class ChequeOut(BaseModel):
    cheque_number: str
    bank: str
    branch: Optional[str] = None
    amount: Decimal
    status: ChequeStatus

    model_config = ConfigDict(from_attributes=True)


class PaymentRecordOut(BaseModel):
    id: int
    amount: Decimal
    mode: PaymentMode
    reference_number: Optional[str] = None
    cheque: Optional[ChequeOut] = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema for a submitted sales order (response)."""

    id: int
    order_number: str
    customer_name: str
    customer_id: Optional[int] = None
    delivery_date: Optional[date] = None
    delivery_address: Optional[str] = None
    remarks: Optional[str] = None
    payment_status: PaymentStatus
    payment_mode: Optional[PaymentMode] = None
    discount: Decimal
    tax: Decimal
    total: Decimal
    items: List[OrderItemOut]
    payments: List[PaymentRecordOut]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
