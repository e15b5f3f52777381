"""Pydantic request/response schemas for the Storefront API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Customer fields keep the names the checkout
form has always posted (``nombre``, ``numero``, ``dni`` ...).
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------
class VariantResponse(BaseModel):
    variant_id: str
    product_id: str
    color: str
    label: str
    stock: int
    available: int
    active: bool
    position: int


class RegisterVariantRequest(BaseModel):
    color: str = Field(min_length=1, max_length=50)
    stock: int = Field(ge=0)
    position: int | None = None

    model_config = {"json_schema_extra": {"examples": [{"color": "Silvery", "stock": 25}]}}


class SetStockRequest(BaseModel):
    stock: int = Field(ge=0)


class VariantIdResponse(BaseModel):
    variant_id: str


# ---------------------------------------------------------------------------
# Geography
# ---------------------------------------------------------------------------
class PlaceListResponse(BaseModel):
    items: list[str]


class ProvinceListResponse(BaseModel):
    department: str
    items: list[str]


class DistrictListResponse(BaseModel):
    department: str
    province: str
    items: list[str]
    is_metro: bool
    requires_national_id: bool


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class StartCheckoutRequest(BaseModel):
    preferred_color: str = "Silvery"
    quantity: int = Field(default=1, ge=1)


class SessionIdResponse(BaseModel):
    session_id: str


class ChangeQuantityRequest(BaseModel):
    quantity: int


class ChangeColorRequest(BaseModel):
    color: str = Field(min_length=1, max_length=50)


class CartLineSchema(BaseModel):
    position: int
    color: str
    label: str
    quantity: int
    unit_price: float


class PricingSchema(BaseModel):
    quantity: int
    discount_accepted: bool
    unit_price: float
    subtotal: float
    base_total: float
    special_discount_amount: float
    total: float
    total_savings: float
    reference_total: float
    currency: str


class CheckoutResponse(BaseModel):
    session_id: str
    state: str
    preferred_color: str
    quantity: int
    max_quantity: int
    sold_out: bool
    discount_accepted: bool
    lines: list[CartLineSchema]
    colors: dict[str, int]
    pricing: PricingSchema
    order_id: str | None = None


class CheckoutStateResponse(BaseModel):
    state: str


class SubmitOrderRequest(BaseModel):
    nombre: str = ""
    apellido: str = ""
    numero: str = ""
    direccion: str = ""
    referencia: str | None = None
    departamento: str = ""
    provincia: str = ""
    distrito: str | None = None
    dni: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "nombre": "Lucía",
                    "apellido": "Quispe",
                    "numero": "987654321",
                    "direccion": "Av. Ejército 1020",
                    "referencia": "Frente al parque",
                    "departamento": "AREQUIPA",
                    "provincia": "AREQUIPA",
                    "distrito": "YANAHUARA",
                    "dni": "45678912",
                }
            ]
        }
    }


class OrderIdResponse(BaseModel):
    order_id: str


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    color: str
    label: str
    quantity: int
    unit_price: float


class OrderPaymentResponse(BaseModel):
    amount: float
    payment_code: str
    payment_type: str
    created_at: str | None = None


class CustomerResponse(BaseModel):
    customer_id: str
    first_name: str
    last_name: str
    phone: str
    address: str
    reference: str | None = None
    district: str | None = None
    province: str
    department: str
    national_id: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    short_code: str
    customer: CustomerResponse | None = None
    items: list[OrderItemResponse]
    payments: list[OrderPaymentResponse]
    total: float
    amount_paid: float
    amount_due: float
    payment_status: str
    shipping_status: str
    is_out_of_capital: bool
    shipping_address: str | None = None
    order_number: str | None = None
    order_code: str | None = None
    created_at: str | None = None


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    count: int


class StatusOptionSchema(BaseModel):
    value: str
    label: str
    current: bool


class OrderOptionsResponse(BaseModel):
    shipping: list[StatusOptionSchema]
    payment: list[StatusOptionSchema]
    confirmations: dict[str, dict | None]


class ChangeShippingStatusRequest(BaseModel):
    status: str
    confirmed: bool = False
    shipping_address: str | None = None
    order_number: str | None = None
    order_code: str | None = None


class RegisterPaymentRequest(BaseModel):
    payment_type: str
    amount: float | None = None
    payment_code: str

    model_config = {
        "json_schema_extra": {"examples": [{"payment_type": "adelanto", "amount": 20.0, "payment_code": "OP-123456"}]}
    }
