"""FastAPI routes for the admin order board."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    ChangeShippingStatusRequest,
    CustomerResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderOptionsResponse,
    OrderPaymentResponse,
    OrderResponse,
    RegisterPaymentRequest,
    StatusOptionSchema,
    StatusResponse,
)
from storefront.catalogue.variant import color_label
from storefront.customer.customer import Customer
from storefront.order.label import render_label
from storefront.order.order import Order
from storefront.order.payment import RegisterPayment, ResetPaymentStatus
from storefront.order.queries import list_orders, order_with_customer
from storefront.order.shipping import ChangeShippingStatus
from storefront.order.status import ShippingStatus

admin_router = APIRouter(prefix="/admin/orders", tags=["admin"])


def _customer_response(customer: Customer | None) -> CustomerResponse | None:
    if customer is None:
        return None
    return CustomerResponse(
        customer_id=str(customer.id),
        first_name=customer.first_name,
        last_name=customer.last_name,
        phone=customer.phone,
        address=customer.address,
        reference=customer.reference,
        district=customer.district,
        province=customer.province,
        department=customer.department,
        national_id=customer.national_id,
    )


def _order_response(order: Order, customer: Customer | None = None) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        short_code=order.short_code,
        customer=_customer_response(customer),
        items=[
            OrderItemResponse(
                color=item.color,
                label=color_label(item.color),
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in order.items
        ],
        payments=[
            OrderPaymentResponse(
                amount=p.amount,
                payment_code=p.payment_code,
                payment_type=p.payment_type,
                created_at=p.created_at.isoformat() if p.created_at else None,
            )
            for p in order.payments
        ],
        total=order.total,
        amount_paid=order.amount_paid or 0.0,
        amount_due=order.amount_due or 0.0,
        payment_status=order.payment_status,
        shipping_status=order.shipping_status,
        is_out_of_capital=bool(order.is_out_of_capital),
        shipping_address=order.shipping_address,
        order_number=order.order_number,
        order_code=order.order_code,
        created_at=order.created_at.isoformat() if order.created_at else None,
    )


@admin_router.get("", response_model=OrderListResponse)
async def get_orders(shipping_status: str | None = None, limit: int = 100, offset: int = 0) -> OrderListResponse:
    if shipping_status is not None and shipping_status not in {s.value for s in ShippingStatus}:
        raise ValidationError({"shipping_status": [f"Unknown shipping status {shipping_status!r}"]})

    customer_repo = current_domain.repository_for(Customer)
    orders = list_orders(shipping_status=shipping_status, limit=limit, offset=offset)
    items = [_order_response(order, customer_repo.get(order.customer_id)) for order in orders]
    return OrderListResponse(items=items, count=len(items))


@admin_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    order, customer = order_with_customer(order_id)
    return _order_response(order, customer)


@admin_router.get("/{order_id}/options", response_model=OrderOptionsResponse)
async def get_order_options(order_id: str) -> OrderOptionsResponse:
    order = current_domain.repository_for(Order).get(order_id)
    shipping = order.shipping_options()
    confirmations = {}
    for status in shipping:
        form = order.confirmation_for(status)
        confirmations[status.value] = form.to_dict() if form is not None else None

    return OrderOptionsResponse(
        shipping=[
            StatusOptionSchema(value=s.value, label=s.label, current=s.value == order.shipping_status) for s in shipping
        ],
        payment=[
            StatusOptionSchema(value=s.value, label=s.label, current=s.value == order.payment_status)
            for s in order.payment_options()
        ],
        confirmations=confirmations,
    )


@admin_router.put("/{order_id}/shipping-status", response_model=OrderResponse)
async def change_shipping_status(order_id: str, body: ChangeShippingStatusRequest) -> OrderResponse:
    command = ChangeShippingStatus(
        order_id=order_id,
        status=body.status,
        confirmed=body.confirmed,
        shipping_address=body.shipping_address,
        order_number=body.order_number,
        order_code=body.order_code,
    )
    current_domain.process(command, asynchronous=False)
    order, customer = order_with_customer(order_id)
    return _order_response(order, customer)


@admin_router.post("/{order_id}/payments", response_model=OrderResponse)
async def register_payment(order_id: str, body: RegisterPaymentRequest) -> OrderResponse:
    command = RegisterPayment(
        order_id=order_id,
        payment_type=body.payment_type,
        amount=body.amount,
        payment_code=body.payment_code,
    )
    current_domain.process(command, asynchronous=False)
    order, customer = order_with_customer(order_id)
    return _order_response(order, customer)


@admin_router.put("/{order_id}/payment-status/reset", response_model=StatusResponse)
async def reset_payment_status(order_id: str) -> StatusResponse:
    current_domain.process(ResetPaymentStatus(order_id=order_id), asynchronous=False)
    return StatusResponse()


@admin_router.get("/{order_id}/label", response_class=HTMLResponse)
async def get_label(order_id: str) -> HTMLResponse:
    order, customer = order_with_customer(order_id)
    return HTMLResponse(content=render_label(order, customer))
