"""FastAPI routes for the shopper side — variants, geography and checkout."""

from fastapi import APIRouter
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    CartLineSchema,
    ChangeColorRequest,
    ChangeQuantityRequest,
    CheckoutResponse,
    CheckoutStateResponse,
    DistrictListResponse,
    OrderIdResponse,
    PlaceListResponse,
    PricingSchema,
    ProvinceListResponse,
    RegisterVariantRequest,
    SessionIdResponse,
    SetStockRequest,
    StartCheckoutRequest,
    StatusResponse,
    SubmitOrderRequest,
    VariantIdResponse,
    VariantResponse,
)
from storefront.catalogue.cache import catalog, list_variants
from storefront.catalogue.management import ActivateVariant, DeactivateVariant, RegisterVariant, SetVariantStock
from storefront.catalogue.variant import color_label
from storefront.checkout.composer import max_quantity
from storefront.checkout.management import ChangeLineColor, ChangeQuantity, StartCheckout
from storefront.checkout.retention import AcceptDiscount, DeclineDiscount, RequestClose
from storefront.checkout.session import CheckoutSession
from storefront.checkout.submission import SubmitOrder
from storefront.geography import ubigeo

# ---------------------------------------------------------------------------
# Variant Router
# ---------------------------------------------------------------------------
variant_router = APIRouter(prefix="/variants", tags=["variants"])


@variant_router.get("", response_model=list[VariantResponse])
async def get_variants() -> list[VariantResponse]:
    return [
        VariantResponse(
            variant_id=str(v.id),
            product_id=v.product_id,
            color=v.color,
            label=color_label(v.color),
            stock=v.stock,
            available=v.to_stock_level().available,
            active=v.active,
            position=v.position,
        )
        for v in list_variants()
    ]


@variant_router.post("", status_code=201, response_model=VariantIdResponse)
async def register_variant(body: RegisterVariantRequest) -> VariantIdResponse:
    command = RegisterVariant(color=body.color, stock=body.stock, position=body.position)
    result = current_domain.process(command, asynchronous=False)
    return VariantIdResponse(variant_id=result)


@variant_router.put("/{color}/stock", response_model=StatusResponse)
async def set_variant_stock(color: str, body: SetStockRequest) -> StatusResponse:
    current_domain.process(SetVariantStock(color=color, stock=body.stock), asynchronous=False)
    return StatusResponse()


@variant_router.put("/{color}/activate", response_model=StatusResponse)
async def activate_variant(color: str) -> StatusResponse:
    current_domain.process(ActivateVariant(color=color), asynchronous=False)
    return StatusResponse()


@variant_router.put("/{color}/deactivate", response_model=StatusResponse)
async def deactivate_variant(color: str) -> StatusResponse:
    current_domain.process(DeactivateVariant(color=color), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Geography Router
# ---------------------------------------------------------------------------
geography_router = APIRouter(prefix="/geography", tags=["geography"])


@geography_router.get("/departments", response_model=PlaceListResponse)
async def get_departments() -> PlaceListResponse:
    return PlaceListResponse(items=ubigeo.departments())


@geography_router.get("/departments/{department}/provinces", response_model=ProvinceListResponse)
async def get_provinces(department: str) -> ProvinceListResponse:
    if department not in ubigeo.departments():
        raise ObjectNotFoundError(f"Department `{department}` does not exist")
    return ProvinceListResponse(department=department, items=ubigeo.provinces(department))


@geography_router.get(
    "/departments/{department}/provinces/{province}/districts",
    response_model=DistrictListResponse,
)
async def get_districts(department: str, province: str) -> DistrictListResponse:
    if province not in ubigeo.provinces(department):
        raise ObjectNotFoundError(f"Province `{province}` does not exist in `{department}`")
    metro = ubigeo.is_metro(department, province)
    return DistrictListResponse(
        department=department,
        province=province,
        items=ubigeo.districts(department, province),
        is_metro=metro,
        requires_national_id=not metro,
    )


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


def _checkout_response(session: CheckoutSession) -> CheckoutResponse:
    stock = catalog.snapshot()
    return CheckoutResponse(
        session_id=str(session.id),
        state=session.state,
        preferred_color=session.preferred_color,
        quantity=session.quantity,
        max_quantity=max_quantity(stock),
        sold_out=stock.total_available() == 0,
        discount_accepted=bool(session.discount_accepted),
        lines=[
            CartLineSchema(
                position=line.position,
                color=line.color,
                label=color_label(line.color),
                quantity=line.quantity,
                unit_price=line.unit_price,
            )
            for line in session.cart_lines
        ],
        colors=session.color_summary(),
        pricing=PricingSchema(**session.pricing().rounded().to_dict()),
        order_id=str(session.order_id) if session.order_id else None,
    )


def _load_checkout(session_id: str) -> CheckoutResponse:
    session = current_domain.repository_for(CheckoutSession).get(session_id)
    return _checkout_response(session)


@checkout_router.post("", status_code=201, response_model=SessionIdResponse)
async def start_checkout(body: StartCheckoutRequest) -> SessionIdResponse:
    command = StartCheckout(preferred_color=body.preferred_color, quantity=body.quantity)
    result = current_domain.process(command, asynchronous=False)
    return SessionIdResponse(session_id=result)


@checkout_router.get("/{session_id}", response_model=CheckoutResponse)
async def get_checkout(session_id: str) -> CheckoutResponse:
    return _load_checkout(session_id)


@checkout_router.put("/{session_id}/quantity", response_model=CheckoutResponse)
async def change_quantity(session_id: str, body: ChangeQuantityRequest) -> CheckoutResponse:
    current_domain.process(ChangeQuantity(session_id=session_id, quantity=body.quantity), asynchronous=False)
    return _load_checkout(session_id)


@checkout_router.put("/{session_id}/lines/{position}/color", response_model=CheckoutResponse)
async def change_line_color(session_id: str, position: int, body: ChangeColorRequest) -> CheckoutResponse:
    command = ChangeLineColor(session_id=session_id, position=position, color=body.color)
    current_domain.process(command, asynchronous=False)
    return _load_checkout(session_id)


@checkout_router.post("/{session_id}/close", response_model=CheckoutStateResponse)
async def request_close(session_id: str) -> CheckoutStateResponse:
    state = current_domain.process(RequestClose(session_id=session_id), asynchronous=False)
    return CheckoutStateResponse(state=state)


@checkout_router.post("/{session_id}/discount/accept", response_model=CheckoutResponse)
async def accept_discount(session_id: str) -> CheckoutResponse:
    current_domain.process(AcceptDiscount(session_id=session_id), asynchronous=False)
    return _load_checkout(session_id)


@checkout_router.post("/{session_id}/discount/decline", response_model=CheckoutStateResponse)
async def decline_discount(session_id: str) -> CheckoutStateResponse:
    state = current_domain.process(DeclineDiscount(session_id=session_id), asynchronous=False)
    return CheckoutStateResponse(state=state)


@checkout_router.post("/{session_id}/submit", status_code=201, response_model=OrderIdResponse)
async def submit_order(session_id: str, body: SubmitOrderRequest) -> OrderIdResponse:
    command = SubmitOrder(
        session_id=session_id,
        first_name=body.nombre,
        last_name=body.apellido,
        phone=body.numero,
        address=body.direccion,
        reference=body.referencia,
        department=body.departamento,
        province=body.provincia,
        district=body.distrito,
        national_id=body.dni,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)
