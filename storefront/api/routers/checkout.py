# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.deps import (
    get_checkout_registry,
    get_identity,
    get_order_service,
    get_payment_registry,
    raise_for_result,
)
from storefront.domain.schemas import (
    Address,
    CheckoutOut,
    OrderResult,
    PaymentIn,
    PaymentMethodRef,
    ReviewIn,
    SameAsShippingIn,
)
from storefront.services.checkout_service import CheckoutRegistry, CheckoutSession
from storefront.services.identity import StaticIdentity
from storefront.services.order_service import OrderService
from storefront.services.payment_registry import PaymentMethodRegistry

router = APIRouter(prefix="/checkout", tags=["checkout"])


def get_session(
    identity: StaticIdentity = Depends(get_identity),
    registry: CheckoutRegistry = Depends(get_checkout_registry),
) -> CheckoutSession:
    return registry.get(identity.current_scope_key())


def _state(session: CheckoutSession) -> CheckoutOut:
    return CheckoutOut(
        scope_key=session.scope_key,
        data=session.data,
        can_proceed=session.can_proceed(),
        is_processing=session.is_processing,
    )


@router.get("", response_model=CheckoutOut)
def get_checkout(session: CheckoutSession = Depends(get_session)):
    return _state(session)


@router.put("/shipping", response_model=CheckoutOut)
def update_shipping(payload: Address, session: CheckoutSession = Depends(get_session)):
    session.update_shipping_address(payload)
    return _state(session)


@router.put("/billing", response_model=CheckoutOut)
def update_billing(payload: Address, session: CheckoutSession = Depends(get_session)):
    session.update_billing_address(payload)
    return _state(session)


@router.put("/same-as-shipping", response_model=CheckoutOut)
def same_as_shipping(payload: SameAsShippingIn, session: CheckoutSession = Depends(get_session)):
    session.set_same_as_shipping(payload.same)
    return _state(session)


@router.put("/payment", response_model=CheckoutOut)
def update_payment(
    payload: PaymentIn,
    session: CheckoutSession = Depends(get_session),
    payments: PaymentMethodRegistry = Depends(get_payment_registry),
):
    if payload.id is None:
        if session.use_default_payment_method(payments) is None:
            raise HTTPException(status_code=404, detail="No saved payment method")
    else:
        session.update_payment_method(
            PaymentMethodRef(id=payload.id, type=payload.type, label=payload.label)
        )
    return _state(session)


@router.put("/review", response_model=CheckoutOut)
def update_review(payload: ReviewIn, session: CheckoutSession = Depends(get_session)):
    session.set_accept_terms(payload.accept_terms)
    session.set_subscribe_newsletter(payload.subscribe_newsletter)
    session.set_order_notes(payload.order_notes)
    return _state(session)


@router.post("/next", response_model=CheckoutOut)
def next_step(session: CheckoutSession = Depends(get_session)):
    # maszyna stanow nie pilnuje kroku, robi to warstwa wywolujaca
    if not session.can_proceed():
        raise HTTPException(status_code=400, detail="Please complete all required fields")
    session.next_step()
    return _state(session)


@router.post("/prev", response_model=CheckoutOut)
def prev_step(session: CheckoutSession = Depends(get_session)):
    session.prev_step()
    return _state(session)


@router.delete("", response_model=CheckoutOut)
def abandon_checkout(session: CheckoutSession = Depends(get_session)):
    session.reset()
    return _state(session)


@router.post("/place-order", response_model=OrderResult, status_code=201)
async def place_order(
    session: CheckoutSession = Depends(get_session),
    orders: OrderService = Depends(get_order_service),
):
    """
    Sklada zamowienie z koszyka.
    Wysyla powiadomienie asynchronicznie.
    """
    result = await orders.place_order(session)
    raise_for_result(result)
    return result
