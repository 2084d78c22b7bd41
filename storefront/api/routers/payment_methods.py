# storefront/api/routers/payment_methods.py
from typing import List

from fastapi import APIRouter, Depends

from storefront.api.deps import get_identity, get_payment_registry
from storefront.domain.schemas import PaymentMethodRef
from storefront.services.identity import StaticIdentity
from storefront.services.payment_registry import PaymentMethodRegistry

router = APIRouter(prefix="/payment-methods", tags=["payment-methods"])


@router.get("", response_model=List[PaymentMethodRef])
def list_methods(
    identity: StaticIdentity = Depends(get_identity),
    payments: PaymentMethodRegistry = Depends(get_payment_registry),
):
    return payments.list_methods(identity.current_scope_key())


@router.post("", response_model=PaymentMethodRef, status_code=201)
def add_method(
    payload: PaymentMethodRef,
    identity: StaticIdentity = Depends(get_identity),
    payments: PaymentMethodRegistry = Depends(get_payment_registry),
):
    return payments.add_method(identity.current_scope_key(), payload)
