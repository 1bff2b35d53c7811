from fastapi import APIRouter, Depends, Request
from app.modules.payments.schemas import PaymentCreate, PaymentResponse
from app.modules.payments.service import PaymentService
from app.core.dependencies import require_action
from typing import Dict

router = APIRouter(tags=["payments"])


def get_payment_service(request: Request) -> PaymentService:
    settings = request.app.state.settings
    return PaymentService(settings.stripe_secret_key, settings.stripe_default_currency)


@router.post("/create-payment", response_model=PaymentResponse)
async def create_payment(
    payment_data: PaymentCreate,
    user_data: Dict = Depends(require_action("payments:create")),
    service: PaymentService = Depends(get_payment_service)
):
    """Create a payment intent; 503 when no Stripe key is configured"""
    return service.create_payment_intent(payment_data, user_data["id"])
