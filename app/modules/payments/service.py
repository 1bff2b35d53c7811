import stripe
from app.modules.payments.schemas import PaymentCreate, PaymentResponse
from fastapi import HTTPException
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(self, secret_key: Optional[str], default_currency: str = "brl"):
        self.secret_key = secret_key
        self.default_currency = default_currency

    def create_payment_intent(self, payment_data: PaymentCreate, user_id: str) -> PaymentResponse:
        """Create a Stripe PaymentIntent and hand its client secret to the app"""
        if not self.secret_key:
            raise HTTPException(status_code=503, detail="Payments are not configured")
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.secret_key,
                amount=payment_data.amount,
                currency=payment_data.currency or self.default_currency,
                description=payment_data.description,
                metadata={"user_id": user_id},
            )
            logger.info(f"Created payment intent {intent.id} for {user_id}")
            return PaymentResponse(client_secret=intent.client_secret)
        except stripe.StripeError as e:
            logger.error(f"Stripe error for {user_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))
