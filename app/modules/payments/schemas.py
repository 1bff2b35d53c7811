from pydantic import BaseModel, Field
from typing import Optional


class PaymentCreate(BaseModel):
    amount: int = Field(gt=0)  # smallest currency unit (centavos)
    currency: Optional[str] = None
    description: Optional[str] = None


class PaymentResponse(BaseModel):
    # The mobile app reads the Stripe payment sheet secret as "clientSecret"
    client_secret: str = Field(serialization_alias="clientSecret")
