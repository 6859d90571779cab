from dataclasses import dataclass, field
from typing import Optional, Protocol
import logging

import stripe

from jurnext.config import Settings

logger = logging.getLogger(__name__)


class CheckoutGatewayError(Exception):
    """The checkout provider failed or rejected a request."""


@dataclass
class LineItem:
    name: str
    unit_amount: int
    quantity: int
    image: Optional[str] = None


@dataclass
class CheckoutSession:
    id: str
    url: Optional[str] = None
    status: Optional[str] = None
    payment_intent: Optional[str] = None
    amount_total: Optional[int] = None
    metadata: dict = field(default_factory=dict)


class CheckoutGateway(Protocol):
    def create_session(
        self,
        line_item: LineItem,
        metadata: dict,
        success_url: str,
        cancel_url: str
    ) -> CheckoutSession:
        ...

    def retrieve_session(self, session_id: str) -> CheckoutSession:
        ...

    def verify_webhook(self, payload: bytes, signature: str) -> dict:
        ...


def _session_from_stripe(session) -> CheckoutSession:
    payment_intent = session.get("payment_intent")
    # expanded payment intents come back as objects
    if payment_intent is not None and not isinstance(payment_intent, str):
        payment_intent = payment_intent.get("id")

    return CheckoutSession(
        id=session.get("id"),
        url=session.get("url"),
        status=session.get("status"),
        payment_intent=payment_intent,
        amount_total=session.get("amount_total"),
        metadata=dict(session.get("metadata") or {})
    )


class StripeCheckoutGateway:
    def __init__(self, settings: Settings):
        self.api_key = settings.stripe_secret_key
        self.webhook_secret = settings.stripe_webhook_secret
        self.currency = settings.currency

    def create_session(
        self,
        line_item: LineItem,
        metadata: dict,
        success_url: str,
        cancel_url: str
    ) -> CheckoutSession:
        product_data = {"name": line_item.name}
        if line_item.image:
            product_data["images"] = [line_item.image]

        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                payment_method_types=["card"],
                line_items=[{
                    "price_data": {
                        "currency": self.currency,
                        "product_data": product_data,
                        "unit_amount": line_item.unit_amount
                    },
                    "quantity": line_item.quantity
                }],
                mode="payment",
                success_url=success_url,
                cancel_url=cancel_url,
                metadata={k: str(v) for k, v in metadata.items()}
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe session creation failed: {e}")
            raise CheckoutGatewayError(f"Stripe error: {str(e)}") from e

        return _session_from_stripe(session)

    def retrieve_session(self, session_id: str) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.error(f"Stripe session retrieval failed for {session_id}: {e}")
            raise CheckoutGatewayError(f"Stripe error: {str(e)}") from e

        return _session_from_stripe(session)

    def verify_webhook(self, payload: bytes, signature: str) -> dict:
        """Verify Stripe webhook signature and return the event."""
        try:
            return stripe.Webhook.construct_event(
                payload,
                signature,
                self.webhook_secret
            )
        except (ValueError, stripe.SignatureVerificationError):
            raise ValueError("Invalid signature")
