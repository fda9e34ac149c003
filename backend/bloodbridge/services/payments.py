# bloodbridge/services/payments.py
import logging

import stripe
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

class PaymentError(Exception):
    pass

class StripeGateway:
    """Creates card PaymentIntents; the client finishes payment with the secret."""

    def __init__(self, api_key: str, currency: str = "usd"):
        self.api_key = api_key
        self.currency = currency
        self._client = None

    def _stripe(self) -> stripe.StripeClient:
        if self._client is None:
            # failures surface straight to the caller
            self._client = stripe.StripeClient(self.api_key, max_network_retries=0)
        return self._client

    async def create_payment_intent(self, amount_minor: int) -> str:
        params = {
            "amount": amount_minor,
            "currency": self.currency,
            "payment_method_types": ["card"],
        }
        try:
            client = self._stripe()
            intent = await run_in_threadpool(client.payment_intents.create, params=params)
        except stripe.StripeError as ex:
            raise PaymentError(str(ex)) from ex
        logger.info("Created payment intent %s for %s %s", intent.id, amount_minor, self.currency)
        return intent.client_secret
