"""
PayTR callback endpoint built with FastAPI.

PayTR posts the final payment outcome to this URL (configure it in the
merchant panel). The gateway repeats the notification until it receives the
plain-text body ``OK``; ``INVALID_HASH`` rejects a forged or corrupted
notification.

Run with ``uvicorn examples.callback_handler:app`` after installing the
``examples`` extra.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from paytr_payments import CallbackPayload, callback_reply, create_paytr_client

logger = logging.getLogger("paytr.callback")

app = FastAPI()
paytr = create_paytr_client()


@app.post("/api/paytr/callback", response_class=PlainTextResponse)
async def receive_paytr_callback(request: Request) -> str:
    form = await request.form()
    payload = CallbackPayload.from_mapping(
        {key: value for key, value in form.items() if isinstance(value, str)}
    )

    if not paytr.verify_callback(payload):
        logger.error("PayTR callback: invalid hash")
        return callback_reply(False)

    if payload.succeeded:
        # Mark the order paid here, idempotently: PayTR may deliver twice.
        # payload.total_amount_decimal is the charged amount in major units.
        # Persist payload.utoken when the customer chose to store the card.
        logger.info(
            "PayTR callback: order %s paid (%s %s)",
            payload.merchant_oid, payload.total_amount_decimal, payload.currency,
        )
    else:
        logger.info(
            "PayTR callback: order %s failed: %s",
            payload.merchant_oid, payload.failure_description,
        )

    # Without this exact reply PayTR keeps retrying the notification.
    return callback_reply(True)
