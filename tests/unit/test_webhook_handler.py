"""
POST /webhook handler tests.

Uses the service_context fixture so the handler runs against the in-memory
directory with no network access.
"""

import base64
import json

from conftest import VIP_GROUP
from handlers import webhook
from utils.error_handling import DirectoryError
from utils.signature import SIGNATURE_HEADER, TOKEN_HEADER, sign


def _payload(order_id=500, created_at=1718452800):
    return json.dumps(
        {
            "scope": "store/order/created",
            "store_id": "1001",
            "data": {"type": "order", "id": order_id},
            "hash": "f0b2",
            "created_at": created_at,
            "producer": "stores/abc123",
        }
    )


def _event(body, headers=None, is_base64=False):
    return {
        "requestContext": {"http": {"method": "POST", "path": "/webhook"}},
        "headers": headers or {"content-type": "application/json"},
        "body": body,
        "isBase64Encoded": is_base64,
    }


def _body(response):
    return json.loads(response["body"])


def test_qualifying_order_processed(service_context, directory):
    directory.add_customer(42)
    directory.add_order(500, 42, [3, 3])

    response = webhook.lambda_handler(_event(_payload()), None)

    assert response["statusCode"] == 200
    body = _body(response)
    assert body["status"] == "processed"
    assert body["action"] == "requalify"
    assert directory.customers[42] == VIP_GROUP


def test_duplicate_delivery_writes_once(service_context, directory):
    directory.add_customer(42)
    directory.add_order(500, 42, [3, 3])

    first = webhook.lambda_handler(_event(_payload()), None)
    second = webhook.lambda_handler(_event(_payload()), None)

    assert _body(first)["status"] == "processed"
    assert second["statusCode"] == 200
    assert _body(second) == {"status": "duplicate"}
    assert len([c for c in directory.writes() if c[0] == "upsert"]) == 1


def test_read_failure_returns_500_and_allows_retry(service_context, directory):
    directory.add_customer(42)
    directory.add_order(500, 42, [6])
    directory.fail["fetch_customer"] = DirectoryError("GET /v3/customers returned 503", status_code=503)

    response = webhook.lambda_handler(_event(_payload()), None)

    assert response["statusCode"] == 500
    assert _body(response)["status"] == "error"
    assert "correlation_id" in _body(response)
    assert directory.writes() == []

    del directory.fail["fetch_customer"]
    retry = webhook.lambda_handler(_event(_payload()), None)
    assert _body(retry)["status"] == "processed"


def test_malformed_payload_acknowledged(service_context, directory):
    response = webhook.lambda_handler(_event("{not json"), None)

    assert response["statusCode"] == 200
    assert _body(response) == {"status": "ignored", "reason": "malformed payload"}
    assert directory.calls == []


def test_base64_body_decoded(service_context, directory):
    directory.add_customer(42)
    directory.add_order(500, 42, [1])
    encoded = base64.b64encode(_payload().encode()).decode()

    response = webhook.lambda_handler(_event(encoded, is_base64=True), None)

    assert _body(response)["action"] == "no_action"


def test_guest_order_acknowledged(service_context, directory):
    directory.add_order(500, None, [9000])

    body = _body(webhook.lambda_handler(_event(_payload()), None))

    assert body["action"] == "ignore"
    assert directory.writes() == []


class TestAuthenticity:
    SECRET = "shared-secret"

    def test_bad_signature_rejected(self, service_context, directory):
        service_context.config.webhook_secret = self.SECRET
        directory.add_order(500, None, [1])

        response = webhook.lambda_handler(_event(_payload(), headers={SIGNATURE_HEADER: "bogus"}), None)

        assert response["statusCode"] == 401
        assert directory.calls == []

    def test_missing_signature_rejected(self, service_context):
        service_context.config.webhook_secret = self.SECRET
        response = webhook.lambda_handler(_event(_payload()), None)
        assert response["statusCode"] == 401
        assert _body(response)["message"] == "Missing webhook signature"

    def test_valid_signature_accepted(self, service_context, directory):
        service_context.config.webhook_secret = self.SECRET
        directory.add_order(500, None, [1])
        payload = _payload()
        headers = {"X-Webhook-Signature": sign(self.SECRET, payload.encode())}

        response = webhook.lambda_handler(_event(payload, headers=headers), None)

        assert response["statusCode"] == 200
        assert _body(response)["action"] == "ignore"

    def test_static_token_accepted(self, service_context, directory):
        service_context.config.webhook_secret = self.SECRET
        directory.add_order(500, None, [1])

        response = webhook.lambda_handler(_event(_payload(), headers={TOKEN_HEADER: self.SECRET}), None)

        assert response["statusCode"] == 200

    def test_wrong_token_rejected(self, service_context):
        service_context.config.webhook_secret = self.SECRET
        response = webhook.lambda_handler(_event(_payload(), headers={TOKEN_HEADER: "guess"}), None)
        assert response["statusCode"] == 401
