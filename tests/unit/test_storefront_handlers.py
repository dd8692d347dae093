"""
Storefront endpoint tests: GET /api/just-qualified/{customerId} and
GET /api/vip-info.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from conftest import VIP_GROUP
from handlers import just_qualified, vip_info
from utils.error_handling import DirectoryError


def _popup_event(customer_id):
    return {
        "requestContext": {"http": {"method": "GET", "path": f"/api/just-qualified/{customer_id}"}},
        "pathParameters": {"customerId": str(customer_id)},
    }


def _check(customer_id):
    response = just_qualified.lambda_handler(_popup_event(customer_id), None)
    return response["statusCode"], json.loads(response["body"])


def _today():
    return datetime.now(timezone.utc).date()


class TestJustQualified:
    @pytest.mark.parametrize("raw", ["abc", "0", "-5", "1.5"])
    def test_invalid_customer_id(self, service_context, raw):
        status, body = _check(raw)
        assert status == 400
        assert body["message"] == "customerId must be a positive integer"

    def test_id_taken_from_path_without_path_parameters(self, service_context):
        event = {"requestContext": {"http": {"method": "GET", "path": "/api/just-qualified/42"}}}
        response = just_qualified.lambda_handler(event, None)
        assert response["statusCode"] == 200

    def test_non_vip(self, service_context, directory):
        directory.add_customer(42)
        status, body = _check(42)
        assert status == 200
        assert body == {"justQualified": False, "isVIP": False, "daysLeft": 0}

    def test_unknown_customer(self, service_context):
        assert _check(77)[1]["isVIP"] is False

    def test_fresh_qualification_shows_popup_once(self, service_context, directory):
        directory.add_customer(42, VIP_GROUP)
        directory.add_record(42, _today().isoformat())
        service_context.recency.mark_qualified(42, datetime.now(timezone.utc))

        _, first = _check(42)
        _, second = _check(42)

        assert first["justQualified"] is True
        assert first["isVIP"] is True
        assert first["discountPercent"] == 35
        assert first["qualifiedDate"] == _today().isoformat()
        assert 89 <= first["daysLeft"] <= 90
        assert second["justQualified"] is False
        assert second["isVIP"] is True

    def test_expired_vip_is_reported_as_not_vip(self, service_context, directory):
        directory.add_customer(42, VIP_GROUP)
        directory.add_record(42, (_today() - timedelta(days=120)).isoformat())
        assert _check(42)[1] == {"justQualified": False, "isVIP": False, "daysLeft": 0}

    def test_directory_failure_answers_not_vip(self, service_context, directory):
        directory.fail["fetch_customer"] = DirectoryError("down", status_code=503)
        status, body = _check(42)
        assert status == 200
        assert body["isVIP"] is False


def test_vip_info(service_context):
    response = vip_info.lambda_handler({}, None)
    assert response["statusCode"] == 200
    assert json.loads(response["body"]) == {
        "vipGroupId": VIP_GROUP,
        "discountPercent": 35,
        "minQuantity": 5,
        "discountDays": 90,
    }
