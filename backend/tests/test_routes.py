"""HTTP 라우트 - ASGITransport 로 앱 직접 호출"""
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from config import settings
from domain.exceptions import GatewayUnavailableError
from infrastructure.persistence.database import get_session

from conftest import auth_headers

pytestmark = pytest.mark.anyio


async def _checkout(client, package_id: str = "10", user_id: str = "user-1"):
    response = await client.post("/api/payments/checkout", json={"packageId": package_id},
                                 headers=auth_headers(user_id))
    assert response.status_code == 200, response.text
    return response.json()


async def _credits(client, user_id: str = "user-1") -> int:
    response = await client.get("/api/payments/credits", headers=auth_headers(user_id))
    assert response.status_code == 200
    return response.json()["credits"]


class TestPackages:
    async def test_lists_catalog(self, client):
        response = await client.get("/api/payments/packages")
        assert response.status_code == 200
        packages = response.json()["packages"]
        assert set(packages) == {"1", "3", "10"}
        assert packages["10"]["credits"] == 10
        assert packages["10"]["price"] == 12.5
        assert isinstance(packages["1"]["price"], float)
        assert packages["3"]["description"] == "3 video uploads"


class TestCheckout:
    async def test_requires_auth(self, client, gateway):
        response = await client.post("/api/payments/checkout", json={"packageId": "1"})
        assert response.status_code == 401
        assert response.json()["success"] is False
        assert gateway.created == []

    async def test_rejects_invalid_token(self, client):
        response = await client.post("/api/payments/checkout", json={"packageId": "1"},
                                     headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    async def test_unknown_package(self, client, gateway):
        response = await client.post("/api/payments/checkout", json={"packageId": "99"},
                                     headers=auth_headers())
        assert response.status_code == 400
        assert gateway.created == []

        history = await client.get("/api/payments/history", headers=auth_headers())
        assert history.json()["payments"] == []

    async def test_creates_pending_payment(self, client, gateway):
        body = await _checkout(client, "3")

        assert body["checkoutUrl"].startswith("https://checkout.test/")
        assert body["paymentId"]
        assert gateway.created[0]["redirect_url"] == settings.checkout_redirect_url
        assert gateway.created[0]["webhook_url"] == settings.payment_webhook_url

        history = (await client.get("/api/payments/history", headers=auth_headers())).json()["payments"]
        assert len(history) == 1
        assert history[0]["status"] == "pending"
        assert history[0]["credits_purchased"] == 3
        assert history[0]["amount"] == 4.0
        assert history[0]["gateway_payment_id"] == body["gatewayPaymentId"]

    async def test_gateway_outage(self, client, gateway):
        gateway.create_checkout = AsyncMock(side_effect=GatewayUnavailableError("timeout"))
        response = await client.post("/api/payments/checkout", json={"packageId": "1"},
                                     headers=auth_headers())
        assert response.status_code == 502

    async def test_commit_failure_is_persistence_error(self, app, client, gateway, session_factory):
        async def failing_session():
            async with session_factory() as session:
                session.commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error")))
                yield session

        app.dependency_overrides[get_session] = failing_session
        response = await client.post("/api/payments/checkout", json={"packageId": "1"},
                                     headers=auth_headers())

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["error"] == "결제 기록 저장 실패: tr_test1"
        assert len(gateway.created) == 1


class TestCredits:
    async def test_first_request_creates_zero_balance(self, client):
        assert await _credits(client, "brand-new") == 0

    async def test_spend_requires_balance(self, client):
        response = await client.post("/api/payments/credits/spend", headers=auth_headers())
        assert response.status_code == 402
        assert await _credits(client) == 0

    async def test_spend_after_purchase(self, client, gateway):
        body = await _checkout(client, "3")
        gateway.statuses[body["gatewayPaymentId"]] = "paid"
        await client.post(f"/api/payments/confirm/{body['paymentId']}")

        response = await client.post("/api/payments/credits/spend", headers=auth_headers())
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": None, "credits": 2}


class TestReconciliation:
    async def test_confirm_then_webhook_credits_once(self, client, gateway):
        gateway._ids.append("tr_abc")
        await _checkout(client, "10")
        gateway.statuses["tr_abc"] = "paid"

        confirm = await client.post("/api/payments/confirm/tr_abc")
        assert confirm.status_code == 200
        assert confirm.json()["success"] is True
        assert confirm.json()["credits"] == 10
        assert await _credits(client) == 10

        webhook = await client.post("/api/payments/webhook", data={"id": "tr_abc"})
        assert webhook.status_code == 200
        assert webhook.text == "OK"
        assert await _credits(client) == 10

        again = await client.post("/api/payments/confirm", json={"gatewayPaymentId": "tr_abc"})
        assert again.json()["success"] is True
        assert again.json()["outcome"] == "already_terminal"
        assert again.json()["credits"] == 0
        assert await _credits(client) == 10

    async def test_webhook_then_confirm(self, client, gateway):
        body = await _checkout(client, "1")
        gateway.statuses[body["gatewayPaymentId"]] = "paid"

        webhook = await client.post("/api/payments/webhook", json={"id": body["gatewayPaymentId"]})
        assert webhook.status_code == 200
        assert await _credits(client) == 1

        confirm = await client.post("/api/payments/confirm", json={"paymentId": body["paymentId"]})
        assert confirm.json()["status"] == "paid"
        assert await _credits(client) == 1

    async def test_failed_payment_grants_nothing(self, client, gateway):
        body = await _checkout(client, "10")
        gateway.statuses[body["gatewayPaymentId"]] = "failed"

        confirm = await client.post(f"/api/payments/confirm/{body['paymentId']}")
        assert confirm.status_code == 200
        assert confirm.json()["success"] is False
        assert confirm.json()["status"] == "failed"

        gateway.statuses[body["gatewayPaymentId"]] = "paid"
        await client.post("/api/payments/webhook", data={"id": body["gatewayPaymentId"]})
        assert await _credits(client) == 0

    async def test_confirm_unknown_payment(self, client):
        response = await client.post("/api/payments/confirm/does-not-exist")
        assert response.status_code == 404

    async def test_confirm_gateway_outage(self, client, gateway):
        body = await _checkout(client, "1")
        gateway.get_status = AsyncMock(side_effect=GatewayUnavailableError("timeout"))
        response = await client.post(f"/api/payments/confirm/{body['paymentId']}")
        assert response.status_code == 502


class TestWebhook:
    async def test_missing_id(self, client):
        response = await client.post("/api/payments/webhook", data={})
        assert response.status_code == 400

    async def test_unknown_payment_is_acknowledged(self, client, gateway):
        gateway.statuses["tr_foreign"] = "paid"
        response = await client.post("/api/payments/webhook", data={"id": "tr_foreign"})
        assert response.status_code == 200
        assert response.text == "OK"

    async def test_status_in_body_is_ignored(self, client, gateway):
        body = await _checkout(client, "10")
        gateway_payment_id = body["gatewayPaymentId"]

        response = await client.post("/api/payments/webhook",
                                     json={"id": gateway_payment_id, "status": "paid"})
        assert response.status_code == 200
        assert gateway.status_calls == [gateway_payment_id]
        assert await _credits(client) == 0

        history = (await client.get("/api/payments/history", headers=auth_headers())).json()["payments"]
        assert history[0]["status"] == "pending"

    async def test_internal_failure_hides_details(self, client, gateway):
        body = await _checkout(client, "1")
        gateway.get_status = AsyncMock(side_effect=GatewayUnavailableError("secret detail"))

        response = await client.post("/api/payments/webhook", data={"id": body["gatewayPaymentId"]})

        assert response.status_code == 500
        assert response.json() == {"error": "Webhook processing failed"}


class TestRecipesAndHealth:
    async def test_generate_recipes(self, client):
        response = await client.post("/api/recipes/generate", json={"ingredients": "eggs, rice"})
        assert response.status_code == 200
        recipes = response.json()["recipes"]
        assert len(recipes) == 2
        assert {"title", "description", "ingredients", "steps"} <= set(recipes[0])

    async def test_generate_requires_ingredients(self, client):
        response = await client.post("/api/recipes/generate", json={"ingredients": ""})
        assert response.status_code == 422

    async def test_root(self, client):
        response = await client.get("/")
        assert response.json()["service"] == settings.APP_NAME

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["recipe_generator"] == "FallbackRecipeGenerator"
