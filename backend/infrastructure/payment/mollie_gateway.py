"""Mollie Payments API 클라이언트"""
import ipaddress
from typing import Dict, Any, Optional
from urllib.parse import urlparse

import httpx
from loguru import logger

from application.ports.payment_gateway import PaymentGatewayPort, CheckoutSession
from domain.entities.credit_package import CreditPackage
from domain.exceptions import ConfigurationError, GatewayUnavailableError, PaymentNotFoundError

LOCAL_HOST_SUFFIXES = (".localhost", ".local", ".internal")


def is_publicly_reachable(url: Optional[str]) -> bool:
    """게이트웨이가 인터넷에서 호출할 수 있는 웹훅 URL 인지"""
    if not url:
        return False
    host = (urlparse(url).hostname or "").lower()
    if not host or host == "localhost" or host.endswith(LOCAL_HOST_SUFFIXES):
        return False
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return True
    return not (ip.is_loopback or ip.is_private or ip.is_link_local
                or ip.is_unspecified or ip.is_reserved)


class MollieGateway(PaymentGatewayPort):
    def __init__(self, api_key: str, api_url: str = "https://api.mollie.com/v2",
                 timeout: float = 10.0, currency: str = "EUR",
                 description_prefix: str = "FlavorSwipe",
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.currency = currency
        self.description_prefix = description_prefix
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ConfigurationError("MOLLIE_API_KEY")
        return {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def build_payment_request(self, user_id: str, package: CreditPackage,
                              redirect_url: str, webhook_url: str) -> Dict[str, Any]:
        payload = {
            "amount": {"currency": self.currency, "value": package.price_value},
            "description": f"{self.description_prefix} - {package.description}",
            "redirectUrl": redirect_url,
            "metadata": {"userId": user_id, "packageId": package.id, "credits": str(package.credits)},
        }
        # 로컬 주소는 게이트웨이가 호출할 수 없으므로 제출하지 않는다 → 수동 확인 경로만 남음
        if is_publicly_reachable(webhook_url):
            payload["webhookUrl"] = webhook_url
        else:
            logger.warning(f"웹훅 URL 생략 (외부 접근 불가): {webhook_url} - 수동 확인 필요")
        return payload

    async def create_checkout(self, user_id: str, package: CreditPackage,
                              redirect_url: str, webhook_url: str) -> CheckoutSession:
        headers = self._get_headers()
        payload = self.build_payment_request(user_id, package, redirect_url, webhook_url)
        data = await self._request("POST", f"{self.api_url}/payments", headers, json=payload)

        gateway_payment_id = data.get("id")
        if not gateway_payment_id:
            raise GatewayUnavailableError("응답에 결제 ID 가 없습니다.")
        checkout_url = ((data.get("_links") or {}).get("checkout") or {}).get("href") or ""
        logger.info(f"Mollie 결제 생성: {gateway_payment_id}")
        return CheckoutSession(gateway_payment_id=gateway_payment_id, checkout_url=checkout_url)

    async def get_status(self, gateway_payment_id: str) -> str:
        headers = self._get_headers()
        data = await self._request("GET", f"{self.api_url}/payments/{gateway_payment_id}", headers,
                                   not_found_id=gateway_payment_id)
        return data.get("status", "")

    async def _request(self, method: str, url: str, headers: Dict[str, str],
                       json: Optional[Dict[str, Any]] = None,
                       not_found_id: Optional[str] = None) -> Dict[str, Any]:
        async with self._client() as client:
            try:
                response = await client.request(method, url, headers=headers, json=json)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                if not_found_id and e.response.status_code == 404:
                    raise PaymentNotFoundError(not_found_id)
                logger.error(f"Mollie API 오류 {e.response.status_code}: {e.response.text}")
                raise GatewayUnavailableError(f"HTTP {e.response.status_code}")
            except httpx.TimeoutException:
                logger.error(f"Mollie API 타임아웃: {method} {url}")
                raise GatewayUnavailableError("timeout")
            except httpx.RequestError as e:
                logger.error(f"Mollie API 연결 실패: {e}")
                raise GatewayUnavailableError(str(e))
            except ValueError as e:
                logger.error(f"Mollie 응답 파싱 실패: {e}")
                raise GatewayUnavailableError("잘못된 응답 형식")
