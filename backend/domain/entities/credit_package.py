"""크레딧 패키지 카탈로그"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any, List

from domain.exceptions import InvalidPackageError

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class CreditPackage:
    """판매 단위 - 배포 시점에 고정되며 DB에 저장하지 않는다"""
    id: str
    credits: int
    price: Decimal
    description: str

    @property
    def price_value(self) -> str:
        """게이트웨이 금액 표기 ("12.50")"""
        return f"{self.price.quantize(CENTS)}"


class CreditCatalog:
    """패키지 ID → CreditPackage. 조회는 전체 함수(total)이며 모르는 ID는 예외."""

    def __init__(self, packages: Dict[str, CreditPackage]):
        self._packages = dict(packages)

    @classmethod
    def from_config(cls, raw: Dict[str, Dict[str, Any]]) -> "CreditCatalog":
        packages = {}
        for package_id, info in raw.items():
            credits = int(info["credits"])
            price = Decimal(str(info["price"])).quantize(CENTS)
            if credits <= 0 or price <= 0:
                raise ValueError(f"잘못된 패키지 설정: {package_id}")
            packages[str(package_id)] = CreditPackage(
                id=str(package_id), credits=credits, price=price,
                description=info.get("description", ""))
        return cls(packages)

    def get(self, package_id: str) -> CreditPackage:
        package = self._packages.get(str(package_id)) if package_id is not None else None
        if package is None:
            raise InvalidPackageError(str(package_id))
        return package

    def __contains__(self, package_id) -> bool:
        return str(package_id) in self._packages

    def all(self) -> List[CreditPackage]:
        return list(self._packages.values())
