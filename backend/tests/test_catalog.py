"""CreditCatalog / 결제 상태 매핑"""
from decimal import Decimal

import pytest

from domain.entities.credit_package import CreditCatalog
from domain.entities.payment import map_provider_status
from domain.enums import PaymentStatus
from domain.exceptions import InvalidPackageError


class TestCatalog:
    def test_known_packages(self, catalog):
        package = catalog.get("10")
        assert package.credits == 10
        assert package.price == Decimal("12.50")
        assert package.price_value == "12.50"
        assert package.description == "10 video uploads"
        assert [p.id for p in catalog.all()] == ["1", "3", "10"]

    def test_price_value_is_two_decimals(self):
        catalog = CreditCatalog.from_config({"x": {"credits": 2, "price": 4, "description": "two"}})
        assert catalog.get("x").price_value == "4.00"

    @pytest.mark.parametrize("package_id", ["99", "", None, "ten"])
    def test_unknown_package_raises(self, catalog, package_id):
        with pytest.raises(InvalidPackageError):
            catalog.get(package_id)

    def test_contains(self, catalog):
        assert "3" in catalog
        assert "4" not in catalog

    @pytest.mark.parametrize("info", [
        {"credits": 0, "price": "1.00"},
        {"credits": 1, "price": "0"},
        {"credits": -3, "price": "2.00"},
    ])
    def test_rejects_non_positive_config(self, info):
        with pytest.raises(ValueError):
            CreditCatalog.from_config({"bad": info})

    def test_packages_are_frozen(self, catalog):
        with pytest.raises(AttributeError):
            catalog.get("1").credits = 100


class TestProviderStatusMap:
    @pytest.mark.parametrize("provider_status,expected", [
        ("paid", PaymentStatus.PAID),
        ("failed", PaymentStatus.FAILED),
        ("expired", PaymentStatus.EXPIRED),
        ("canceled", PaymentStatus.CANCELED),
        ("cancelled", PaymentStatus.CANCELED),
        ("PAID", PaymentStatus.PAID),
        ("open", PaymentStatus.PENDING),
        ("pending", PaymentStatus.PENDING),
        ("authorized", PaymentStatus.PENDING),
        ("something-new", PaymentStatus.PENDING),
        ("", PaymentStatus.PENDING),
        (None, PaymentStatus.PENDING),
    ])
    def test_mapping(self, provider_status, expected):
        assert map_provider_status(provider_status) is expected

    def test_terminal_flags(self):
        assert not PaymentStatus.PENDING.is_terminal
        assert all(s.is_terminal for s in PaymentStatus if s is not PaymentStatus.PENDING)
