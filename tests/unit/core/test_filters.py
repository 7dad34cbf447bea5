"""Tests for list filter normalization."""

import pytest

from ledgercache.catalog import CLIENTS, DIGITAL_WALLETS, PRODUCTS, VENDORS
from ledgercache.core.entities import (
    ClientFilters,
    DigitalWalletFilters,
    ProductFilters,
    SortDirection,
    VendorFilters,
)
from ledgercache.core.exceptions import InvalidFilterError


class TestBaseFilters:
    """Defaults, coercion and clamping shared by every entity."""

    def test_defaults(self) -> None:
        filters = PRODUCTS.parse_filters({})

        assert filters == ProductFilters()
        assert filters.skip == 0
        assert filters.take == 20
        assert filters.company is None
        assert filters.sort_field == "createdAt"
        assert filters.sort_direction == SortDirection.DESC

    def test_entity_default_take(self) -> None:
        assert VENDORS.parse_filters({}).take == 50

    def test_numbers_given_as_strings(self) -> None:
        from_strings = PRODUCTS.parse_filters({"skip": "20", "take": "10", "company": "5"})
        from_ints = PRODUCTS.parse_filters({"skip": 20, "take": 10, "company": 5})

        assert from_strings == from_ints
        assert from_strings.company == 5

    @pytest.mark.parametrize("take,expected", [("0", 1), ("-5", 1), ("100", 100), ("500", 100)])
    def test_take_is_clamped(self, take: str, expected: int) -> None:
        assert PRODUCTS.parse_filters({"take": take}).take == expected

    def test_negative_skip_becomes_zero(self) -> None:
        assert PRODUCTS.parse_filters({"skip": "-3"}).skip == 0

    @pytest.mark.parametrize("param", ["skip", "take", "company"])
    def test_non_numeric_is_rejected(self, param: str) -> None:
        with pytest.raises(InvalidFilterError) as exc_info:
            PRODUCTS.parse_filters({param: "lots"})

        assert exc_info.value.param == param

    @pytest.mark.parametrize("value", ["all", "ALL", "", None])
    def test_company_all_means_no_filter(self, value) -> None:
        assert PRODUCTS.parse_filters({"company": value}).company is None

    def test_unknown_sort_field_falls_back(self) -> None:
        filters = PRODUCTS.parse_filters({"sortField": "password"})

        assert filters.sort_field == "createdAt"

    def test_known_sort_field_and_direction(self) -> None:
        filters = PRODUCTS.parse_filters({"sortField": "price", "sortDirection": "ASC"})

        assert filters.sort_field == "price"
        assert filters.sort_direction == SortDirection.ASC

    def test_unknown_direction_is_desc(self) -> None:
        assert PRODUCTS.parse_filters({"sortDirection": "up"}).sort_direction == SortDirection.DESC

    def test_search_is_trimmed(self) -> None:
        assert PRODUCTS.parse_filters({"search": "  widget "}).search == "widget"


class TestEntityFilters:
    def test_product_filters(self) -> None:
        filters = PRODUCTS.parse_filters({"isActive": "true", "currency": "eur"})

        assert isinstance(filters, ProductFilters)
        assert filters.is_active is True
        assert filters.currency == "EUR"

    def test_product_bool_rejects_garbage(self) -> None:
        with pytest.raises(InvalidFilterError):
            PRODUCTS.parse_filters({"isActive": "maybe"})

    def test_vendor_status(self) -> None:
        assert VENDORS.parse_filters({"status": "Active"}).status == "active"
        assert VENDORS.parse_filters({"status": "all"}).status is None

    def test_vendor_status_rejects_unknown(self) -> None:
        with pytest.raises(InvalidFilterError):
            VENDORS.parse_filters({"status": "deleted"})

    def test_client_filters(self) -> None:
        filters = CLIENTS.parse_filters({"status": "lead", "industry": "Retail"})

        assert isinstance(filters, ClientFilters)
        assert filters.status == "LEAD"
        assert filters.industry == "Retail"

    def test_digital_wallet_filters(self) -> None:
        filters = DIGITAL_WALLETS.parse_filters({"walletType": "crypto", "currency": "btc"})

        assert isinstance(filters, DigitalWalletFilters)
        assert filters.wallet_type == "CRYPTO"
        assert filters.currency == "BTC"

    def test_vendor_filters_type(self) -> None:
        assert isinstance(VENDORS.parse_filters({}), VendorFilters)


class TestCanonical:
    def test_uses_parameter_names(self) -> None:
        canonical = PRODUCTS.parse_filters({"isActive": "false", "company": "7"}).canonical()

        assert canonical == {
            "skip": 0,
            "take": 20,
            "search": "",
            "company": 7,
            "sortField": "createdAt",
            "sortDirection": "desc",
            "isActive": False,
            "currency": "",
        }

    def test_missing_company_is_all(self) -> None:
        assert PRODUCTS.parse_filters({}).canonical()["company"] == "all"
