"""Tests for DefaultKeyBuilder."""

import pytest

from ledgercache.catalog import CLIENTS, PRODUCTS
from ledgercache.infrastructure.key_builders.default import DefaultKeyBuilder


class TestDefaultKeyBuilder:
    """Tests for DefaultKeyBuilder."""

    @pytest.fixture
    def key_builder(self) -> DefaultKeyBuilder:
        """Create a key builder for testing."""
        return DefaultKeyBuilder()

    def test_key_layout(self, key_builder: DefaultKeyBuilder) -> None:
        keys = key_builder.build("products", PRODUCTS.parse_filters({}))

        assert keys.data_key.startswith("products:list:{")
        assert keys.count_key.startswith("products:count:{")
        assert keys.data_key.split(":list:")[1] == keys.count_key.split(":count:")[1]

    def test_defaults_are_substituted(self, key_builder: DefaultKeyBuilder) -> None:
        implicit = key_builder.build("products", PRODUCTS.parse_filters({}))
        explicit = key_builder.build(
            "products",
            PRODUCTS.parse_filters(
                {
                    "skip": "0",
                    "take": "20",
                    "company": "all",
                    "sortField": "createdAt",
                    "sortDirection": "desc",
                }
            ),
        )

        assert implicit == explicit
        assert '"company":"all"' in implicit.data_key

    def test_parameter_order_does_not_matter(self, key_builder: DefaultKeyBuilder) -> None:
        a = key_builder.build(
            "clients", CLIENTS.parse_filters({"status": "LEAD", "industry": "Retail"})
        )
        b = key_builder.build(
            "clients", CLIENTS.parse_filters({"industry": "Retail", "status": "LEAD"})
        )

        assert a == b

    def test_numeric_and_string_values_match(self, key_builder: DefaultKeyBuilder) -> None:
        as_int = key_builder.build("products", PRODUCTS.parse_filters({"company": 5}))
        as_str = key_builder.build("products", PRODUCTS.parse_filters({"company": "5"}))

        assert as_int == as_str

    @pytest.mark.parametrize(
        "params",
        [
            {"skip": "20"},
            {"take": "10"},
            {"search": "widget"},
            {"company": "7"},
            {"sortField": "price"},
            {"sortDirection": "asc"},
            {"isActive": "true"},
            {"currency": "USD"},
        ],
    )
    def test_different_filters_different_keys(
        self, key_builder: DefaultKeyBuilder, params: dict
    ) -> None:
        base = key_builder.build("products", PRODUCTS.parse_filters({}))
        other = key_builder.build("products", PRODUCTS.parse_filters(params))

        assert base.data_key != other.data_key
        assert base.count_key != other.count_key

    def test_entity_namespaces_keys(self, key_builder: DefaultKeyBuilder) -> None:
        filters = PRODUCTS.parse_filters({})

        assert (
            key_builder.build("products", filters).data_key
            != key_builder.build("vendors", filters).data_key
        )

    def test_hashed_filters(self) -> None:
        builder = DefaultKeyBuilder(hash_filters=True)

        keys = builder.build("products", PRODUCTS.parse_filters({"company": "7"}))

        assert len(keys.data_key) == len("products:list:") + 16
        assert keys == builder.build("products", PRODUCTS.parse_filters({"company": 7}))
