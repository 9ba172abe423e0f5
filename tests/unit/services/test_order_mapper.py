"""Unit tests for the marketplace -> storefront order mapping."""

import pytest

from order_sync_service.services.order_mapper import (
    map_to_destination,
    order_tag,
    resolve_email,
    split_name,
)


class TestSplitName:
    """Tests for customer name splitting."""

    def test_two_tokens(self) -> None:
        assert split_name("Cliente Sandbox") == ("Cliente", "Sandbox")

    def test_single_token(self) -> None:
        assert split_name("Ana") == ("Ana", "")

    def test_extra_whitespace_collapsed(self) -> None:
        assert split_name("  Ana   Maria Silva ") == ("Ana", "Maria Silva")

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_empty(self, name) -> None:
        assert split_name(name) == ("", "")


class TestResolveEmail:
    """Invalid or missing emails are replaced by a deterministic placeholder."""

    def test_valid_email_passes_through(self) -> None:
        assert resolve_email("a@b.co", "42") == "a@b.co"

    def test_invalid_email_uses_placeholder(self) -> None:
        email = resolve_email("not-an-email", "42")
        assert "42" in email
        assert email == resolve_email("not-an-email", "42")

    def test_missing_email_uses_placeholder(self) -> None:
        assert resolve_email(None, "42", domain="example.invalid") == "order-42@example.invalid"


class TestMapToDestination:
    def test_maps_customer_and_addresses(self, order_factory) -> None:
        order = order_factory(order_id="42", customer_name="  Ana   Maria Silva ")

        mapped = map_to_destination(order)

        assert mapped.customer.first_name == "Ana"
        assert mapped.customer.last_name == "Maria Silva"
        assert mapped.shipping_address.address1 == "Rua Exemplo 123"
        assert mapped.shipping_address.zip == "1000-000"
        assert mapped.billing_address.city == "Lisboa"
        assert mapped.financial_status == "pending"
        assert mapped.currency == "EUR"

    def test_money_has_two_decimals(self, order_factory) -> None:
        order = order_factory(totalPrice=19.9, shipping={"type": "CTT", "value": 3.5})

        mapped = map_to_destination(order)

        assert mapped.total_price == "19.90"
        assert mapped.shipping_lines[0].price == "3.50"
        assert mapped.shipping_lines[0].code == "CTT"

    def test_missing_shipping_gives_empty_list(self, order_factory) -> None:
        mapped = map_to_destination(order_factory(shipping=None))
        assert mapped.shipping_lines == []

    def test_tags_include_marker_and_reference(self, order_factory) -> None:
        mapped = map_to_destination(order_factory(order_id="42"))

        assert "KuantoKusta" in mapped.tags
        assert order_tag("42") in mapped.tags
        assert mapped.to_payload()["tags"] == "KuantoKusta, KK-42"

    def test_email_fallback_is_applied(self, order_factory) -> None:
        mapped = map_to_destination(order_factory(order_id="42", email="not-an-email"))

        assert "42" in mapped.email
        assert mapped.customer.email == mapped.email

    def test_valid_email_kept(self, order_factory) -> None:
        mapped = map_to_destination(order_factory(email="a@b.co"))
        assert mapped.email == "a@b.co"

    def test_line_items_left_for_engine(self, order_factory) -> None:
        assert map_to_destination(order_factory()).line_items == []
