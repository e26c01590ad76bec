"""Unit tests for the order text parser."""
import pytest
from decimal import Decimal

from snacktrack.services.menu.in_memory_menu import InMemoryMenuProvider
from snacktrack.services.menu.repository import MenuRepository
from snacktrack.services.ordering.models import (
    PARSE_FAILURE_MESSAGE,
    OrderType,
    ParsedOrder,
    PaymentMethod,
)
from snacktrack.services.ordering.parser import OrderTextParser
from snacktrack.services.ordering.validator import MISSING_ADDRESS_MESSAGE


class FailingMenuProvider(InMemoryMenuProvider):
    """Menu provider whose lookups always fail."""

    async def find_by_name(self, phrase, language="en"):
        raise RuntimeError("menu service unavailable")


@pytest.fixture
def parser(test_menu_repository):
    return OrderTextParser(test_menu_repository)


def summary(order: ParsedOrder):
    return [(line.menu_item.name, line.quantity) for line in order.items]


class TestOrderParser:
    """Parsing whole messages."""

    @pytest.mark.asyncio
    async def test_repeated_items_aggregate(self, parser):
        order = await parser.parse_order_text("2 burger and 1 burger and 3 burger to 123 Main St")

        assert summary(order) == [("Burger", 6)]
        assert order.total_price == Decimal("534.00")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [
        "I want 1 burger and fries deliver to 123 Main St",
        "Gusto ko po ng burger at fries, address po sa 123 Main St",
    ])
    async def test_english_and_tagalog_orders(self, parser, text):
        order = await parser.parse_order_text(text)

        assert len(order.items) == 2
        assert "123 Main St" in order.delivery_address
        assert order.order_type == OrderType.DELIVERY
        assert order.errors == []

    @pytest.mark.asyncio
    async def test_customer_info(self, parser):
        order = await parser.parse_order_text(
            "name: John Doe\nphone: +639123456789\n1 burger to 123 Main St"
        )

        assert order.customer_name == "John Doe"
        assert order.customer_phone == "+639123456789"
        assert summary(order) == [("Burger", 1)]
        assert order.delivery_address == "to 123 Main St"
        assert order.is_valid

    @pytest.mark.asyncio
    async def test_phone_is_sanitized(self, parser):
        order = await parser.parse_order_text("phone: 0912-345-6789\n1 burger to 123 Main St")
        assert order.customer_phone == "09123456789"

    @pytest.mark.asyncio
    async def test_implausible_phone_reported(self, parser):
        order = await parser.parse_order_text("phone: 12-34\n1 burger to 123 Main St")

        assert order.customer_phone is None
        assert "Invalid phone number: 12-34" in order.errors

    @pytest.mark.asyncio
    async def test_missing_address(self, parser):
        order = await parser.parse_order_text("order 1 burger and 1 fries")

        assert not order.delivery_address
        assert MISSING_ADDRESS_MESSAGE in order.errors
        assert len(order.items) == 2
        assert not order.is_valid

    @pytest.mark.asyncio
    async def test_unknown_item(self, parser):
        order = await parser.parse_order_text("I want 1 pizza deliver to 123 Main St")

        assert order.items == []
        assert any("pizza" in error for error in order.errors)
        assert order.errors[0].startswith("Unknown menu items: pizza")

    @pytest.mark.asyncio
    async def test_address_starting_with_article(self, parser):
        order = await parser.parse_order_text("1 burger to the Ayala Mall lobby")

        assert order.delivery_address == "to the Ayala Mall lobby"
        assert summary(order) == [("Burger", 1)]
        assert order.errors == []

    @pytest.mark.asyncio
    async def test_quantity_words_are_not_instructions(self, parser):
        order = await parser.parse_order_text("2 burger and 1 more fries to 123 Main St")

        assert summary(order) == [("Burger", 2), ("French Fries", 1)]
        assert order.special_instructions is None
        assert order.delivery_address == "to 123 Main St"

    @pytest.mark.asyncio
    async def test_tagalog_thanks_is_not_an_instruction(self, parser):
        order = await parser.parse_order_text("1 burger maraming salamat po sa 5 Rizal Ave")

        assert summary(order) == [("Burger", 1)]
        assert order.special_instructions is None
        assert order.delivery_address == "sa 5 Rizal Ave"

    @pytest.mark.asyncio
    async def test_nothing_recognisable(self, parser):
        order = await parser.parse_order_text("hi po")
        assert "No menu items found in order" in order.errors

    @pytest.mark.asyncio
    async def test_compound_phrase_matches_one_item(self, parser):
        order = await parser.parse_order_text(
            "2 pritong manok at 1 burger, deliver to 123 Main St"
        )

        assert summary(order) == [("Fried Chicken", 2), ("Burger", 1)]

    @pytest.mark.asyncio
    async def test_default_quantity(self, parser):
        order = await parser.parse_order_text("burger and fries to 123 Main St")
        assert summary(order) == [("Burger", 1), ("French Fries", 1)]

    @pytest.mark.asyncio
    async def test_tagalog_quantity_words(self, parser):
        order = await parser.parse_order_text("dalawang burger at tatlong softdrinks sa 5 Rizal Ave")

        assert summary(order) == [("Burger", 2), ("Soda", 3)]
        assert order.delivery_address == "sa 5 Rizal Ave"

    @pytest.mark.asyncio
    async def test_zero_quantity(self, parser):
        order = await parser.parse_order_text("0 burger to 123 Main St")
        assert "contains items with zero quantity" in order.errors

    @pytest.mark.asyncio
    async def test_instructions(self, parser):
        order = await parser.parse_order_text(
            "1 burger with extra cheese and 1 fries no salt, deliver to 123 Main St"
        )

        assert order.special_instructions == "extra cheese, no salt"
        assert summary(order) == [("Burger", 1), ("French Fries", 1)]

    @pytest.mark.asyncio
    async def test_requested_time_payment_and_discount(self, parser):
        order = await parser.parse_order_text(
            "2 burger at 5:30pm gcash promo code SAVE10, deliver to 123 Main St"
        )

        assert summary(order) == [("Burger", 2)]
        assert order.requested_time == "5:30pm"
        assert order.payment_method == PaymentMethod.GCASH
        assert order.discount_code == "SAVE10"
        assert order.delivery_address == "deliver to 123 Main St"

    @pytest.mark.asyncio
    async def test_metadata_after_address(self, parser):
        order = await parser.parse_order_text(
            "1 burger deliver to 123 Main St by 7 pm, cash on delivery"
        )

        assert order.requested_time == "7 pm"
        assert order.payment_method == PaymentMethod.CASH
        assert order.delivery_address == "deliver to 123 Main St"

    @pytest.mark.asyncio
    async def test_pickup_needs_no_address(self, parser):
        order = await parser.parse_order_text("2 burger for pickup")

        assert order.order_type == OrderType.PICKUP
        assert order.delivery_address is None
        assert order.errors == []

    @pytest.mark.asyncio
    async def test_original_text_kept(self, parser):
        text = "1 burger to 123 Main St"
        order = await parser.parse_order_text(text)

        assert order.original_text == text
        assert order.degraded is False

    @pytest.mark.asyncio
    async def test_empty_text(self, parser):
        order = await parser.parse_order_text("")

        assert order.items == []
        assert order.degraded is False
        assert "No menu items found in order" in order.errors

    @pytest.mark.asyncio
    async def test_menu_failure_gives_degraded_result(self, test_menu_path):
        parser = OrderTextParser(MenuRepository(FailingMenuProvider(menu_file=str(test_menu_path))))

        order = await parser.parse_order_text("name: Ana\n2 burger to 123 Main St")

        assert order.degraded is True
        assert order.items == []
        assert order.errors == [PARSE_FAILURE_MESSAGE]
        assert order.customer_name is None
        assert order.delivery_address is None
        assert order.order_type == OrderType.DELIVERY
        assert order.original_text == "name: Ana\n2 burger to 123 Main St"
