"""Order parsing service."""
import logging
from typing import Any, Callable, Optional, Tuple

from snacktrack.services.menu.repository import MenuRepository
from snacktrack.services.ordering.extractors import Extraction, MetadataExtractor
from snacktrack.services.ordering.matcher import ItemMatcher
from snacktrack.services.ordering.models import OrderType, ParsedOrder
from snacktrack.services.ordering.segmenter import TextSegmenter
from snacktrack.services.ordering.tokenizer import Tokenizer
from snacktrack.services.ordering.validator import OrderValidator, is_plausible_phone
from snacktrack.services.ordering.vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)


class OrderTextParser:
    """Turns a free-form English/Tagalog chat message into a ParsedOrder."""

    def __init__(
        self,
        menu_repository: MenuRepository,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    ):
        self.menu_repository = menu_repository
        self.vocabulary = vocabulary
        self.segmenter = TextSegmenter(vocabulary)
        self.extractor = MetadataExtractor(vocabulary)
        self.tokenizer = Tokenizer(vocabulary)
        self.matcher = ItemMatcher(menu_repository, vocabulary)
        self.validator = OrderValidator(vocabulary)

    async def parse_order_text(self, text: str) -> ParsedOrder:
        """
        Parse a chat message into a structured order.

        This never raises. Any failure, including a failing menu lookup,
        yields a degraded ParsedOrder (``degraded=True``) with no items and
        a single error message.

        Args:
            text: Message as received from the customer

        Returns:
            ParsedOrder with items, customer details, metadata and errors
        """
        try:
            return await self._parse(text or "")
        except Exception as e:
            logger.error(
                f"[ORDER PARSER] Error parsing order text - "
                f"Text: '{(text or '')[:100]}', Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            return ParsedOrder.degraded_result(text)

    @staticmethod
    def _fill_from_address(
        extract: Callable[[str], Extraction],
        value: Any,
        address: Optional[str],
    ) -> Tuple[Any, Optional[str]]:
        """Look for a value missing from the order text in the address instead."""
        if value is not None or not address:
            return value, address
        found = extract(address)
        if found.value is None:
            return value, address
        return found.value, found.remaining_text.strip(" ,;") or None

    async def _parse(self, text: str) -> ParsedOrder:
        info = self.segmenter.extract_customer_info(text)
        split = self.segmenter.extract_address(info.remaining_text or text)

        pickup = self.extractor.extract_pickup(split.order_text)
        instructions = self.extractor.extract_instructions(pickup.remaining_text)
        time = self.extractor.extract_time(instructions.remaining_text)
        payment = self.extractor.extract_payment_method(time.remaining_text)
        discount = self.extractor.extract_discount_code(payment.remaining_text)

        address = split.address
        requested_time, address = self._fill_from_address(
            self.extractor.extract_time, time.value, address
        )
        payment_method, address = self._fill_from_address(
            self.extractor.extract_payment_method, payment.value, address
        )
        discount_code, address = self._fill_from_address(
            self.extractor.extract_discount_code, discount.value, address
        )

        tokens = self.tokenizer.clean_text(discount.remaining_text)
        result = await self.matcher.match(tokens)

        order_type = OrderType.PICKUP if pickup.value else OrderType.DELIVERY
        errors = self.validator.validate(
            original_text=text,
            items=result.lines,
            order_type=order_type,
            delivery_address=address,
            customer_phone=info.customer_phone,
            raw_phone=info.raw_phone,
        )

        logger.info(
            f"[ORDER PARSER] Parsed order - items: {len(result.lines)}, "
            f"unmatched tokens: {len(result.unmatched)}, type: {order_type.value}, "
            f"errors: {len(errors)}"
        )
        if result.unmatched:
            logger.debug(f"[ORDER PARSER] Unmatched tokens: {result.unmatched}")

        return ParsedOrder(
            items=result.lines,
            customer_name=info.customer_name,
            customer_phone=(
                info.customer_phone if is_plausible_phone(info.customer_phone) else None
            ),
            delivery_address=address,
            order_type=order_type,
            special_instructions=instructions.value,
            requested_time=requested_time,
            payment_method=payment_method,
            discount_code=discount_code,
            original_text=text,
            errors=errors,
        )
