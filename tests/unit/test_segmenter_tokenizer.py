"""Unit tests for text segmentation, tokenizing and metadata extraction."""
import pytest

from snacktrack.services.ordering.extractors import MetadataExtractor, remove_spans
from snacktrack.services.ordering.models import PaymentMethod
from snacktrack.services.ordering.segmenter import TextSegmenter, sanitize_phone
from snacktrack.services.ordering.tokenizer import Tokenizer
from snacktrack.services.ordering.vocabulary import DEFAULT_VOCABULARY, Vocabulary


@pytest.fixture
def segmenter():
    return TextSegmenter(DEFAULT_VOCABULARY)


@pytest.fixture
def extractor():
    return MetadataExtractor(DEFAULT_VOCABULARY)


class TestCustomerInfo:
    """Name and phone lines."""

    def test_name_and_phone_lines_removed(self, segmenter):
        info = segmenter.extract_customer_info(
            "name: John Doe\nphone: +639123456789\n1 burger to 123 Main St"
        )

        assert info.customer_name == "John Doe"
        assert info.customer_phone == "+639123456789"
        assert info.remaining_text == "1 burger to 123 Main St"

    def test_tagalog_indicators(self, segmenter):
        info = segmenter.extract_customer_info("Pangalan: Maria\nNumero: 0917 123 4567\n2 burger")

        assert info.customer_name == "Maria"
        assert info.customer_phone == "09171234567"
        assert info.raw_phone == "0917 123 4567"

    def test_first_found_wins(self, segmenter):
        info = segmenter.extract_customer_info(
            "name: Ana\nname: Ben\nphone: 111\n1 burger"
        )

        assert info.customer_name == "Ana"
        # The second name line is not an info line any more
        assert info.remaining_text == "name: Ben\n1 burger"

    def test_empty_value_does_not_count(self, segmenter):
        info = segmenter.extract_customer_info("name:\n1 burger")
        assert info.customer_name is None
        assert info.remaining_text == "name:\n1 burger"

    def test_no_info(self, segmenter):
        info = segmenter.extract_customer_info("1 burger")
        assert info.customer_name is None
        assert info.customer_phone is None
        assert info.remaining_text == "1 burger"

    def test_sanitize_phone(self):
        assert sanitize_phone("0912-345-6789") == "09123456789"
        assert sanitize_phone("+63 (912) 345 6789") == "+639123456789"


class TestAddressSplit:
    """Order text / address split."""

    def test_split_keeps_indicator_in_address(self, segmenter):
        split = segmenter.extract_address("1 burger deliver to 123 Main St")
        assert split.order_text == "1 burger"
        assert split.address == "deliver to 123 Main St"

    def test_no_indicator(self, segmenter):
        split = segmenter.extract_address("order 1 burger and 1 fries")
        assert split.order_text == "order 1 burger and 1 fries"
        assert split.address is None

    def test_indicator_at_start_is_not_an_address(self, segmenter):
        split = segmenter.extract_address("to 123 Main St")
        assert split.address is None

    def test_indicator_followed_by_order_verb_is_skipped(self, segmenter):
        split = segmenter.extract_address("I want to order 1 burger to 123 Main St")
        assert split.order_text == "I want to order 1 burger"
        assert split.address == "to 123 Main St"

    def test_tagalog_address_indicator(self, segmenter):
        split = segmenter.extract_address("burger at fries, address po sa 123 Main St")
        assert split.address == "address po sa 123 Main St"

    def test_indicator_followed_by_article_is_accepted(self, segmenter):
        split = segmenter.extract_address("1 burger to the Ayala Mall lobby")
        assert split.order_text == "1 burger"
        assert split.address == "to the Ayala Mall lobby"

    def test_split_keeps_original_text_with_non_ascii_name(self, segmenter):
        # "İ" lowercases to two characters
        split = segmenter.extract_address("2 burger for İris deliver to 123 Main St")
        assert split.order_text == "2 burger for İris"
        assert split.address == "deliver to 123 Main St"

    def test_indicator_near_compound_phrase_is_skipped(self, segmenter):
        split = segmenter.extract_address("2 pritong manok to go")
        assert split.address is None

    def test_indicator_far_from_compound_phrase(self, segmenter):
        split = segmenter.extract_address("2 pritong manok at 1 burger, deliver to 123 Main St")
        assert split.order_text == "2 pritong manok at 1 burger,"
        assert split.address == "deliver to 123 Main St"

    def test_indicator_inside_word_ignored(self, segmenter):
        split = segmenter.extract_address("1 tomato burger")
        assert split.address is None


class TestTokenizer:
    """Token cleanup."""

    def test_compound_phrase_kept_whole(self):
        tokens = Tokenizer(DEFAULT_VOCABULARY).clean_text("2 Pritong Manok at 1 burger!")
        assert tokens == ["2", "pritong manok", "1", "burger"]

    def test_filler_and_punctuation_dropped(self):
        tokens = Tokenizer(DEFAULT_VOCABULARY).clean_text("Gusto ko po ng burger, at fries.")
        assert tokens == ["burger", "fries"]

    def test_compound_inside_longer_word_not_joined(self):
        tokens = Tokenizer(DEFAULT_VOCABULARY).clean_text("french friesy")
        assert tokens == ["french", "friesy"]

    def test_alternate_vocabulary(self):
        vocabulary = Vocabulary(
            tables={"filter": {"english": ("gimme",)}},
            quantities={},
            payment_methods={},
            compound_phrases=("hot dog",),
        )
        tokens = Tokenizer(vocabulary).clean_text("gimme the hot dog")
        assert tokens == ["the", "hot dog"]

    def test_empty_text(self):
        assert Tokenizer(DEFAULT_VOCABULARY).clean_text("") == []


class TestMetadataExtractor:
    """Pickup, instructions, time, payment and discount."""

    def test_pickup(self, extractor):
        found = extractor.extract_pickup("2 burger for pick up")
        assert found.value is True
        assert found.remaining_text == "2 burger for"

        assert extractor.extract_pickup("2 burger").value is False
        assert extractor.extract_pickup("kukunin ko na lang").value is True

    def test_instructions(self, extractor):
        found = extractor.extract_instructions("1 burger with extra cheese and 1 fries no salt,")
        assert found.value == "extra cheese, no salt"
        assert found.remaining_text == "1 burger with and 1 fries,"

    def test_instructions_stop_at_punctuation(self, extractor):
        found = extractor.extract_instructions("1 burger no onions, 2 fries")
        assert found.value == "no onions"
        assert found.remaining_text == "1 burger, 2 fries"

    def test_instructions_word_limit(self, extractor):
        found = extractor.extract_instructions("burger walang sibuyas kamatis pipino letsugas")
        assert found.value == "walang sibuyas kamatis pipino"

    def test_no_instructions(self, extractor):
        found = extractor.extract_instructions("2 burger")
        assert found.value is None
        assert found.remaining_text == "2 burger"

    @pytest.mark.parametrize("text,expected", [
        ("1 burger at 5:30pm", "5:30pm"),
        ("1 burger by 7 pm", "7 pm"),
        ("1 burger alas 6:00", "6:00"),
    ])
    def test_time(self, extractor, text, expected):
        found = extractor.extract_time(text)
        assert found.value == expected
        assert found.remaining_text == "1 burger"

    def test_time_needs_prefix(self, extractor):
        assert extractor.extract_time("2 burger at fries").value is None
        assert extractor.extract_time("5:30pm burger").value is None

    def test_payment_method(self, extractor):
        found = extractor.extract_payment_method("1 burger, gcash")
        assert found.value == PaymentMethod.GCASH
        assert found.remaining_text == "1 burger,"

    def test_payment_earliest_wins(self, extractor):
        found = extractor.extract_payment_method("cash on delivery or card")
        assert found.value == PaymentMethod.CASH
        assert found.remaining_text == "or card"

    def test_payment_whole_word_only(self, extractor):
        assert extractor.extract_payment_method("discount code ABC").value is None

    def test_discount_code(self, extractor):
        found = extractor.extract_discount_code("1 burger promo code save10,")
        assert found.value == "SAVE10"
        assert found.remaining_text == "1 burger,"

    def test_discount_code_with_colon(self, extractor):
        assert extractor.extract_discount_code("voucher: FREEFRIES").value == "FREEFRIES"

    def test_discount_indicator_without_code(self, extractor):
        found = extractor.extract_discount_code("any discount po")
        assert found.value is None
        assert found.remaining_text == "any discount po"

    def test_remove_spans(self):
        assert remove_spans("a b c", [(2, 3)]) == "a c"
        assert remove_spans("burger gcash, fries", [(7, 12)]) == "burger, fries"
        assert remove_spans("same", []) == "same"
