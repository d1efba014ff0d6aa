"""Tests for record models and their normalizers."""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from agentmart.exceptions import InvalidPriceError, InvalidPurchaseTransitionError
from agentmart.models import (
    Agent,
    AgentPage,
    ContactRequestCreate,
    Importance,
    Package,
    PaymentStatus,
    Profile,
)
from agentmart.models.package import CUSTOM_PRICE, normalize_features, parse_package_price
from agentmart.models.purchase import check_transition
from agentmart.models.result import validate_row, validate_rows


class TestNormalizeFeatures:
    def test_list_is_kept_in_order(self) -> None:
        assert normalize_features(["a", "b", "c"]) == ["a", "b", "c"]

    def test_json_encoded_array(self) -> None:
        assert normalize_features(json.dumps(["a", "b"])) == ["a", "b"]

    def test_object_contributes_values(self) -> None:
        assert normalize_features({"x": "first", "y": "second"}) == ["first", "second"]

    def test_json_encoded_object(self) -> None:
        assert normalize_features('{"x": "first", "y": "second"}') == ["first", "second"]

    @pytest.mark.parametrize("value", [None, "", "   ", []])
    def test_empty_values(self, value: object) -> None:
        assert normalize_features(value) == []

    def test_plain_string_becomes_single_feature(self) -> None:
        assert normalize_features("Priority support") == ["Priority support"]

    def test_non_string_items_are_stringified(self) -> None:
        assert normalize_features([1, True]) == ["1", "True"]

    def test_normalizing_twice_changes_nothing(self) -> None:
        once = normalize_features('{"a": "one", "b": "two"}')
        assert normalize_features(once) == once


class TestParsePackagePrice:
    @pytest.mark.parametrize("value", ["Custom", "custom", " CUSTOM "])
    def test_custom_is_case_insensitive(self, value: str) -> None:
        assert parse_package_price(value) == CUSTOM_PRICE

    @pytest.mark.parametrize("value", [29, "99", 0, "12.50"])
    def test_numbers(self, value: object) -> None:
        assert parse_package_price(value) == Decimal(str(value))

    @pytest.mark.parametrize("value", [-1, "abc", True, "NaN", "Infinity", None])
    def test_invalid_values(self, value: object) -> None:
        with pytest.raises(InvalidPriceError):
            parse_package_price(value)


class TestPackage:
    def test_row_with_string_features(self) -> None:
        package = Package.model_validate(
            {
                "id": 7,
                "name": "Pro",
                "description": "For teams",
                "price": 99,
                "features": '["One", "Two"]',
                "is_popular": None,
            }
        )

        assert package.id == "7"
        assert package.features == ["One", "Two"]
        assert package.is_popular is False
        assert package.price == Decimal(99)
        assert not package.is_custom_priced

    def test_custom_priced_package(self) -> None:
        package = Package(id="e", name="Enterprise", price="custom")

        assert package.is_custom_priced
        assert package.model_dump(mode="json")["price"] == "Custom"

    def test_negative_price_is_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            Package(id="p", name="Bad", price=-5)


class TestAgent:
    def test_price_serializes_as_number(self) -> None:
        agent = Agent(id="1", name="A", price=Decimal("29.99"))

        assert agent.model_dump(mode="json")["price"] == 29.99

    def test_negative_price_is_invalid(self) -> None:
        with pytest.raises(PydanticValidationError):
            Agent(id="1", name="A", price=Decimal("-1"))

    def test_unknown_importance_is_invalid(self) -> None:
        with pytest.raises(PydanticValidationError):
            Agent(id="1", name="A", importance="Urgent")

    def test_numeric_id_is_coerced(self) -> None:
        agent = Agent.model_validate({"id": 3, "name": "A", "importance": "High"})

        assert agent.id == "3"
        assert agent.importance is Importance.HIGH

    def test_page_has_more(self) -> None:
        page = AgentPage(agents=[], total_count=25, total_pages=3, current_page=2, page_size=10)
        last = page.model_copy(update={"current_page": 3})

        assert page.has_more
        assert not last.has_more


class TestPurchaseTransitions:
    @pytest.mark.parametrize("target", [PaymentStatus.COMPLETED, PaymentStatus.FAILED])
    def test_pending_can_settle(self, target: PaymentStatus) -> None:
        check_transition(PaymentStatus.PENDING, target)

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (PaymentStatus.COMPLETED, PaymentStatus.PENDING),
            (PaymentStatus.COMPLETED, PaymentStatus.FAILED),
            (PaymentStatus.FAILED, PaymentStatus.COMPLETED),
            (PaymentStatus.PENDING, PaymentStatus.PENDING),
        ],
    )
    def test_other_transitions_are_rejected(
        self, current: PaymentStatus, target: PaymentStatus
    ) -> None:
        with pytest.raises(InvalidPurchaseTransitionError) as exc:
            check_transition(current, target)

        assert exc.value.current == current.value
        assert exc.value.target == target.value


class TestContactRequestCreate:
    def test_whitespace_is_stripped(self) -> None:
        request = ContactRequestCreate(
            name="  Ada  ", email="ada@example.com", message=" Hello "
        )

        assert request.name == "Ada"
        assert request.message == "Hello"

    def test_invalid_email(self) -> None:
        with pytest.raises(PydanticValidationError):
            ContactRequestCreate(name="Ada", email="not-an-email", message="Hello")

    def test_blank_message(self) -> None:
        with pytest.raises(PydanticValidationError):
            ContactRequestCreate(name="Ada", email="ada@example.com", message="   ")


class TestRowValidation:
    def test_valid_row(self) -> None:
        result = validate_row(Profile, {"id": "u1", "role": "admin"})

        assert result.ok
        assert result.value is not None
        assert result.value.role.value == "admin"

    def test_invalid_row_describes_field(self) -> None:
        result = validate_row(Agent, {"id": "1"})

        assert not result.ok
        assert result.error is not None
        assert "name" in result.error

    def test_batch_reports_offending_index(self) -> None:
        result = validate_rows(Agent, [{"id": "1", "name": "ok"}, {"id": "2"}])

        assert not result.ok
        assert result.error is not None
        assert result.error.startswith("row 1:")
