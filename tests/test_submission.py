"""Tests for validation and submission mapping."""

from decimal import Decimal

import pytest

from lineform.domain import errors
from lineform.domain.calculator import calc_total
from lineform.domain.entities import AmountMode, EntryMeta
from lineform.domain.submission import round_money, validate_and_map


def submit(store, rate_table, require_price=True, require_target=True, **kwargs):
    return validate_and_map(store.groups, rate_table, require_price, require_target, **kwargs)


class TestValidation:
    """Tests for the validation pass."""

    def test_untouched_store_succeeds_with_no_payloads(self, receive_store, rate_table):
        result = submit(receive_store, rate_table)
        assert result.ok
        assert result.payloads == ()
        assert result.errors_by_entry_id == {}

    def test_filled_and_empty_entries(self, receive_store, rate_table):
        first, second = receive_store.get_group("v1").entries
        receive_store.update_entry(first.id, target_id="s1", quantity="1", unit_price="50")

        result = submit(receive_store, rate_table)

        assert result.ok
        assert result.errors_by_entry_id == {}
        assert len(result.payloads) == 1
        record = result.payloads[0]
        assert record.target_id == "s1"
        assert record.group_id == "v1"
        assert record.line_total == Decimal("50.00")

    def test_missing_price_blocks_submission(self, sale_store, rate_table):
        entry = sale_store.get_group("sale-1").entries[0]
        sale_store.update_entry(entry.id, target_id="variant-1", quantity="3", unit_price="")

        result = submit(sale_store, rate_table)

        assert not result.ok
        assert result.payloads == ()
        assert result.errors_by_entry_id == {entry.id: (errors.UNIT_PRICE_NOT_POSITIVE,)}

    def test_missing_target_message(self, receive_store, rate_table):
        entry = receive_store.get_group("v2").entries[0]
        receive_store.update_entry(entry.id, quantity="2", unit_price="10")

        result = submit(receive_store, rate_table)
        assert result.errors_by_entry_id[entry.id] == (errors.TARGET_REQUIRED,)

    def test_one_partial_entry_blocks_all(self, receive_store, rate_table):
        first, second = receive_store.get_group("v1").entries
        receive_store.update_entry(first.id, target_id="s1", quantity="1", unit_price="50")
        receive_store.update_entry(second.id, target_id="s2")

        result = submit(receive_store, rate_table)

        assert not result.ok
        assert result.payloads == ()
        assert set(result.errors_by_entry_id) == {second.id}
        assert result.errors_by_entry_id[second.id] == (
            errors.QUANTITY_NOT_POSITIVE,
            errors.UNIT_PRICE_NOT_POSITIVE,
        )

    def test_invalid_number_message(self, receive_store, rate_table):
        entry = receive_store.get_group("v2").entries[0]
        receive_store.update_entry(entry.id, target_id="s1", quantity="two", unit_price="10")

        result = submit(receive_store, rate_table)
        assert result.errors_by_entry_id[entry.id] == (
            errors.invalid_number("Quantity", "two"),
        )

    def test_adjust_mode_does_not_require_price(self, adjust_store, rate_table):
        entry = adjust_store.get_group("v1").entries[0]
        adjust_store.update_entry(entry.id, target_id="s1", quantity="4")

        result = submit(adjust_store, rate_table, require_price=False)
        assert result.ok
        assert len(result.payloads) == 1


class TestMapping:
    """Tests for record mapping."""

    def test_line_total_round_trip(self, receive_store, rate_table):
        entry = receive_store.get_group("v2").entries[0]
        entry = receive_store.update_entry(
            entry.id,
            target_id="s1",
            quantity="3",
            unit_price="19.99",
            currency="EUR",
            tax_percent="18",
            discount_mode="amount",
            discount_amount="12.345",
        )

        record = submit(receive_store, rate_table).payloads[0]
        assert record.line_total == round_money(calc_total(entry, rate_table))
        assert record.line_total == Decimal("2464.42")

    def test_rounding_is_half_up(self):
        assert round_money(Decimal("0.125")) == Decimal("0.13")
        assert round_money(Decimal("2.004999")) == Decimal("2.00")

    def test_only_active_tax_and_discount_are_mapped(self, receive_store, rate_table):
        entry = receive_store.get_group("v2").entries[0]
        receive_store.update_entry(
            entry.id,
            target_id="s1",
            quantity="2",
            unit_price="100",
            tax_mode="amount",
            tax_amount="5",
            discount_percent="10",
        )

        record = submit(receive_store, rate_table).payloads[0]
        assert record.tax_amount == Decimal("5")
        assert record.tax_percent is None
        assert record.discount_percent == Decimal("10")
        assert record.discount_amount is None

    def test_zero_tax_and_discount_are_omitted(self, receive_store, rate_table):
        entry = receive_store.get_group("v2").entries[0]
        receive_store.update_entry(
            entry.id, target_id="s1", quantity="2", unit_price="100", tax_percent="0"
        )

        data = submit(receive_store, rate_table).payloads[0].to_dict()
        for key in ("taxPercent", "taxAmount", "discountPercent", "discountAmount", "meta"):
            assert key not in data

    def test_meta(self, receive_store, rate_table):
        entry = receive_store.get_group("v2").entries[0]
        receive_store.update_entry(
            entry.id, target_id="s1", quantity="2", unit_price="1", reason="  ", note="fragile"
        )

        record = submit(receive_store, rate_table).payloads[0]
        assert record.meta == EntryMeta(reason=None, note="fragile")
        assert record.to_dict()["meta"] == {"note": "fragile"}

    def test_adjust_mode_record(self, adjust_store, rate_table):
        entry = adjust_store.get_group("v1").entries[0]
        adjust_store.update_entry(
            entry.id,
            target_id="s1",
            quantity="4",
            unit_price="10",
            currency="USD",
            tax_percent="18",
            reason="count correction",
        )

        record = submit(
            adjust_store, rate_table, require_price=False, adjust_currency="TRY"
        ).payloads[0]
        assert record.unit_price == Decimal("0")
        assert record.line_total == Decimal("0.00")
        assert record.currency == "TRY"
        assert record.tax_percent is None
        assert record.meta == EntryMeta(reason="count correction")

    def test_fixed_target_fills_record(self, receive_store, rate_table):
        entry = receive_store.get_group("v2").entries[0]
        receive_store.update_entry(entry.id, quantity="1", unit_price="10")

        result = submit(receive_store, rate_table, require_target=False, fixed_target="store-9")
        assert result.payloads[0].target_id == "store-9"

    def test_to_dict_shape(self, sale_store, rate_table):
        entry = sale_store.get_group("sale-1").entries[0]
        sale_store.update_entry(
            entry.id,
            target_id="variant-1",
            unit_price="100",
            currency="USD",
            tax_percent="10",
            discount_percent="10",
            campaign_code="SPRING",
        )

        data = submit(sale_store, rate_table).payloads[0].to_dict()
        assert data == {
            "targetId": "variant-1",
            "groupId": "sale-1",
            "quantity": 1.0,
            "currency": "USD",
            "unitPrice": 100.0,
            "lineTotal": 2970.0,
            "taxPercent": 10.0,
            "discountPercent": 10.0,
            "campaignCode": "SPRING",
        }

    @pytest.mark.parametrize("mode", [AmountMode.PERCENT, AmountMode.AMOUNT])
    def test_discount_over_total_maps_zero(self, receive_store, rate_table, mode):
        entry = receive_store.get_group("v2").entries[0]
        field = "discount_percent" if mode == AmountMode.PERCENT else "discount_amount"
        receive_store.update_entry(
            entry.id, target_id="s1", quantity="1", unit_price="10", discount_mode=mode,
            **{field: "500"},
        )

        record = submit(receive_store, rate_table).payloads[0]
        assert record.line_total == Decimal("0.00")


class TestFieldNumbers:
    """Tests for entry values that are not plain numbers."""

    def test_comma_quantity_is_rejected(self, receive_store, rate_table):
        entry = receive_store.get_group("v2").entries[0]
        receive_store.update_entry(entry.id, target_id="s1", quantity="1,5", unit_price="10")

        result = submit(receive_store, rate_table)

        assert not result.ok
        assert result.payloads == ()
        assert result.errors_by_entry_id[entry.id] == (errors.invalid_number("Quantity", "1,5"),)

    @pytest.mark.parametrize("quantity", ["1e27", "1e999999"])
    def test_huge_quantity_is_a_validation_error(self, receive_store, rate_table, quantity):
        entry = receive_store.get_group("v2").entries[0]
        receive_store.update_entry(entry.id, target_id="s1", quantity=quantity, unit_price="1")

        result = submit(receive_store, rate_table)

        assert not result.ok
        assert result.errors_by_entry_id[entry.id] == (
            errors.invalid_number("Quantity", quantity),
        )

    def test_largest_values_map_without_error(self, receive_store, rate_table):
        entry = receive_store.get_group("v2").entries[0]
        receive_store.update_entry(
            entry.id, target_id="s1", quantity="1e12", unit_price="1e12", currency="EUR"
        )

        record = submit(receive_store, rate_table).payloads[0]
        assert record.line_total == Decimal("35000000000000000000000000.00")

    def test_round_money_beyond_default_precision(self):
        assert round_money(Decimal("1e36") + Decimal("0.005")) == Decimal("1e36")
        assert round_money(Decimal("123456789012345678901234567890.125")) == Decimal(
            "123456789012345678901234567890.13"
        )
