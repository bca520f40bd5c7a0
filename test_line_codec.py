"""
Line Codec Test

Validates the line-item wire codec:
1. Every concrete detail variant survives encode -> decode unchanged
2. Encoding always writes the payload key and a matching DetailType
3. Decoding picks the single known payload key and ignores DetailType
4. Empty details decode from untagged rows and are refused on encode
5. set_taxable rewrites sales-item tax codes, including inside groups
"""

from datetime import date
from decimal import Decimal

import pytest


def make_sales_line(amount="100.00", tax_code="NON"):
    from connectors.quickbooks.qb_lines import LineItem, SalesItemLineDetail
    from core.models.refs import Reference

    return LineItem(
        id="1",
        line_num=1,
        amount=amount,
        description="Pest Control Services",
        detail=SalesItemLineDetail(
            item_ref=Reference(target_id="10", display_name="Pest Control"),
            tax_code_ref=Reference(target_id=tax_code),
            qty=1,
            unit_price=Decimal("100"),
        ),
    )


SAMPLE_WIRE_LINE = {
    "Description": "Pest Control Services",
    "DetailType": "SalesItemLineDetail",
    "SalesItemLineDetail": {
        "TaxCodeRef": {"value": "NON"},
        "Qty": 1,
        "UnitPrice": 100,
        "ItemRef": {"name": "Pest Control", "value": "10"},
    },
    "LineNum": 1,
    "Amount": 100.0,
    "Id": "1",
}


class TestRoundTrip:
    """decode(encode(line)) reproduces the line for every concrete variant."""

    def variant_lines(self):
        from connectors.quickbooks.qb_lines import (
            AccountBasedExpenseLineDetail,
            BillableStatus,
            DescriptionLineDetail,
            DiscountLineDetail,
            GroupLineDetail,
            ItemBasedExpenseLineDetail,
            LineItem,
            SubTotalLineDetail,
            TaxLineDetail,
        )
        from core.models.refs import LinkedTxn, Reference

        return [
            make_sales_line(),
            LineItem(
                amount="250.5",
                detail=GroupLineDetail(
                    group_item_ref=Reference(target_id="19", display_name="Bundle"),
                    quantity=2,
                    line=[make_sales_line("125.25")],
                ),
            ),
            LineItem(
                amount=0,
                description="Thanks for your business",
                detail=DescriptionLineDetail(service_date=date(2024, 3, 1)),
            ),
            LineItem(
                amount="10",
                detail=DiscountLineDetail(
                    percent_based=True,
                    discount_percent="10",
                    discount_account_ref=Reference(target_id="86"),
                ),
            ),
            LineItem(amount="100", detail=SubTotalLineDetail()),
            LineItem(
                amount="42.10",
                linked_txn=[LinkedTxn(txn_id="7", txn_type="PurchaseOrder")],
                detail=ItemBasedExpenseLineDetail(
                    item_ref=Reference(target_id="11"),
                    billable_status=BillableStatus.NOT_BILLABLE,
                    qty="3",
                    unit_price="14.0333",
                ),
            ),
            LineItem(
                amount="75",
                detail=AccountBasedExpenseLineDetail(
                    account_ref=Reference(target_id="7", display_name="Advertising"),
                    billable_status=BillableStatus.BILLABLE,
                    customer_ref=Reference(target_id="3"),
                ),
            ),
            LineItem(
                amount="8.25",
                detail=TaxLineDetail(
                    tax_rate_ref=Reference(target_id="3"),
                    percent_based=True,
                    tax_percent="8.25",
                    net_amount_taxable="100",
                ),
            ),
        ]

    def test_every_variant_round_trips(self):
        """Each concrete variant decodes back to an equal line."""
        from connectors.quickbooks.qb_lines import decode_line, encode_line

        for line in self.variant_lines():
            assert decode_line(encode_line(line)) == line, line.detail_type

    def test_collection_round_trip(self):
        """encode_lines / decode_lines keep order and content."""
        from connectors.quickbooks.qb_lines import decode_lines, encode_lines

        lines = self.variant_lines()
        assert decode_lines(encode_lines(lines)) == lines

    def test_amounts_are_fixed_point(self):
        """Amounts decode as Decimal without binary rounding."""
        from connectors.quickbooks.qb_lines import decode_line, encode_line

        line = make_sales_line("0.1")
        decoded = decode_line(encode_line(line))
        assert decoded.amount == Decimal("0.1")
        assert isinstance(decoded.amount, Decimal)

    def test_widest_amounts_survive_json(self):
        """Fifteen significant digits come back exactly through JSON text."""
        import json
        from connectors.quickbooks.qb_lines import (
            LineItem,
            SalesItemLineDetail,
            decode_line,
            encode_line,
        )

        line = LineItem(
            amount=Decimal("1234567890123.45"),
            detail=SalesItemLineDetail(
                unit_price=Decimal("0.123456789012345"),
                qty=Decimal("99999999999999.9"),
            ),
        )
        wire = json.loads(json.dumps(encode_line(line)))

        assert decode_line(wire) == line

    def test_amounts_beyond_wire_precision_are_refused(self):
        """Amounts a JSON number would round are rejected, not rounded."""
        from pydantic import ValidationError
        from connectors.quickbooks.qb_lines import LineItem, SalesItemLineDetail, decode_line
        from core.errors import DecodeError

        with pytest.raises(ValidationError):
            LineItem(amount=Decimal("12345678901234.56789"), detail=SalesItemLineDetail())
        with pytest.raises(ValidationError):
            SalesItemLineDetail(unit_price=Decimal("0.123456789012345678"))
        with pytest.raises(DecodeError):
            decode_line({"Amount": "12345678901234.56789", "SalesItemLineDetail": {}})
        with pytest.raises(DecodeError):
            decode_line({"Amount": 1, "SalesItemLineDetail": {"UnitPrice": "1E+20"}})
        with pytest.raises(DecodeError):
            decode_line({"Amount": "NaN", "SalesItemLineDetail": {}})


class TestEncoding:
    """Wire shape written by the encoder."""

    def test_detail_type_matches_payload_key(self):
        """DetailType equals the canonical name under which the payload sits."""
        from connectors.quickbooks.qb_lines import encode_line

        for line in TestRoundTrip().variant_lines():
            wire = encode_line(line)
            assert wire["DetailType"] == line.detail.detail_type
            assert line.detail.detail_type in wire

    def test_sample_line_shape(self):
        """A sales line encodes with PascalCase keys and lowercase reference keys."""
        from connectors.quickbooks.qb_lines import encode_line

        wire = encode_line(make_sales_line())

        assert wire["Amount"] == 100
        assert wire["LineNum"] == 1
        assert wire["DetailType"] == "SalesItemLineDetail"
        assert wire["SalesItemLineDetail"] == {
            "ItemRef": {"name": "Pest Control", "value": "10"},
            "TaxCodeRef": {"value": "NON"},
            "Qty": 1,
            "UnitPrice": 100,
        }

    def test_absent_values_are_omitted(self):
        """Unset fields and empty collections never appear as null or []."""
        from connectors.quickbooks.qb_lines import LineItem, SubTotalLineDetail, encode_line

        wire = encode_line(LineItem(amount="5", detail=SubTotalLineDetail()))

        assert "Description" not in wire
        assert "LinkedTxn" not in wire
        assert "Id" not in wire
        assert None not in wire.values()

    def test_empty_payload_keeps_its_key(self):
        """A variant with no fields set still writes its payload key."""
        from connectors.quickbooks.qb_lines import LineItem, SubTotalLineDetail, encode_line

        wire = encode_line(LineItem(amount="5", detail=SubTotalLineDetail()))
        assert wire["SubTotalLineDetail"] == {}
        assert wire["DetailType"] == "SubTotalLineDetail"

    def test_fractional_amount_is_float(self):
        """Non-integral amounts are emitted as JSON numbers with a fraction."""
        from connectors.quickbooks.qb_lines import encode_line

        assert encode_line(make_sales_line("19.99"))["Amount"] == 19.99

    def test_empty_detail_is_refused(self):
        """Encoding a line without a detail is a hard failure."""
        from connectors.quickbooks.qb_lines import LineItem, encode_line
        from core.errors import ValidationError

        with pytest.raises(ValidationError):
            encode_line(LineItem(amount="10"))

    def test_empty_detail_inside_group_is_refused(self):
        """Group component lines are checked as well."""
        from connectors.quickbooks.qb_lines import GroupLineDetail, LineItem, encode_line
        from core.errors import ValidationError

        group = LineItem(
            amount="10",
            detail=GroupLineDetail(line=[make_sales_line(), LineItem(amount="1")]),
        )
        with pytest.raises(ValidationError) as exc_info:
            encode_line(group)
        assert "GroupLineDetail.Line[1]" in str(exc_info.value)


class TestDecoding:
    """Variant selection on decode."""

    def test_sample_line(self):
        """A platform line decodes into a sales-item detail."""
        from connectors.quickbooks.qb_lines import SalesItemLineDetail, decode_line

        line = decode_line(SAMPLE_WIRE_LINE)

        assert isinstance(line.detail, SalesItemLineDetail)
        assert line.amount == Decimal("100")
        assert line.detail.item_ref.display_name == "Pest Control"
        assert line.detail.item_ref.target_id == "10"
        assert line.detail.tax_code_ref.target_id == "NON"
        assert line.detail.qty == Decimal("1")

    def test_detail_type_is_ignored(self):
        """A wrong or missing DetailType does not change the chosen variant."""
        from connectors.quickbooks.qb_lines import SalesItemLineDetail, decode_line

        mislabelled = dict(SAMPLE_WIRE_LINE, DetailType="DiscountLineDetail")
        untagged = {k: v for k, v in SAMPLE_WIRE_LINE.items() if k != "DetailType"}

        assert isinstance(decode_line(mislabelled).detail, SalesItemLineDetail)
        assert isinstance(decode_line(untagged).detail, SalesItemLineDetail)

    def test_two_payload_keys_are_ambiguous(self):
        """More than one known payload key fails."""
        from connectors.quickbooks.qb_lines import decode_line
        from core.errors import DecodeError

        with pytest.raises(DecodeError) as exc_info:
            decode_line({
                "Amount": 1,
                "SalesItemLineDetail": {},
                "DiscountLineDetail": {},
            })
        assert "Ambiguous" in exc_info.value.message

    def test_untagged_row_is_empty(self):
        """A row without any detail key decodes to the empty sentinel."""
        from connectors.quickbooks.qb_lines import EMPTY_DETAIL, decode_line

        line = decode_line({"Amount": 100, "Description": "Subtotal"})

        assert line.detail == EMPTY_DETAIL
        assert line.detail.is_empty
        assert line.detail_type is None
        assert not line.can_create()

    def test_null_payload_is_empty(self):
        """A payload key holding null is treated as absent."""
        from connectors.quickbooks.qb_lines import decode_line

        assert decode_line({"Amount": 1, "SalesItemLineDetail": None}).detail.is_empty

    def test_non_object_payload_fails(self):
        """A payload that is not an object is malformed."""
        from connectors.quickbooks.qb_lines import decode_line
        from core.errors import DecodeError

        with pytest.raises(DecodeError):
            decode_line({"Amount": 1, "SalesItemLineDetail": "oops"})

    def test_malformed_payload_value_fails(self):
        """A bad value inside the payload surfaces as DecodeError."""
        from connectors.quickbooks.qb_lines import decode_line
        from core.errors import DecodeError

        with pytest.raises(DecodeError):
            decode_line({"Amount": 1, "SalesItemLineDetail": {"Qty": "many"}})

    def test_non_object_line_fails(self):
        """Rows must be objects; collections must be arrays."""
        from connectors.quickbooks.qb_lines import decode_line, decode_lines
        from core.errors import DecodeError

        with pytest.raises(DecodeError):
            decode_line("not a line")
        with pytest.raises(DecodeError):
            decode_lines({"Amount": 1})
        assert decode_lines(None) == []

    def test_unknown_detail_fails_by_default(self):
        """An unrecognised detail key is rejected under the default policy."""
        from connectors.quickbooks.qb_lines import decode_line
        from core.errors import DecodeError

        with pytest.raises(DecodeError) as exc_info:
            decode_line({
                "Amount": 5,
                "DetailType": "ReimburseLineDetail",
                "ReimburseLineDetail": {"ItemRef": {"value": "1"}},
            })
        assert "ReimburseLineDetail" in exc_info.value.message

    def test_unknown_detail_lenient_policy(self):
        """With the lenient policy an unrecognised detail decodes as empty."""
        from connectors.quickbooks.qb_lines import EMPTY_DETAIL, decode_line
        from core.config import override_settings

        with override_settings(unknown_detail_policy="empty"):
            line = decode_line({"Amount": 5, "ReimburseLineDetail": {}})

        assert line.detail == EMPTY_DETAIL
        assert line.amount == Decimal("5")

    def test_nested_group_decodes(self):
        """Group component rows use the same protocol."""
        from connectors.quickbooks.qb_lines import GroupLineDetail, SalesItemLineDetail, decode_line

        line = decode_line({
            "Amount": 200,
            "DetailType": "GroupLineDetail",
            "GroupLineDetail": {
                "GroupItemRef": {"value": "19", "name": "Bundle"},
                "Quantity": 2,
                "Line": [SAMPLE_WIRE_LINE, SAMPLE_WIRE_LINE],
            },
        })

        assert isinstance(line.detail, GroupLineDetail)
        assert len(line.detail.line) == 2
        assert all(isinstance(c.detail, SalesItemLineDetail) for c in line.detail.line)

    def test_ambiguity_inside_group_fails(self):
        """A malformed component row fails the whole line."""
        from connectors.quickbooks.qb_lines import decode_line
        from core.errors import DecodeError

        with pytest.raises(DecodeError):
            decode_line({
                "Amount": 200,
                "GroupLineDetail": {
                    "Line": [{"Amount": 1, "SalesItemLineDetail": {}, "TaxLineDetail": {}}],
                },
            })


class TestLineCreatePrecondition:
    """Amount and a concrete detail make a line ready to send."""

    def test_line_can_create(self):
        """Both amount and detail are needed."""
        from connectors.quickbooks.qb_lines import LineItem, SubTotalLineDetail

        assert make_sales_line().can_create()
        assert not LineItem(amount="1").can_create()
        assert not LineItem(detail=SubTotalLineDetail()).can_create()

    def test_lines_can_create(self):
        """A collection needs at least one line, all of them ready."""
        from connectors.quickbooks.qb_lines import LineItem, lines_can_create

        assert lines_can_create([make_sales_line(), make_sales_line("5")])
        assert not lines_can_create([])
        assert not lines_can_create(None)
        assert not lines_can_create([make_sales_line(), LineItem(amount="1")])

    def test_payment_lines_need_only_amount(self):
        """Payment rows carry no detail."""
        from connectors.quickbooks.qb_lines import PaymentLine, lines_can_create

        assert lines_can_create([PaymentLine(amount="50")])
        assert not lines_can_create([PaymentLine()])


class TestSetTaxable:
    """Forcing the taxable marker on sales-item rows."""

    def test_single_line(self):
        """The tax code is replaced by the taxable marker."""
        from connectors.quickbooks.qb_lines import set_taxable

        line = make_sales_line(tax_code="NON")
        original = line.detail
        set_taxable(line)

        assert line.detail.tax_code_ref.target_id == "TAX"
        assert original.tax_code_ref.target_id == "NON"
        assert line.detail.item_ref == original.item_ref

    def test_group_and_other_variants(self):
        """Group components are updated; other variants are left alone."""
        from connectors.quickbooks.qb_lines import (
            DescriptionLineDetail,
            GroupLineDetail,
            LineItem,
            set_taxable,
        )
        from core.models.refs import Reference

        description = LineItem(
            amount=0,
            detail=DescriptionLineDetail(tax_code_ref=Reference(target_id="NON")),
        )
        group = LineItem(
            amount="10",
            detail=GroupLineDetail(line=[make_sales_line(), make_sales_line()]),
        )
        lines = [description, group]
        set_taxable(lines)

        assert description.detail.tax_code_ref.target_id == "NON"
        assert all(c.detail.tax_code_ref.target_id == "TAX" for c in group.detail.line)

    def test_none_is_noop(self):
        """None is accepted and ignored."""
        from connectors.quickbooks.qb_lines import set_taxable

        set_taxable(None)

    def test_configured_marker(self):
        """The marker comes from settings."""
        from connectors.quickbooks.qb_lines import set_taxable
        from core.config import override_settings

        line = make_sales_line()
        with override_settings(taxable_tax_code="GST"):
            set_taxable(line)

        assert line.detail.tax_code_ref.target_id == "GST"
