"""Unit tests for stock delta netting."""

from decimal import Decimal

from stockledger.core.entities import BillLine, PurchaseLine, TransactionDelta
from stockledger.core.services import bill_deltas, compute_diff, net_deltas, purchase_deltas


def _delta(product_id: str, warehouse_id: str, pieces: int, ppb: int | None = None):
    return TransactionDelta(
        product_id=product_id, warehouse_id=warehouse_id, pieces=pieces, pieces_per_box=ppb
    )


def _as_map(deltas: list[TransactionDelta]) -> dict[tuple[str, str], int]:
    return {d.key: d.pieces for d in deltas}


class TestNetDeltas:
    def test_sums_per_row(self):
        netted = net_deltas([_delta("P1", "W1", -5), _delta("P1", "W1", -3), _delta("P2", "W1", 4)])
        assert _as_map(netted) == {("P1", "W1"): -8, ("P2", "W1"): 4}

    def test_drops_rows_netting_to_zero(self):
        netted = net_deltas([_delta("P1", "W1", 5), _delta("P1", "W1", -5)])
        assert netted == []

    def test_keeps_first_appearance_order(self):
        netted = net_deltas([_delta("P2", "W1", 1), _delta("P1", "W1", 1), _delta("P2", "W1", 1)])
        assert [d.product_id for d in netted] == ["P2", "P1"]

    def test_last_known_box_size_wins(self):
        netted = net_deltas([_delta("P1", "W1", 1, ppb=10), _delta("P1", "W1", 1), _delta("P1", "W1", 1, ppb=12)])
        assert netted[0].pieces_per_box == 12


class TestComputeDiff:
    def test_unchanged_document_touches_nothing(self):
        old = [_delta("P1", "W1", -10)]
        assert compute_diff(old, old) == []

    def test_quantity_change(self):
        diff = compute_diff([_delta("P1", "W1", -10)], [_delta("P1", "W1", -14)])
        assert _as_map(diff) == {("P1", "W1"): -4}

    def test_warehouse_move(self):
        diff = compute_diff([_delta("P1", "A", 24)], [_delta("P1", "B", 24)])
        assert _as_map(diff) == {("P1", "A"): -24, ("P1", "B"): 24}

    def test_removed_line_reverts(self):
        diff = compute_diff([_delta("P1", "W1", -6), _delta("P2", "W1", -2)], [_delta("P1", "W1", -6)])
        assert _as_map(diff) == {("P2", "W1"): 2}


class TestDocumentDeltas:
    def test_bill_lines_take_stock_out(self):
        line = BillLine(
            product_id="P1",
            warehouse_id="W1",
            selling_price=Decimal("1"),
            total_pieces=15,
        )
        deltas = bill_deltas([line], {"P1": 12})
        assert deltas == [_delta("P1", "W1", -15, ppb=12)]

    def test_purchase_lines_put_stock_in(self):
        line = PurchaseLine(product_id="P1", warehouse_id="W1", total_qty=28)
        deltas = purchase_deltas([line])
        assert deltas == [_delta("P1", "W1", 28)]
