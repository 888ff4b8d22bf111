"""
Stock deltas for bills and purchase orders.

Pure functions: turn document lines into signed TransactionDeltas and net
an old set of deltas against a new one so an edit touches each stock row
exactly once.
"""

from collections.abc import Iterable

from stockledger.core.entities.bill import BillLine
from stockledger.core.entities.purchase import PurchaseLine
from stockledger.core.entities.stock import TransactionDelta


def net_deltas(deltas: Iterable[TransactionDelta]) -> list[TransactionDelta]:
    """
    Sum deltas per (product, warehouse), dropping rows that net to zero.

    Rows keep the order in which they first appear. The pieces_per_box of
    the last delta that carries one wins.
    """
    pieces: dict[tuple[str, str], int] = {}
    box_sizes: dict[tuple[str, str], int | None] = {}
    for delta in deltas:
        pieces[delta.key] = pieces.get(delta.key, 0) + delta.pieces
        if delta.pieces_per_box is not None or delta.key not in box_sizes:
            box_sizes[delta.key] = delta.pieces_per_box

    return [
        TransactionDelta(
            product_id=product_id,
            warehouse_id=warehouse_id,
            pieces=total,
            pieces_per_box=box_sizes[(product_id, warehouse_id)],
        )
        for (product_id, warehouse_id), total in pieces.items()
        if total != 0
    ]


def negate(deltas: Iterable[TransactionDelta]) -> list[TransactionDelta]:
    return [d.model_copy(update={"pieces": -d.pieces}) for d in deltas]


def compute_diff(
    old_deltas: Iterable[TransactionDelta],
    new_deltas: Iterable[TransactionDelta],
) -> list[TransactionDelta]:
    """
    Net change needed to move stock from the old document to the new one.

    Equivalent to reverting every old delta and then applying every new
    one, collapsed to a single delta per (product, warehouse).
    """
    return net_deltas([*negate(old_deltas), *new_deltas])


def bill_deltas(
    lines: Iterable[BillLine], box_sizes: dict[str, int] | None = None
) -> list[TransactionDelta]:
    """Stock-out deltas for priced bill lines."""
    box_sizes = box_sizes or {}
    return [
        TransactionDelta(
            product_id=line.product_id,
            warehouse_id=line.warehouse_id,
            pieces=-line.total_pieces,
            pieces_per_box=box_sizes.get(line.product_id),
        )
        for line in lines
    ]


def purchase_deltas(
    lines: Iterable[PurchaseLine], box_sizes: dict[str, int] | None = None
) -> list[TransactionDelta]:
    """Stock-in deltas for priced purchase lines."""
    box_sizes = box_sizes or {}
    return [
        TransactionDelta(
            product_id=line.product_id,
            warehouse_id=line.warehouse_id,
            pieces=line.total_qty,
            pieces_per_box=box_sizes.get(line.product_id),
        )
        for line in lines
    ]
