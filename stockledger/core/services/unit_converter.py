"""
Box and loose-piece arithmetic.

A quantity is held as whole boxes plus loose pieces. Every conversion
checks that pieces_per_box is at least 1 and that no quantity is negative.
"""

from stockledger.core.exceptions import InvalidUnitError


class UnitConverter:
    """Converts between (boxes, loose) and a piece count."""

    @staticmethod
    def _check_box_size(pieces_per_box: int) -> None:
        if pieces_per_box is None or pieces_per_box < 1:
            raise InvalidUnitError("pieces_per_box", pieces_per_box)

    @classmethod
    def to_pieces(cls, boxes: int, loose: int, pieces_per_box: int) -> int:
        """Total pieces held in `boxes` full boxes plus `loose` pieces."""
        cls._check_box_size(pieces_per_box)
        if boxes < 0:
            raise InvalidUnitError("boxes", boxes)
        if loose < 0:
            raise InvalidUnitError("loose", loose)
        return boxes * pieces_per_box + loose

    @classmethod
    def from_pieces(cls, pieces: int, pieces_per_box: int) -> tuple[int, int]:
        """Split a piece count into (boxes, loose) with loose < pieces_per_box."""
        cls._check_box_size(pieces_per_box)
        if pieces < 0:
            raise InvalidUnitError("pieces", pieces)
        return divmod(pieces, pieces_per_box)

    @classmethod
    def normalize(cls, boxes: int, loose: int, pieces_per_box: int) -> tuple[int, int]:
        """
        Fold loose overflow into whole boxes.

        Preserves the piece count and is idempotent:
        normalize(*normalize(b, l, n), n) == normalize(b, l, n).
        """
        return cls.from_pieces(cls.to_pieces(boxes, loose, pieces_per_box), pieces_per_box)
