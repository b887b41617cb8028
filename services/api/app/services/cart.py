"""Line-item mutations for the order draft.

Every function takes a tuple of items and returns a new tuple. Nothing is modified in
place; the wizard controller swaps the new collection into a new draft.
"""

from __future__ import annotations

from decimal import Decimal

from services.api.app.models.draft import StandItem, TreeItem, WreathItem
from services.api.app.services.wizard import WizardError

OWN_STAND_NAME = "Own Stand"


class LineItemNotFoundError(WizardError):
    def __init__(self, kind: str, key: object) -> None:
        super().__init__(f"No {kind} line item at {key!r}")
        self.kind = kind
        self.key = key


# Trees are keyed by position: the same species/height/fullness may appear twice.


def add_tree(trees: tuple[TreeItem, ...], tree: TreeItem) -> tuple[TreeItem, ...]:
    return (*trees, tree)


def set_tree_quantity(
    trees: tuple[TreeItem, ...], index: int, quantity: int
) -> tuple[TreeItem, ...]:
    if index < 0 or index >= len(trees):
        raise LineItemNotFoundError("tree", index)
    if quantity <= 0:
        return remove_tree(trees, index)
    return tuple(
        t.model_copy(update={"quantity": quantity}) if i == index else t
        for i, t in enumerate(trees)
    )


def remove_tree(trees: tuple[TreeItem, ...], index: int) -> tuple[TreeItem, ...]:
    if index < 0 or index >= len(trees):
        raise LineItemNotFoundError("tree", index)
    return tuple(t for i, t in enumerate(trees) if i != index)


# Stands and wreaths are keyed by catalog id.


def has_own_stand(stands: tuple[StandItem, ...]) -> bool:
    return any(s.is_own_stand for s in stands)


def has_purchased_stands(stands: tuple[StandItem, ...]) -> bool:
    return any(not s.is_own_stand for s in stands)


def stand_quantity(stands: tuple[StandItem, ...], stand_id: str) -> int:
    for s in stands:
        if s.stand_id == stand_id and not s.is_own_stand:
            return s.quantity
    return 0


def set_stand_quantity(
    stands: tuple[StandItem, ...],
    stand_id: str,
    name: str,
    unit_price: Decimal,
    quantity: int,
) -> tuple[StandItem, ...]:
    """Set a purchased stand's quantity. Any own-stand entry is dropped."""

    purchased = tuple(s for s in stands if not s.is_own_stand)

    if quantity <= 0:
        return tuple(s for s in purchased if s.stand_id != stand_id)

    if any(s.stand_id == stand_id for s in purchased):
        return tuple(
            s.model_copy(update={"quantity": quantity}) if s.stand_id == stand_id else s
            for s in purchased
        )

    return (
        *purchased,
        StandItem(stand_id=stand_id, name=name, unit_price=unit_price, quantity=quantity),
    )


def remove_stand(stands: tuple[StandItem, ...], stand_id: str) -> tuple[StandItem, ...]:
    return tuple(s for s in stands if s.is_own_stand or s.stand_id != stand_id)


def add_stand(
    stands: tuple[StandItem, ...], stand_id: str, name: str, unit_price: Decimal
) -> tuple[StandItem, ...]:
    return set_stand_quantity(
        stands, stand_id, name, unit_price, stand_quantity(stands, stand_id) + 1
    )


def toggle_own_stand(stands: tuple[StandItem, ...]) -> tuple[StandItem, ...]:
    if has_own_stand(stands):
        return ()
    return (
        StandItem(
            stand_id=None,
            name=OWN_STAND_NAME,
            unit_price=Decimal("0"),
            quantity=1,
            is_own_stand=True,
        ),
    )


def wreath_quantity(wreaths: tuple[WreathItem, ...], wreath_id: str) -> int:
    for w in wreaths:
        if w.wreath_id == wreath_id:
            return w.quantity
    return 0


def set_wreath_quantity(
    wreaths: tuple[WreathItem, ...],
    wreath_id: str,
    size: str,
    title: str,
    unit_price: Decimal,
    quantity: int,
) -> tuple[WreathItem, ...]:
    if quantity <= 0:
        return tuple(w for w in wreaths if w.wreath_id != wreath_id)

    if any(w.wreath_id == wreath_id for w in wreaths):
        return tuple(
            w.model_copy(update={"quantity": quantity}) if w.wreath_id == wreath_id else w
            for w in wreaths
        )

    return (
        *wreaths,
        WreathItem(
            wreath_id=wreath_id, size=size, title=title, unit_price=unit_price, quantity=quantity
        ),
    )


def remove_wreath(wreaths: tuple[WreathItem, ...], wreath_id: str) -> tuple[WreathItem, ...]:
    return tuple(w for w in wreaths if w.wreath_id != wreath_id)


def add_wreath(
    wreaths: tuple[WreathItem, ...], wreath_id: str, size: str, title: str, unit_price: Decimal
) -> tuple[WreathItem, ...]:
    return set_wreath_quantity(
        wreaths, wreath_id, size, title, unit_price, wreath_quantity(wreaths, wreath_id) + 1
    )
