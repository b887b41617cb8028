from __future__ import annotations

from decimal import Decimal

import pytest
from packages.shared.schemas.catalog_v1 import FullnessV1
from services.api.app.models.draft import TreeItem
from services.api.app.services.cart import (
    LineItemNotFoundError,
    add_stand,
    add_tree,
    add_wreath,
    has_own_stand,
    has_purchased_stands,
    remove_stand,
    set_stand_quantity,
    set_tree_quantity,
    set_wreath_quantity,
    toggle_own_stand,
)


def _tree(height: float = 7, quantity: int = 1) -> TreeItem:
    return TreeItem(
        species_id="sp-1",
        species_name="Fraser Fir",
        fullness=FullnessV1.MEDIUM,
        height_feet=height,
        price_per_foot=Decimal("20"),
        quantity=quantity,
    )


def test_identical_trees_are_separate_entries() -> None:
    trees = add_tree(add_tree((), _tree()), _tree())
    assert len(trees) == 2
    assert trees[0] == trees[1]


def test_tree_quantity_update_and_removal() -> None:
    trees = add_tree(add_tree((), _tree(6)), _tree(8))

    updated = set_tree_quantity(trees, 1, 3)
    assert [t.quantity for t in updated] == [1, 3]
    assert trees[1].quantity == 1

    assert [t.height_feet for t in set_tree_quantity(trees, 0, 0)] == [8]
    assert [t.height_feet for t in set_tree_quantity(trees, 1, -2)] == [6]


def test_tree_index_out_of_range() -> None:
    with pytest.raises(LineItemNotFoundError):
        set_tree_quantity((_tree(),), 3, 1)


def test_tree_height_must_be_whole_or_half_feet() -> None:
    assert _tree(6.5).unit_price == Decimal("130.0")
    with pytest.raises(ValueError):
        _tree(6.3)


def test_same_stand_added_twice_increments() -> None:
    stands = add_stand((), "st-1", "Classic Stand", Decimal("25"))
    stands = add_stand(stands, "st-1", "Classic Stand", Decimal("25"))
    assert len(stands) == 1
    assert stands[0].quantity == 2


def test_own_stand_replaces_purchased_stands() -> None:
    stands = add_stand((), "st-1", "Classic Stand", Decimal("25"))
    stands = add_stand(stands, "st-2", "Heavy Duty", Decimal("45"))

    stands = toggle_own_stand(stands)
    assert len(stands) == 1
    assert stands[0].is_own_stand
    assert stands[0].unit_price == Decimal("0")
    assert not has_purchased_stands(stands)

    assert toggle_own_stand(stands) == ()


def test_purchasing_a_stand_drops_own_stand() -> None:
    stands = toggle_own_stand(())
    stands = add_stand(stands, "st-1", "Classic Stand", Decimal("25"))
    assert not has_own_stand(stands)
    assert [s.stand_id for s in stands] == ["st-1"]


def test_stand_quantity_zero_removes() -> None:
    stands = add_stand((), "st-1", "Classic Stand", Decimal("25"))
    assert set_stand_quantity(stands, "st-1", "Classic Stand", Decimal("25"), 0) == ()
    assert remove_stand(stands, "st-1") == ()


def test_wreath_increment_and_negative_quantity_removes() -> None:
    wreaths = add_wreath((), "wr-1", "small", "Small Wreath", Decimal("15"))
    wreaths = add_wreath(wreaths, "wr-1", "small", "Small Wreath", Decimal("15"))
    assert wreaths[0].quantity == 2

    assert set_wreath_quantity(wreaths, "wr-1", "small", "Small Wreath", Decimal("15"), -1) == ()
