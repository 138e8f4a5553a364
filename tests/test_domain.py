import pytest

from partflow.domain import (
    DomainValidationError,
    apply_inventory_change,
    build_category_path,
    build_category_tree,
    create_category,
    create_inventory_change,
    create_location,
    create_part,
    create_tag,
    is_low_stock,
)
from partflow.domain.catalog import would_create_cycle
from partflow.domain.inventory import MAX_STOCK_QUANTITY, delta_from


def _category(id, name, parent_id=None):
    return create_category({"id": id, "name": name, "parent_id": parent_id})


# ---------------- parts ----------------
def test_create_part_defaults():
    part = create_part({"name": "Bolt M6"})

    assert part.id
    assert part.quantity == 0
    assert part.tags == []
    assert part.min_quantity is None
    assert part.created_at == part.updated_at
    assert part.created_at.endswith("Z")


def test_create_part_keeps_supplied_id_and_tag_order():
    part = create_part({"id": "p-1", "name": "Nut", "tags": ["b", "a", "b"]})

    assert part.id == "p-1"
    assert part.tags == ["b", "a", "b"]


def test_create_part_requires_name():
    with pytest.raises(DomainValidationError) as exc:
        create_part({"quantity": 3})
    assert exc.value.field == "name"


def test_create_part_rejects_negative_quantity():
    with pytest.raises(DomainValidationError):
        create_part({"name": "Nut", "quantity": -1})


def test_create_part_keeps_zero_min_quantity():
    assert create_part({"name": "Nut", "min_quantity": 0}).min_quantity == 0


# ---------------- inventory changes ----------------
@pytest.mark.parametrize(
    "delta, change_type, quantity",
    [(5, "in", 5), (-7, "out", 7), (0, "out", 0)],
)
def test_create_inventory_change_derives_type_and_magnitude(delta, change_type, quantity):
    change = create_inventory_change({"part_id": "p-1", "delta": delta})

    assert change.change_type == change_type
    assert change.quantity == quantity
    assert delta_from(change.change_type, change.quantity) == delta


def test_create_inventory_change_requires_part_and_delta():
    with pytest.raises(DomainValidationError):
        create_inventory_change({"delta": 1})
    with pytest.raises(DomainValidationError):
        create_inventory_change({"part_id": "p-1"})
    with pytest.raises(DomainValidationError):
        create_inventory_change({"part_id": "p-1", "delta": True})


def test_apply_inventory_change_clamps_at_zero():
    part = create_part({"name": "Washer", "quantity": 3})
    change = create_inventory_change({"part_id": part.id, "delta": -10})

    updated = apply_inventory_change(part, change)

    assert updated.quantity == 0
    assert updated.updated_at == change.timestamp
    # input untouched
    assert part.quantity == 3


def test_apply_inventory_change_never_goes_negative_over_a_sequence():
    part = create_part({"name": "Washer", "quantity": 4})
    for delta in (-1, -10, 3, -2, -2, 5, -100):
        part = apply_inventory_change(
            part, create_inventory_change({"part_id": part.id, "delta": delta})
        )
        assert part.quantity >= 0
    assert part.quantity == 0


def test_apply_inventory_change_rejects_overflow():
    part = create_part({"name": "Washer", "quantity": MAX_STOCK_QUANTITY - 2})

    filled = apply_inventory_change(
        part, create_inventory_change({"part_id": part.id, "delta": 2})
    )
    assert filled.quantity == MAX_STOCK_QUANTITY

    with pytest.raises(DomainValidationError) as exc:
        apply_inventory_change(part, create_inventory_change({"part_id": part.id, "delta": 3}))
    assert exc.value.field == "delta"


# ---------------- low stock ----------------
@pytest.mark.parametrize("quantity, expected", [(5, True), (0, True), (6, False)])
def test_is_low_stock_boundary(quantity, expected):
    part = create_part({"name": "Bolt", "quantity": quantity, "min_quantity": 5})
    assert is_low_stock(part) is expected


def test_is_low_stock_without_threshold_is_never_low():
    assert is_low_stock(create_part({"name": "Bolt", "quantity": 0})) is False


def test_scenario_bolt_leaves_low_stock_after_restock():
    part = create_part({"name": "Bolt M6", "quantity": 5, "min_quantity": 10})
    assert is_low_stock(part)

    part = apply_inventory_change(
        part, create_inventory_change({"part_id": part.id, "delta": 50})
    )

    assert part.quantity == 55
    assert not is_low_stock(part)


# ---------------- catalog ----------------
def test_create_location_uppercases_code():
    assert create_location({"code": "  a1 "}).code == "A1"


def test_create_location_requires_code():
    with pytest.raises(DomainValidationError):
        create_location({"name": "Box"})


def test_create_tag():
    tag = create_tag({"name": "metric", "color": "#fff"})
    assert tag.name == "metric"
    assert tag.created_at


def test_build_category_path_root_to_child():
    categories = [
        _category("a", "Fasteners"),
        _category("b", "Bolts", "a"),
        _category("c", "Hex", "b"),
    ]

    assert build_category_path(categories, "c") == ["Fasteners", "Bolts", "Hex"]
    assert build_category_path(categories, "a") == ["Fasteners"]
    assert build_category_path(categories, "missing") == []


def test_build_category_path_stops_on_cycle():
    categories = [_category("a", "A", "b"), _category("b", "B", "a")]

    assert build_category_path(categories, "a") == ["B", "A"]


def test_build_category_path_stops_at_missing_parent():
    categories = [_category("b", "Bolts", "gone")]
    assert build_category_path(categories, "b") == ["Bolts"]


def test_would_create_cycle():
    categories = [
        _category("a", "A"),
        _category("b", "B", "a"),
        _category("c", "C", "b"),
    ]

    assert would_create_cycle(categories, "a", "a")
    assert would_create_cycle(categories, "a", "c")
    assert not would_create_cycle(categories, "c", "a")
    assert not would_create_cycle(categories, "b", None)


def test_build_category_tree_nests_and_sorts_by_name():
    categories = [
        _category("r2", "Zeta"),
        _category("r1", "Alpha"),
        _category("c2", "Nuts", "r1"),
        _category("c1", "Bolts", "r1"),
        _category("o", "Orphan", "missing"),
    ]

    tree = build_category_tree(categories)

    assert [n.name for n in tree] == ["Alpha", "Orphan", "Zeta"]
    assert [c.name for c in tree[0].children] == ["Bolts", "Nuts"]


def test_build_category_tree_includes_cycle_members_once():
    categories = [
        _category("root", "Root"),
        _category("a", "A", "b"),
        _category("b", "B", "a"),
    ]

    tree = build_category_tree(categories)

    def _ids(nodes):
        for node in nodes:
            yield node.id
            yield from _ids(node.children)

    assert sorted(_ids(tree)) == ["a", "b", "root"]
