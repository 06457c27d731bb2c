import pytest
from narrative.components import Inventory
from narrative.dialogue.inventory_gate import InventoryGate
from narrative.dialogue.models import DialogueOption

def option(*requirements, required_item=None):
    return DialogueOption.model_validate({
        "text": "Trade",
        "requiredItem": required_item,
        "requiredInventoryItems": [
            {"itemName": name, "requiredQuantity": qty, "consumeOnUse": consume}
            for name, qty, consume in requirements
        ],
    })

def test_free_option_always_selectable():
    assert InventoryGate().can_select(DialogueOption(text="Hi"))

def test_cost_without_inventory_is_not_selectable():
    assert not InventoryGate().can_select(option(("Wood", 1, False)))

def test_quantity_check(fake_inventory):
    gate = InventoryGate(fake_inventory(Wood=2))
    assert gate.can_select(option(("Wood", 2, False)))
    assert not gate.can_select(option(("Wood", 3, False)))

def test_legacy_required_item(fake_inventory):
    assert InventoryGate(fake_inventory(Key=1)).can_select(option(required_item="Key"))
    assert not InventoryGate(fake_inventory()).can_select(option(required_item="Key"))

def test_every_requirement_must_hold(fake_inventory):
    gate = InventoryGate(fake_inventory(Wood=5, Nails=1))
    assert not gate.can_select(option(("Wood", 3, False), ("Nails", 2, False)))

def test_can_select_has_no_side_effects(fake_inventory):
    inventory = fake_inventory(Wood=3)
    gate = InventoryGate(inventory)
    wood = option(("Wood", 3, True))

    for _ in range(5):
        assert gate.can_select(wood)
    assert inventory.items == {"Wood": 3}
    assert inventory.removed == []

def test_consume_only_flagged_requirements(fake_inventory):
    inventory = fake_inventory(Wood=3, Hammer=1)
    gate = InventoryGate(inventory)

    gate.consume(option(("Wood", 3, True), ("Hammer", 1, False)))

    assert inventory.items == {"Wood": 0, "Hammer": 1}
    assert inventory.removed == [("Wood", 3)]

def test_consume_skips_missing_items(fake_inventory):
    inventory = fake_inventory(Wood=1)
    InventoryGate(inventory).consume(option(("Stone", 2, True), ("Wood", 1, True)))
    assert inventory.removed == [("Wood", 1)]

def test_with_inventory_component():
    inventory = Inventory()
    inventory.add_item("Scrap Metal", 3)
    gate = InventoryGate(inventory)
    scrap = option(("Scrap Metal", 3, True))

    assert gate.can_select(scrap)
    gate.consume(scrap)
    assert inventory.count_item("Scrap Metal") == 0
    assert not gate.can_select(scrap)

@pytest.mark.parametrize("data, expected", [
    ({"text": "Free"}, ""),
    ({"requiredItem": "Key"}, "Requires: Key"),
    ({"requiredInventoryItems": [{"itemName": "Wood", "requiredQuantity": 3}]}, "Requires: 3x Wood"),
    ({"requiredInventoryItems": [{"itemName": "Wood"}]}, "Requires: Wood"),
    ({"requiredInventoryItems": [
        {"itemName": "Wood", "requiredQuantity": 2, "displayText": "Some planks"},
        {"itemName": "Nails", "requiredQuantity": 10},
    ]}, "Requires: Some planks, 10x Nails"),
])
def test_describe(data, expected):
    assert InventoryGate.describe(DialogueOption.model_validate(data)) == expected
