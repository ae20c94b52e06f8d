"""
Tests for the in-memory packing-slip item list.
"""

from slipscan.database.models import LineItem
from slipscan.packing.items import PackingSlipItems


def build_items():
    return PackingSlipItems([
        LineItem(serial_number=1, merchant="zeta mills", design_number="Z1", quantity=2),
        LineItem(serial_number=2, merchant="Acme Corp", design_number="A1", external_id="X1"),
        LineItem(serial_number=3, merchant="Modern Fabrics", design_number="M1", quantity=3),
    ])


def test_sort_by_merchant_renumbers():
    items = build_items()
    items.sort_by_merchant()
    result = items.get_items()

    assert [i.merchant for i in result] == ["Acme Corp", "Modern Fabrics", "zeta mills"]
    assert [i.serial_number for i in result] == [1, 2, 3]


def test_remove_closes_serial_gap():
    items = build_items()
    removed = items.remove(0)
    result = items.get_items()

    assert removed.design_number == "Z1"
    assert [i.serial_number for i in result] == [1, 2]
    assert [i.design_number for i in result] == ["A1", "M1"]


def test_total_pieces():
    assert build_items().total_pieces() == 6


def test_to_payload_uses_packing_slip_keys():
    payload = build_items().to_payload()

    assert payload[1] == {
        "srNo": 2,
        "merchant": "Acme Corp",
        "productionSampleType": "",
        "designNo": "A1",
        "qrCodeId": "X1",
        "totalPieces": 1,
    }
    assert "qrCodeId" not in payload[0]


def test_get_items_returns_copy():
    items = build_items()
    snapshot = items.get_items()
    snapshot.clear()
    assert len(items) == 3
