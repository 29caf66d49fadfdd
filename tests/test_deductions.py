import pytest

from cutlist.core.deductions import (
    BlindItem,
    DEFAULT_FABRIC_DEDUCTION,
    cut_drop,
    fabric_cut_deduction,
    fabric_cut_panels,
    fabric_cut_width,
    tube_cut_width,
    width_deductions,
)
from cutlist.core.optimizer_core import CutlistOptimizer


@pytest.mark.parametrize('motor, deduction', [
    ('TBS winder-32mm', 28),
    ('Automate 2NM Li-Ion Motor', 29),
    ('Alpha 2NM Battery Motor', 30),
    ('Alpha AC 5NM Motor', 35),
    ('Alpha_AC_5NM_Motor', 35),
    ('Some new chain', DEFAULT_FABRIC_DEDUCTION),
    (None, DEFAULT_FABRIC_DEDUCTION),
])
def test_fabric_cut_deduction(motor, deduction):
    assert fabric_cut_deduction(motor) == deduction


def test_width_figures():
    assert fabric_cut_width(1500, 'Alpha AC 5NM Motor') == 1465
    assert tube_cut_width(1500) == 1472
    assert cut_drop(2100) == 2250
    assert width_deductions(1500, 'Alpha 1NM Battery Motor') == {
        'fabric_cut_width': 1470,
        'tube_cut_width': 1472,
        'fabric_deduction': 30,
        'tube_deduction': 28,
    }


def test_fabric_cut_panels_from_order_items():
    panels = fabric_cut_panels([
        {'location': 'Living Room', 'width': 1500, 'drop': 2100,
         'chainOrMotor': 'Automate 2NM Li-Ion Motor', 'orderItemId': 7},
        BlindItem(location='', width=900, drop=1200, quantity=2),
    ])

    first, second = panels
    assert (first.width, first.length, first.label) == (1471, 2250, 'Living Room')
    assert (first.original_width, first.original_drop, first.order_item_id) == (1500, 2100, 7)
    assert (second.width, second.length, second.quantity) == (872, 1350, 2)
    assert second.label is None


def test_too_narrow_blind_is_rejected():
    with pytest.raises(ValueError, match='too narrow'):
        fabric_cut_panels([{'location': 'Hall', 'width': 20, 'drop': 1000}])


def test_prepared_panels_run_through_optimizer():
    panels = fabric_cut_panels([
        {'location': 'Bed 1', 'width': 1500, 'drop': 2100, 'orderItemId': 1},
        {'location': 'Bed 2', 'width': 1000, 'drop': 2100, 'orderItemId': 2},
    ])

    result = CutlistOptimizer().optimize(panels)

    placed = result.sheets[0].panels
    assert [p.order_item_id for p in placed] == [1, 2]
    assert [p.label for p in placed] == ['Bed 1', 'Bed 2']
    assert result.cuts[0].result == '1472×2250'
