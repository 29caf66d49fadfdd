import pytest

from cutlist.core.models import OptimizerConfig
from cutlist.core.optimizer_core import CutlistOptimizer


@pytest.fixture
def optimizer():
    """Standard 3000 x 10000 roll, no kerf"""
    return CutlistOptimizer(OptimizerConfig(stock_width=3000, stock_length=10000))


@pytest.fixture
def mixed_order():
    """A realistic order with several blind sizes"""
    return [
        {'width': 1472, 'length': 2250, 'quantity': 5, 'label': 'Type A'},
        {'width': 972, 'length': 1950, 'quantity': 5, 'label': 'Type B'},
        {'width': 1972, 'length': 2550, 'quantity': 3, 'label': 'Type C'},
        {'width': 800, 'length': 600, 'quantity': 7, 'label': 'Type D'},
        {'width': 2900, 'length': 400, 'quantity': 2, 'label': 'Type E'},
        {'width': 3500, 'length': 900, 'quantity': 1, 'label': 'Wide'},
    ]
