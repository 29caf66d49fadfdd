"""
Core logic of the cutlist optimizer
"""

from .models import PanelRequest, OptimizerConfig, OptimizationPriority
from .optimizer_core import optimize, CutlistOptimizer, OptimizationResult
from .deductions import BlindItem, fabric_cut_panels
from .tube_cut import TubeBlindInput, TubeCutOptimizer, TubeCutResult

__all__ = [
    "optimize",
    "CutlistOptimizer",
    "OptimizationResult",
    "PanelRequest",
    "OptimizerConfig",
    "OptimizationPriority",
    "BlindItem",
    "fabric_cut_panels",
    "TubeBlindInput",
    "TubeCutOptimizer",
    "TubeCutResult",
]
