#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Cutlist optimizer for fabric blinds

This package contains:
- core: Packing engine, input models, configuration and worksheet preparation and bottom bar stock
"""

__version__ = "1.0.0"

# Export the main components for convenient imports
from .core import (
    optimize,
    CutlistOptimizer,
    OptimizationResult,
    PanelRequest,
    OptimizerConfig,
    OptimizationPriority,
    BlindItem,
    fabric_cut_panels,
    TubeBlindInput,
    TubeCutOptimizer,
    TubeCutResult,
)

__all__ = [
    'optimize',
    'CutlistOptimizer',
    'OptimizationResult',
    'PanelRequest',
    'OptimizerConfig',
    'OptimizationPriority',
    'BlindItem',
    'fabric_cut_panels',
    'TubeBlindInput',
    'TubeCutOptimizer',
    'TubeCutResult',
]
