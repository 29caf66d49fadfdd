"""
Input models for the cutlist optimizer
"""

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .config import (
    DEFAULT_OPTIMIZATION_PARAMS,
    DEFAULT_STOCK_WIDTH,
    DEFAULT_STOCK_LENGTH,
    DEFAULT_KERF_THICKNESS,
)


class OptimizationPriority(Enum):
    """Packing heuristics"""
    LARGEST_AREA_FIRST = "largest_area_first"   # First-Fit-Decreasing by area


# Names used by earlier releases of the order worksheet
LEGACY_PRIORITIES = {
    "least_wasted_area": OptimizationPriority.LARGEST_AREA_FIRST.value,
}


class PanelRequest(BaseModel):
    """A distinct panel size required `quantity` times"""
    model_config = ConfigDict(frozen=True)

    width: float = Field(gt=0, allow_inf_nan=False)
    length: float = Field(gt=0, allow_inf_nan=False)
    quantity: int = Field(default=1, ge=1, validation_alias=AliasChoices('quantity', 'qty'))
    label: Optional[str] = None

    # Order layer passthrough
    original_width: Optional[float] = Field(
        default=None, validation_alias=AliasChoices('original_width', 'originalWidth'))
    original_drop: Optional[float] = Field(
        default=None, validation_alias=AliasChoices('original_drop', 'originalDrop'))
    order_item_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices('order_item_id', 'orderItemId'))


class OptimizerConfig(BaseModel):
    """Stock roll and packing settings, fixed for a whole run"""
    model_config = ConfigDict(frozen=True)

    stock_width: float = Field(
        default=DEFAULT_STOCK_WIDTH, gt=0, allow_inf_nan=False,
        validation_alias=AliasChoices('stock_width', 'stockWidth'))
    stock_length: float = Field(
        default=DEFAULT_STOCK_LENGTH, gt=0, allow_inf_nan=False,
        validation_alias=AliasChoices('stock_length', 'stockLength'))
    kerf_thickness: float = Field(
        default=DEFAULT_KERF_THICKNESS, ge=0, allow_inf_nan=False,
        validation_alias=AliasChoices('kerf_thickness', 'kerfThickness'))
    optimization_priority: OptimizationPriority = Field(
        default=OptimizationPriority.LARGEST_AREA_FIRST,
        validation_alias=AliasChoices('optimization_priority', 'optimizationPriority'))

    @field_validator('optimization_priority', mode='before')
    @classmethod
    def _resolve_legacy_priority(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            return LEGACY_PRIORITIES.get(value, value)
        return value

    @classmethod
    def from_defaults(cls, **overrides) -> 'OptimizerConfig':
        """
        Builds a config from the environment defaults

        Args:
            overrides: Values that take precedence, snake_case or camelCase

        Returns:
            Validated OptimizerConfig
        """
        params = dict(DEFAULT_OPTIMIZATION_PARAMS)
        if overrides:
            params.update(cls.model_validate(overrides).model_dump(exclude_unset=True))
        return cls(**params)
