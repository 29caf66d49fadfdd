"""
Worksheet preparation: turns blind order items into fabric cut panels

Fabric cut width = blind width - deduction for the control mechanism.
Fabric cut length = drop + roll allowance.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .models import PanelRequest

logger = logging.getLogger(__name__)

# Deductions in mm, by chain/motor name
MOTOR_DEDUCTIONS = {
    # Winders
    'TBS winder-32mm': 28,
    'Acmeda winder-29mm': 28,

    # Automate motors
    'Automate 1.1NM Li-Ion Quiet Motor': 29,
    'Automate 0.7NM Li-Ion Quiet Motor': 29,
    'Automate 2NM Li-Ion Quiet Motor': 29,
    'Automate 2NM Li-Ion Motor': 29,
    'Automate 3NM Li-Ion Motor': 29,
    'Automate E6 6NM Motor': 29,

    # Alpha battery motors
    'Alpha 1NM Battery Motor': 30,
    'Alpha 2NM Battery Motor': 30,
    'Alpha 3NM Battery Motor': 30,

    # Alpha AC motors
    'Alpha AC 3NM Motor': 35,
    'Alpha AC 5NM Motor': 35,
}

DEFAULT_FABRIC_DEDUCTION = 28   # unknown motors and plain chains
TUBE_CUT_DEDUCTION = 28         # tube cuts ignore the motor
DROP_ADDITION = 150


class BlindItem(BaseModel):
    """One blind line of a customer order"""
    model_config = ConfigDict(frozen=True)

    location: str = ''
    width: float = Field(gt=0, allow_inf_nan=False)
    drop: float = Field(gt=0, allow_inf_nan=False)
    chain_or_motor: Optional[str] = Field(
        default=None, validation_alias=AliasChoices('chain_or_motor', 'chainOrMotor'))
    quantity: int = Field(default=1, ge=1, validation_alias=AliasChoices('quantity', 'qty'))
    order_item_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices('order_item_id', 'orderItemId'))


def _motor_name(motor_type: Optional[str]) -> str:
    # Order imports store names with underscores instead of spaces
    return (motor_type or '').replace('_', ' ').strip()


def fabric_cut_deduction(motor_type: Optional[str]) -> float:
    """Width deduction for a chain/motor type"""
    return MOTOR_DEDUCTIONS.get(_motor_name(motor_type), DEFAULT_FABRIC_DEDUCTION)


def fabric_cut_width(width: float, motor_type: Optional[str]) -> float:
    return width - fabric_cut_deduction(motor_type)


def tube_cut_width(width: float) -> float:
    return width - TUBE_CUT_DEDUCTION


def cut_drop(drop: float) -> float:
    """Drop plus the roll allowance"""
    return drop + DROP_ADDITION


def width_deductions(width: float, motor_type: Optional[str]) -> Dict[str, float]:
    """All width figures shown on the worksheet for one blind"""
    return {
        'fabric_cut_width': fabric_cut_width(width, motor_type),
        'tube_cut_width': tube_cut_width(width),
        'fabric_deduction': fabric_cut_deduction(motor_type),
        'tube_deduction': TUBE_CUT_DEDUCTION,
    }


def fabric_cut_panels(items: Iterable[Union[BlindItem, Dict[str, Any]]]) -> List[PanelRequest]:
    """
    Builds optimizer input from blind order items

    Args:
        items: BlindItem objects or dicts (location, width, drop, chainOrMotor, ...)

    Returns:
        One PanelRequest per item, in item order

    Raises:
        ValueError: an item is invalid or narrower than its deduction
    """
    panels = []
    for item in items:
        if not isinstance(item, BlindItem):
            item = BlindItem.model_validate(item)

        cut_width = fabric_cut_width(item.width, item.chain_or_motor)
        if cut_width <= 0:
            raise ValueError(
                f"Blind '{item.location}' is too narrow for its deduction: "
                f"width {item.width}, motor '{_motor_name(item.chain_or_motor)}'")

        panels.append(PanelRequest(
            width=cut_width,
            length=cut_drop(item.drop),
            quantity=item.quantity,
            label=item.location or None,
            original_width=item.width,
            original_drop=item.drop,
            order_item_id=item.order_item_id,
        ))

    logger.info(f"📋 Prepared {len(panels)} fabric cut panels")
    return panels
