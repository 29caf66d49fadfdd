"""
Bottom bar stock calculation

Bottom bars are cut from fixed-length stock. Blinds are grouped by bottom
rail type and colour, their full (undeducted) widths summed, and 10% added
for offcuts before rounding up to whole stock pieces.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .optimizer_core import round_half_up

logger = logging.getLogger(__name__)

BOTTOM_BAR_STOCK_LENGTH = 5800   # mm per piece
WASTAGE_PERCENT = 0.10


def round_3(value: float) -> float:
    return round_half_up(value * 1000) / 1000


class TubeBlindInput(BaseModel):
    """One blind as seen by the bottom bar calculation"""
    model_config = ConfigDict(frozen=True)

    location: str = ''
    original_width: float = Field(
        gt=0, allow_inf_nan=False,
        validation_alias=AliasChoices('original_width', 'originalWidth'))
    bottom_rail_type: str = Field(
        validation_alias=AliasChoices('bottom_rail_type', 'bottomRailType'))
    bottom_rail_colour: str = Field(
        validation_alias=AliasChoices('bottom_rail_colour', 'bottomRailColour'))
    order_item_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices('order_item_id', 'orderItemId'))


@dataclass
class TubeGroup:
    """Stock requirement for one bottom rail type and colour"""
    bottom_rail_type: str
    bottom_rail_colour: str
    blinds: List[TubeBlindInput] = field(default_factory=list)
    total_width: float = 0
    base_quantity: float = 0
    wastage: float = 0
    final_quantity: float = 0
    pieces_to_deduct: int = 0
    stock_length: int = BOTTOM_BAR_STOCK_LENGTH

    def to_dict(self) -> Dict[str, Any]:
        return {
            'bottomRailType': self.bottom_rail_type,
            'bottomRailColour': self.bottom_rail_colour,
            'blinds': [
                {
                    'location': blind.location,
                    'originalWidth': blind.original_width,
                    'orderItemId': blind.order_item_id,
                }
                for blind in self.blinds
            ],
            'totalWidth': self.total_width,
            'baseQuantity': self.base_quantity,
            'wastage': self.wastage,
            'finalQuantity': self.final_quantity,
            'piecesToDeduct': self.pieces_to_deduct,
            'stockLength': self.stock_length,
        }


@dataclass
class TubeCutResult:
    groups: List[TubeGroup] = field(default_factory=list)
    total_pieces_needed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'groups': [group.to_dict() for group in self.groups],
            'totalPiecesNeeded': self.total_pieces_needed,
        }


class TubeCutOptimizer:
    """Bottom bar stock pieces needed per rail type and colour"""

    def optimize(self, blinds: Iterable[Union[TubeBlindInput, Dict[str, Any]]]) -> TubeCutResult:
        """
        Groups blinds and works out the stock pieces to deduct

        Args:
            blinds: TubeBlindInput objects or dicts (originalWidth, bottomRailType, ...)

        Returns:
            TubeCutResult with groups in order of first appearance
        """
        grouped: Dict[Tuple[str, str], List[TubeBlindInput]] = {}
        for blind in blinds:
            if not isinstance(blind, TubeBlindInput):
                blind = TubeBlindInput.model_validate(blind)
            key = (blind.bottom_rail_type, blind.bottom_rail_colour)
            grouped.setdefault(key, []).append(blind)

        result = TubeCutResult()
        for (rail_type, rail_colour), group_blinds in grouped.items():
            total_width = sum(blind.original_width for blind in group_blinds)
            base_quantity = total_width / BOTTOM_BAR_STOCK_LENGTH
            wastage = base_quantity * WASTAGE_PERCENT
            final_quantity = base_quantity + wastage
            pieces = math.ceil(final_quantity)

            result.groups.append(TubeGroup(
                bottom_rail_type=rail_type,
                bottom_rail_colour=rail_colour,
                blinds=group_blinds,
                total_width=total_width,
                base_quantity=round_3(base_quantity),
                wastage=round_3(wastage),
                final_quantity=round_3(final_quantity),
                pieces_to_deduct=pieces,
            ))
            result.total_pieces_needed += pieces

            logger.debug(f"📏 {rail_type} {rail_colour}: {len(group_blinds)} blinds, "
                         f"{total_width} mm -> {pieces} pieces")

        logger.info(f"📦 Bottom bars: {result.total_pieces_needed} stock pieces "
                    f"in {len(result.groups)} groups")
        return result


def tube_cut_pieces(blinds: Iterable[Union[TubeBlindInput, Dict[str, Any]]]) -> TubeCutResult:
    """Shortcut for TubeCutOptimizer().optimize(blinds)"""
    return TubeCutOptimizer().optimize(blinds)
