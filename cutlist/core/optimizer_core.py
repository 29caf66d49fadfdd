#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Cutlist optimizer for fabric roll cutting

Packs blind panels onto fixed-size stock sheets with a First-Fit-Decreasing
guillotine algorithm. Identical input always gives identical placements,
sheet assignment and statistics.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from .config import ENABLE_DETAILED_LOGGING
from .models import OptimizationPriority, OptimizerConfig, PanelRequest

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Rounds halves up (2.5 -> 3), unlike the built-in round()"""
    return int(math.floor(value + 0.5))


def format_mm(value):
    """Drops the trailing .0 of whole millimetre values"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def format_dimensions(width, length, separator: str = "×") -> str:
    return f"{format_mm(width)}{separator}{format_mm(length)}"


def _count(number: int, noun: str) -> str:
    return f"{number} {noun}" if number == 1 else f"{number} {noun}s"


@dataclass
class PanelInstance:
    """One occurrence of a panel request"""
    id: str
    width: float
    length: float
    original_index: int
    instance_index: int
    label: str
    original_width: Optional[float] = None
    original_drop: Optional[float] = None
    order_item_id: Optional[int] = None

    def __post_init__(self):
        self.area = self.width * self.length

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'width': self.width,
            'length': self.length,
            'originalIndex': self.original_index,
            'label': self.label,
            'originalWidth': self.original_width,
            'originalDrop': self.original_drop,
            'orderItemId': self.order_item_id,
        }


@dataclass
class FreeRectangle:
    """Unoccupied region of a sheet"""
    x: float
    y: float
    width: float
    length: float

    def __post_init__(self):
        self.x2 = self.x + self.width
        self.y2 = self.y + self.length

    def fits(self, width: float, length: float, kerf: float = 0) -> bool:
        """Checks whether a width x length panel plus kerf fits"""
        return width + kerf <= self.width and length + kerf <= self.length

    def is_inside(self, other: 'FreeRectangle') -> bool:
        """Checks whether this rectangle lies entirely within other"""
        return (self.x >= other.x and self.y >= other.y and
                self.x2 <= other.x2 and self.y2 <= other.y2)

    def to_dict(self) -> Dict[str, Any]:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'length': self.length}


@dataclass
class PlacedPanel:
    """A panel instance bound to a position on a sheet"""
    id: str
    x: float
    y: float
    width: float    # as placed, swapped when rotated
    length: float
    rotated: bool
    label: str
    original_index: int
    original_width: Optional[float] = None
    original_drop: Optional[float] = None
    order_item_id: Optional[int] = None

    def __post_init__(self):
        self.x2 = self.x + self.width
        self.y2 = self.y + self.length
        self.area = self.width * self.length

    @property
    def perimeter(self) -> float:
        return 2 * (self.width + self.length)

    def footprint(self, kerf: float = 0) -> FreeRectangle:
        """Area taken on the sheet, including the blade clearance on the trailing edges"""
        return FreeRectangle(self.x, self.y, self.width + kerf, self.length + kerf)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'length': self.length,
            'rotated': self.rotated,
            'label': self.label,
            'originalIndex': self.original_index,
            'originalWidth': self.original_width,
            'originalDrop': self.original_drop,
            'orderItemId': self.order_item_id,
        }


@dataclass
class Sheet:
    """One stock sheet cut from the roll, with its layout"""
    id: int
    width: float
    length: float
    panels: List[PlacedPanel] = field(default_factory=list)
    free_rectangles: List[FreeRectangle] = field(default_factory=list)
    used_area: float = 0

    def __post_init__(self):
        self.area = self.width * self.length
        self.wasted_area = self.area - self.used_area

    @classmethod
    def blank(cls, sheet_id: int, width: float, length: float) -> 'Sheet':
        """New sheet whose whole area is one free rectangle"""
        return cls(id=sheet_id, width=width, length=length,
                   free_rectangles=[FreeRectangle(0, 0, width, length)])

    @property
    def efficiency(self) -> int:
        return round_half_up(self.used_area / self.area * 100) if self.area > 0 else 0

    def add_panel(self, panel: PlacedPanel):
        self.panels.append(panel)
        self.used_area += panel.area
        self.wasted_area = self.area - self.used_area

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'width': self.width,
            'length': self.length,
            'panels': [panel.to_dict() for panel in self.panels],
            'freeRectangles': [rect.to_dict() for rect in self.free_rectangles],
            'usedArea': self.used_area,
            'wastedArea': self.wasted_area,
            'efficiency': self.efficiency,
        }


@dataclass
class OptimizationStatistics:
    """Totals over all sheets of a run"""
    used_stock_sheets: int
    stock_dimensions: str
    total_used_area: int
    total_wasted_area: int
    waste_percentage: int
    efficiency: int
    total_cuts: int
    total_cut_length: int
    total_panels: int
    wasted_panels: int
    total_fabric_needed: float   # roll length consumed, mm
    unplaced_panels: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'usedStockSheets': self.used_stock_sheets,
            'stockDimensions': self.stock_dimensions,
            'totalUsedArea': self.total_used_area,
            'totalWastedArea': self.total_wasted_area,
            'wastePercentage': self.waste_percentage,
            'efficiency': self.efficiency,
            'totalCuts': self.total_cuts,
            'totalCutLength': self.total_cut_length,
            'totalPanels': self.total_panels,
            'wastedPanels': self.wasted_panels,
            'totalFabricNeeded': self.total_fabric_needed,
            'unplacedPanels': self.unplaced_panels,
        }


@dataclass
class CutRecord:
    """One line of the cut sheet handed to the cutter"""
    cut_number: int
    sheet_number: int
    panel: str      # stock dimensions
    cut: str        # "x=" or "y=" followed by the placed width
    result: str
    x: float
    y: float
    width: float
    length: float
    rotated: bool
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cutNumber': self.cut_number,
            'sheetNumber': self.sheet_number,
            'panel': self.panel,
            'cut': self.cut,
            'result': self.result,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'length': self.length,
            'rotated': self.rotated,
            'label': self.label,
        }


@dataclass
class OptimizationResult:
    """Sheets, statistics and cut list of one run"""
    sheets: List[Sheet]
    statistics: OptimizationStatistics
    cuts: List[CutRecord]
    unplaced_panels: List[PanelInstance] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.unplaced_panels

    @property
    def message(self) -> str:
        if self.success:
            return (f"All {_count(self.statistics.total_cuts, 'panel')} placed "
                    f"on {_count(len(self.sheets), 'sheet')}")
        return (f"Placed {_count(self.statistics.total_cuts, 'panel')}, "
                f"could not be optimized: {len(self.unplaced_panels)}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sheets': [sheet.to_dict() for sheet in self.sheets],
            'statistics': self.statistics.to_dict(),
            'cuts': [cut.to_dict() for cut in self.cuts],
            'unplacedPanels': [panel.to_dict() for panel in self.unplaced_panels],
        }


def largest_area_first(panel: PanelInstance) -> Tuple[float, float]:
    """Sort key: larger area first, then longer side first"""
    return (-panel.area, -max(panel.width, panel.length))


SORT_KEYS: Dict[OptimizationPriority, Callable[[PanelInstance], Tuple]] = {
    OptimizationPriority.LARGEST_AREA_FIRST: largest_area_first,
}


class CutlistOptimizer:
    """
    Guillotine packer for fabric roll cutting

    Holds only its configuration; every optimize() call works on its own
    sheets and free rectangle lists, so one instance can serve parallel
    requests.
    """

    def __init__(self, config: Union[OptimizerConfig, Dict[str, Any], None] = None):
        if config is None:
            config = OptimizerConfig()
        elif not isinstance(config, OptimizerConfig):
            config = OptimizerConfig.model_validate(config)
        self.config = config
        self.stock_width = config.stock_width
        self.stock_length = config.stock_length
        self.kerf_thickness = config.kerf_thickness

    def optimize(self, panels: Iterable[Union[PanelRequest, Dict[str, Any]]]) -> OptimizationResult:
        """Packs the requested panels and returns the layout, statistics and cut list"""
        requests = [self._coerce_request(panel) for panel in panels]

        logger.info(f"🚀 Cutlist optimization: {len(requests)} panel sizes, "
                    f"stock {format_dimensions(self.stock_width, self.stock_length)}, "
                    f"kerf {format_mm(self.kerf_thickness)}")

        expanded = self._expand_panels(requests)
        sorted_panels = self._sort_panels(expanded)
        sheets, unplaced = self._pack_panels(sorted_panels)

        result = OptimizationResult(
            sheets=sheets,
            statistics=self._calculate_statistics(sheets, requests, unplaced),
            cuts=self._generate_cut_list(sheets),
            unplaced_panels=unplaced,
        )

        logger.info(f"✅ {result.message}, efficiency {result.statistics.efficiency}%")
        return result

    @staticmethod
    def _coerce_request(panel: Union[PanelRequest, Dict[str, Any]]) -> PanelRequest:
        if isinstance(panel, PanelRequest):
            return panel
        return PanelRequest.model_validate(panel)

    def _expand_panels(self, requests: List[PanelRequest]) -> List[PanelInstance]:
        """Flattens quantities into single panel instances, keeping request order"""
        expanded = []
        for index, request in enumerate(requests):
            label = request.label or format_dimensions(request.width, request.length)
            for i in range(request.quantity):
                expanded.append(PanelInstance(
                    id=f"{index}-{i}",
                    width=request.width,
                    length=request.length,
                    original_index=index,
                    instance_index=i,
                    label=label,
                    original_width=request.original_width,
                    original_drop=request.original_drop,
                    order_item_id=request.order_item_id,
                ))
        return expanded

    def _sort_panels(self, panels: List[PanelInstance]) -> List[PanelInstance]:
        # sorted() is stable, equal keys keep their input order
        return sorted(panels, key=SORT_KEYS[self.config.optimization_priority])

    def _pack_panels(self, panels: List[PanelInstance]) -> Tuple[List[Sheet], List[PanelInstance]]:
        """Places each panel on the first sheet that takes it, opening sheets as needed"""
        sheets: List[Sheet] = []
        unplaced: List[PanelInstance] = []
        sheet_counter = 0   # also advances for trial sheets that are discarded

        for panel in panels:
            for sheet in sheets:
                if self._try_place_panel(sheet, panel):
                    break
            else:
                sheet_counter += 1
                new_sheet = Sheet.blank(sheet_counter, self.stock_width, self.stock_length)
                if self._try_place_panel(new_sheet, panel):
                    sheets.append(new_sheet)
                    if ENABLE_DETAILED_LOGGING:
                        logger.debug(f"📄 Opened sheet {new_sheet.id} for panel {panel.id}")
                else:
                    logger.warning(f"⚠️ Panel {panel.id} too large for stock sheet: {panel.label}")
                    unplaced.append(panel)

        return sheets, unplaced

    def _try_place_panel(self, sheet: Sheet, panel: PanelInstance) -> bool:
        """Tries the free rectangles in order, normal orientation before rotated"""
        for index, rect in enumerate(sheet.free_rectangles):
            if rect.fits(panel.width, panel.length, self.kerf_thickness):
                self._place_panel(sheet, panel, index, rotated=False)
                return True

            if (panel.width != panel.length and
                    rect.fits(panel.length, panel.width, self.kerf_thickness)):
                self._place_panel(sheet, panel, index, rotated=True)
                return True

        return False

    def _place_panel(self, sheet: Sheet, panel: PanelInstance, rect_index: int, rotated: bool):
        rect = sheet.free_rectangles.pop(rect_index)

        placed = PlacedPanel(
            id=panel.id,
            x=rect.x,
            y=rect.y,
            width=panel.length if rotated else panel.width,
            length=panel.width if rotated else panel.length,
            rotated=rotated,
            label=panel.label,
            original_index=panel.original_index,
            original_width=panel.original_width,
            original_drop=panel.original_drop,
            order_item_id=panel.order_item_id,
        )
        sheet.add_panel(placed)

        if ENABLE_DETAILED_LOGGING:
            logger.debug(f"🔧 Sheet {sheet.id}: {panel.id} at ({format_mm(placed.x)}, {format_mm(placed.y)}) "
                         f"{format_dimensions(placed.width, placed.length)}{' rotated' if rotated else ''}")

        self._split_rectangle(sheet, rect, placed)

    def _split_rectangle(self, sheet: Sheet, rect: FreeRectangle, placed: PlacedPanel):
        """Guillotine split of the consumed rectangle around the kerf footprint"""
        footprint = placed.footprint(self.kerf_thickness)

        # Right remainder, full rectangle length
        if rect.width > footprint.width:
            sheet.free_rectangles.append(FreeRectangle(
                rect.x + footprint.width,
                rect.y,
                rect.width - footprint.width,
                rect.length
            ))

        # Top remainder, only as wide as the footprint
        if rect.length > footprint.length:
            sheet.free_rectangles.append(FreeRectangle(
                rect.x,
                rect.y + footprint.length,
                footprint.width,
                rect.length - footprint.length
            ))

        sheet.free_rectangles = self._prune_free_rectangles(sheet.free_rectangles)

    @staticmethod
    def _prune_free_rectangles(rectangles: List[FreeRectangle]) -> List[FreeRectangle]:
        """Drops every rectangle contained in another one of the list"""
        return [
            rect for i, rect in enumerate(rectangles)
            if not any(i != j and rect.is_inside(other) for j, other in enumerate(rectangles))
        ]

    def _calculate_statistics(self, sheets: List[Sheet], requests: List[PanelRequest],
                              unplaced: List[PanelInstance]) -> OptimizationStatistics:
        total_stock_area = len(sheets) * self.stock_width * self.stock_length
        total_used_area = sum(sheet.used_area for sheet in sheets)
        total_wasted_area = sum(sheet.wasted_area for sheet in sheets)
        total_cut_length = sum(panel.perimeter for sheet in sheets for panel in sheet.panels)

        if total_stock_area > 0:
            waste_percentage = round_half_up(total_wasted_area / total_stock_area * 100)
            efficiency = round_half_up(total_used_area / total_stock_area * 100)
        else:
            waste_percentage = efficiency = 0

        return OptimizationStatistics(
            used_stock_sheets=len(sheets),
            stock_dimensions=format_dimensions(self.stock_width, self.stock_length, "x"),
            total_used_area=round_half_up(total_used_area),
            total_wasted_area=round_half_up(total_wasted_area),
            waste_percentage=waste_percentage,
            efficiency=efficiency,
            total_cuts=sum(len(sheet.panels) for sheet in sheets),
            total_cut_length=round_half_up(total_cut_length),
            total_panels=sum(request.quantity for request in requests),
            wasted_panels=sum(1 for sheet in sheets if not sheet.panels),
            total_fabric_needed=format_mm(len(sheets) * self.stock_length),
            unplaced_panels=len(unplaced),
        )

    def _generate_cut_list(self, sheets: List[Sheet]) -> List[CutRecord]:
        """Numbers every placement across all sheets, in sheet order"""
        cuts = []
        for sheet in sheets:
            stock = format_dimensions(sheet.width, sheet.length)
            for panel in sheet.panels:
                cuts.append(CutRecord(
                    cut_number=len(cuts) + 1,
                    sheet_number=sheet.id,
                    panel=stock,
                    cut=f"{'y=' if panel.rotated else 'x='}{format_mm(panel.width)}",
                    result=format_dimensions(panel.width, panel.length),
                    x=panel.x,
                    y=panel.y,
                    width=panel.width,
                    length=panel.length,
                    rotated=panel.rotated,
                    label=panel.label,
                ))
        return cuts


def optimize(panels: Iterable[Union[PanelRequest, Dict[str, Any]]],
             config: Union[OptimizerConfig, Dict[str, Any], None] = None,
             **kwargs) -> OptimizationResult:
    """
    Entry point for the worksheet layer

    Args:
        panels: PanelRequest objects or dicts with width, length, quantity (or qty), label
        config: OptimizerConfig or dict; missing values come from the environment defaults
        **kwargs: Extra config values, override config

    Returns:
        OptimizationResult
    """
    # Both sides go through the model first, so snake_case and camelCase spellings merge
    overrides = OptimizerConfig.model_validate(kwargs).model_dump(exclude_unset=True)
    if not isinstance(config, OptimizerConfig):
        params = OptimizerConfig.model_validate(config or {}).model_dump(exclude_unset=True)
        params.update(overrides)
        config = OptimizerConfig.from_defaults(**params)
    elif overrides:
        config = config.model_copy(update=overrides)

    return CutlistOptimizer(config).optimize(panels)
