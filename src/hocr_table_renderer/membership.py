from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from .spatial import CellAddress, Grid, TableRegion
from .structures import Word

log = logging.getLogger(__name__)


def find_table(x: int, y: int, regions: Sequence[TableRegion]) -> Optional[int]:
    """Index of the first region whose rectangle contains (x, y), edges included."""
    for idx, region in enumerate(regions):
        if region.bbox.contains(x, y):
            return idx
    return None


def _locate(value: int, bounds: Sequence[int]) -> int:
    for i in range(1, len(bounds)):
        if value < bounds[i]:
            return i
    # on or past the closing rule: stays in the last row/column
    return len(bounds) - 1


def locate_row(y: int, grid: Grid) -> int:
    """1-based row: smallest i >= 1 with y < ys[i]."""
    return _locate(y, grid.ys)


def locate_column(x: int, grid: Grid) -> int:
    return _locate(x, grid.xs)


class TableLocator:
    """Asigna a cada palabra su (tabla, fila, columna) según su punto central."""

    def __init__(self, regions: Sequence[TableRegion], grids: Sequence[Grid], debug: bool = False):
        if len(regions) != len(grids):
            raise ValueError("regions y grids deben tener la misma longitud.")
        self.regions: List[TableRegion] = list(regions)
        self.grids: List[Grid] = list(grids)
        self.debug = debug

    def __len__(self) -> int:
        return len(self.regions)

    def locate(self, word: Word) -> Optional[CellAddress]:
        x, y = word.center
        table = find_table(x, y, self.regions)
        if table is None:
            return None
        grid = self.grids[table]
        row = locate_row(y, grid)
        col = locate_column(x, grid)
        if self.debug:
            log.debug("tabla=%d | texto=%r | x=%d y=%d | ys=%s xs=%s -> fila=%d col=%d",
                      table, word.text, x, y, grid.ys, grid.xs, row, col)
        return CellAddress(table, row, col)
