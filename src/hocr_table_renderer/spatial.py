# src/hocr_table_renderer/spatial.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Tuple

from .structures import BBox

Point = Tuple[int, int]
JointGroup = Tuple[Point, ...]


@dataclass(frozen=True)
class TableRegion:
    """Una tabla detectada: grupos de puntos de intersección (joints) y su rectángulo."""
    joints: Tuple[JointGroup, ...]
    bbox: BBox

    @classmethod
    def from_joints(cls, joints: Iterable[Iterable[Point]]) -> "TableRegion":
        groups = tuple(tuple((int(x), int(y)) for x, y in group) for group in joints)
        points = [p for group in groups for p in group]
        if not points:
            raise ValueError("Una región de tabla necesita al menos un joint.")
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return cls(joints=groups, bbox=BBox(min(xs), min(ys), max(xs), max(ys)))

    @property
    def n_joints(self) -> int:
        return len(self.joints)


@dataclass(frozen=True)
class Grid:
    """Límites de columnas (xs) y filas (ys), ordenados de forma estrictamente creciente."""
    xs: Tuple[int, ...]
    ys: Tuple[int, ...]

    @property
    def n_rows(self) -> int:
        return max(0, len(self.ys) - 1)

    @property
    def n_cols(self) -> int:
        return max(0, len(self.xs) - 1)

    @property
    def is_valid(self) -> bool:
        return len(self.xs) >= 2 and len(self.ys) >= 2

    def row_bbox(self, row: int) -> BBox:
        """Band of row `row` (1-based) across the full table width."""
        return BBox(self.xs[0], self.ys[row - 1], self.xs[-1], self.ys[row])

    def cell_bbox(self, row: int, col: int) -> BBox:
        return BBox(self.xs[col - 1], self.ys[row - 1], self.xs[col], self.ys[row])


class CellAddress(NamedTuple):
    table: int
    row: int
    col: int
