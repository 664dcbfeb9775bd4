# src/hocr_table_renderer/grid_builder.py
from __future__ import annotations
import logging
from typing import Iterable, List, Sequence, Tuple

from .config import DEFAULT_TOLERANCE
from .spatial import Grid, JointGroup, TableRegion

log = logging.getLogger(__name__)

X_AXIS = 0
Y_AXIS = 1


def _reverse_scan(joints: Sequence[JointGroup], axis: int, tolerance: int) -> List[int]:
    """Una coordenada representativa por línea de la rejilla.

    Recorre los grupos de joints del último al primero; dentro de un grupo
    deja de acumular en cuanto encuentra una coordenada ya vista (a menos
    de `tolerance` px).
    """
    coords: List[int] = []
    for group in reversed(joints):
        for point in group:
            value = point[axis]
            if any(abs(c - value) < tolerance for c in coords):
                break
            coords.append(value)
    coords.sort()
    return coords


def cluster_coordinates(values: Iterable[int], tolerance: int = DEFAULT_TOLERANCE) -> List[int]:
    """1D clustering: sort, split where consecutive values are >= tolerance apart,
    keep the rounded mean of each run."""
    ordered = sorted(int(v) for v in values)
    if not ordered:
        return []
    runs: List[List[int]] = [[ordered[0]]]
    for value in ordered[1:]:
        if value - runs[-1][-1] < tolerance:
            runs[-1].append(value)
        else:
            runs.append([value])
    return [int(round(sum(run) / len(run))) for run in runs]


def build_grid(region: TableRegion,
               tolerance: int = DEFAULT_TOLERANCE,
               method: str = "reverse_scan") -> Grid:
    if method == "reverse_scan":
        xs = _reverse_scan(region.joints, X_AXIS, tolerance)
        ys = _reverse_scan(region.joints, Y_AXIS, tolerance)
    elif method == "cluster":
        points = [p for group in region.joints for p in group]
        xs = cluster_coordinates((p[X_AXIS] for p in points), tolerance)
        ys = cluster_coordinates((p[Y_AXIS] for p in points), tolerance)
    else:
        raise ValueError(f"Método de rejilla desconocido: {method!r}")
    return Grid(xs=tuple(xs), ys=tuple(ys))


def build_grids(regions: Sequence[TableRegion],
                tolerance: int = DEFAULT_TOLERANCE,
                method: str = "reverse_scan") -> Tuple[List[TableRegion], List[Grid]]:
    """Construye la rejilla de cada región y descarta las que no forman una tabla.

    Devuelve listas paralelas (regiones, rejillas); el índice de tabla que usa
    el serializador es la posición en estas listas.
    """
    kept_regions: List[TableRegion] = []
    grids: List[Grid] = []
    for i, region in enumerate(regions):
        grid = build_grid(region, tolerance=tolerance, method=method)
        if not grid.is_valid:
            log.warning("Tabla %d descartada: rejilla degenerada xs=%s ys=%s", i, grid.xs, grid.ys)
            continue
        log.debug("Tabla %d: %d filas x %d columnas, xs=%s ys=%s",
                  len(grids), grid.n_rows, grid.n_cols, grid.xs, grid.ys)
        kept_regions.append(region)
        grids.append(grid)
    return kept_regions, grids
