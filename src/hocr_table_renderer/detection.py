# src/hocr_table_renderer/detection.py
"""
Detección de tablas con bordes completos (tipo "lattice").

No detecta tablas sin líneas de división ("stream"), ni tablas rotadas.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

import cv2
import numpy as np

from .config import DetectionParams
from .lines import ImageLoadError, binarize, extract_rule_lines, load_page_image
from .spatial import Grid, TableRegion

log = logging.getLogger(__name__)


def detect_table_regions(horizontal: np.ndarray,
                         vertical: np.ndarray,
                         min_area: float = 50.0,
                         min_joints: int = 5) -> List[TableRegion]:
    """Find ruled tables in the line masks.

    Every external contour of `horizontal | vertical` is a table candidate.
    Candidates with a small area, or with fewer than `min_joints`
    line crossings inside their bounding rectangle, are discarded.
    Regions come out in contour discovery order, not reading order.
    """
    mask = cv2.bitwise_or(horizontal, vertical)
    joints = cv2.bitwise_and(horizontal, vertical)

    contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

    regions: List[TableRegion] = []
    for i, contour in enumerate(contours):
        area = cv2.contourArea(contour)
        if area < min_area:
            continue

        poly = cv2.approxPolyDP(contour, 3, True)
        x, y, w, h = cv2.boundingRect(poly)

        roi = np.ascontiguousarray(joints[y:y + h, x:x + w])
        joint_contours, _ = cv2.findContours(roi, cv2.RETR_CCOMP, cv2.CHAIN_APPROX_SIMPLE)
        if len(joint_contours) < min_joints:
            log.debug("Contorno %d descartado: %d joints (mínimo %d)", i, len(joint_contours), min_joints)
            continue

        groups = [
            [(int(px) + x, int(py) + y) for px, py in jc.reshape(-1, 2)]
            for jc in joint_contours
        ]
        region = TableRegion.from_joints(groups)
        log.debug("Tabla candidata %d: bbox=%s, %d joints", len(regions), region.bbox, region.n_joints)
        regions.append(region)

    return regions


def extract_table_regions(image_path: Union[str, Path],
                          params: Optional[DetectionParams] = None) -> List[TableRegion]:
    """Load → binarize → rule lines → regions. An unreadable image yields no tables."""
    params = params or DetectionParams()
    try:
        image = load_page_image(image_path)
    except ImageLoadError as exc:
        log.warning("%s. Se omite la detección de tablas para esta página.", exc)
        return []

    bw = binarize(image, block_size=params.block_size, offset=params.offset)
    horizontal, vertical = extract_rule_lines(bw, scale=params.scale)
    regions = detect_table_regions(horizontal, vertical,
                                   min_area=params.min_area,
                                   min_joints=params.min_joints)
    log.info("Se detectaron %d tablas en %s", len(regions), image_path)
    return regions


def draw_grid_overlay(image: np.ndarray, grids: Sequence[Grid]) -> np.ndarray:
    """Dibuja en rojo las líneas de cada rejilla sobre una copia de la imagen."""
    canvas = image.copy()
    if canvas.ndim == 2:
        canvas = cv2.cvtColor(canvas, cv2.COLOR_GRAY2BGR)
    h, w = canvas.shape[:2]
    for grid in grids:
        for x in grid.xs:
            cv2.line(canvas, (x, 0), (x, h - 1), (0, 0, 255), 3)
        for y in grid.ys:
            cv2.line(canvas, (0, y), (w - 1, y), (0, 0, 255), 3)
    return canvas


def write_grid_overlay(image_path: Union[str, Path],
                       grids: Sequence[Grid],
                       output_path: Union[str, Path]) -> Optional[str]:
    try:
        image = load_page_image(image_path)
    except ImageLoadError as exc:
        log.warning("%s. No se genera la imagen de depuración.", exc)
        return None
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(output_path), draw_grid_overlay(image, grids))
    log.info("Rejilla de depuración guardada en: %s", output_path)
    return str(output_path)
