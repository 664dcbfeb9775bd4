from __future__ import annotations
import logging
from pathlib import Path
from typing import Tuple, Union

import cv2
import numpy as np

from .config import DEFAULT_BLOCK_SIZE, DEFAULT_OFFSET, DEFAULT_SCALE

log = logging.getLogger(__name__)


class ImageLoadError(RuntimeError):
    """Raised when a page image cannot be decoded."""


def load_page_image(image_path: Union[str, Path]) -> np.ndarray:
    img = cv2.imread(str(image_path))
    if img is None:
        raise ImageLoadError(f"No se pudo cargar la imagen: {image_path}")
    log.debug("Imagen cargada %s (%dx%d)", image_path, img.shape[1], img.shape[0])
    return img


def binarize(image: np.ndarray,
             block_size: int = DEFAULT_BLOCK_SIZE,
             offset: int = DEFAULT_OFFSET) -> np.ndarray:
    """Return an inverted binary mask (ink = 255) of a colour or grey page.

    Adaptive mean threshold over the inverted grey image, so dark strokes
    end up as foreground regardless of local background brightness.
    """
    if image.ndim == 3 and image.shape[2] == 3:
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    elif image.ndim == 3 and image.shape[2] == 4:
        gray = cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    else:
        gray = image
    return cv2.adaptiveThreshold(
        cv2.bitwise_not(gray),
        255,
        cv2.ADAPTIVE_THRESH_MEAN_C,
        cv2.THRESH_BINARY,
        block_size,
        offset,
    )


def extract_rule_lines(bw: np.ndarray, scale: int = DEFAULT_SCALE) -> Tuple[np.ndarray, np.ndarray]:
    """Keep only long horizontal / vertical strokes of a binary mask.

    Opening (erode then dilate) with a 1-px thick element of length
    width/scale (resp. height/scale): glyphs shorter than that vanish.
    """
    h, w = bw.shape[:2]
    horizontal_size = max(1, w // scale)
    vertical_size = max(1, h // scale)

    horizontal_structure = cv2.getStructuringElement(cv2.MORPH_RECT, (horizontal_size, 1))
    horizontal = cv2.erode(bw, horizontal_structure)
    horizontal = cv2.dilate(horizontal, horizontal_structure)

    vertical_structure = cv2.getStructuringElement(cv2.MORPH_RECT, (1, vertical_size))
    vertical = cv2.erode(bw, vertical_structure)
    vertical = cv2.dilate(vertical, vertical_structure)

    log.debug("Elementos estructurantes: horizontal=%d px, vertical=%d px", horizontal_size, vertical_size)
    return horizontal, vertical
