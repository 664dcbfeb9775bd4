from __future__ import annotations

from dataclasses import dataclass

DEFAULT_BLOCK_SIZE = 15
DEFAULT_OFFSET = -2
DEFAULT_SCALE = 30
DEFAULT_MIN_AREA = 50.0
DEFAULT_MIN_JOINTS = 5
DEFAULT_TOLERANCE = 3
GRID_METHODS = ("reverse_scan", "cluster")


@dataclass(frozen=True)
class DetectionParams:
    """Parámetros del detector de tablas con bordes completos."""
    block_size: int = DEFAULT_BLOCK_SIZE
    offset: int = DEFAULT_OFFSET
    scale: int = DEFAULT_SCALE
    min_area: float = DEFAULT_MIN_AREA
    min_joints: int = DEFAULT_MIN_JOINTS
    tolerance: int = DEFAULT_TOLERANCE
    grid_method: str = "reverse_scan"

    def __post_init__(self) -> None:
        if self.grid_method not in GRID_METHODS:
            raise ValueError(f"Método de rejilla desconocido: {self.grid_method!r}")
        if self.block_size < 3 or self.block_size % 2 == 0:
            raise ValueError("block_size debe ser impar y >= 3.")
        if self.scale <= 0:
            raise ValueError("scale debe ser positivo.")
        if self.tolerance <= 0:
            raise ValueError("tolerance debe ser positiva.")
        if self.min_joints < 1:
            raise ValueError("min_joints debe ser al menos 1.")


@dataclass(frozen=True)
class RenderOptions:
    """Opciones del serializador.

    font_info: añade `font_name` a cada palabra y las capacidades de fuente al <head>.
    char_boxes: emite una caja por carácter cuando el reconocedor las aporta.
    debug: traza las decisiones de fila/columna y guarda la rejilla dibujada.
    """
    font_info: bool = False
    char_boxes: bool = False
    debug: bool = False
