from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .config import DetectionParams, RenderOptions
from .detection import extract_table_regions, write_grid_overlay
from .document import render_document, render_page
from .exporters import tables_from_markup, tables_to_csv
from .grid_builder import build_grids
from .membership import TableLocator
from .ocr_utils import generate_hocr_from_image
from .parser import parse_hocr_pages
from .structures import RecognizedPage

log = logging.getLogger(__name__)


def _ensure_parent_dir(path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def detect_page_tables(
    image_path: Optional[str],
    params: Optional[DetectionParams] = None,
    *,
    debug: bool = False,
    debug_image_path: Optional[str] = None,
) -> TableLocator:
    """
    Detecta las tablas de una página y construye sus rejillas.
    Cualquier fallo de imagen produce un localizador vacío: todas las palabras
    irán al flujo de texto normal.
    """
    params = params or DetectionParams()
    if not image_path:
        log.warning("Página sin imagen asociada. Se omite la detección de tablas.")
        return TableLocator([], [], debug=debug)

    regions = extract_table_regions(image_path, params)
    regions, grids = build_grids(regions, tolerance=params.tolerance, method=params.grid_method)
    if debug and debug_image_path and grids:
        write_grid_overlay(image_path, grids, debug_image_path)
    return TableLocator(regions, grids, debug=debug)


def _page_images(pages: Sequence[RecognizedPage], image_path: str) -> List[Optional[str]]:
    """
    Imagen sobre la que detectar tablas en cada página del HOCR.
    Con una sola página se usa la imagen de entrada. Con varias, cada página
    necesita su propio archivo: Tesseract asigna a todas las páginas de un
    TIFF multipágina la misma ruta y cv2.imread sólo leería la primera.
    """
    if len(pages) == 1:
        return [image_path]
    paths = [page.image_path for page in pages]
    if all(paths) and len(set(paths)) == len(paths) and all(Path(p).exists() for p in paths):
        return list(paths)
    log.warning("Las %d páginas no tienen imágenes propias; se omite la detección de tablas.", len(pages))
    return [None] * len(pages)


def render_recognized_page(
    page: Optional[RecognizedPage],
    image_path: Optional[str] = None,
    *,
    params: Optional[DetectionParams] = None,
    options: Optional[RenderOptions] = None,
    debug_image_path: Optional[str] = None,
    detect_tables: bool = True,
) -> Optional[str]:
    if page is None:
        log.error("No hay resultados de reconocimiento para la página.")
        return None
    options = options or RenderOptions()
    image_path = image_path or page.image_path
    if detect_tables:
        locator = detect_page_tables(image_path, params, debug=options.debug,
                                     debug_image_path=debug_image_path)
    else:
        locator = TableLocator([], [], debug=options.debug)
    if image_path:
        page = dataclasses.replace(page, image_path=str(image_path))
    return render_page(page, locator=locator, options=options)


def image_to_abbyy(
    image_path: str,
    output_path: Optional[str] = None,
    *,
    hocr_path: Optional[str] = None,
    lang: str = "eng",
    params: Optional[DetectionParams] = None,
    options: Optional[RenderOptions] = None,
    csv_dir: Optional[str] = None,
) -> str:
    """
    Orquesta OCR (o un HOCR existente) + detección de tablas + serialización.
    Devuelve el documento completo y, si se indica, lo escribe en `output_path`.
    """
    options = options or RenderOptions()
    if not hocr_path:
        # sin HOCR la imagen es imprescindible; con HOCR su ausencia sólo anula la detección
        if not Path(image_path).exists():
            raise FileNotFoundError(image_path)
        target = str(Path(output_path).with_suffix(".hocr")) if output_path else None
        hocr_path = generate_hocr_from_image(image_path, target, lang=lang,
                                             font_info=options.font_info,
                                             char_boxes=options.char_boxes)

    log.info("Parseando HOCR desde: %s", hocr_path)
    pages = parse_hocr_pages(hocr_path)
    if not pages:
        log.warning("El HOCR no contiene páginas. Se generará un documento vacío.")

    rendered: List[Optional[str]] = []
    for page, page_image in zip(pages, _page_images(pages, image_path)):
        debug_image = None
        if options.debug:
            base = Path(output_path or image_path)
            debug_image = str(base.with_name(f"{base.stem}.grid_{page.page_number + 1}.png"))
        rendered.append(render_recognized_page(page, page_image, params=params, options=options,
                                               debug_image_path=debug_image,
                                               detect_tables=page_image is not None))

    document = render_document(rendered, title=Path(image_path).name, font_info=options.font_info)

    if output_path:
        _ensure_parent_dir(output_path)
        with open(output_path, "w", encoding="utf-8") as fh:
            fh.write(document)
        log.info("Documento escrito en: %s", output_path)

    if csv_dir:
        tables = tables_from_markup(document)
        if not tables:
            log.warning("No se detectaron tablas; no se exporta ningún CSV.")
        tables_to_csv(tables, csv_dir, stem=Path(image_path).stem)

    return document
