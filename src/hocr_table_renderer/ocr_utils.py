from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

log = logging.getLogger(__name__)


def tesseract_config(psm: int = 3, oem: int = 3, *, font_info: bool = False, char_boxes: bool = False) -> str:
    """Flags de Tesseract para el HOCR que consume el serializador."""
    flags: List[str] = [f"--oem {oem}", f"--psm {psm}", "-c tessedit_create_hocr=1"]
    if font_info:
        flags.append("-c hocr_font_info=1")
    if char_boxes:
        flags.append("-c hocr_char_boxes=1")
    return " ".join(flags)


def generate_hocr_from_image(
    image_path: str,
    output_path: Optional[str] = None,
    *,
    lang: str = "eng",
    psm: int = 3,
    oem: int = 3,
    font_info: bool = False,
    char_boxes: bool = False,
) -> str:
    """
    Ejecuta Tesseract sobre la página y guarda el HOCR resultante.

    Sin `output_path` el archivo queda junto a la imagen (`<imagen>.hocr`).
    `psm=3` mantiene la segmentación automática en bloques y párrafos, de la
    que dependen los elementos block/paragraph del marcado.
    """
    source = Path(image_path)
    if not source.exists():
        raise FileNotFoundError(str(source))
    target = Path(output_path) if output_path else source.with_suffix(".hocr")

    try:
        from PIL import Image
        import pytesseract
    except ImportError as exc:
        raise RuntimeError("Pillow y pytesseract son necesarios para reconocer la imagen.") from exc

    config = tesseract_config(psm, oem, font_info=font_info, char_boxes=char_boxes)
    log.debug("Tesseract (%s, lang=%s): %s → %s", config, lang, source, target)
    with Image.open(source) as page:
        hocr = pytesseract.image_to_pdf_or_hocr(page.convert("RGB"), extension="hocr", lang=lang, config=config)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(hocr)
    log.info("HOCR de %s guardado en %s", source.name, target)
    return str(target)
