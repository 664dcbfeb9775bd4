from __future__ import annotations

import argparse
import logging
import sys

from .config import DEFAULT_MIN_AREA, DEFAULT_MIN_JOINTS, DEFAULT_SCALE, DEFAULT_TOLERANCE, DetectionParams, RenderOptions
from .main import image_to_abbyy

log = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconoce una página escaneada y genera marcado con las tablas con bordes reconstruidas."
    )
    parser.add_argument("image", type=str, help="Ruta a la imagen de la página")
    parser.add_argument("output", type=str, help="Ruta al archivo de salida (.html)")
    parser.add_argument("--hocr_path", type=str, help="HOCR ya generado por Tesseract (omite el OCR)")
    parser.add_argument("--lang", type=str, default="eng", help="Idioma OCR para Tesseract (default: eng)")
    parser.add_argument("--csv-dir", type=str, help="Directorio donde exportar cada tabla a CSV")
    parser.add_argument("--scale", type=int, default=DEFAULT_SCALE,
                        help="Divisor del tamaño de la imagen para la longitud mínima de línea (default: 30)")
    parser.add_argument("--min-area", type=float, default=DEFAULT_MIN_AREA, help="Área mínima de una tabla en px²")
    parser.add_argument("--min-joints", type=int, default=DEFAULT_MIN_JOINTS, help="Intersecciones mínimas por tabla")
    parser.add_argument("--tolerance", type=int, default=DEFAULT_TOLERANCE,
                        help="Distancia en px bajo la cual dos líneas de la rejilla se fusionan")
    parser.add_argument("--grid-method", default="reverse_scan", choices=["reverse_scan", "cluster"])
    parser.add_argument("--font-info", action="store_true", help="Incluye el nombre de fuente de cada palabra")
    parser.add_argument("--char-boxes", action="store_true", help="Incluye cajas por carácter")
    parser.add_argument("--debug", action="store_true",
                        help="Traza la asignación fila/columna y guarda la rejilla dibujada")
    parser.add_argument("--loglevel", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Nivel de verbosidad del log (default: INFO)")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    loglevel = "DEBUG" if args.debug else args.loglevel
    logging.basicConfig(level=loglevel, format='%(asctime)s - %(levelname)s - %(message)s')
    log.info("IMAGEN: %s", args.image)
    log.info("SALIDA: %s", args.output)

    try:
        params = DetectionParams(
            scale=args.scale,
            min_area=args.min_area,
            min_joints=args.min_joints,
            tolerance=args.tolerance,
            grid_method=args.grid_method,
        )
        options = RenderOptions(font_info=args.font_info, char_boxes=args.char_boxes, debug=args.debug)
        image_to_abbyy(
            args.image,
            args.output,
            hocr_path=args.hocr_path,
            lang=args.lang,
            params=params,
            options=options,
            csv_dir=args.csv_dir,
        )
        log.info("✔ Proceso completado.")
    except FileNotFoundError as e:
        log.error("Error: No se encontró el archivo de entrada: %s", e)
        sys.exit(2)
    except Exception as e:
        log.error("Ocurrió un error inesperado: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
