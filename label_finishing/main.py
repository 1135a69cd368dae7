import argparse
from pathlib import Path
from typing import Iterable

from label_finishing.catalog.dimensions import LabelCatalog
from label_finishing.catalog.exceptions import UnknownLabelError
from label_finishing.config.settings import Settings
from label_finishing.imaging.models import ImageBuffer
from label_finishing.logging.logger import Log
from label_finishing.pdf.exporter import create_pdf_from_image
from label_finishing.processor.exceptions import ProcessorError
from label_finishing.processor.models import SideRequest
from label_finishing.processor.processor import build_processor

_EXTENSION_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
}


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="label_finishing",
        description="Trim candidate label artwork and compose it onto a print-size canvas.",
    )
    parser.add_argument("bottle", help="Bottle style, e.g. 'Polo'.")
    parser.add_argument("side", help="Label side: front or back.")
    parser.add_argument("files", nargs="+", type=Path, help="Candidate image files.")
    parser.add_argument(
        "--palette",
        default="",
        help="Fill colour as #RRGGBB; sampled from the artwork when omitted.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Also write every intermediate image next to the inputs.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def _load(path: Path) -> ImageBuffer:
    mime_type = _EXTENSION_MIME_TYPES.get(path.suffix.lower(), "application/octet-stream")
    return ImageBuffer(data=path.read_bytes(), mime_type=mime_type)


def main(argv: Iterable[str] | None = None) -> int:
    """Entry point: look up the label -> finish candidates -> write PNG and PDF outputs."""
    try:
        args = parse_args(argv)
    except SystemExit as exc:
        return 0 if exc.code == 0 else 2

    settings = Settings()
    Log.configure(settings.log_level)

    try:
        target = LabelCatalog().lookup(
            args.bottle,
            args.side,
            bleed_per_side_mm=settings.bleed_per_side_mm,
        )
    except UnknownLabelError as exc:
        Log.error(str(exc))
        return 2

    missing = [str(path) for path in args.files if not path.is_file()]
    if missing:
        Log.error(f"Input files not found: {missing}")
        return 2

    request = SideRequest(
        side=args.side.strip().lower(),
        candidates=[_load(path) for path in args.files],
        target=target,
        palette_hex=args.palette,
    )
    processor = build_processor(settings)
    try:
        result = processor.process([request], debug=args.debug)[request.side]
    except ProcessorError as exc:
        Log.error(f"Finishing failed: {exc}")
        return 1

    for path, outcome in zip(args.files, result.candidates):
        if args.debug:
            for capture in outcome.captures:
                capture_path = path.with_name(f"{path.stem}_{capture.label}.png")
                capture_path.write_bytes(capture.buffer.data)
        output = outcome.output
        if output is None:
            Log.warning(f"No output for {path.name}: {outcome.error_message}")
            continue
        png_path = path.with_name(f"{path.stem}_composed.png")
        png_path.write_bytes(output.data)
        pdf_path = path.with_name(f"{path.stem}_composed.pdf")
        pdf_path.write_bytes(create_pdf_from_image(output, target.width_mm, target.height_mm))
        Log.info(f"Wrote {png_path.name} and {pdf_path.name}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
