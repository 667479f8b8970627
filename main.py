"""High-level API + CLI for the screen-capture feature extractor."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from screen_forensics import AnalysisConfig, analyze, extract_metadata, load_config
from screen_forensics.errors import ScreenForensicsError
from screen_forensics.utils import save_json

CONFIG_ANALYSIS = Path("configs/analysis.yaml")
DEFAULT_SAVE_DIR = Path("outputs/results")
IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".bmp", ".gif", ".tif", ".tiff", ".webp"}

logger = logging.getLogger("screen_forensics.cli")


class ScreenDetectorAPI:
    """High-level orchestration API usable from CLI or notebooks."""

    def __init__(self, config_path: Path | None = CONFIG_ANALYSIS):
        # Only the implicit default may be absent; an explicit path must exist.
        if config_path is None or (Path(config_path) == CONFIG_ANALYSIS and not CONFIG_ANALYSIS.is_file()):
            self.config = AnalysisConfig()
        else:
            self.config = load_config(config_path)
        self.config_path = config_path

    def analyze_image(self, image_path: str | Path) -> dict[str, Any]:
        """Features plus source metadata for one image; raises on failure."""
        image_path = Path(image_path)
        result = analyze(image_path, self.config)
        meta = extract_metadata(image_path)
        return {
            "image_id": image_path.name,
            "input_path": str(image_path),
            "features": result.to_dict(),
            "source": {
                "format": meta.get("format"),
                "width": meta.get("width"),
                "height": meta.get("height"),
                "upright_width": meta.get("upright_width"),
                "upright_height": meta.get("upright_height"),
                "rotation_deg": meta.get("rotation_deg"),
            },
        }

    def run_images(
        self,
        image_paths: list[str | Path],
        save_dir: str | Path = DEFAULT_SAVE_DIR,
    ) -> dict[str, Any]:
        """Analyse every image, one JSON per image plus ``summary.json``.

        A failing image is recorded in the summary and does not stop the run.
        """
        out_dir = Path(save_dir)
        out_dir.mkdir(parents=True, exist_ok=True)

        results = []
        failures = []
        for image_path in image_paths:
            image_path = Path(image_path)
            try:
                record = self.analyze_image(image_path)
            except ScreenForensicsError as exc:
                logger.warning("Skipping %s: %s", image_path, exc)
                failures.append({
                    "image_id": image_path.name,
                    "input_path": str(image_path),
                    "error": {"code": exc.code, "message": str(exc)},
                })
                continue

            save_json(record, out_dir / f"{image_path.stem}.json")
            results.append(record)

        summary = {
            "config": self.config.to_dict(),
            "processed": len(results),
            "failed": len(failures),
            "results": results,
            "failures": failures,
        }
        save_json(summary, out_dir / "summary.json")
        return summary


def collect_images(directory: str | Path, pattern: str = "*") -> list[Path]:
    """Image files in *directory* matching *pattern*, sorted by name."""
    root = Path(directory)
    if not root.is_dir():
        raise FileNotFoundError(f"Not a directory: {root}")
    return sorted(
        p for p in root.glob(pattern)
        if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES
    )


# -------------------- CLI commands --------------------

def cmd_analyze(args: argparse.Namespace) -> None:
    api = ScreenDetectorAPI(args.config)
    if len(args.images) == 1 and args.save_dir is None:
        print(json.dumps(api.analyze_image(args.images[0]), indent=2, ensure_ascii=False))
        return
    summary = api.run_images(args.images, save_dir=args.save_dir or DEFAULT_SAVE_DIR)
    print(f"[analyze] Processed {summary['processed']} images, {summary['failed']} failed.")


def cmd_batch(args: argparse.Namespace) -> None:
    api = ScreenDetectorAPI(args.config)
    try:
        images = collect_images(args.directory, args.pattern)
    except FileNotFoundError as exc:
        print(f"[batch] {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    summary = api.run_images(images, save_dir=args.save_dir or DEFAULT_SAVE_DIR)
    print(
        f"[batch] Processed {summary['processed']} images, {summary['failed']} failed. "
        f"Results in {args.save_dir or DEFAULT_SAVE_DIR}/"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Re-photographed screen feature extractor")
    parser.add_argument("--config", type=Path, default=CONFIG_ANALYSIS, help="Analysis YAML config")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze_p = sub.add_parser("analyze", help="Analyse one or more images")
    analyze_p.add_argument("images", nargs="+", help="Image paths")
    analyze_p.add_argument("--save-dir", default=None, help="Write per-image JSON here")

    batch_p = sub.add_parser("batch", help="Analyse every image in a directory")
    batch_p.add_argument("directory", help="Directory of images")
    batch_p.add_argument("--pattern", default="*", help="Glob pattern inside the directory")
    batch_p.add_argument("--save-dir", default=None, help=f"Output directory (default {DEFAULT_SAVE_DIR})")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "analyze": cmd_analyze,
        "batch": cmd_batch,
    }
    try:
        commands[args.command](args)
    except ScreenForensicsError as exc:
        print(f"{exc.code}: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
