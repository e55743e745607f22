"""
Batch cut-out — run the isolation pipeline over a folder of photos.

Each image is paired with an instance-id mask named <stem><mask-suffix>
(grayscale PNG, 0 = background). Without a mask, the image's own alpha
channel is taken as an already isolated cut-out.

Usage:
  python batch_cutout.py photos/ -o stickers/
  python batch_cutout.py photos/ -o stickers/ --workers 4 --size 1000 --fill 0.95
"""

from __future__ import annotations

import argparse
import logging
import sys
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

import numpy as np

from stickerlab.config import settings
from stickerlab.engine.config import IsolationConfig
from stickerlab.engine.context import IsolationContext
from stickerlab.engine.pipeline import IsolationPipeline
from stickerlab.models.instance_mask import InstanceMaskBuffer
from stickerlab.utils.imaging import load_image, load_mask, save_png

logger = logging.getLogger("batch_cutout")

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".tif", ".tiff"}


def find_images(folder: Path, mask_suffix: str) -> list[Path]:
    """Image files in folder, excluding the masks themselves."""
    return sorted(
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTENSIONS
        and not p.name.endswith(mask_suffix)
    )


def build_context(path: Path, mask_suffix: str) -> IsolationContext | None:
    image = load_image(path)
    mask_path = path.with_name(path.stem + mask_suffix)
    if mask_path.exists():
        mask = InstanceMaskBuffer.from_array(load_mask(mask_path))
        return IsolationContext.from_segmentation(image, mask)

    if np.all(image[:, :, 3] == 255):
        return None
    return IsolationContext.from_masked_image(image)


def write_outputs(ctx: IsolationContext, stem: str, out_dir: Path) -> list[str]:
    written: list[str] = []
    if ctx.canvas_image is not None:
        save_png(ctx.canvas_image, out_dir / f"{stem}.png")
        written.append(f"{stem}.png")
    if ctx.masked_image is not None:
        save_png(ctx.masked_image, out_dir / f"{stem}.cutout.png")
        written.append(f"{stem}.cutout.png")
    if ctx.outline_image is not None:
        save_png(ctx.outline_image, out_dir / f"{stem}.outline.png")
        written.append(f"{stem}.outline.png")
    if ctx.contour_path is not None:
        w, h = ctx.masked_size
        d = ctx.contour_path.scaled(w, h).svg_d(precision=2)
        svg = (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" '
            f'viewBox="0 0 {w} {h}">\n'
            f'  <path d="{d}" fill="none" stroke="#ffffff" stroke-width="2"/>\n'
            f"</svg>\n"
        )
        (out_dir / f"{stem}.svg").write_text(svg, encoding="utf-8")
        written.append(f"{stem}.svg")
    return written


def process_image(
    path: Path, out_dir: Path, mask_suffix: str, config: IsolationConfig
) -> dict:
    """Decode, isolate and write one image. Runs inside a worker process.

    Only a small summary travels back to the parent; pixel data stays here.
    """
    try:
        ctx = build_context(path, mask_suffix)
    except ValueError as e:
        return {"name": path.name, "status": "error", "error": str(e), "files": []}
    if ctx is None:
        return {"name": path.name, "status": "skipped", "files": []}

    ctx = IsolationPipeline(config=config).run(ctx)
    if ctx.status != "ok":
        return {"name": path.name, "status": ctx.status, "files": []}
    files = write_outputs(ctx, path.stem, out_dir)
    return {"name": path.name, "status": "ok", "files": files}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Batch cut-out — folder of photos to stickers")
    parser.add_argument("input", help="Folder of images (and optional instance masks)")
    parser.add_argument("-o", "--output", required=True, help="Output folder")
    parser.add_argument("--workers", type=int, default=settings.batch_workers or None,
                        help="Worker processes (default: one per CPU core)")
    parser.add_argument("--size", type=int, default=512, help="Thumbnail canvas side in px")
    parser.add_argument("--fill", type=float, default=0.8, help="Fraction of the canvas the subject fills")
    parser.add_argument("--mask-suffix", default=".mask.png", help="Instance mask file suffix")
    parser.add_argument("--no-outline", action="store_true", help="Skip the sticker outline")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.stickerlab_log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    in_dir = Path(args.input)
    out_dir = Path(args.output)
    if not in_dir.is_dir():
        print(f"Not a folder: {in_dir}", file=sys.stderr)
        return 1

    paths = find_images(in_dir, args.mask_suffix)
    if not paths:
        print("No images found in input folder", file=sys.stderr)
        return 1
    out_dir.mkdir(parents=True, exist_ok=True)

    config = IsolationConfig(
        canvas_size=(args.size, args.size),
        fill_fraction=args.fill,
        outline_enabled=not args.no_outline,
    )

    done = 0
    attempted = 0
    with ProcessPoolExecutor(max_workers=args.workers) as executor:
        # Workers receive paths, never decoded pixels
        futures = [
            executor.submit(process_image, path, out_dir, args.mask_suffix, config)
            for path in paths
        ]
        for future in as_completed(futures):
            result = future.result()
            if result["status"] == "skipped":
                logger.warning("%s: no mask and no transparency, skipping", result["name"])
                continue
            attempted += 1
            if result["status"] != "ok":
                logger.warning("%s: %s", result["name"], result.get("error", result["status"]))
                continue
            logger.info("%s: wrote %s", result["name"], ", ".join(result["files"]))
            done += 1

    print(f"Completed! Processed {done}/{attempted} images.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
