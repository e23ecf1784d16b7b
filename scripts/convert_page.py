"""Render one PDF page to PNG and print the result payload as JSON.

Usage::

    python scripts/convert_page.py input.pdf --page 2 --scale 3 --output out/p2.png
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pdf2bitmap import BitmapService, RenderConfig


def main() -> int:
    parser = argparse.ArgumentParser(description="Rasterize a single PDF page to PNG")
    parser.add_argument("pdf", type=Path, help="Path to PDF")
    parser.add_argument("--page", type=int, default=0, help="Zero-based page index")
    parser.add_argument("--dpi", type=int, default=300, help="Recorded DPI (metadata only)")
    parser.add_argument(
        "--scale", type=float, default=2.0, help="Pixels per PDF point (default 2.0)"
    )
    parser.add_argument("--output", type=Path, default=None, help="Output PNG path")
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=None,
        help="Directory for synthesized output names when --output is omitted",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    arguments = {
        "filePath": str(args.pdf),
        "pageIndex": args.page,
        "dpi": args.dpi,
        "scaleFactor": args.scale,
    }
    if args.output is not None:
        arguments["outputPath"] = str(args.output)

    with BitmapService(RenderConfig(cache_dir=args.cache_dir)) as svc:
        res = svc.call("convertPage", arguments)

    if res.ok:
        print(json.dumps(res.value, indent=2))
        return 0
    print(json.dumps(res.to_dict(), indent=2), file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
