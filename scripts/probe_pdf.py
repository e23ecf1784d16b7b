"""Print the access diagnostics and page count of a PDF as JSON."""

import argparse
import json
import logging
import sys
from pathlib import Path

from pdf2bitmap import BitmapService


def main() -> int:
    parser = argparse.ArgumentParser(description="Diagnose whether a PDF can be rendered")
    parser.add_argument("pdf", type=Path, help="Path to PDF")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    with BitmapService() as svc:
        access = svc.call("testAccess", {"filePath": str(args.pdf)})
        count = svc.call("getPageCount", {"filePath": str(args.pdf)})

    out = {
        "access": access.value if access.ok else access.to_dict(),
        "pageCount": count.value if count.ok else count.to_dict(),
    }
    print(json.dumps(out, indent=2))
    return 0 if count.ok else 1


if __name__ == "__main__":
    sys.exit(main())
