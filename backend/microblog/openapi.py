"""
Microblog Backend: Static API Description Export
===================================================

What:  Writes the generated OpenAPI document to a file.
Why:   The API description can be produced as a build artifact and checked
       in or published without starting the server.
How:   Builds the app with create_app() (no database connection is opened)
       and serializes app.openapi().

Usage:
    python -m microblog.openapi               # writes ./openapi.json
    python -m microblog.openapi docs/api.json
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from microblog.main import create_app

logger = logging.getLogger(__name__)


def export_openapi(path: Path) -> Path:
    """Serializes the OpenAPI document to `path` and returns the path."""
    schema = create_app().openapi()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(schema, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    logger.info("Wrote API description to %s", path)
    return path


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Export the Microblog OpenAPI document.")
    parser.add_argument("path", nargs="?", default="openapi.json", help="output file")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    export_openapi(Path(args.path))


if __name__ == "__main__":
    main()
