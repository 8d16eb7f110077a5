"""Backup the console tables.

Note: writes the same JSON document as the export button, so the file can
be loaded back through the import endpoint.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.choir_console.choir_console.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    export = container.gateway.export_all()
    out_file = out_dir / export.filename
    out_file.write_text(export.content, encoding="utf-8")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
