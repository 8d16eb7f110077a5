from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.choir_console.choir_console.database.bootstrap import apply_schema
from src.choir_console.choir_console.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_dict(dict(settings.DB_CONFIG))

    apply_schema(DatabaseConnection.get_instance(config))
    print(f"OK: schema ready -> {config.user}@{config.host}:{config.port}/{config.database}")


if __name__ == "__main__":
    main()
