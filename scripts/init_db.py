from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.inout.inout.database.bootstrap import apply_schema, count_documents
from src.inout.inout.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = DBConfig.from_dict(dict(settings.DB_CONFIG))
    conn = DatabaseConnection(db_config)

    apply_schema(conn)
    counts = count_documents(conn)
    print(
        "OK: documents table ready -> "
        f"{db_config.user}@{db_config.host}:{db_config.port}/{db_config.database} "
        f"(documents={sum(counts.values())})"
    )


if __name__ == "__main__":
    main()
