from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from ..common.datetime_utils import now_local
from ..core.constants import STORAGE_PREFIX, TABLE_KEYS
from ..core.exceptions import ImportFormatError, StorageError, StorageQuotaExceeded
from .codec import decode_table, encode_table
from .repository import KeyValueStore

logger = logging.getLogger(__name__)

QUOTA_WARNING = "Límite de memoria excedido: los cambios no se guardaron. Reduzca el tamaño de las imágenes."


@dataclass(frozen=True)
class ExportFile:
    filename: str
    document: dict

    @property
    def content(self) -> str:
        return json.dumps(self.document, ensure_ascii=False, indent=2)


@dataclass(frozen=True)
class ImportPayload:
    """Decoded import document: a table is either present (decoded rows) or absent (None)."""

    tables: Mapping[str, Optional[list]] = field(default_factory=dict)

    def present(self) -> dict[str, list]:
        return {k: v for k, v in self.tables.items() if v is not None}


class PersistenceGateway:
    """Mirror of the session tables in a durable key/value store.

    Reads never raise; writes that hit the store's quota are dropped with a
    warning so the in-memory state stays authoritative.
    """

    def __init__(self, store: KeyValueStore, *, prefix: str = STORAGE_PREFIX):
        self._store = store
        self._prefix = prefix
        self.warnings: list[str] = []

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def storage_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def save(self, key: str, value: Any) -> bool:
        if value is None:
            return False

        text = json.dumps(value, ensure_ascii=False)
        try:
            self._store.set(self.storage_key(key), text)
        except StorageQuotaExceeded as e:
            logger.warning("save of %s dropped: %s", key, e)
            self.warnings.append(QUOTA_WARNING)
            return False
        except StorageError as e:
            logger.warning("save of %s failed: %s", key, e)
            return False
        return True

    def load(self, key: str, default: Any = None) -> Any:
        try:
            text = self._store.get(self.storage_key(key))
        except StorageError as e:
            logger.warning("load of %s failed: %s", key, e)
            return default

        if text is None:
            return default
        try:
            return json.loads(text)
        except ValueError:
            logger.warning("stored value for %s is not valid JSON, using default", key)
            return default

    def remove(self, key: str) -> None:
        try:
            self._store.delete(self.storage_key(key))
        except StorageError as e:
            logger.warning("remove of %s failed: %s", key, e)

    def save_table(self, name: str, rows) -> bool:
        return self.save(name, encode_table(name, rows))

    def load_table(self, name: str, default: list) -> list:
        raw = self.load(name, None)
        if raw is None:
            return default
        try:
            return decode_table(name, raw)
        except ImportFormatError as e:
            logger.warning("stored table %s is malformed (%s), using default", name, e)
            return default

    def export_all(self, *, now: datetime | None = None) -> ExportFile:
        now = now or now_local()
        document = {name: self.load(name, []) for name in TABLE_KEYS}
        return ExportFile(filename=f"umbral_backup_{int(now.timestamp())}.json", document=document)

    def parse_import(self, document: Union[str, bytes, Mapping]) -> ImportPayload:
        """Validate an import document key by key before anything is replaced."""
        if isinstance(document, (str, bytes)):
            try:
                document = json.loads(document)
            except ValueError as e:
                raise ImportFormatError("El archivo no es un JSON válido") from e

        if not isinstance(document, Mapping):
            raise ImportFormatError("El archivo no contiene un objeto JSON")

        tables: dict[str, Optional[list]] = {}
        for name in TABLE_KEYS:
            tables[name] = decode_table(name, document[name]) if name in document else None
        return ImportPayload(tables=tables)
