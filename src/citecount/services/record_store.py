"""
Record storage collaborators.

The batch processor only needs four operations from the host record store:
read a field, read creators, write the ``extra`` field, and commit. Two
implementations ship here: an in-memory store and a JSON file store used by
the command line.
"""

import json
from pathlib import Path
from typing import Protocol

from loguru import logger
from pydantic import ValidationError

from citecount.errors import RecordStoreError
from citecount.utilities.schemas import BibliographicRecord, Creator


class RecordStore(Protocol):
    """Interface the batch processor uses to read and update records."""

    def get_field(self, record: BibliographicRecord, name: str) -> str: ...

    def get_creators(self, record: BibliographicRecord) -> list[Creator]: ...

    def set_field(self, record: BibliographicRecord, name: str, value: str) -> None: ...

    def commit(self, record: BibliographicRecord) -> None: ...


class InMemoryRecordStore:
    """Record store that keeps records in a dict keyed by record key.

    Keys are unique: a duplicate key is rejected rather than letting one record
    overwrite another.
    """

    def __init__(self, records: list[BibliographicRecord] | None = None) -> None:
        self.records: dict[str, BibliographicRecord] = {}
        self.commits: list[str] = []
        for record in records or []:
            self._insert(record)

    def _insert(self, record: BibliographicRecord) -> None:
        if record.key in self.records:
            raise RecordStoreError(
                'DUPLICATE_KEY',
                f'Duplicate record key: {record.key}',
                context={'key': record.key},
            )
        self.records[record.key] = record

    def add(self, record: BibliographicRecord) -> None:
        """Store a new record and commit it.

        Raises:
            RecordStoreError: If a record with the same key already exists.
        """
        self._insert(record)
        self.commit(record)

    def get_field(self, record: BibliographicRecord, name: str) -> str:
        return record.get_field(name)

    def get_creators(self, record: BibliographicRecord) -> list[Creator]:
        return list(record.creators)

    def set_field(self, record: BibliographicRecord, name: str, value: str) -> None:
        if name not in BibliographicRecord.model_fields:
            raise RecordStoreError(
                'UNKNOWN_FIELD', f'Unknown record field: {name}', context={'field': name}
            )
        setattr(record, name, value)

    def commit(self, record: BibliographicRecord) -> None:
        stored = self.records.get(record.key)
        if stored is not None and stored is not record:
            raise RecordStoreError(
                'DUPLICATE_KEY',
                f'Another record is stored under key {record.key}',
                context={'key': record.key},
            )
        self.records[record.key] = record
        self.commits.append(record.key)


class JsonRecordStore(InMemoryRecordStore):
    """Record store persisted as a JSON array of records.

    ``commit`` rewrites the whole file so every successful record is on disk
    before the next one is processed.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> list[BibliographicRecord]:
        if not self.path.exists():
            raise RecordStoreError(
                'RECORDS_NOT_FOUND',
                f'Record file not found: {self.path}',
                context={'path': str(self.path)},
            )
        try:
            raw = json.loads(self.path.read_text(encoding='utf-8'))
            records = [BibliographicRecord.model_validate(item) for item in raw]
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            raise RecordStoreError(
                'RECORDS_INVALID',
                f'Could not read records from {self.path}: {e}',
                context={'path': str(self.path)},
            ) from e
        logger.debug(f'Loaded {len(records)} records from {self.path}')
        return records

    def commit(self, record: BibliographicRecord) -> None:
        super().commit(record)
        payload = [item.model_dump(mode='json') for item in self.records.values()]
        tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
        tmp_path.write_text(json.dumps(payload, indent=2) + '\n', encoding='utf-8')
        tmp_path.replace(self.path)
