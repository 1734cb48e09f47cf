from __future__ import annotations

from typing import Optional

from .store import Store


class Repository:
    """
    One named collection (a list of dict records keyed by "id").
    Every operation reads the whole list, works in memory and writes the
    whole list back; business code only sees list/get/upsert/delete.
    """

    def __init__(self, store: Store, key: str, id_field: str = "id"):
        self.store = store
        self.key = key
        self.id_field = id_field

    def list(self) -> list[dict]:
        return self.store.get(self.key, []) or []

    def get_by_id(self, record_id) -> Optional[dict]:
        if not record_id:
            return None
        for r in self.list():
            if str(r.get(self.id_field)) == str(record_id):
                return r
        return None

    def upsert(self, record: dict, prepend: bool = True) -> dict:
        """Replace the record with the same id, or add it (newest first by default)."""
        rid = str(record.get(self.id_field))
        records = self.list()
        for i, r in enumerate(records):
            if str(r.get(self.id_field)) == rid:
                records[i] = record
                break
        else:
            if prepend:
                records.insert(0, record)
            else:
                records.append(record)
        self.store.set(self.key, records)
        return record

    def delete(self, record_id) -> bool:
        records = self.list()
        kept = [r for r in records if str(r.get(self.id_field)) != str(record_id)]
        if len(kept) == len(records):
            return False
        self.store.set(self.key, kept)
        return True

    def replace_all(self, records: list[dict]) -> None:
        self.store.set(self.key, list(records))
