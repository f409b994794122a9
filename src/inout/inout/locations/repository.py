from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.constants import LOCATIONS
from ..store.document_store import DocumentStore, SnapshotCallback, Subscription
from .model import Location, location_from_document, location_to_document


class LocationRepository(Protocol):
    def get_by_id(self, location_id: str) -> Optional[Location]:
        raise NotImplementedError

    def create(self, *, name: str, latitude: float, longitude: float, radius_meters: float) -> Location:
        raise NotImplementedError

    def delete(self, location_id: str) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Location]:
        raise NotImplementedError

    def listen(self, location_id: str, callback: SnapshotCallback) -> Subscription:
        raise NotImplementedError


class DocumentLocationRepository(LocationRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_id(self, location_id: str) -> Optional[Location]:
        doc = self._store.get(LOCATIONS, location_id)
        return location_from_document(location_id, doc) if doc is not None else None

    def create(self, *, name: str, latitude: float, longitude: float, radius_meters: float) -> Location:
        # Validate before writing; the id is only known after add().
        draft = Location(location_id="", name=name, latitude=latitude, longitude=longitude, radius_meters=radius_meters)
        location_id = self._store.add(LOCATIONS, location_to_document(draft))
        self._store.update(LOCATIONS, location_id, {"id": location_id})
        return Location(
            location_id=location_id,
            name=draft.name,
            latitude=draft.latitude,
            longitude=draft.longitude,
            radius_meters=draft.radius_meters,
        )

    def delete(self, location_id: str) -> bool:
        return self._store.delete(LOCATIONS, location_id)

    def list_all(self) -> Sequence[Location]:
        items = [location_from_document(doc_id, doc) for doc_id, doc in self._store.query(LOCATIONS)]
        items.sort(key=lambda loc: loc.name.lower())
        return items

    def listen(self, location_id: str, callback: SnapshotCallback) -> Subscription:
        return self._store.listen(LOCATIONS, location_id, callback)
