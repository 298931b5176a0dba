"""Authoritative table of policy versions.

All writes go through one commit path:

    with store.mutation() as tx:       # takes the store lock
        current = tx.get(version_id)   # read
        ...validate...
        tx.put(updated)                # stage
    # on clean exit: apply → rebuild projections → publish

If the block raises, nothing staged is applied, so a failed operation never
leaves a partial mutation behind. Readers only ever see fully rebuilt
snapshots; `all()` and `grouped_by_document()` return the same tuple object
until the next commit, so consumers can skip work on identity equality.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from ..domain.policies.models import DocumentGroup, PolicyVersion
from ..domain.policies.status import PolicyVersionStatus
from ..errors import NotFoundError
from ..events.bus import ChangeBus
from .projections import build_groups, normalize_attachments, sort_versions

logger = logging.getLogger(__name__)


class StoreMutation:
    """Staged writes of one commit. Obtained from VersionStore.mutation()."""

    def __init__(self, store: "VersionStore") -> None:
        self._store = store
        self._puts: Dict[str, PolicyVersion] = {}
        self._removed: Set[str] = set()

    def find(self, version_id: str) -> Optional[PolicyVersion]:
        """Read a version, seeing writes staged earlier in this mutation"""
        if version_id in self._puts:
            return self._puts[version_id]
        if version_id in self._removed:
            return None
        return self._store.find(version_id)

    def get(self, version_id: str) -> PolicyVersion:
        version = self.find(version_id)
        if version is None:
            raise NotFoundError(f"Policy version {version_id} not found")
        return version

    def put(self, version: PolicyVersion, replaces: Optional[str] = None) -> PolicyVersion:
        """Stage a write.

        Args:
            version: New state of the version
            replaces: Previous id when the version's id changed (draft
                version edits); the old key is removed in the same commit
        """
        if replaces and replaces != version.id:
            self._puts.pop(replaces, None)
            self._removed.add(replaces)
        self._removed.discard(version.id)
        self._puts[version.id] = version
        return version

    @property
    def has_changes(self) -> bool:
        return bool(self._puts or self._removed)

    @property
    def staged(self) -> Tuple[PolicyVersion, ...]:
        return tuple(self._puts.values())

    @property
    def removed_ids(self) -> Tuple[str, ...]:
        return tuple(self._removed)


class VersionStore:
    """In-process version table keyed by version id, with cached projections.

    Args:
        bus: Change bus notified after every commit
    """

    def __init__(self, bus: Optional[ChangeBus] = None) -> None:
        self._bus = bus
        self._lock = threading.RLock()
        self._by_id: Dict[str, PolicyVersion] = {}
        self._versions: Tuple[PolicyVersion, ...] = ()
        self._groups: Tuple[DocumentGroup, ...] = ()
        self._by_document: Dict[str, Tuple[PolicyVersion, ...]] = {}
        self._by_review_item: Dict[str, str] = {}
        self._revision = 0

    # ------------------------------------------------------------------ reads

    def find(self, version_id: str) -> Optional[PolicyVersion]:
        with self._lock:
            return self._by_id.get(version_id)

    def get(self, version_id: str) -> PolicyVersion:
        """Get a version by id.

        Raises:
            NotFoundError: If no version has this id
        """
        version = self.find(version_id)
        if version is None:
            raise NotFoundError(f"Policy version {version_id} not found")
        return version

    def all(self) -> Tuple[PolicyVersion, ...]:
        """All versions sorted by document_id ASC, version DESC, updated_at DESC"""
        with self._lock:
            return self._versions

    def grouped_by_document(self) -> Tuple[DocumentGroup, ...]:
        with self._lock:
            return self._groups

    def versions_of(self, document_id: str) -> Tuple[PolicyVersion, ...]:
        with self._lock:
            return self._by_document.get(document_id, ())

    def document_ids(self) -> List[str]:
        with self._lock:
            return list(self._by_document)

    def find_in_status(
        self, document_id: str, status: PolicyVersionStatus
    ) -> Optional[PolicyVersion]:
        """First (highest) version of a document currently in `status`"""
        for version in self.versions_of(document_id):
            if version.status == status:
                return version
        return None

    def active_for(self, document_id: str) -> Optional[PolicyVersion]:
        return self.find_in_status(document_id, PolicyVersionStatus.ACTIVE)

    def draft_for(self, document_id: str) -> Optional[PolicyVersion]:
        return self.find_in_status(document_id, PolicyVersionStatus.DRAFT)

    def find_by_review_item_id(self, review_item_id: str) -> Optional[PolicyVersion]:
        with self._lock:
            version_id = self._by_review_item.get(review_item_id)
            return self._by_id.get(version_id) if version_id else None

    @property
    def revision(self) -> int:
        """Number of commits applied so far"""
        with self._lock:
            return self._revision

    # ----------------------------------------------------------------- writes

    @contextmanager
    def mutation(self) -> Iterator[StoreMutation]:
        """Open an atomic read-modify-write block (see module docstring)"""
        with self._lock:
            batch = StoreMutation(self)
            yield batch
            changed = batch.has_changes
            if changed:
                self._apply(batch.staged, batch.removed_ids)
        if changed and self._bus is not None:
            self._bus.publish()

    def put(self, version: PolicyVersion) -> PolicyVersion:
        """Commit a single version"""
        with self.mutation() as tx:
            tx.put(version)
        return self.get(version.id)

    def load(self, versions: Iterable[PolicyVersion]) -> None:
        """Commit a batch of versions in one commit (hydration)"""
        with self.mutation() as tx:
            for version in versions:
                tx.put(version)

    def _apply(self, puts: Iterable[PolicyVersion], removed_ids: Iterable[str]) -> None:
        for version_id in removed_ids:
            self._by_id.pop(version_id, None)
        for version in puts:
            self._by_id[version.id] = normalize_attachments(version)
        self._rebuild()
        self._revision += 1

    def _rebuild(self) -> None:
        self._versions = sort_versions(self._by_id.values())
        self._groups = build_groups(self._versions)

        by_document: Dict[str, List[PolicyVersion]] = {}
        by_review_item: Dict[str, str] = {}
        for version in self._versions:
            by_document.setdefault(version.document_id, []).append(version)
            if version.review_item_id:
                by_review_item[version.review_item_id] = version.id
        self._by_document = {doc_id: tuple(vs) for doc_id, vs in by_document.items()}
        self._by_review_item = by_review_item

        logger.debug(f"Rebuilt projections: {len(self._versions)} versions, {len(self._groups)} documents")
