"""Policy version lifecycle service.

Public in-process API of the policy store. Every operation:
1. Opens a correlation scope and makes sure the store is hydrated
2. Checks the actor's permission (when an authorizer is configured)
3. Validates guards and stages the new state inside one store mutation
4. Commits (projections rebuilt, subscribers notified)
5. Schedules background jobs for the committed generation, if any

A raised PolicyStoreError always means nothing was committed.

Transitions:
    create_draft            (none)         → DRAFT
    update_draft            DRAFT          → DRAFT
    attach_files/remove_file DRAFT         → DRAFT (preprocessing reset)
    run_preprocess          DRAFT          → DRAFT (preprocessing PROCESSING)
    submit_review_request   DRAFT          → PENDING_REVIEW
    reviewer_approve        PENDING_REVIEW → ACTIVE (prior ACTIVE → ARCHIVED)
    reviewer_reject         PENDING_REVIEW → REJECTED
    retry_indexing          ACTIVE         → ACTIVE (indexing FAILED → INDEXING)
    rollback                ARCHIVED       → ACTIVE (prior ACTIVE → ARCHIVED)
    soft_delete             any but ACTIVE → DELETED
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, Mapping, Optional, Tuple, Union

from ..audit.service import AuditRecorder, append_audit
from ..auth.roles import PolicyAction, RoleAuthorizer
from ..clock import Clock, IdGenerator, random_id, utc_now
from ..config import Settings, get_settings
from ..domain.policies.identifiers import (
    sanitize_file_name,
    normalize_file_key,
    suggest_document_id,
    version_id_for,
)
from ..domain.policies.models import (
    Attachment,
    AuditAction,
    DocumentGroup,
    PolicyVersion,
)
from ..domain.policies.status import (
    IndexingStatus,
    PolicyVersionStatus,
    PreprocessStatus,
)
from ..errors import InternalError, InvalidStateError, NotFoundError, PolicyStoreError
from ..events.bus import ChangeBus, Listener, Unsubscribe
from ..observability.correlation import correlation_scope
from ..review_linkage.ports import ReviewIntakePort
from ..review_linkage.schemas import ReviewWorkItem
from ..review_linkage.work_items import (
    build_review_work_item,
    build_seed_review_item,
    review_item_id_prefix,
)
from ..store.version_store import StoreMutation, VersionStore
from ..workers.jobs import JobKind
from ..workers.pipeline import PipelineWorker
from ..workers.scheduler import JobScheduler
from .guards import (
    check_draft_unique,
    check_file_duplicate,
    check_version_monotonic,
    check_version_number,
    check_version_slot_free,
    require_status,
    require_transition,
    taken_file_keys,
)
from .schemas import FileUpload

logger = logging.getLogger(__name__)

SeedLoader = Callable[[], Iterable[PolicyVersion]]
FileInput = Union[FileUpload, Mapping[str, object]]


class PolicyVersionService:
    """Lifecycle manager for policy document versions.

    Args:
        scheduler: Delayed execution port for preprocessing / indexing jobs
        review_intake: Outbound port to the review queue
        settings: Delays, failure markers, review labels (default: get_settings())
        clock: Time source
        new_id: Id generator for audit entries, attachments, jobs, review items
        authorizer: Optional role check; without one every actor is allowed
        seed_loader: Optional source of versions loaded on first hydration

    Example:
        service = PolicyVersionService(QueuedJobScheduler(), InMemoryReviewDesk())
        draft = service.create_draft("POL-0001", "Travel policy", 1, "initial", "SYSTEM_ADMIN")
        service.attach_files(draft.id, [{"name": "travel.pdf"}], "SYSTEM_ADMIN")
        service.run_preprocess(draft.id, "SYSTEM_ADMIN")
    """

    def __init__(
        self,
        scheduler: JobScheduler,
        review_intake: ReviewIntakePort,
        settings: Optional[Settings] = None,
        clock: Clock = utc_now,
        new_id: IdGenerator = random_id,
        authorizer: Optional[RoleAuthorizer] = None,
        seed_loader: Optional[SeedLoader] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._clock = clock
        self._new_id = new_id
        self._review_intake = review_intake
        self._authorizer = authorizer
        self._seed_loader = seed_loader

        self.bus = ChangeBus(on_first_subscribe=self.ensure_hydrated)
        self.store = VersionStore(self.bus)
        self._recorder = AuditRecorder(clock, new_id, self._settings.SYSTEM_ACTOR)
        self._worker = PipelineWorker(
            self.store, scheduler, self._recorder, clock, new_id, self._settings
        )

        self._hydrated = False
        self._hydration_lock = threading.RLock()

    # ---------------------------------------------------------- subscriptions

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register for change notifications (hydrates the store on first call)"""
        return self.bus.subscribe(listener)

    def ensure_hydrated(self) -> None:
        """Load the seed once. Safe to call repeatedly and from listeners."""
        with self._hydration_lock:
            if self._hydrated:
                return
            self._hydrated = True
            if self._seed_loader is None:
                return

            versions = list(self._seed_loader())
            self.store.load(versions)
            logger.info(f"Hydrated policy store with {len(versions)} seed versions")
            self._push_seed_review_items()

    def _push_seed_review_items(self) -> None:
        now = self._clock()
        for version in self.store.all():
            if version.status != PolicyVersionStatus.PENDING_REVIEW or not version.review_item_id:
                continue
            item = build_seed_review_item(version, now, self._new_id, self._settings)
            try:
                self._review_intake.upsert_review_item(item)
            except Exception:
                logger.exception(
                    f"Could not register seeded review item {item.id}",
                    extra={"version_id": version.id, "document_id": version.document_id},
                )

    # ------------------------------------------------------------------ reads

    def list_versions(self) -> Tuple[PolicyVersion, ...]:
        self.ensure_hydrated()
        return self.store.all()

    def list_groups(self) -> Tuple[DocumentGroup, ...]:
        self.ensure_hydrated()
        return self.store.grouped_by_document()

    def get_version(self, version_id: str) -> Optional[PolicyVersion]:
        self.ensure_hydrated()
        return self.store.find(version_id)

    def suggest_next_version(self, document_id: str) -> int:
        """Lowest version above the ACTIVE one (or from 1) whose id is free.

        Rejected, archived and deleted versions keep their ids, so their
        numbers are skipped.
        """
        self.ensure_hydrated()
        doc_id = (document_id or "").strip()
        active = self.store.active_for(doc_id)
        candidate = active.version + 1 if active else 1
        while self.store.find(version_id_for(doc_id, candidate)) is not None:
            candidate += 1
        return candidate

    def suggest_next_document_id(self) -> str:
        """Best-effort next <PREFIX>-NNNN id (not reserved; see create_draft guards)"""
        self.ensure_hydrated()
        return suggest_document_id(self.store.document_ids(), self._settings.DOCUMENT_ID_PREFIX)

    # ----------------------------------------------------------------- drafts

    def create_draft(
        self,
        document_id: str,
        title: str,
        version: int,
        change_summary: str,
        actor: str,
    ) -> PolicyVersion:
        """Create a new DRAFT version.

        Raises:
            InvalidStateError: Empty document id, non-positive version, or the
                derived version id is already taken (e.g. an archived vN)
            DraftAlreadyExistsError: The document already has a draft
            VersionReverseError: version is not above the ACTIVE version
        """
        doc_id = (document_id or "").strip()
        with self._operation("create_draft", actor, document_id=doc_id):
            self._authorize(actor, PolicyAction.EDIT_DRAFT)
            if not doc_id:
                raise InvalidStateError("Document id is required")
            check_version_number(version)

            with self.store.mutation() as tx:
                siblings = self.store.versions_of(doc_id)
                check_draft_unique(siblings, doc_id)
                check_version_monotonic(siblings, version)
                new_id = version_id_for(doc_id, version)
                check_version_slot_free(tx.find(new_id), new_id)

                now = self._clock()
                draft = PolicyVersion(
                    id=new_id,
                    document_id=doc_id,
                    version=version,
                    title=(title or "").strip() or doc_id,
                    change_summary=(change_summary or "").strip(),
                    status=PolicyVersionStatus.DRAFT,
                    created_at=now,
                    updated_at=now,
                    audit=(self._recorder.event(AuditAction.CREATE_DRAFT, actor, f"draft v{version} created"),),
                )
                tx.put(draft)

            self._log_commit("Created draft", draft, actor)
            return self.store.get(new_id)

    def update_draft(
        self,
        version_id: str,
        actor: str,
        title: Optional[str] = None,
        change_summary: Optional[str] = None,
        version: Optional[int] = None,
    ) -> PolicyVersion:
        """Edit a DRAFT's metadata.

        Changing the version number regenerates the id: the draft is removed
        under its old id and re-inserted under the new one in the same
        commit. Callers holding the old id must re-resolve by document id and
        version. Preprocessing goes back to IDLE and the preview is dropped,
        since it names the old version; a job in flight for the old id is
        abandoned.

        Returns:
            PolicyVersion: The draft under its (possibly new) id
        """
        with self._operation("update_draft", actor, version_id=version_id):
            self._authorize(actor, PolicyAction.EDIT_DRAFT)

            with self.store.mutation() as tx:
                current = tx.get(version_id)
                require_status(current, [PolicyVersionStatus.DRAFT], "edit")

                changes = {}
                if title is not None:
                    changes["title"] = title.strip() or current.title
                if change_summary is not None:
                    changes["change_summary"] = change_summary.strip()
                if version is not None and version != current.version:
                    check_version_number(version)
                    check_version_monotonic(self.store.versions_of(current.document_id), version)
                    new_id = version_id_for(current.document_id, version)
                    check_version_slot_free(tx.find(new_id), new_id)
                    changes.update(
                        id=new_id,
                        version=version,
                        preprocess_status=PreprocessStatus.IDLE,
                        preprocess_preview=None,
                        preprocess_error=None,
                        preprocess_generation=current.preprocess_generation + 1,
                    )

                updated = append_audit(
                    current,
                    self._recorder.event(AuditAction.UPDATE_DRAFT, actor, _describe_changes(current, changes)),
                    updated_at=self._clock(),
                    **changes,
                )
                tx.put(updated, replaces=current.id)

            if updated.id != version_id:
                logger.info(
                    f"Draft re-keyed {version_id} -> {updated.id}",
                    extra={"version_id": updated.id, "document_id": updated.document_id, "actor": actor},
                )
            self._log_commit("Updated draft", updated, actor)
            return self.store.get(updated.id)

    def attach_files(
        self,
        version_id: str,
        files: Iterable[FileInput],
        actor: str,
    ) -> PolicyVersion:
        """Append attachments to a DRAFT.

        Names are sanitized, then compared case-insensitively with every
        attachment of every version of the document. Any collision fails the
        whole call with FileDuplicateError; repeats within `files` are
        dropped silently. Adding files resets preprocessing to IDLE.
        """
        uploads = [f if isinstance(f, FileUpload) else FileUpload.model_validate(f) for f in files]

        with self._operation("attach_files", actor, version_id=version_id):
            self._authorize(actor, PolicyAction.EDIT_DRAFT)

            with self.store.mutation() as tx:
                current = tx.get(version_id)
                require_status(current, [PolicyVersionStatus.DRAFT], "attach files to")

                taken = taken_file_keys(self.store.versions_of(current.document_id))
                now = self._clock()
                added = []
                seen = set()
                for upload in uploads:
                    name = sanitize_file_name(upload.name)
                    key = normalize_file_key(name)
                    if key in seen:
                        continue
                    check_file_duplicate(taken, name, current.document_id)
                    seen.add(key)
                    added.append(
                        Attachment(
                            id=self._new_id("att"),
                            name=name,
                            uploaded_at=now,
                            size_bytes=upload.size_bytes,
                            mime_type=upload.mime_type,
                        )
                    )

                if not added:
                    return current

                updated = append_audit(
                    current,
                    self._recorder.event(
                        AuditAction.UPLOAD_FILE, actor, "uploaded: " + ", ".join(a.name for a in added)
                    ),
                    attachments=current.attachments + tuple(added),
                    preprocess_status=PreprocessStatus.IDLE,
                    preprocess_error=None,
                    preprocess_preview=None,
                    updated_at=now,
                )
                tx.put(updated)

            self._log_commit(f"Attached {len(added)} file(s) to", updated, actor)
            return self.store.get(version_id)

    def attach_file(self, version_id: str, file: FileInput, actor: str) -> PolicyVersion:
        return self.attach_files(version_id, [file], actor)

    def remove_file(self, version_id: str, attachment_id: str, actor: str) -> PolicyVersion:
        """Remove one attachment from a DRAFT and reset preprocessing to IDLE

        Raises:
            NotFoundError: The draft has no attachment with this id
        """
        with self._operation("remove_file", actor, version_id=version_id):
            self._authorize(actor, PolicyAction.EDIT_DRAFT)

            with self.store.mutation() as tx:
                current = tx.get(version_id)
                require_status(current, [PolicyVersionStatus.DRAFT], "remove files from")

                removed = next((a for a in current.attachments if a.id == attachment_id), None)
                if removed is None:
                    raise NotFoundError(f"Attachment {attachment_id} not found on {version_id}")

                remaining = tuple(a for a in current.attachments if a.id != attachment_id)
                primary = remaining[0] if remaining else None
                updated = append_audit(
                    current,
                    self._recorder.event(AuditAction.REMOVE_FILE, actor, f"removed: {removed.name}"),
                    attachments=remaining,
                    file_name=primary.name if primary else None,
                    file_size_bytes=primary.size_bytes if primary else None,
                    preprocess_status=PreprocessStatus.IDLE,
                    preprocess_error=None,
                    preprocess_preview=None,
                    updated_at=self._clock(),
                )
                tx.put(updated)

            self._log_commit(f"Removed {removed.name} from", updated, actor)
            return self.store.get(version_id)

    def run_preprocess(self, version_id: str, actor: str) -> PolicyVersion:
        """Start preprocessing for a DRAFT with at least one attachment.

        A new run supersedes any run still in flight for the same draft.
        """
        with self._operation("run_preprocess", actor, version_id=version_id):
            self._authorize(actor, PolicyAction.EDIT_DRAFT)

            with self.store.mutation() as tx:
                current = tx.get(version_id)
                require_status(current, [PolicyVersionStatus.DRAFT], "preprocess")
                if not current.attachments:
                    raise InvalidStateError(f"Cannot preprocess {version_id}: no file attached")

                updated = append_audit(
                    current,
                    self._recorder.event(AuditAction.PREPROCESS_START, actor, "preprocessing started"),
                    preprocess_status=PreprocessStatus.PROCESSING,
                    preprocess_error=None,
                    preprocess_preview=None,
                    preprocess_generation=current.preprocess_generation + 1,
                    updated_at=self._clock(),
                )
                tx.put(updated)

            self._log_commit("Preprocessing started for", updated, actor)
            self._worker.enqueue(JobKind.PREPROCESS, updated)
            return self.store.get(version_id)

    def submit_review_request(self, version_id: str, actor: str) -> PolicyVersion:
        """Submit a preprocessed DRAFT to the review queue.

        Raises:
            InvalidStateError: Not a DRAFT, or preprocessing is not READY
            DraftAlreadyExistsError: Another DRAFT exists for the document
            InternalError: The review queue rejected the work item
        """
        with self._operation("submit_review_request", actor, version_id=version_id):
            self._authorize(actor, PolicyAction.SUBMIT_REVIEW)

            with self.store.mutation() as tx:
                current = tx.get(version_id)
                require_status(current, [PolicyVersionStatus.DRAFT], "submit")
                if current.preprocess_status != PreprocessStatus.READY:
                    raise InvalidStateError(
                        f"Cannot submit {version_id}: preprocessing is "
                        f"{current.preprocess_status.value}, expected READY"
                    )
                check_draft_unique(
                    self.store.versions_of(current.document_id), current.document_id, exclude_id=current.id
                )
                require_transition(current, PolicyVersionStatus.PENDING_REVIEW)

                now = self._clock()
                item = build_review_work_item(
                    current,
                    actor=actor,
                    item_id=self._new_id(review_item_id_prefix(current)),
                    now=now,
                    new_id=self._new_id,
                    settings=self._settings,
                )
                review_item_id = self._send_to_review(item, current)

                updated = append_audit(
                    current,
                    self._recorder.event(AuditAction.SUBMIT_REVIEW, actor, f"review requested ({review_item_id})"),
                    status=PolicyVersionStatus.PENDING_REVIEW,
                    review_requested_at=now,
                    review_item_id=review_item_id,
                    updated_at=now,
                )
                tx.put(updated)

            self._log_commit("Submitted for review", updated, actor)
            return self.store.get(version_id)

    def soft_delete(self, version_id: str, actor: str, reason: str) -> PolicyVersion:
        """Tombstone a version. ACTIVE versions must be demoted first.

        Raises:
            InvalidStateError: Empty reason, ACTIVE or already DELETED version
        """
        with self._operation("soft_delete", actor, version_id=version_id):
            self._authorize(actor, PolicyAction.SOFT_DELETE)
            if not (reason or "").strip():
                raise InvalidStateError("A reason is required to delete a version")

            with self.store.mutation() as tx:
                current = tx.get(version_id)
                if current.status == PolicyVersionStatus.ACTIVE:
                    raise InvalidStateError(
                        f"Cannot delete active {version_id}; approve or roll back to another version first"
                    )
                require_transition(current, PolicyVersionStatus.DELETED)

                now = self._clock()
                updated = append_audit(
                    current,
                    self._recorder.event(AuditAction.SOFT_DELETE, actor, reason),
                    status=PolicyVersionStatus.DELETED,
                    deleted_at=now,
                    updated_at=now,
                )
                tx.put(updated)

            self._log_commit("Soft-deleted", updated, actor)
            return self.store.get(version_id)

    # ---------------------------------------------------------- reviewer side

    def reviewer_approve(self, version_or_item_id: str, actor: str) -> PolicyVersion:
        """Activate a PENDING_REVIEW version and start indexing.

        The previously ACTIVE version of the document, if any, is archived
        in the same commit.
        """
        with self._operation("reviewer_approve", actor, version_id=version_or_item_id):
            self._authorize(actor, PolicyAction.REVIEW_DECIDE)

            with self.store.mutation() as tx:
                target = self._resolve(tx, version_or_item_id)
                require_status(target, [PolicyVersionStatus.PENDING_REVIEW], "approve")
                require_transition(target, PolicyVersionStatus.ACTIVE)

                now = self._clock()
                previous = self.store.active_for(target.document_id)
                if previous is not None and previous.id != target.id:
                    tx.put(self._demote(
                        previous,
                        self._recorder.event(AuditAction.ARCHIVE, actor, f"archived: {target.version_label} activated"),
                        now,
                    ))

                activated = append_audit(
                    target,
                    self._recorder.event(AuditAction.REVIEW_APPROVE, actor, "approved"),
                    self._recorder.system_event(AuditAction.INDEX_START, "indexing started"),
                    status=PolicyVersionStatus.ACTIVE,
                    activated_at=now,
                    archived_at=None,
                    indexing_status=IndexingStatus.INDEXING,
                    indexing_error=None,
                    indexing_generation=target.indexing_generation + 1,
                    updated_at=now,
                )
                tx.put(activated)

            self._log_commit("Approved", activated, actor)
            self._worker.enqueue(JobKind.INDEXING, activated)
            return self.store.get(activated.id)

    def reviewer_reject(self, version_or_item_id: str, actor: str, reason: str) -> PolicyVersion:
        with self._operation("reviewer_reject", actor, version_id=version_or_item_id):
            self._authorize(actor, PolicyAction.REVIEW_DECIDE)

            with self.store.mutation() as tx:
                target = self._resolve(tx, version_or_item_id)
                require_status(target, [PolicyVersionStatus.PENDING_REVIEW], "reject")
                require_transition(target, PolicyVersionStatus.REJECTED)

                now = self._clock()
                rejected = append_audit(
                    target,
                    self._recorder.event(AuditAction.REVIEW_REJECT, actor, reason),
                    status=PolicyVersionStatus.REJECTED,
                    rejected_at=now,
                    reject_reason=reason,
                    updated_at=now,
                )
                tx.put(rejected)

            self._log_commit("Rejected", rejected, actor)
            return self.store.get(rejected.id)

    def retry_indexing(self, version_or_item_id: str, actor: str) -> PolicyVersion:
        """Re-run indexing for an ACTIVE version whose indexing FAILED"""
        with self._operation("retry_indexing", actor, version_id=version_or_item_id):
            self._authorize(actor, PolicyAction.RETRY_INDEXING)

            with self.store.mutation() as tx:
                target = self._resolve(tx, version_or_item_id)
                require_status(target, [PolicyVersionStatus.ACTIVE], "retry indexing for")
                if target.indexing_status != IndexingStatus.FAILED:
                    raise InvalidStateError(
                        f"Cannot retry indexing for {target.id}: indexing is "
                        f"{target.indexing_status.value}, expected FAILED"
                    )

                retried = append_audit(
                    target,
                    self._recorder.event(AuditAction.INDEX_START, actor, "indexing retried"),
                    indexing_status=IndexingStatus.INDEXING,
                    indexing_error=None,
                    indexing_generation=target.indexing_generation + 1,
                    updated_at=self._clock(),
                )
                tx.put(retried)

            self._log_commit("Indexing retried for", retried, actor)
            self._worker.enqueue(JobKind.INDEXING, retried)
            return self.store.get(retried.id)

    def rollback(
        self,
        document_id: str,
        target_version_id: str,
        actor: str,
        reason: Optional[str] = None,
    ) -> PolicyVersion:
        """Re-activate an ARCHIVED version of `document_id`.

        The current ACTIVE version is archived. The target keeps its search
        index, so indexing is marked DONE without scheduling a job. Both
        versions receive one ROLLBACK audit entry.

        Raises:
            InvalidStateError: Target belongs to another document or is not ARCHIVED
        """
        with self._operation("rollback", actor, version_id=target_version_id):
            self._authorize(actor, PolicyAction.ROLLBACK)

            with self.store.mutation() as tx:
                target = self._resolve(tx, target_version_id)
                if target.document_id != (document_id or "").strip():
                    raise InvalidStateError(
                        f"Version {target.id} belongs to {target.document_id}, not {document_id}"
                    )
                require_status(target, [PolicyVersionStatus.ARCHIVED], "roll back to")
                require_transition(target, PolicyVersionStatus.ACTIVE)

                now = self._clock()
                suffix = f": {reason}" if reason else ""
                previous = self.store.active_for(target.document_id)
                if previous is not None:
                    tx.put(self._demote(
                        previous,
                        self._recorder.event(
                            AuditAction.ROLLBACK, actor, f"rolled back to {target.version_label}{suffix}"
                        ),
                        now,
                    ))

                restored = append_audit(
                    target,
                    self._recorder.event(AuditAction.ROLLBACK, actor, f"restored as active{suffix}"),
                    status=PolicyVersionStatus.ACTIVE,
                    activated_at=now,
                    archived_at=None,
                    indexing_status=IndexingStatus.DONE,
                    indexing_error=None,
                    indexing_generation=target.indexing_generation + 1,
                    updated_at=now,
                )
                tx.put(restored)

            self._log_commit("Rolled back to", restored, actor)
            return self.store.get(restored.id)

    # ---------------------------------------------------------------- helpers

    @contextmanager
    def _operation(
        self,
        name: str,
        actor: str,
        version_id: Optional[str] = None,
        document_id: Optional[str] = None,
    ) -> Iterator[None]:
        with correlation_scope():
            self.ensure_hydrated()
            try:
                yield
            except PolicyStoreError as exc:
                logger.info(
                    f"{name} rejected: {exc.message}",
                    extra={
                        "version_id": version_id,
                        "document_id": document_id,
                        "actor": actor,
                        "error_code": exc.code.value,
                    },
                )
                raise

    def _authorize(self, actor: str, action: PolicyAction) -> None:
        if self._authorizer is not None:
            self._authorizer.authorize(actor, action)

    def _resolve(self, tx: StoreMutation, version_or_item_id: str) -> PolicyVersion:
        """Look a version up by version id, then by review item id"""
        version = tx.find(version_or_item_id)
        if version is not None:
            return version
        linked = self.store.find_by_review_item_id(version_or_item_id)
        if linked is not None:
            return tx.get(linked.id)
        raise NotFoundError(f"No policy version or review item {version_or_item_id}")

    def _demote(self, active: PolicyVersion, audit_event, now) -> PolicyVersion:
        require_transition(active, PolicyVersionStatus.ARCHIVED)
        return append_audit(
            active,
            audit_event,
            status=PolicyVersionStatus.ARCHIVED,
            archived_at=now,
            updated_at=now,
        )

    def _send_to_review(self, item: ReviewWorkItem, version: PolicyVersion) -> str:
        try:
            assigned = self._review_intake.upsert_review_item(item)
        except PolicyStoreError:
            raise
        except Exception as exc:
            logger.error(
                f"Review intake failed for {version.id}: {exc}",
                extra={"version_id": version.id, "document_id": version.document_id},
            )
            raise InternalError(f"Review queue rejected the review request: {exc}") from exc
        return assigned or item.id

    def _log_commit(self, what: str, version: PolicyVersion, actor: str) -> None:
        logger.info(
            f"{what} {version.id} (status={version.status.value})",
            extra={"version_id": version.id, "document_id": version.document_id, "actor": actor},
        )


def _describe_changes(current: PolicyVersion, changes: dict) -> str:
    parts = []
    if "version" in changes:
        parts.append(f"version {current.version_label} -> v{changes['version']}")
    if "title" in changes and changes["title"] != current.title:
        parts.append("title")
    if "change_summary" in changes and changes["change_summary"] != current.change_summary:
        parts.append("change summary")
    return "updated: " + ", ".join(parts) if parts else "updated"
