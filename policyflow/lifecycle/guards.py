"""Invariant guards for lifecycle transitions.

Each guard raises a typed PolicyStoreError and never mutates anything; the
service runs them inside a store mutation, before staging any write.
"""

from typing import Iterable, Optional, Sequence, Set

from ..domain.policies.identifiers import normalize_file_key
from ..domain.policies.models import PolicyVersion
from ..domain.policies.status import PolicyVersionStatus, validate_transition
from ..errors import (
    DraftAlreadyExistsError,
    FileDuplicateError,
    InvalidStateError,
    VersionReverseError,
)


def check_version_number(version: object) -> int:
    """Version numbers are positive integers (bool is rejected explicitly)"""
    if isinstance(version, bool) or not isinstance(version, int) or version <= 0:
        raise InvalidStateError(f"Version must be a positive integer (got {version!r})")
    return version


def check_draft_unique(
    siblings: Iterable[PolicyVersion],
    document_id: str,
    exclude_id: Optional[str] = None,
) -> None:
    """Raise if the document already has a DRAFT other than `exclude_id`"""
    for version in siblings:
        if version.status == PolicyVersionStatus.DRAFT and version.id != exclude_id:
            raise DraftAlreadyExistsError(
                f"Document {document_id} already has a draft ({version.version_label})"
            )


def check_version_monotonic(siblings: Iterable[PolicyVersion], version: int) -> None:
    """Raise VersionReverseError unless `version` is above the ACTIVE version"""
    for sibling in siblings:
        if sibling.status == PolicyVersionStatus.ACTIVE and version <= sibling.version:
            raise VersionReverseError(
                f"Version v{version} must be greater than the active {sibling.version_label} "
                f"of {sibling.document_id}"
            )


def check_version_slot_free(existing: Optional[PolicyVersion], version_id: str) -> None:
    """Raise if another entity already occupies the derived version id"""
    if existing is not None:
        raise InvalidStateError(
            f"Version id {version_id} is already used by a {existing.status.value} version"
        )


def taken_file_keys(siblings: Iterable[PolicyVersion]) -> Set[str]:
    return {
        normalize_file_key(attachment.name)
        for version in siblings
        for attachment in version.attachments
    }


def check_file_duplicate(taken: Set[str], name: str, document_id: str) -> None:
    if normalize_file_key(name) in taken:
        raise FileDuplicateError(
            f"A file named {name!r} already exists for document {document_id}"
        )


def require_status(
    version: PolicyVersion,
    allowed: Sequence[PolicyVersionStatus],
    operation: str,
) -> None:
    """Raise InvalidStateError unless the version is in one of `allowed`"""
    if version.status not in allowed:
        raise InvalidStateError(
            f"Cannot {operation} {version.id}: status is {version.status.value}, "
            f"expected {' or '.join(s.value for s in allowed)}"
        )


def require_transition(
    version: PolicyVersion,
    target: PolicyVersionStatus,
) -> None:
    """State-machine check for status-changing operations"""
    validate_transition(version.status, target)
