"""Read-optimized projections over the version table.

Pure functions: the store calls them after every commit and caches the
results until the next one.
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Tuple

from ..domain.policies.models import Attachment, DocumentGroup, PolicyVersion
from ..domain.policies.status import PolicyVersionStatus


def normalize_attachments(version: PolicyVersion) -> PolicyVersion:
    """Keep the legacy single-file fields in sync with attachments[0].

    A record that only carries legacy fields (older seed data) is promoted to
    a one-element attachment list first.
    """
    attachments = version.attachments
    if not attachments and version.file_name:
        attachments = (
            Attachment(
                id=f"att-legacy-{version.id}",
                name=version.file_name,
                size_bytes=version.file_size_bytes,
                uploaded_at=version.updated_at or version.created_at,
            ),
        )

    primary = attachments[0] if attachments else None
    file_name = primary.name if primary else None
    file_size_bytes = primary.size_bytes if primary else None

    if (
        attachments == version.attachments
        and file_name == version.file_name
        and file_size_bytes == version.file_size_bytes
    ):
        return version
    return replace(
        version,
        attachments=attachments,
        file_name=file_name,
        file_size_bytes=file_size_bytes,
    )


def sort_versions(versions: Iterable[PolicyVersion]) -> Tuple[PolicyVersion, ...]:
    """Sort by document_id ASC, version DESC, updated_at DESC"""
    ordered = sorted(versions, key=lambda v: v.updated_at, reverse=True)
    ordered.sort(key=lambda v: v.version, reverse=True)
    ordered.sort(key=lambda v: v.document_id)
    return tuple(ordered)


def build_groups(sorted_versions: Tuple[PolicyVersion, ...]) -> Tuple[DocumentGroup, ...]:
    """Group versions by document.

    Expects the output of sort_versions. Groups holding an ACTIVE version come
    first, then the rest, each part ordered by document_id. Archived versions
    and the full version list inside a group are ordered by version DESC.
    """
    by_document: Dict[str, List[PolicyVersion]] = {}
    for version in sorted_versions:
        by_document.setdefault(version.document_id, []).append(version)

    groups: List[DocumentGroup] = []
    for document_id, versions in by_document.items():
        pointers: Dict[PolicyVersionStatus, PolicyVersion] = {}
        archived: List[PolicyVersion] = []
        title = ""
        for version in versions:
            if not title and version.title:
                title = version.title
            if version.status == PolicyVersionStatus.ARCHIVED:
                archived.append(version)
            else:
                pointers.setdefault(version.status, version)

        groups.append(
            DocumentGroup(
                document_id=document_id,
                title=title or document_id,
                versions=tuple(sorted(versions, key=lambda v: v.version, reverse=True)),
                archived=tuple(sorted(archived, key=lambda v: v.version, reverse=True)),
                active=pointers.get(PolicyVersionStatus.ACTIVE),
                draft=pointers.get(PolicyVersionStatus.DRAFT),
                pending=pointers.get(PolicyVersionStatus.PENDING_REVIEW),
                rejected=pointers.get(PolicyVersionStatus.REJECTED),
                deleted=pointers.get(PolicyVersionStatus.DELETED),
            )
        )

    groups.sort(key=lambda g: (g.active is None, g.document_id))
    return tuple(groups)
