"""Domain models for eksphemeral.

All models are **frozen** dataclasses — immutable value objects built
transiently from script output on every invocation.  Authoritative
cluster state lives in the external system; nothing here is persisted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

DETAIL_KEYS: tuple[str, ...] = ("status", "endpoint", "platformv", "vpcconf", "iamrole")
"""Keys of :attr:`ClusterRecord.details` rendered by the detail view."""


def _empty_details() -> Mapping[str, str]:
    return MappingProxyType({})


# ---------------------------------------------------------------------------
# Cluster record
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ClusterRecord:
    """Metadata of one ephemeral cluster as reported by ``eksp-list.sh``."""

    id: str = ""
    """Opaque cluster identifier.  Injected by the caller after lookup."""

    name: str = ""
    """Cluster name.  Empty when the cluster is gone or unreachable."""

    num_workers: int = 0
    """Number of worker nodes."""

    kube_version: str = ""
    """Dotted Kubernetes version without the ``v`` prefix (e.g. ``1.12``)."""

    timeout_minutes: int = 0
    """Minutes after which an unfinished creation is abandoned."""

    ttl_minutes: int = 0
    """Remaining minutes before the cluster is destroyed."""

    owner: str = ""
    """Owner e-mail address."""

    created_at: str = ""
    """UTC creation timestamp, verbatim from the metadata store."""

    details: Mapping[str, str] = field(default_factory=_empty_details)
    """Status and config; only populated for single-cluster lookups."""

    @property
    def exists(self) -> bool:
        """``False`` when the lookup signalled "not found / control plane down"."""
        return bool(self.name)

    def detail(self, key: str) -> str:
        """Return ``details[key]`` or an empty string when absent."""
        return self.details.get(key, "")

    def with_id(self, cluster_id: str) -> ClusterRecord:
        """Return a copy carrying *cluster_id* as its identifier."""
        return replace(self, id=cluster_id)


# ---------------------------------------------------------------------------
# Listing result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ClusterListing:
    """Ordered result of looking up every cluster of a listing.

    Identifiers whose lookup failed are kept in :attr:`skipped` so the
    caller can report them; they never appear in :attr:`records`.
    """

    records: tuple[ClusterRecord, ...]
    skipped: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __bool__(self) -> bool:
        return len(self.records) > 0
