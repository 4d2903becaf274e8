"""Plain-text rendering of cluster records.

Two shapes are produced: a fixed multi-line detail view for a single
cluster and a column-aligned table for a listing.  Both are pure string
transforms; writing them out is the CLI layer's job.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from eksphemeral.core.models import ClusterRecord

SENTINEL = "Cluster does not exist or control plane is down"
"""Rendered instead of field values when a record has no name."""

TABLE_HEADER: tuple[str, ...] = (
    "NAME",
    "ID",
    "KUBERNETES",
    "NUM WORKERS",
    "TIMEOUT",
    "TTL",
    "OWNER",
)
TABLE_PADDING = 3


# ---------------------------------------------------------------------------
# Detail view
# ---------------------------------------------------------------------------

def render_detail(record: ClusterRecord) -> str:
    """Render *record* in the fixed detail layout.

    Returns :data:`SENTINEL` when the record has an empty name.  Missing
    detail keys render as empty strings.
    """
    if not record.exists:
        return SENTINEL

    return (
        f"ID:\t\t{record.id}\n"
        f"Name:\t\t{record.name}\n"
        f"Kubernetes:\tv{record.kube_version}\n"
        f"Worker nodes:\t{record.num_workers}\n"
        f"Timeout:\t{record.timeout_minutes} min\n"
        f"TTL:\t\t{record.ttl_minutes} min\n"
        f"Owner:\t\t{record.owner}\n"
        "Details:\n"
        f"\tStatus:\t\t\t{record.detail('status')}\n"
        f"\tEndpoint:\t\t{record.detail('endpoint')}\n"
        f"\tPlatform version:\t{record.detail('platformv')}\n"
        f"\tVPC config:\t\t{record.detail('vpcconf')}\n"
        f"\tIAM role:\t\t{record.detail('iamrole')}\n"
    )


# ---------------------------------------------------------------------------
# Table view
# ---------------------------------------------------------------------------

def table_row(record: ClusterRecord) -> tuple[str, ...]:
    """Return the table cells for *record*, in :data:`TABLE_HEADER` order."""
    return (
        record.name,
        record.id,
        f"v{record.kube_version}",
        str(record.num_workers),
        f"{record.timeout_minutes} min",
        f"{record.ttl_minutes} min",
        record.owner,
    )


def render_table(records: Iterable[ClusterRecord]) -> str:
    """Render *records* as a left-aligned table with a header row.

    Every column is as wide as its widest cell plus
    :data:`TABLE_PADDING` spaces.  The header is present even when
    *records* is empty.
    """
    rows = [TABLE_HEADER, *(table_row(record) for record in records)]
    return _align(rows) + "\n"


def _align(rows: Sequence[Sequence[str]]) -> str:
    widths = [
        max(len(row[col]) for row in rows) + TABLE_PADDING
        for col in range(len(rows[0]))
    ]
    lines = [
        "".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()
        for row in rows
    ]
    return "\n".join(lines)
