"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No subprocess or filesystem I/O.
* No imports from ``cli`` or ``infra``.
"""

from eksphemeral.core.cluster_service import ClusterService
from eksphemeral.core.models import DETAIL_KEYS, ClusterListing, ClusterRecord
from eksphemeral.core.parser import parse_cluster_ids, parse_cluster_record
from eksphemeral.core.protocols import ScriptRunner
from eksphemeral.core.report import SENTINEL, render_detail, render_table

__all__: list[str] = [
    "DETAIL_KEYS",
    "SENTINEL",
    "ClusterListing",
    "ClusterRecord",
    "ClusterService",
    "ScriptRunner",
    "parse_cluster_ids",
    "parse_cluster_record",
    "render_detail",
    "render_table",
]
