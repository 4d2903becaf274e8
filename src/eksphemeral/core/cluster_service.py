"""Core cluster service — looks clusters up through ``eksp-list.sh``.

The service depends on a :class:`~eksphemeral.core.protocols.ScriptRunner`
injected at construction time, keeping the core free of any subprocess
handling.

Guarantees
----------
* Pure orchestration — no printing, no filesystem access.
* Lookups run strictly sequentially and listings keep input order.
* Only :class:`~eksphemeral.exceptions.EksphemeralError` subclasses escape.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from eksphemeral._logging import get_logger
from eksphemeral.core.models import ClusterListing, ClusterRecord
from eksphemeral.core.parser import parse_cluster_ids, parse_cluster_record
from eksphemeral.core.protocols import ScriptRunner
from eksphemeral.exceptions import DecodeError

_log = get_logger("core.cluster_service")


class ClusterService:
    """Stateless lookups of cluster metadata.

    Parameters
    ----------
    runner:
        Any object satisfying the :class:`ScriptRunner` protocol.
    list_script:
        Path of ``eksp-list.sh``.
    """

    def __init__(self, runner: ScriptRunner, list_script: Path) -> None:
        self._runner: ScriptRunner = runner
        self._list_script: Path = list_script

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def lookup(self, cluster_id: str) -> ClusterRecord:
        """Return the record of *cluster_id* with its identifier injected.

        Raises
        ------
        DecodeError
            If the script produced no usable JSON object.
        """
        output = self._runner.capture(self._list_script, cluster_id)
        return parse_cluster_record(output).with_id(cluster_id)

    def list_ids(self) -> tuple[str, ...]:
        """Return the identifiers of all known clusters, in script order.

        Raises
        ------
        DecodeError
            If the script produced no usable JSON array.
        """
        return parse_cluster_ids(self._runner.capture(self._list_script))

    def list_all(self, cluster_ids: Iterable[str]) -> ClusterListing:
        """Look up every identifier in order, skipping failed lookups."""
        records: list[ClusterRecord] = []
        skipped: list[str] = []
        for cluster_id in cluster_ids:
            try:
                records.append(self.lookup(cluster_id))
            except DecodeError as exc:
                _log.info("skipping cluster %s: %s", cluster_id, exc)
                skipped.append(cluster_id)
        return ClusterListing(records=tuple(records), skipped=tuple(skipped))
