"""Proforma persistence boundary.

``ProformaRepository`` is injected into the calling layer. Every write goes
through ``recompute`` first, so a stored proforma never carries derived
totals or metrics that are stale relative to its line items.
"""

import copy
import logging
import threading
from collections import defaultdict
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from .calculations.analysis import recompute
from .models.defaults import EngineConfig
from .models.proforma import Proforma

logger = logging.getLogger(__name__)


class ProformaNotFoundError(KeyError):
    """Raised when a proforma id is not in the repository."""

    def __init__(self, project_id: str, proforma_id: str):
        super().__init__(f"Proforma {proforma_id} not found in project {project_id}")
        self.project_id = project_id
        self.proforma_id = proforma_id


class ProformaRepository:
    """In-memory proforma store keyed by project and proforma id.

    Reads return copies; ``update`` serializes read-modify-write cycles per
    proforma id so concurrent edits are not lost.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self._records: Dict[str, Dict[str, Proforma]] = defaultdict(dict)
        self._store_lock = threading.Lock()
        self._record_locks: Dict[Tuple[str, str], threading.Lock] = defaultdict(threading.Lock)

    def _lock_for(self, project_id: str, proforma_id: str) -> threading.Lock:
        with self._store_lock:
            return self._record_locks[(project_id, proforma_id)]

    def save(self, proforma: Proforma) -> Proforma:
        """Recompute and store a proforma, returning the stored copy."""
        stored = recompute(proforma, self.config)
        stored.last_updated = date.today().isoformat()
        with self._store_lock:
            self._records[stored.project_id][stored.id] = stored
        logger.debug("Saved proforma %s for project %s", stored.id, stored.project_id)
        return copy.deepcopy(stored)

    def get(self, project_id: str, proforma_id: str) -> Optional[Proforma]:
        """Get a copy of a stored proforma, or None."""
        with self._store_lock:
            stored = self._records.get(project_id, {}).get(proforma_id)
            return copy.deepcopy(stored) if stored is not None else None

    def list_for_project(self, project_id: str) -> List[Proforma]:
        """Copies of every proforma stored for a project, in insertion order."""
        with self._store_lock:
            return [copy.deepcopy(p) for p in self._records.get(project_id, {}).values()]

    def delete(self, project_id: str, proforma_id: str) -> None:
        """Delete a stored proforma.

        Raises:
            ProformaNotFoundError: If the proforma does not exist.
        """
        with self._store_lock:
            project = self._records.get(project_id, {})
            if proforma_id not in project:
                raise ProformaNotFoundError(project_id, proforma_id)
            del project[proforma_id]
            self._record_locks.pop((project_id, proforma_id), None)

    def update(
        self,
        project_id: str,
        proforma_id: str,
        mutate: Callable[[Proforma], Proforma],
    ) -> Proforma:
        """Apply ``mutate`` to the stored proforma and save the result.

        Args:
            project_id: Parent project id.
            proforma_id: Proforma id.
            mutate: Function returning the edited proforma.

        Returns:
            The stored, recomputed proforma.

        Raises:
            ProformaNotFoundError: If the proforma does not exist.
        """
        with self._lock_for(project_id, proforma_id):
            current = self.get(project_id, proforma_id)
            if current is None:
                raise ProformaNotFoundError(project_id, proforma_id)
            return self.save(mutate(current))
