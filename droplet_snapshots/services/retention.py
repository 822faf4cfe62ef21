"""
Retention pruning of expired droplet snapshots.
"""
from typing import Any, Callable, Iterable, List
from datetime import datetime, timedelta, timezone
import logging

from .client import DigitalOceanClient
from .models import Snapshot


logger = logging.getLogger(__name__)

MAX_SNAPSHOT_VALIDITY = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def select_expired(
    snapshots: Iterable[Snapshot],
    droplet_id: Any,
    now: datetime,
    validity: timedelta = MAX_SNAPSHOT_VALIDITY
) -> List[Snapshot]:
    """Pick the snapshots of a droplet that are older than the validity window.

    Listing order is preserved.
    """
    return [
        snapshot for snapshot in snapshots
        if snapshot.belongs_to(droplet_id) and now - snapshot.created_at > validity
    ]


class RetentionPruner:
    """Deletes a droplet's snapshots once they are past the retention window."""

    def __init__(
        self,
        client: DigitalOceanClient,
        validity: timedelta = MAX_SNAPSHOT_VALIDITY,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.client = client
        self.validity = validity
        self._clock = clock

    def prune_expired_snapshots(self, droplet_id: Any) -> List[Snapshot]:
        """Delete every expired snapshot of a droplet, one at a time.

        The first failed deletion aborts the remaining ones.

        Args:
            droplet_id: Droplet whose snapshots are pruned

        Returns:
            Snapshots that were deleted, in deletion order

        Raises:
            ServiceError: If listing or a deletion fails
        """
        snapshots = self.client.list_snapshots()
        expired = select_expired(snapshots, droplet_id, self._clock(), self.validity)

        logger.debug(f"{len(expired)} of {len(snapshots)} snapshots expired for droplet {droplet_id}")

        deleted = []
        for snapshot in expired:
            logger.info(f"Deleting snapshot {snapshot.name}")
            self.client.delete_snapshot(snapshot.id)
            deleted.append(snapshot)

        return deleted
