"""
Lifecycle orchestrator for the power-off, snapshot, power-on cycle of a droplet.
"""
from typing import Callable, Optional
from datetime import date, datetime, timedelta, timezone
import logging

import requests

from .actions import ActionInvoker
from .client import DigitalOceanClient
from .models import ActionType, CycleReport, Droplet
from .poller import ActionPoller
from .retention import RetentionPruner
from ..core.config import Config
from ..core.exceptions import ActionFailedError, DropletNotFoundError


logger = logging.getLogger(__name__)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class LifecycleOrchestrator:
    """Runs the snapshot cycle against one droplet, one step at a time."""

    def __init__(
        self,
        client: DigitalOceanClient,
        invoker: ActionInvoker,
        pruner: RetentionPruner,
        halt_on_failure: bool = False,
        today: Callable[[], date] = _utc_today
    ):
        """Initialize the orchestrator.

        Args:
            client: API client used to look up the droplet
            invoker: Runs each action to completion
            pruner: Deletes expired snapshots once the cycle is done
            halt_on_failure: If True, a step that does not complete skips the
                             remaining steps (power-on is still attempted)
            today: Returns the date used to name the snapshot
        """
        self.client = client
        self.invoker = invoker
        self.pruner = pruner
        self.halt_on_failure = halt_on_failure
        self._today = today

    @classmethod
    def from_config(cls, config: Config, session: requests.Session) -> 'LifecycleOrchestrator':
        """Wire client, poller, invoker and pruner from the run configuration."""
        client = DigitalOceanClient(session, config)
        poller = ActionPoller(client, wait_interval=config.wait_interval, max_wait=config.max_wait)
        pruner = RetentionPruner(client, validity=timedelta(days=config.snapshot_validity_days))
        return cls(
            client,
            ActionInvoker(client, poller),
            pruner,
            halt_on_failure=config.halt_on_failure
        )

    def find_droplet(self, droplet_name: str) -> Droplet:
        """Look up a droplet by name.

        Raises:
            DropletNotFoundError: If no droplet has that name
        """
        for droplet in self.client.list_droplets():
            if droplet.name == droplet_name:
                return droplet
        raise DropletNotFoundError(droplet_name)

    def run_snapshot_cycle(self, droplet_name: str) -> CycleReport:
        """Shut down, power off, snapshot and power on a droplet, then prune.

        Each step is awaited before the next one is submitted. By default the
        outcome of a step does not change the flow; failures are only logged.

        Args:
            droplet_name: Name of the target droplet

        Returns:
            Report of the actions run and snapshots deleted

        Raises:
            DropletNotFoundError: If the droplet does not exist
            ActionFailedError: If halt_on_failure is set and a step failed
            ServiceError: If any API request fails
        """
        droplet = self.find_droplet(droplet_name)
        logger.info(f"Starting snapshot cycle for droplet {droplet.name} ({droplet.id})")

        report = CycleReport(droplet=droplet)
        first_result = len(self.invoker.history)

        failed_step: Optional[ActionType] = None
        steps = [
            (ActionType.SHUTDOWN, None),
            (ActionType.POWER_OFF, None),
            (ActionType.SNAPSHOT, {'name': self.snapshot_name()}),
        ]
        for action_type, payload in steps:
            if not self.invoker.run_action(droplet.id, action_type, payload) and self.halt_on_failure:
                failed_step = action_type
                break

        # Never leave the droplet powered off
        self.invoker.run_action(droplet.id, ActionType.POWER_ON)
        report.results = self.invoker.history[first_result:]

        if failed_step is not None:
            report.halted = True
            logger.error(f"Snapshot cycle halted after {failed_step.value} failed, skipping pruning")
            raise ActionFailedError(failed_step.value, report=report)

        report.deleted_snapshots = self.pruner.prune_expired_snapshots(droplet.id)
        logger.info(
            f"Snapshot cycle finished: {len(report.results) - len(report.failed_actions)}/"
            f"{len(report.results)} actions succeeded, "
            f"{len(report.deleted_snapshots)} expired snapshots deleted"
        )

        return report

    def snapshot_name(self) -> str:
        """Snapshot name for today's run, e.g. 2024-01-05."""
        return self._today().isoformat()
