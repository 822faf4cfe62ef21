"""
Submission of droplet actions and tracking of their outcome.
"""
from typing import Any, Callable, Dict, List, Optional, Union
from datetime import datetime, timezone
import logging
import time

from .client import DigitalOceanClient
from .models import ActionResult, ActionType
from .poller import ActionPoller


logger = logging.getLogger(__name__)


class ActionInvoker:
    """Runs a droplet action to completion: submit, then poll."""

    def __init__(
        self,
        client: DigitalOceanClient,
        poller: ActionPoller,
        timer: Callable[[], float] = time.monotonic
    ):
        """Initialize with an API client and a poller.

        Args:
            client: API client used to submit actions
            poller: Poller that resolves submitted actions
            timer: Monotonic clock used for durations
        """
        self.client = client
        self.poller = poller
        self._timer = timer
        self.history: List[ActionResult] = []

    def run_action(
        self,
        droplet_id: int,
        action_type: Union[ActionType, str],
        payload: Optional[Dict[str, Any]] = None
    ) -> bool:
        """Submit an action against a droplet and wait for its outcome.

        Args:
            droplet_id: Target droplet
            action_type: Action to perform
            payload: Extra request fields (e.g. the snapshot name)

        Returns:
            True if the action completed, False if it errored or timed out

        Raises:
            ServiceError: If submission or a status query fails
        """
        action_type = ActionType(action_type)
        logger.info(f"Starting to perform action {action_type.value}")

        started_at = datetime.now(timezone.utc)
        start = self._timer()

        action = self.client.submit_action(droplet_id, action_type.value, payload)
        success = self.poller.await_completion(action.id)

        elapsed = round(self._timer() - start)
        outcome = 'success' if success else 'error'
        log = logger.info if success else logger.error
        log(f"Action {action_type.value} ran in {elapsed} seconds and ended with {outcome}")

        self.history.append(ActionResult(
            action_type=action_type,
            success=success,
            started_at=started_at,
            duration=elapsed,
            action_id=action.id
        ))

        return success
