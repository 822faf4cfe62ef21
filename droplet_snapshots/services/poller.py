"""
Polling of asynchronous droplet actions until they reach a terminal status.
"""
from typing import Callable
import logging
import time

from .client import DigitalOceanClient
from .models import ActionStatus


logger = logging.getLogger(__name__)

WAIT_INTERVAL = 10
MAX_WAIT = 10 * 60


class ActionPoller:
    """Waits for a submitted action to complete, error or run out of time."""

    def __init__(
        self,
        client: DigitalOceanClient,
        wait_interval: int = WAIT_INTERVAL,
        max_wait: int = MAX_WAIT,
        sleep: Callable[[float], None] = time.sleep
    ):
        """Initialize the poller.

        Args:
            client: API client used for status queries
            wait_interval: Seconds to sleep before each status query
            max_wait: Total wait budget in seconds
            sleep: Sleep function, replaceable in tests
        """
        self.client = client
        self.wait_interval = wait_interval
        self.max_trials = max_wait // wait_interval
        self._sleep = sleep

    def await_completion(self, action_id: int) -> bool:
        """Poll an action until it resolves.

        An action is never complete right after submission, so every status
        query is preceded by a full wait interval.

        Args:
            action_id: ID of an action already accepted by the API

        Returns:
            True if the action completed; False if it errored or the trial
            budget ran out.

        Raises:
            ServiceError: If a status query fails
        """
        for trial in range(1, self.max_trials + 1):
            self._sleep(self.wait_interval)

            action = self.client.get_action(action_id)
            logger.debug(f"Action {action_id} status after trial {trial}/{self.max_trials}: {action.status.value}")

            if action.status is ActionStatus.COMPLETED:
                return True
            if action.status is ActionStatus.ERRORED:
                return False

        logger.warning(
            f"Action {action_id} still in progress after {self.max_trials * self.wait_interval} seconds"
        )
        return False
