"""Bearer token authentication for the DigitalOcean API."""

import logging
from typing import Optional

import requests

from droplet_snapshots import __version__
from droplet_snapshots.core.config import Config
from droplet_snapshots.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


class TokenAuthenticator:
    """Builds HTTP sessions that carry the configured API token."""

    def __init__(self, config: Config):
        """Initialize the token authenticator.

        Args:
            config: Run configuration holding the API token.
        """
        self.config = config
        self._session: Optional[requests.Session] = None

    def get_session(self) -> requests.Session:
        """Get an authenticated HTTP session.

        The token is read once; the same session is reused for every request
        of the run.

        Returns:
            requests.Session with Authorization and User-Agent headers set.

        Raises:
            ConfigurationError: If no API token is configured.
        """
        if self._session is None:
            if not self.config.api_token:
                raise ConfigurationError("No DigitalOcean API token configured")

            session = requests.Session()
            session.headers.update(self.auth_headers())
            self._session = session
            logger.debug("Created authenticated API session")

        return self._session

    def auth_headers(self) -> dict:
        """Headers sent with every API request."""
        return {
            'Authorization': f"Bearer {self.config.api_token}",
            'Content-Type': 'application/json',
            'User-Agent': f"droplet-snapshots/{__version__}",
        }

    def close(self) -> None:
        """Close the underlying session, if one was opened."""
        if self._session is not None:
            self._session.close()
            self._session = None
