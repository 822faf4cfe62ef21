"""
Thin client for the DigitalOcean API endpoints used by the snapshot cycle.
"""
from typing import Any, Dict, Iterator, List, Optional
import logging

import requests

from .models import Action, Droplet, Snapshot
from ..core.config import Config
from ..core.exceptions import AuthenticationError, ServiceError


logger = logging.getLogger(__name__)

PAGE_SIZE = 200


class DigitalOceanClient:
    """Issues requests against the droplet, action and snapshot endpoints."""

    def __init__(self, session: requests.Session, config: Config):
        """Initialize the client with an authenticated session.

        Args:
            session: Session carrying the bearer token header
            config: Run configuration (base URL, request timeout)
        """
        self.session = session
        self.base_url = config.api_base_url
        self.timeout = config.request_timeout

    def list_droplets(self) -> List[Droplet]:
        """List every droplet visible to the token.

        Raises:
            ServiceError: If any page request fails
        """
        return [self._parse(Droplet, d) for d in self._paginate('/droplets', 'droplets')]

    def submit_action(self, droplet_id: int, action_type: str, payload: Optional[Dict[str, Any]] = None) -> Action:
        """Submit a droplet action and return the accepted (not yet applied) action.

        Raises:
            ServiceError: If submission fails; it is never retried
        """
        body = {'type': action_type}
        body.update(payload or {})
        data = self._request('POST', f"/droplets/{droplet_id}/actions", json=body)
        return self._parse(Action, self._extract(data, 'action'))

    def get_action(self, action_id: int) -> Action:
        """Fetch the current status of a submitted action."""
        data = self._request('GET', f"/actions/{action_id}")
        return self._parse(Action, self._extract(data, 'action'))

    def list_snapshots(self) -> List[Snapshot]:
        """List every snapshot visible to the token, across all resources."""
        return [self._parse(Snapshot, s) for s in self._paginate('/snapshots', 'snapshots')]

    def delete_snapshot(self, snapshot_id: str) -> None:
        """Delete a snapshot by ID."""
        self._request('DELETE', f"/snapshots/{snapshot_id}")

    def _paginate(self, path: str, key: str) -> Iterator[Dict[str, Any]]:
        """Yield items of a list endpoint, following links.pages.next."""
        url = f"{self.base_url}{path}"
        params: Optional[Dict[str, Any]] = {'page': 1, 'per_page': PAGE_SIZE}

        while url:
            data = self._request('GET', url, params=params)
            yield from self._extract(data, key)

            # The next link already carries its own query string
            url = ((data.get('links') or {}).get('pages') or {}).get('next')
            params = None

    def _request(self, method: str, path_or_url: str, **kwargs) -> Dict[str, Any]:
        """Send one request and decode its JSON body.

        Returns:
            Decoded body, or an empty dict for bodiless responses (204)
        """
        url = path_or_url if path_or_url.startswith('http') else f"{self.base_url}{path_or_url}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as e:
            self._handle_api_error(e, method, url)

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise ServiceError(f"DigitalOcean {method} {url} returned invalid JSON", details=str(e))

    def _extract(self, data: Dict[str, Any], key: str) -> Any:
        if key not in data:
            raise ServiceError(f"DigitalOcean response is missing '{key}'", details=str(data))
        return data[key]

    def _parse(self, model: type, item: Any) -> Any:
        """Build a model from an API item, treating missing or bad fields as a failed request."""
        try:
            return model.from_api(item)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ServiceError(
                f"DigitalOcean response is malformed: bad {model.__name__.lower()} entry",
                details=f"{e!r} in {item!r}"
            )

    def _handle_api_error(self, error: requests.RequestException, method: str, url: str) -> None:
        """Convert request errors to AuthenticationError or ServiceError.

        Raises:
            AuthenticationError: On 401/403 responses
            ServiceError: On any other failure
        """
        response = getattr(error, 'response', None)
        status = response.status_code if response is not None else None
        api_message = self._api_error_message(response)

        if status in (401, 403):
            raise AuthenticationError(
                f"DigitalOcean rejected the API token ({status}): {api_message or error}",
                details=str(error)
            )

        status_context = f" with status {status}" if status else ""
        raise ServiceError(
            f"DigitalOcean {method} {url} failed{status_context}: {api_message or error}",
            details=str(error)
        )

    @staticmethod
    def _api_error_message(response: Optional[requests.Response]) -> Optional[str]:
        """Pull the 'message' field out of an API error body, if any."""
        if response is None:
            return None
        try:
            return response.json().get('message')
        except (ValueError, AttributeError):
            return None
