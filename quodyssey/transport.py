import abc
import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from quodyssey.errors import TransportError

logger = logging.getLogger(__name__)


def resolve_base_url(hostname: Optional[str], port, origin: str) -> str:
    """``http://host:port`` when both are given, else the page origin."""
    if hostname and port:
        return f'http://{hostname}:{port}'
    return f'http://{origin}'


class Transport(abc.ABC):
    """JSON request interface the client talks to the game server through."""

    @abc.abstractmethod
    async def get(self, path: str) -> Dict[str, Any]:
        """GET ``path`` relative to the server root and decode the JSON body."""

    @abc.abstractmethod
    async def post(self, path: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """POST ``body`` as JSON to ``path`` and decode the JSON reply."""


class HttpTransport(Transport):
    """Blocking ``requests`` calls pushed onto a worker thread.

    Errors of any kind (connection, HTTP status, undecodable body) surface as
    :class:`TransportError` chained to the original exception.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout or None

    async def get(self, path):
        return await asyncio.to_thread(self._request, 'GET', path, None)

    async def post(self, path, body=None):
        return await asyncio.to_thread(self._request, 'POST', path, body)

    def _request(self, method: str, path: str, body):
        url = f'{self.base_url}/{path}'
        try:
            res = self.session.request(method, url, json=body, timeout=self.timeout)
            res.raise_for_status()
            return res.json()
        except requests.RequestException as exc:
            logger.warning(f"[http-error] {method} {url} failed: {exc}")
            raise TransportError(f'{method} {url} failed: {exc}') from exc
        except ValueError as exc:
            raise TransportError(f'{method} {url} returned a non-JSON body') from exc

    def close(self) -> None:
        self.session.close()
