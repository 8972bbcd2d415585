"""
Transmission RPC client
"""

import logging
import os
import threading

import requests

from .base_client import DEFAULT_TIMEOUT, BaseHTTPClient, DownloadAdapter
from .errors import DuplicateError, TransportError
from .models import TorrentInfo

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Transmission-Session-Id"
RPC_PATH = "transmission/rpc"


class TransmissionClient(BaseHTTPClient, DownloadAdapter):
    """Client to add torrents to a Transmission daemon"""

    def __init__(
        self,
        url: str,
        user: str = "",
        password: str = "",
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize Transmission client

        Args:
            url: Transmission web URL (e.g., http://localhost:9091)
            user: RPC user name, no authentication when empty
            password: RPC password
        """
        super().__init__(url, timeout)
        self.session.headers.update({"Content-Type": "application/json"})
        if user:
            self.session.auth = (user, password)
        self.session_id: str | None = None
        self._session_lock = threading.Lock()

    def connect(self) -> "TransmissionClient":
        """
        Obtain a session id from the daemon

        Raises:
            TransportError: daemon unreachable or not answering with a session id
        """
        url = f"{self.url}/{RPC_PATH}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"unable to reach Transmission at {url}: {e}") from e

        self.session_id = response.headers.get(SESSION_HEADER)
        if not self.session_id:
            raise TransportError(
                "unable to initialize Transmission client. Server replied "
                f"{response.status_code} ({response.reason})"
            )
        self.session.headers[SESSION_HEADER] = self.session_id
        logger.debug(f"Connected to Transmission at {self.url}")
        return self

    def _rpc(self, method: str, arguments: dict) -> dict:
        """Call an RPC method, refreshing the session id once on 409"""
        payload = {"method": method, "arguments": arguments}
        try:
            response = self._post(RPC_PATH, payload)
            if response.status_code == 409:
                # shared by the update workers
                with self._session_lock:
                    self.session_id = response.headers.get(SESSION_HEADER)
                    self.session.headers[SESSION_HEADER] = self.session_id or ""
                response = self._post(RPC_PATH, payload)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} failed: {e}") from e

        if response.status_code != 200:
            raise TransportError(
                f"got error {response.status_code} ({response.reason}) during {method}"
            )
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(f"invalid response to {method}: {e}") from e
        if not isinstance(data, dict):
            raise TransportError(f"invalid response to {method}: {data!r}")

        if data.get("result") != "success":
            raise TransportError(data.get("result") or f"{method} failed")
        return data.get("arguments") or {}

    def enqueue(self, magnet: str, target_dir: str) -> TorrentInfo:
        """Add a torrent downloading into target_dir, creating it first"""
        try:
            os.makedirs(target_dir, exist_ok=True)
        except OSError as e:
            raise TransportError(f"unable to create {target_dir}: {e}") from e

        arguments = self._rpc(
            "torrent-add", {"filename": magnet, "download-dir": target_dir}
        )

        duplicate = arguments.get("torrent-duplicate")
        if duplicate and duplicate.get("hashString"):
            raise DuplicateError(duplicate.get("id", 0), duplicate.get("name", ""))

        added = arguments.get("torrent-added") or {}
        return TorrentInfo(
            id=added.get("id", 0),
            name=added.get("name", ""),
            hash_string=added.get("hashString", ""),
        )

    def test_connection(self) -> bool:
        """Test the connection to Transmission"""
        try:
            self.connect()
            self._rpc("session-get", {})
            return True
        except TransportError as e:
            logger.error(f"Connection test failed: {e}")
            return False
