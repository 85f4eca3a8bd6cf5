#!/usr/bin/env python3
"""
Rancher v1 API client for host removal
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from core.exceptions import HostLookupError, DeactivateError, DeleteError
from core.interfaces import ClusterControl

logger = logging.getLogger(__name__)


def _label(host: Dict[str, Any], name: str) -> Optional[str]:
    labels = host.get("labels")
    return labels.get(name) if isinstance(labels, dict) else None


class RancherClient(ClusterControl):
    """Looks up, deactivates and deletes hosts on a Rancher server"""

    def __init__(
        self,
        url: str,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Rancher client

        Args:
            url: Rancher server base URL, e.g. http://rancher-server:8080
            access_key: API access key
            secret_key: API secret key
            timeout: Per-request timeout in seconds
            session: Preconfigured requests session
        """
        self.base_url = url.rstrip("/")
        if not self.base_url.endswith("/v1"):
            self.base_url = f"{self.base_url}/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        if access_key and secret_key:
            self.session.auth = (access_key, secret_key)
        self.session.headers.update({"Accept": "application/json"})

    def _host_url(self, host_id: str) -> str:
        return f"{self.base_url}/hosts/{host_id}"

    def _list_hosts(self) -> List[Dict[str, Any]]:
        hosts = []
        url = f"{self.base_url}/hosts"
        params = {"limit": 1000}
        seen = set()
        while url and url not in seen:
            seen.add(url)
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            page = response.json()
            if not isinstance(page, dict):
                raise ValueError(f"host listing is a {type(page).__name__}, not an object")
            data = page.get("data") or []
            if not isinstance(data, list) or not all(isinstance(host, dict) for host in data):
                raise ValueError("host listing data is not a list of objects")
            hosts.extend(data)
            pagination = page.get("pagination")
            url = pagination.get("next") if isinstance(pagination, dict) else None
            params = None
        return hosts

    def lookup_hosts_by_label(self, label_name: str, label_value: str) -> List[str]:
        try:
            hosts = self._list_hosts()
        except (requests.RequestException, ValueError) as e:
            raise HostLookupError(f"Could not list hosts: {e}") from e

        host_ids = [
            host["id"] for host in hosts
            if _label(host, label_name) == label_value and host.get("id")
        ]
        logger.debug(f"Hosts labelled {label_name}={label_value}: {host_ids}")
        return host_ids

    def deactivate_host(self, host_id: str) -> None:
        try:
            response = self.session.post(
                f"{self._host_url(host_id)}/",
                params={"action": "deactivate"},
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise DeactivateError(f"Could not deactivate host {host_id}: {e}") from e

    def delete_host(self, host_id: str) -> None:
        try:
            response = self.session.delete(self._host_url(host_id), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DeleteError(f"Could not delete host {host_id}: {e}") from e

    def ping(self) -> Tuple[bool, str]:
        """Check the API answers with the configured credentials"""
        try:
            response = self.session.get(self.base_url, timeout=self.timeout)
            response.raise_for_status()
            return True, "ok"
        except requests.RequestException as e:
            return False, str(e)
