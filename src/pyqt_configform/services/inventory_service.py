"""
Integration inventory lookup service.

Lists the resources (repositories, projects, services, ...) a connected
integration exposes for a canvas, so resource fields can offer them as
choices. The form engine only depends on :class:`InventoryLookupService`;
the HTTP client is one implementation of it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote
import logging

import requests

logger = logging.getLogger(__name__)


class InventoryLookupError(Exception):
    """Raised when the inventory cannot be read (transport, HTTP or payload error)."""


class InventoryLookupService(ABC):
    """ABC for resource inventory lookups - enforces explicit interface."""

    @abstractmethod
    def list_resources(self, resource_type: str, integration_name: str, canvas_id: str,
                       organization_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List resources of one type for an integration, scoped to a canvas.

        Returns:
            List of items, each carrying ``name`` and/or ``id``

        Raises:
            InventoryLookupError: If the lookup fails
        """
        pass


@dataclass
class InventoryServiceConfig:
    """Connection settings for the HTTP inventory client."""
    base_url: str = "http://localhost:8000"
    organization_id: Optional[str] = None
    timeout_seconds: float = 30.0
    verify_tls: bool = True


class HttpInventoryService(InventoryLookupService):
    """
    Inventory lookups against the integrations REST API.

    ``GET {base_url}/api/v1/integrations/{integration}/resources`` with the
    canvas as authorization domain and the resource type as filter.
    """

    RESOURCES_ENDPOINT = "/api/v1/integrations/{integration}/resources"
    CANVAS_DOMAIN_TYPE = "DOMAIN_TYPE_CANVAS"
    ORGANIZATION_HEADER = "x-organization-id"

    def __init__(self, config: Optional[InventoryServiceConfig] = None,
                 session: Optional[requests.Session] = None):
        self.config = config or InventoryServiceConfig()
        self.session = session or requests.Session()

    def _build_url(self, integration_name: str) -> str:
        path = self.RESOURCES_ENDPOINT.format(integration=quote(integration_name, safe=''))
        return f"{self.config.base_url.rstrip('/')}{path}"

    def list_resources(self, resource_type: str, integration_name: str, canvas_id: str,
                       organization_id: Optional[str] = None) -> List[Dict[str, Any]]:
        url = self._build_url(integration_name)
        params = {
            "domainType": self.CANVAS_DOMAIN_TYPE,
            "domainId": canvas_id,
            "type": resource_type,
        }
        headers = {}
        organization = organization_id or self.config.organization_id
        if organization:
            headers[self.ORGANIZATION_HEADER] = organization

        logger.debug(f"Listing {resource_type} resources for {integration_name} (canvas {canvas_id})")
        try:
            response = self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.config.timeout_seconds,
                verify=self.config.verify_tls,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise InventoryLookupError(f"Inventory request to {url} failed: {e}") from e
        except ValueError as e:
            raise InventoryLookupError(f"Inventory response from {url} is not JSON: {e}") from e

        resources = payload.get("resources") if isinstance(payload, Mapping) else None
        if not isinstance(resources, list):
            return []
        return [item for item in resources if isinstance(item, Mapping)]


class StaticInventoryService(InventoryLookupService):
    """In-memory inventory: resource type -> items, same for every integration/canvas."""

    def __init__(self, resources: Optional[Mapping[str, List[Dict[str, Any]]]] = None):
        self.resources = dict(resources or {})

    def list_resources(self, resource_type: str, integration_name: str, canvas_id: str,
                       organization_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return list(self.resources.get(resource_type, []))
