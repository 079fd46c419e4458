from typing import Dict, Any, List, NamedTuple
import httpx
import structlog
from msal import ConfidentialClientApplication

from sensor_errors import AuthenticationError, RetrievalError
from sensor_models import Credentials, ServiceStatusItem, Token

AUTHORITY_ROOT = "https://login.microsoftonline.com"
GRAPH_ROOT_V1 = "https://graph.microsoft.com/v1.0"
MANAGE_ROOT_V1 = "https://manage.office.com/api/v1.0"

logger = structlog.get_logger(__name__)


class StatusSource(NamedTuple):
    resource: str
    url: str             # {tenant} wird ersetzt
    name_field: str
    status_field: str


SOURCES: Dict[str, StatusSource] = {
    "servicecomms": StatusSource(
        resource="https://manage.office.com",
        url=f"{MANAGE_ROOT_V1}/{{tenant}}/ServiceComms/CurrentStatus",
        name_field="WorkloadDisplayName",
        status_field="Status",
    ),
    "graph": StatusSource(
        resource="https://graph.microsoft.com",
        url=f"{GRAPH_ROOT_V1}/admin/serviceAnnouncement/healthOverviews",
        name_field="service",
        status_field="status",
    ),
}
DEFAULT_SOURCE = "servicecomms"


class GraphClient:
    """Talks to Entra ID and one Microsoft 365 service-health API.

    A client lives for a single sensor run: it acquires one token and
    performs one status request.
    """

    def __init__(self, credentials: Credentials, source: str = DEFAULT_SOURCE,
                 timeout: float = 30, transport: httpx.AsyncBaseTransport | None = None):
        if source not in SOURCES:
            raise ValueError(f"unknown status source: {source}")
        self.credentials = credentials
        self.source = SOURCES[source]
        self.source_name = source
        self.authority = f"{AUTHORITY_ROOT}/{credentials.tenant_id}"
        self.scope = [f"{self.source.resource}/.default"]
        self.timeout = timeout
        self._transport = transport

    def _build_app(self) -> ConfidentialClientApplication:
        return ConfidentialClientApplication(
            client_id=self.credentials.client_id,
            client_credential=self.credentials.client_secret,
            authority=self.authority,
        )

    def authenticate(self) -> Token:
        log = logger.bind(tenant=self.credentials.tenant_id, scope=self.scope[0])
        try:
            # msal validates the authority over the network on construction
            result = self._build_app().acquire_token_for_client(scopes=self.scope)
        except Exception as exc:
            log.warning("token_request_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc
        if not result or "access_token" not in result:
            result = result or {}
            reason = result.get("error_description") or result.get("error") or "no access token returned"
            log.warning("token_rejected", error=result.get("error"))
            raise AuthenticationError(reason)
        log.debug("token_acquired", expires_in=result.get("expires_in"))
        return Token(token_type=result.get("token_type") or "Bearer",
                     access_token=result["access_token"])

    async def _get(self, url: str, token: Token, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        headers = {"Authorization": token.header(), "Accept": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.get(url, headers=headers, params=params)
                r.raise_for_status()
                return r.json()
        except httpx.HTTPStatusError as exc:
            raise RetrievalError(f"HTTP {exc.response.status_code} from {url}") from exc
        except httpx.HTTPError as exc:
            raise RetrievalError(f"request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise RetrievalError(f"invalid JSON from {url}") from exc

    async def get_current_status(self, token: Token) -> List[ServiceStatusItem]:
        url = self.source.url.format(tenant=self.credentials.tenant_id)
        data = await self._get(url, token)
        values = data.get("value") if isinstance(data, dict) else None
        if not isinstance(values, list):
            raise RetrievalError(f"response from {url} has no 'value' list")

        items: List[ServiceStatusItem] = []
        for raw in values:
            name = raw.get(self.source.name_field) if isinstance(raw, dict) else None
            status = raw.get(self.source.status_field) if isinstance(raw, dict) else None
            if not (isinstance(name, str) and name and isinstance(status, str) and status):
                raise RetrievalError(
                    f"item has no string {self.source.name_field}/{self.source.status_field}: {raw!r}"
                )
            items.append(ServiceStatusItem(workload_display_name=name, status=status))
        logger.info("status_fetched", source=self.source_name, items=len(items))
        return items
