import asyncio
import os
from typing import Optional

import httpx
import structlog
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from graph_client import DEFAULT_SOURCE, GraphClient
from prtg_xml import build_report, error_report
from sensor_errors import SensorError
from sensor_models import Credentials, Report
from status_codes import DEFAULT_VALUE_LOOKUP, map_statuses

logger = structlog.get_logger(__name__)


class SensorSettings(BaseModel):
    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = Field(default="", repr=False)
    source: str = DEFAULT_SOURCE
    timeout: float = Field(default=30, gt=0)
    value_lookup: str = DEFAULT_VALUE_LOOKUP

    @classmethod
    def from_env(cls) -> "SensorSettings":
        load_dotenv()
        return cls(
            tenant_id=os.getenv("TENANT_ID", ""),
            client_id=os.getenv("CLIENT_ID", ""),
            client_secret=os.getenv("CLIENT_SECRET", ""),
            source=os.getenv("STATUS_SOURCE", DEFAULT_SOURCE),
            timeout=os.getenv("HTTP_TIMEOUT", "30"),
            value_lookup=os.getenv("VALUE_LOOKUP", DEFAULT_VALUE_LOOKUP),
        )

    def credentials(self) -> Credentials:
        return Credentials(client_id=self.client_id, client_secret=self.client_secret,
                           tenant_id=self.tenant_id)


async def run_sensor(settings: SensorSettings,
                     transport: Optional[httpx.AsyncBaseTransport] = None) -> Report:
    """Authenticate, fetch, map and build the report for one run.

    Any SensorError becomes a single error block; nothing partial is kept.
    """
    log = logger.bind(tenant=settings.tenant_id, source=settings.source)
    client = GraphClient(settings.credentials(), source=settings.source,
                         timeout=settings.timeout, transport=transport)
    try:
        # msal is synchronous
        token = await asyncio.to_thread(client.authenticate)
        items = await client.get_current_status(token)
        mapped = map_statuses(items)
    except SensorError as exc:
        log.error("sensor_run_failed", error=exc.report_text())
        return error_report(exc.report_text())

    log.info("sensor_run_finished", channels=len(mapped))
    return build_report(mapped, settings.value_lookup)
