from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str = Field(repr=False)
    tenant_id: str


class Token(BaseModel):
    token_type: str = "Bearer"
    access_token: str = Field(repr=False)

    def header(self) -> str:
        return f"{self.token_type} {self.access_token}"


class ServiceStatusItem(BaseModel):
    workload_display_name: str
    status: str             # ServiceOperational, Investigating, ...


class MappedStatus(BaseModel):
    channel: str
    value: int


class ReportResult(BaseModel):
    channel: str
    value: int
    valuelookup: str


class ReportError(BaseModel):
    error: int = 1
    text: str


class Report(BaseModel):
    # either results or a single error, never both
    results: List[ReportResult] = []
    error: Optional[ReportError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None
