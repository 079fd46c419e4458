class SensorError(Exception):
    """Base class for failures that end a sensor run with an error block."""

    prefix = "Sensor failed"

    def report_text(self) -> str:
        return f"{self.prefix}: {self}"


class AuthenticationError(SensorError):
    prefix = "Authentication failed"


class RetrievalError(SensorError):
    prefix = "Data retrieval failed"


class UnsupportedStatusError(RetrievalError):
    def __init__(self, workload: str, status: str):
        super().__init__(f"unsupported status '{status}' for workload '{workload}'")
        self.workload = workload
        self.status = status
