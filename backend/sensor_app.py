import os
from datetime import datetime, timezone
from typing import Optional
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware

from graph_client import SOURCES
from prtg_xml import render_report
from sensor import SensorSettings, run_sensor
from sensor_logging import configure_logging

settings = SensorSettings.from_env()
ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",")]

app = FastAPI(title="M365 PRTG Sensor")
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.get("/api/ping")
def ping():
    return {"ok": True, "time": datetime.now(timezone.utc).isoformat()}


@app.get("/api/prtg")
async def prtg(source: Optional[str] = None):
    # PRTG "HTTP Data Advanced" only reads the body, so failures stay HTTP 200
    if source is not None and source not in SOURCES:
        raise HTTPException(status_code=400, detail=f"unknown source '{source}'")
    run_settings = settings if source is None else settings.model_copy(update={"source": source})
    report = await run_sensor(run_settings)
    return Response(content=render_report(report), media_type="application/xml")


if __name__ == "__main__":
    import uvicorn
    configure_logging()
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("sensor_app:app", host="0.0.0.0", port=port)
