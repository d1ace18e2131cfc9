from fastapi import FastAPI
from app.api.routes import availability, schedules
from app.core.logging import setup_logging

setup_logging()

app = FastAPI(title="AutoShift API", version="0.1.0")

app.include_router(availability.router, prefix="/api/v1")
app.include_router(schedules.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    return {"status": "ok"}
