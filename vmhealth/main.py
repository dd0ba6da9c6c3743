from fastapi import FastAPI

from .api import host

app = FastAPI(title="VM Health Check")

app.include_router(host.router, prefix="/host", tags=["host"])
