# path: route-map-api/routemap/main.py

import logging

from fastapi import FastAPI

from routemap.api.routes.routes import router as routes_router
from routemap.config import get_settings

logging.basicConfig(level=get_settings().log_level)

app = FastAPI(title="route-map-api")

app.include_router(routes_router)


@app.get("/health")
def health_check():
    return {"status": "healthy"}
