# file: main.py

import logging

from fastapi import FastAPI

from app.config import LOG_LEVEL
from app.controllers.tasks import router as tasks_router
from app.controllers.triggers import router as triggers_router
from app.database.connection import init_db

logging.basicConfig(level=LOG_LEVEL)

app = FastAPI(title="Workshop Notifications API")

app.include_router(triggers_router, prefix="/triggers", tags=["triggers"])
app.include_router(tasks_router, prefix="/tasks", tags=["tasks"])


@app.get("/")
async def root():
    return {"message": "Workshop Notifications API is running"}

@app.on_event("startup")
async def startup_event():
    await init_db()
