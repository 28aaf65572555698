"""
HTTP API adapter for the teleporter console.

Architectural role:
- Expose settings, history and one in-process console session over HTTP.
- Enforce adapter-level input validation.
- Delegate stage transitions to `teleporter.core.console.ConsoleController`.

Endpoint responsibilities:
- `GET/PUT /v1/settings`: read (masked) and partially update settings.
- `GET/DELETE /v1/history[/{id}]`: list, delete one, clear all.
- `/v1/console/*`: file upload, analyze, blueprint edit, reconstruct, back,
  reset, reopen from history, dismiss error, and the current snapshot.
- `GET /v1/strategies`: preview the resolved fallback chain for a model.

Error handling strategy:
- `InvalidTransition` -> HTTP 409.
- `FileInputError` -> HTTP 400.
- Unknown history id -> HTTP 404.
- Provider failures never surface as HTTP errors; they land in the console
  snapshot `error` field with a 200 response.

Side effects:
- Reads/writes the settings and history JSON files.
- Emits debug logs only when `DEBUG == "true"`.
- Console endpoints are `async` so every stage mutation runs on the event
  loop; blocking file decoding is pushed to a worker thread.
- Loads environment variables at import time via `load_dotenv()`.
"""

from dotenv import load_dotenv

load_dotenv()

import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from teleporter.config import DEBUG
from teleporter.core.console import ConsoleController
from teleporter.core.stages import InvalidTransition
from teleporter.ingestion.file_input import FileInputError, load_data_url
from teleporter.storage.history_store import HistoryStore
from teleporter.storage.settings_store import SettingsStore
from teleporter.strategy.resolver import resolve


logger = logging.getLogger(__name__)

app = FastAPI(title="Matter Stream")

settings_store = SettingsStore()
history_store = HistoryStore()
console = ConsoleController(settings_store, history_store)


# ============================================================
# Request Schemas
# ============================================================

class SettingsUpdate(BaseModel):
    """Partial settings update; omitted fields are left unchanged."""
    openrouter_key: str | None = None
    openai_key: str | None = None
    google_key: str | None = None
    xai_key: str | None = None
    analyzer_model: str | None = None
    generator_model: str | None = None


class FileUpload(BaseModel):
    filename: str | None = None
    data_url: str


class AnalyzeRequest(BaseModel):
    instruction: str | None = None


class BlueprintUpdate(BaseModel):
    blueprint: str


# ============================================================
# Error Mapping
# ============================================================

@app.exception_handler(InvalidTransition)
async def invalid_transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(status_code=409, content={"error": str(exc)})


@app.exception_handler(FileInputError)
async def file_input_handler(request: Request, exc: FileInputError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


# ============================================================
# Settings
# ============================================================

@app.get("/v1/settings")
def get_settings():
    return settings_store.load().masked()


@app.put("/v1/settings")
def update_settings(update: SettingsUpdate):
    changes = {k: v for k, v in update.model_dump().items() if v is not None}
    if DEBUG:
        logger.debug("Settings update fields: %s", sorted(changes))
    return settings_store.update(**changes).masked()


@app.get("/v1/strategies")
def preview_strategies(model: str):
    """Show the fallback chain `model` would use, without credentials."""
    credentials = settings_store.load().credentials()
    return {
        "model": model,
        "strategies": [s.describe() for s in resolve(model, credentials)],
    }


# ============================================================
# History
# ============================================================

@app.get("/v1/history")
def list_history():
    return {"object": "list", "data": [r.to_dict() for r in history_store.list_all()]}


@app.delete("/v1/history/{record_id}")
def delete_history(record_id: str):
    if not history_store.remove(record_id):
        return JSONResponse(status_code=404, content={"error": "Unknown history record"})
    return {"deleted": record_id}


@app.delete("/v1/history")
def clear_history():
    history_store.clear()
    return {"cleared": True}


# ============================================================
# Console Session
# ============================================================

@app.get("/v1/console")
async def get_console():
    return console.snapshot()


@app.post("/v1/console/file")
async def upload_file(upload: FileUpload):
    source = await asyncio.to_thread(load_data_url, upload.data_url, upload.filename)
    if DEBUG:
        logger.debug("File selected: %s (%s, %d bytes)", source.name, source.mime_type, len(source.data))
    console.select_file(source)
    return console.snapshot()


@app.post("/v1/console/analyze")
async def analyze(body: AnalyzeRequest | None = None):
    instruction = body.instruction if body else None
    await console.analyze(instruction)
    return console.snapshot()


@app.put("/v1/console/blueprint")
async def edit_blueprint(update: BlueprintUpdate):
    console.edit_blueprint(update.blueprint)
    return console.snapshot()


@app.post("/v1/console/reconstruct")
async def reconstruct():
    await console.reconstruct()
    return console.snapshot()


@app.post("/v1/console/back")
async def back_to_blueprint():
    console.back_to_blueprint()
    return console.snapshot()


@app.post("/v1/console/reset")
async def reset():
    console.reset()
    return console.snapshot()


@app.post("/v1/console/load/{record_id}")
async def load_project(record_id: str):
    record = history_store.get(record_id)
    if record is None:
        return JSONResponse(status_code=404, content={"error": "Unknown history record"})
    console.load_project(record)
    return console.snapshot()


@app.post("/v1/console/dismiss")
async def dismiss_error():
    console.dismiss_error()
    return console.snapshot()
