# whisperer/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from whisperer.core.config import get_settings
from whisperer.core.database import init_db
from whisperer.core.exceptions import WhispererException
from whisperer.core.logging import setup_logging
from whisperer.routers import (
    admin,
    assistant,
    auth,
    chat,
    collection,
    debug,
    file,
    llm,
    model,
    profile,
    prompt,
    tool,
    workspace,
)

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=get_settings().app_name)

# Add CORS middleware (adjust allow_origins as needed for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WhispererException)
async def whisperer_exception_handler(request: Request, exc: WhispererException):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(profile.router, prefix="/api/profile", tags=["Profile"])
app.include_router(model.router, prefix="/api", tags=["Model"])
app.include_router(workspace.router, prefix="/api/workspaces", tags=["Workspace"])
app.include_router(chat.router, prefix="/api", tags=["Chat"])
app.include_router(assistant.router, prefix="/api/assistants", tags=["Assistant"])
app.include_router(collection.router, prefix="/api/collections", tags=["Collection"])
app.include_router(file.router, prefix="/api/files", tags=["File"])
app.include_router(prompt.router, prefix="/api/prompts", tags=["Prompt"])
app.include_router(tool.router, prefix="/api/tools", tags=["Tool"])
app.include_router(llm.router, prefix="/api", tags=["LLM"])
app.include_router(admin.router, prefix="/api", tags=["Admin"])
app.include_router(debug.router, prefix="/api", tags=["Debug"])

# Initialize the database (create tables if needed)
init_db()


@app.get("/")
def read_root():
    return {"message": "Script Whisperer API"}
