import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from core import db
from core.errors import install_exception_handlers
from core.logging_config import setup_logging
from flows import router as flows_router


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


setup_logging()

app = FastAPI(title="HK Passenger Flow API", lifespan=lifespan)
install_exception_handlers(app)

app.include_router(flows_router.router, tags=["flows"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


def serve() -> None:
    """Run the API with uvicorn; HOST/PORT come from the environment."""
    host = os.environ.get("HOST", "0.0.0.0").strip() or "0.0.0.0"
    port = int(os.environ.get("PORT", "8080").strip() or "8080")
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    serve()
