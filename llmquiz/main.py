"""
LLM Quiz API — Main Application
FastAPI application that turns PDF reports into gradable multiple-choice quizzes.
"""

from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from llmquiz import __version__
from llmquiz.database.database import Base, engine
from llmquiz.database import models  # noqa: F401  (registers tables on Base)
from llmquiz.routers import quizzes

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(name)s  %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: create tables."""
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title="LLM Quiz API",
    description="Multiple-choice quiz generation from PDF reports",
    version=__version__,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─── Routers ───────────────────────────────────────────────────────────────────

app.include_router(quizzes.router)           # /quizzes/*


@app.get("/")
def root():
    return {
        "name": "LLM Quiz API",
        "version": __version__,
        "endpoints": {
            "docs": "/docs",
            "quizzes": "/quizzes",
        },
    }


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": "llmquiz-api"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
