# FastAPI entry point for the explorer API
# explorer/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from explorer.endpoints import (
    questions as questions_router,
    explore as explore_router,
    history as history_router,
)
from explorer.utils.config import settings
from explorer.utils.db import create_slot_tables, engine
from explorer.utils.logger import logger

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    logger.info("Explorer API starting up...")

    await create_slot_tables(engine)

    logger.info(f"Using LLM provider '{settings.llm_provider}'.")
    logger.info("Startup complete.")
    yield
    logger.info("Explorer API shutting down...")
    await engine.dispose()

app = FastAPI(
    title="Explorer API",
    description="Topic explanations and quiz questions generated by an LLM.",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this to your frontend's domain
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(questions_router.router, prefix="/questions", tags=["Questions"])
app.include_router(explore_router.router, prefix="/explore", tags=["Explore"])
app.include_router(history_router.router)

@app.get("/")
async def root():
    return {"message": "Welcome to the Explorer API"}
