from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from servicegraph.config import settings
from servicegraph.corpus.loader import close_corpus, get_corpus, init_corpus
from servicegraph.eligibility.router import router as eligibility_router
from servicegraph.exception_handlers import register_exception_handlers
from servicegraph.journey.router import router as journey_router
from servicegraph.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_corpus()
    yield
    close_corpus()


app = FastAPI(
    title=settings.api_title,
    description="Life-event journey planning and eligibility screening over UK government services",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(journey_router, prefix="/api/v1", tags=["journeys"])
app.include_router(eligibility_router, prefix="/api/v1/eligibility", tags=["eligibility"])


@app.get("/api/v1/health")
async def health():
    return {"status": "healthy", "services": len(get_corpus().nodes)}
