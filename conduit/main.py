import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from conduit.config import settings
from conduit.database import engine
from conduit.exceptions import NotFoundError, UnauthorizedError
from conduit.middleware import TimingMiddleware
from conduit.routers import articles, profiles, tags, users

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Conduit API starting (env=%s)", settings.APP_ENV)
    yield
    await engine.dispose()

app = FastAPI(
    title="Conduit API",
    description="Articles, comments, favorites, follows and tags",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Service errors -> HTTP
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": f"{exc.entity} not found"})

@app.exception_handler(UnauthorizedError)
async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    return JSONResponse(status_code=403, content={"detail": str(exc)})

# Routers
app.include_router(articles.router)
app.include_router(profiles.router)
app.include_router(tags.router)
app.include_router(users.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
