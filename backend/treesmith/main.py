import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from treesmith.config import get_settings
from treesmith.database import init_db
from treesmith.routers import git, repos
from treesmith.services.accounts import BoundedCache

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from treesmith.database import engine

    await init_db()
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Tree and commit construction over bare git repositories",
    version="0.1.0",
    lifespan=lifespan,
)

# Acting-user accounts, shared by all requests of this process
app.state.account_cache = BoundedCache(settings.account_cache_size)

app.include_router(repos.router)
app.include_router(git.router)


@app.get("/health")
async def health():
    return {"status": "ok", "app": settings.app_name}


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "docs": "/docs"}
