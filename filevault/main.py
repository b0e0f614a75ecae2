import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text

from filevault.config import settings
from filevault.database import Base, async_session_maker, engine, get_async_session
from filevault.core.errors import register_exception_handlers
from filevault.routes.auth import router as auth_router
from filevault.routes.files import router as file_router
from filevault.services.seed import seed_demo_users

import filevault.models.file  # noqa: F401  registers the table
import filevault.models.user  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.SEED_DEMO_USERS:
        async with async_session_maker() as session:
            await seed_demo_users(session)

    log.info(f"File storage backend: {settings.FILE_STORAGE_TYPE}")
    yield
    await engine.dispose()


app = FastAPI(title="File Vault API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)
register_exception_handlers(app)

app.include_router(auth_router) 
app.include_router(file_router)

@app.get("/")
async def root():
    return {"message": "File Vault API is running"}

@app.get("/health")
async def health(session: AsyncSession = Depends(get_async_session)):
    await session.execute(text("SELECT 1"))
    return {"status": "ok"}
