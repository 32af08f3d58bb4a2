import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from controle_loa import __version__
from controle_loa.config import get_settings
from controle_loa.database import init_db

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Startup: create the storage and audit tables if missing
    init_db()
    logger.info("%s %s started (ano fiscal %d)", settings.APP_NAME, __version__, settings.ANO_FISCAL)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get(f"{settings.API_PREFIX}/health")
def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

# Budget dashboard
from controle_loa.routers import orcamento  # noqa: E402

app.include_router(
    orcamento.router,
    prefix=f"{settings.API_PREFIX}/orcamento",
    tags=["Orçamento"],
)

# Balancete import and dataset management
from controle_loa.routers import importacao  # noqa: E402

app.include_router(
    importacao.router,
    prefix=f"{settings.API_PREFIX}/importacao",
    tags=["Importação"],
)

# Exportação (Excel, PDF, impressão)
from controle_loa.routers import exportacao  # noqa: E402

app.include_router(
    exportacao.router,
    prefix=f"{settings.API_PREFIX}/exportar",
    tags=["Exportação"],
)
