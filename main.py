from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from dotenv import load_dotenv
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

load_dotenv()
from core.config import settings
from db import criar_tabelas, get_db
from schemas.arquivo_schema import UltimoMesResponse
from services.repositorio import RepositorioFinanceiro
from routers.arquivo_router import router as arquivo_router
from routers.reconciliacao_router import router as reconciliacao_router
from routers.qualidade_router import router as qualidade_router
from routers.kpi_router import router as kpi_router
from routers.iva_router import router as iva_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    criar_tabelas()
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} ({settings.ENVIRONMENT}) iniciado")
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="""
API do assistente financeiro: vendas, extrato bancario e reconciliacao de cartao.

Fluxo:
1. Upload da planilha de vendas e do extrato do mes
2. Reconciliacao diaria vendas com cartao x fechos TPA
3. Anomalias, KPIs e relatorio de IVA
""",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Captura exceções não tratadas para que a resposta 500
    passe pelo CORSMiddleware e inclua os headers corretos."""
    logger.exception(f"Erro nao tratado em {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"detail": f"Erro interno do servidor: {str(exc)}"},
    )


@app.get("/health", tags=["Sistema"])
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/ultimo-mes", response_model=UltimoMesResponse, tags=["Sistema"])
def ultimo_mes(db: Session = Depends(get_db)):
    """Mes do arquivo enviado mais recentemente ("" se nenhum)."""
    return {"mes": RepositorioFinanceiro(db).ultimo_mes_carregado()}


app.include_router(arquivo_router, prefix="/api")
app.include_router(reconciliacao_router, prefix="/api")
app.include_router(qualidade_router, prefix="/api")
app.include_router(kpi_router, prefix="/api")
app.include_router(iva_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
