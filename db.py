import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from core.config import settings

logger = logging.getLogger(__name__)

# ============================================================
# CONFIGURAÇÃO DO SQLAlchemy
# ============================================================

# Base para os modelos
Base = declarative_base()


def criar_engine(database_url: str):
    """
    Cria o engine do banco.

    SQLite (desenvolvimento e testes) nao aceita as opcoes de pool
    usadas no PostgreSQL, por isso os argumentos variam pelo dialeto.
    """
    if database_url.startswith("sqlite"):
        engine_sqlite = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=False,
        )

        # pysqlite nao emite BEGIN sozinho; sem isso o SAVEPOINT por dia
        # da reconciliacao nao funciona
        @event.listens_for(engine_sqlite, "connect")
        def _on_connect(dbapi_conn, _):
            dbapi_conn.isolation_level = None

        @event.listens_for(engine_sqlite, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN")

        return engine_sqlite

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verifica conexão antes de usar
        pool_size=10,        # Pool de conexões
        max_overflow=20,     # Conexões extras quando necessário
        echo=False           # Mude para True para ver queries SQL
    )


logger.info(f"[DB] DATABASE_URL carregada: {settings.DATABASE_URL[:50]}...")

engine = criar_engine(settings.DATABASE_URL)

# Cria a sessão
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ============================================================
# DEPENDENCY INJECTION para FastAPI
# ============================================================

def get_db():
    """
    Cria uma sessão do banco de dados para cada requisição.
    Fecha automaticamente após o uso.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def criar_tabelas(bind=None) -> None:
    """Cria as tabelas que ainda nao existem (usado no startup e nos testes)."""
    import models  # noqa: F401  registra os modelos no metadata

    Base.metadata.create_all(bind=bind or engine)
