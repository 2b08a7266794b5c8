"""Fixtures compartilhadas: banco SQLite isolado por teste e cliente HTTP.

Cada teste recebe um arquivo SQLite proprio em ``tmp_path``; o cliente da
API troca a dependencia ``get_db`` por sessoes desse banco, entao nenhum
teste toca o ``DATABASE_URL`` configurado.
"""

from __future__ import annotations


import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from db import criar_engine, criar_tabelas, get_db


@pytest.fixture
def engine(tmp_path):
    engine = criar_engine(f"sqlite:///{tmp_path / 'financas_teste.db'}")
    criar_tabelas(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sessao_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(sessao_factory):
    sessao = sessao_factory()
    yield sessao
    sessao.close()


@pytest.fixture
def client(sessao_factory):
    from main import app

    def _get_db_teste():
        sessao = sessao_factory()
        try:
            yield sessao
        finally:
            sessao.close()

    app.dependency_overrides[get_db] = _get_db_teste
    # sem ``with``: o lifespan (create_all no banco configurado) nao roda
    yield TestClient(app)
    app.dependency_overrides.clear()
