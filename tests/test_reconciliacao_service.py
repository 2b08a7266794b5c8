from datetime import date

import pytest
from sqlalchemy.exc import SQLAlchemyError

from models import ReconciliacaoDiaria
from services.reconciliacao_service import ReconciliacaoService
from services.repositorio import RepositorioFinanceiro
from fabricas import fecho_tpa, venda

MES = "2025-09"


@pytest.fixture
def mes_carregado(db):
    repo = RepositorioFinanceiro(db)
    repo.salvar_venda(venda(date(2025, 9, 1), "228"), MES)
    repo.salvar_venda(venda(date(2025, 9, 1), "57", forma_pagamento="Numerário", numero_fatura="F002"), MES)
    repo.salvar_venda(venda(date(2025, 9, 3), "114", numero_fatura="F003"), MES)
    repo.salvar_transacao(fecho_tpa(date(2025, 9, 2), "228"), MES)
    repo.salvar_transacao(fecho_tpa(date(2025, 9, 4), "100"), MES)
    db.commit()
    return db


def test_executar_grava_um_registro_por_dia(mes_carregado):
    db = mes_carregado

    resultado = ReconciliacaoService().executar(db, MES)

    assert resultado["mes"] == MES
    assert resultado["falhas"] == []
    assert [d["data"] for d in resultado["diario"]] == ["2025-09-01", "2025-09-03"]

    primeiro, segundo = resultado["diario"]
    assert primeiro["vendas_cartao"] == 228.0
    assert primeiro["delta"] == 0.0
    assert primeiro["aprovado"] is True
    assert segundo["delta"] == 14.0
    assert segundo["delta_percentual"] == 12.28
    assert segundo["aprovado"] is False

    assert resultado["resumo"] == {
        "total_dias": 2,
        "dias_aprovados": 1,
        "taxa_aprovacao": 50.0,
        "aprovado_geral": False,
    }
    assert db.query(ReconciliacaoDiaria).count() == 2


def test_executar_e_idempotente(mes_carregado):
    db = mes_carregado
    service = ReconciliacaoService()

    primeiro = service.executar(db, MES)
    segundo = service.executar(db, MES)

    assert primeiro["diario"] == segundo["diario"]
    assert db.query(ReconciliacaoDiaria).count() == 2


def test_falha_num_dia_nao_impede_os_outros(mes_carregado, monkeypatch):
    db = mes_carregado
    upsert_original = RepositorioFinanceiro.upsert_reconciliacao_dia

    def _upsert(self, dia):
        if dia.data == date(2025, 9, 1):
            raise SQLAlchemyError("falha simulada")
        return upsert_original(self, dia)

    monkeypatch.setattr(RepositorioFinanceiro, "upsert_reconciliacao_dia", _upsert)

    resultado = ReconciliacaoService().executar(db, MES)

    assert len(resultado["falhas"]) == 1
    assert resultado["falhas"][0]["data"] == "2025-09-01"
    assert "falha simulada" in resultado["falhas"][0]["erro"]
    assert [d["data"] for d in resultado["diario"]] == ["2025-09-03"]

    registros = db.query(ReconciliacaoDiaria).all()
    assert [r.data for r in registros] == [date(2025, 9, 3)]


def test_consultar_le_o_que_foi_gravado(mes_carregado):
    db = mes_carregado
    service = ReconciliacaoService()
    executado = service.executar(db, MES)

    consultado = service.consultar(db, MES)

    assert consultado["diario"] == executado["diario"]
    assert consultado["resumo"] == executado["resumo"]


def test_mes_sem_vendas(db):
    resultado = ReconciliacaoService().executar(db, "2025-01")
    assert resultado["diario"] == []
    assert resultado["resumo"]["total_dias"] == 0


def test_mes_invalido(db):
    with pytest.raises(ValueError):
        ReconciliacaoService().executar(db, "setembro")
