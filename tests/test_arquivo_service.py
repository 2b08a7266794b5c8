import io

import pandas as pd
import pytest

from models import ArquivoCarregado, TransacaoBancaria, Venda
from services import arquivo_service
from services.arquivo_service import ArquivoService, extrair_texto_extrato, ler_planilha
from amostras import EXTRATO_TXT, VENDAS_CSV


# ---- Leitura dos arquivos ----------------------------------------------------


def test_ler_planilha_csv_com_ponto_e_virgula():
    df = ler_planilha(VENDAS_CSV, "vendas.csv")

    assert len(df) == 3
    assert df.loc[0, "Total"] == "228,00"
    assert df.loc[0, "Preço Unitário"] == "100,00"


def test_ler_planilha_excel_mantem_tipos():
    buffer = io.BytesIO()
    pd.DataFrame({
        "Data": [pd.Timestamp("2025-09-01")],
        "Fatura": ["F001"],
        "Liquido": [100.5],
    }).to_excel(buffer, index=False)

    df = ler_planilha(buffer.getvalue(), "Vendas.XLSX")

    assert df.loc[0, "Liquido"] == pytest.approx(100.5)
    assert df.loc[0, "Fatura"] == "F001"


@pytest.mark.parametrize("nome", ["vendas.docx", "vendas", "extrato.pdf"])
def test_ler_planilha_formato_nao_suportado(nome):
    with pytest.raises(ValueError):
        ler_planilha(b"conteudo", nome)


def test_ler_planilha_vazia():
    with pytest.raises(ValueError):
        ler_planilha(b"", "vendas.csv")


def test_extrair_texto_txt_latin1():
    texto = extrair_texto_extrato("02/09/2025 Depósito 10,00 20,00".encode("latin-1"), "extrato.txt")
    assert texto == "02/09/2025 Depósito 10,00 20,00"


def test_extrair_texto_pdf_junta_paginas(monkeypatch):
    class _Pagina:
        def __init__(self, texto):
            self.texto = texto

        def extract_text(self):
            return self.texto

    class _Pdf:
        pages = [_Pagina("linha 1"), _Pagina(None), _Pagina("linha 3")]

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

    aberturas = []

    def _abrir(fonte):
        aberturas.append(fonte.read())
        return _Pdf()

    monkeypatch.setattr(arquivo_service.pdfplumber, "open", _abrir)

    texto = extrair_texto_extrato(b"%PDF-1.4 falso", "Extrato.PDF")

    assert texto == "linha 1\n\nlinha 3"
    assert aberturas == [b"%PDF-1.4 falso"]


def test_extrair_texto_formato_nao_suportado():
    with pytest.raises(ValueError):
        extrair_texto_extrato(b"x", "extrato.xlsx")


# ---- Processamento -----------------------------------------------------------


def test_processar_arquivo_vendas_grava_e_registra(db):
    metricas = ArquivoService().processar_arquivo_vendas(db, VENDAS_CSV, "vendas.csv")

    assert metricas["tipo"] == "sales"
    assert metricas["linhas_lidas"] == 3
    assert metricas["mes"] == "2025-09"
    assert metricas["duracao_ms"] >= 0

    assert db.query(Venda).filter(Venda.mes == "2025-09").count() == 3
    arquivo = db.query(ArquivoCarregado).one()
    assert arquivo.nome_arquivo == "vendas.csv"
    assert "F001" in arquivo.conteudo_bruto


def test_processar_arquivo_banco_grava_e_registra(db):
    metricas = ArquivoService().processar_arquivo_banco(db, EXTRATO_TXT, "extrato.txt")

    assert metricas["tipo"] == "bank"
    assert metricas["linhas_lidas"] == 2
    assert metricas["mes"] == "2025-09"

    assert db.query(TransacaoBancaria).filter(TransacaoBancaria.e_liquidacao_tpa.is_(True)).count() == 2
    arquivo = db.query(ArquivoCarregado).one()
    assert arquivo.conteudo_bruto == EXTRATO_TXT.decode("utf-8")


def test_processar_upload_reconcilia_o_mes_inferido(db):
    resultado = ArquivoService().processar_upload(
        db,
        vendas=(VENDAS_CSV, "vendas.csv"),
        banco=(EXTRATO_TXT, "extrato.txt"),
    )

    assert resultado["sucesso"] is True
    assert resultado["mes_inferido"] == "2025-09"
    assert [r["tipo"] for r in resultado["resultados"]] == ["sales", "bank"]
    assert resultado["reconciliacao"] == {
        "total_dias": 2,
        "dias_aprovados": 2,
        "taxa_aprovacao": 100.0,
        "aprovado_geral": True,
    }


def test_processar_upload_so_extrato_usa_mes_do_banco(db):
    resultado = ArquivoService().processar_upload(db, banco=(EXTRATO_TXT, "extrato.txt"))

    assert resultado["mes_inferido"] == "2025-09"
    # sem vendas nao ha dias para reconciliar
    assert resultado["reconciliacao"]["total_dias"] == 0


def test_processar_upload_sem_mes_nao_reconcilia(db):
    resultado = ArquivoService().processar_upload(db, banco=(b"Extrato sem movimentos\n", "extrato.txt"))

    assert resultado["mes_inferido"] == ""
    assert resultado["reconciliacao"] is None


def test_processar_upload_sem_arquivos(db):
    with pytest.raises(ValueError):
        ArquivoService().processar_upload(db)


def test_processar_upload_extrato_invalido_nao_grava_vendas(db):
    with pytest.raises(ValueError, match="extrato"):
        ArquivoService().processar_upload(
            db,
            vendas=(VENDAS_CSV, "vendas.csv"),
            banco=(b"x", "extrato.docx"),
        )

    db.rollback()
    assert db.query(Venda).count() == 0
    assert db.query(ArquivoCarregado).count() == 0


def test_processar_upload_falha_no_extrato_desfaz_vendas(db, monkeypatch):
    def falhar(texto):
        raise RuntimeError("extrato ilegivel")

    monkeypatch.setattr(arquivo_service, "normalizar_extrato_texto", falhar)

    with pytest.raises(RuntimeError):
        ArquivoService().processar_upload(
            db,
            vendas=(VENDAS_CSV, "vendas.csv"),
            banco=(EXTRATO_TXT, "extrato.txt"),
        )

    assert db.query(Venda).count() == 0
    assert db.query(TransacaoBancaria).count() == 0
    assert db.query(ArquivoCarregado).count() == 0
