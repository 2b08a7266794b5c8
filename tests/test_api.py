import pytest

from core.config import settings
from amostras import EXTRATO_TXT, VENDAS_CSV

MES = "2025-09"


@pytest.fixture
def client_com_dados(client):
    resposta = client.post(
        "/api/arquivos/upload",
        files={
            "vendas": ("vendas.csv", VENDAS_CSV, "text/csv"),
            "banco": ("extrato.txt", EXTRATO_TXT, "text/plain"),
        },
    )
    assert resposta.status_code == 200, resposta.text
    return client


def test_health(client):
    resposta = client.get("/health")

    assert resposta.status_code == 200
    assert resposta.json()["status"] == "ok"
    assert "timestamp" in resposta.json()


def test_ultimo_mes_sem_arquivos(client):
    assert client.get("/api/ultimo-mes").json() == {"mes": ""}


def test_upload_completo(client):
    resposta = client.post(
        "/api/arquivos/upload",
        files={
            "vendas": ("vendas.csv", VENDAS_CSV, "text/csv"),
            "banco": ("extrato.txt", EXTRATO_TXT, "text/plain"),
        },
    )

    assert resposta.status_code == 200
    corpo = resposta.json()
    assert corpo["sucesso"] is True
    assert corpo["mes_inferido"] == MES
    assert [r["linhas_lidas"] for r in corpo["resultados"]] == [3, 2]
    assert corpo["reconciliacao"]["aprovado_geral"] is True

    assert client.get("/api/ultimo-mes").json() == {"mes": MES}


def test_upload_sem_arquivos(client):
    resposta = client.post("/api/arquivos/upload")
    assert resposta.status_code == 400


def test_upload_formato_nao_suportado(client):
    resposta = client.post(
        "/api/arquivos/upload",
        files={"vendas": ("vendas.docx", b"conteudo", "application/octet-stream")},
    )
    assert resposta.status_code == 400
    assert "nao suportado" in resposta.json()["detail"]


def test_upload_com_extrato_invalido_nao_grava_nada(client):
    resposta = client.post(
        "/api/arquivos/upload",
        files={
            "vendas": ("vendas.csv", VENDAS_CSV, "text/csv"),
            "banco": ("extrato.docx", b"x", "application/octet-stream"),
        },
    )

    assert resposta.status_code == 400
    assert client.get("/api/ultimo-mes").json() == {"mes": ""}
    assert client.get(f"/api/kpi/resumo?mes={MES}").json()["faturas"] == 0


def test_upload_acima_do_limite(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_MB", 0)

    resposta = client.post(
        "/api/arquivos/upload",
        files={"banco": ("extrato.txt", EXTRATO_TXT, "text/plain")},
    )
    assert resposta.status_code == 413


def test_reconciliacao_consulta_e_recalculo(client_com_dados):
    consulta = client_com_dados.get(f"/api/reconciliacao/cartao?mes={MES}")
    assert consulta.status_code == 200
    diario = consulta.json()["diario"]
    assert [d["data"] for d in diario] == ["2025-09-01", "2025-09-03"]
    assert diario[0]["vendas_cartao"] == 228.0

    recalculo = client_com_dados.post(f"/api/reconciliacao/cartao?mes={MES}")
    assert recalculo.status_code == 200
    assert recalculo.json()["diario"] == diario
    assert recalculo.json()["resumo"]["taxa_aprovacao"] == 100.0


@pytest.mark.parametrize("url", ["/api/reconciliacao/cartao", "/api/reconciliacao/cartao?mes=2025-13"])
def test_reconciliacao_mes_invalido(client, url):
    assert client.get(url).status_code == 400


def test_anomalias(client_com_dados):
    resposta = client_com_dados.get(f"/api/qualidade/anomalias?mes={MES}")

    assert resposta.status_code == 200
    assert resposta.json()["anomalias"] == []
    assert resposta.json()["resumo"] == {"total": 0, "errors": 0, "warnings": 0}


def test_anomalias_sem_mes(client):
    assert client.get("/api/qualidade/anomalias").status_code == 400


def test_kpi_resumo(client_com_dados):
    corpo = client_com_dados.get(f"/api/kpi/resumo?mes={MES}").json()

    assert corpo["receita"] == 399.0
    assert corpo["faturas"] == 3
    assert corpo["ticket_medio"] == 133.0
    assert corpo["divisao_pagamento"] == {"Cartão": 342.0, "Numerário": 57.0}


def test_kpi_diario(client_com_dados):
    corpo = client_com_dados.get(f"/api/kpi/diario?mes={MES}").json()

    assert corpo["serie"] == [
        {"data": "2025-09-01", "receita": 285.0},
        {"data": "2025-09-03", "receita": 114.0},
    ]


def test_kpi_top_clientes(client_com_dados):
    corpo = client_com_dados.get(f"/api/kpi/top-clientes?mes={MES}&limite=1").json()
    assert corpo["clientes"] == [{"cliente": "Loja A", "receita": 342.0, "faturas": 2}]

    assert client_com_dados.get(f"/api/kpi/top-clientes?mes={MES}&limite=0").status_code == 400


def test_kpi_top_produtos(client_com_dados):
    corpo = client_com_dados.get(f"/api/kpi/top-produtos?mes={MES}&limite=2").json()

    assert corpo["mes"] == MES
    assert corpo["produtos"] == [
        {"produto": "Arroz", "receita": 228.0, "quantidade": 2.0},
        {"produto": "Acucar", "receita": 114.0, "quantidade": 1.0},
    ]

    assert client_com_dados.get(f"/api/kpi/top-produtos?mes={MES}&limite=0").status_code == 400
    assert client_com_dados.get("/api/kpi/top-produtos?mes=2024-01").json()["produtos"] == []


def test_kpi_mes_sem_vendas(client):
    corpo = client.get("/api/kpi/resumo?mes=2024-01").json()
    assert corpo["receita"] == 0.0
    assert corpo["divisao_pagamento"] == {}


def test_relatorio_iva(client_com_dados):
    corpo = client_com_dados.get(f"/api/iva/relatorio?mes={MES}").json()

    assert corpo["totais_por_taxa"] == [
        {"taxa": "14%", "base_tributavel": 350.0, "valor_iva": 49.0, "valor_bruto": 399.0}
    ]
    assert corpo["total_geral"] == {"base_tributavel": 350.0, "valor_iva": 49.0, "valor_bruto": 399.0}
    assert [d["data"] for d in corpo["diario"]] == ["2025-09-01", "2025-09-03"]
    assert corpo["diario"][0]["por_taxa"][0]["valor_bruto"] == 285.0


def test_exportar_csv_iva(client_com_dados):
    resposta = client_com_dados.get(f"/api/iva/export.csv?mes={MES}")

    assert resposta.status_code == 200
    assert resposta.headers["content-type"].startswith("text/csv")

    linhas = resposta.text.strip().split("\n")
    assert linhas[0] == (
        "Date,Invoice,Customer,Product,Quantity,Unit Price,VAT Rate,"
        "Net Amount,VAT Amount,Gross Amount,Payment Method"
    )
    assert linhas[1] == "2025-09-01,F001,Loja A,Arroz,2,100.00,14,200.00,28.00,228.00,Cartão"
    assert len(linhas) == 4
