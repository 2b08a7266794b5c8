from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from tools.vendas import normalizar_nome_cabecalho, normalizar_planilha_vendas


@pytest.mark.parametrize(
    "cabecalho, campo",
    [
        ("Data", "data"),
        ("Nº Fatura", "numero_fatura"),
        ("Factura", "numero_fatura"),
        ("Artigo", "produto"),
        ("Qtd", "quantidade"),
        ("Preço Unitário", "preco_unitario"),
        ("P.U.", "preco_unitario"),
        ("Taxa IVA", "taxa_iva"),
        ("Valor Líquido", "valor_liquido"),
        ("Base", "valor_liquido"),
        ("IVA", "valor_iva"),
        ("Total", "valor_bruto"),
        ("Método", "forma_pagamento"),
        (" Cliente ", "cliente"),
    ],
)
def test_normalizar_nome_cabecalho_aliases(cabecalho, campo):
    assert normalizar_nome_cabecalho(cabecalho) == campo


def test_normalizar_nome_cabecalho_desconhecido_passa_direto():
    assert normalizar_nome_cabecalho(" Observacoes ") == "Observacoes"


def test_calcula_iva_e_bruto_quando_faltam():
    resultado = normalizar_planilha_vendas([
        ["Data", "Liquido", "Taxa IVA"],
        ["01/09/2025", "100", "14"],
    ])

    assert resultado.linhas_processadas == 1
    assert resultado.mes == "2025-09"

    venda = resultado.vendas[0]
    assert venda.data == date(2025, 9, 1)
    assert venda.valor_liquido == Decimal("100")
    assert venda.valor_iva == Decimal("14")
    assert venda.valor_bruto == Decimal("114")


def test_calcula_liquido_a_partir_de_quantidade_e_preco():
    resultado = normalizar_planilha_vendas([
        ["Data", "Quantidade", "Preço", "Taxa", "Pagamento"],
        ["02/09/2025", "3", "10,50", "14", "Cartão"],
    ])

    venda = resultado.vendas[0]
    assert venda.valor_liquido == Decimal("31.5")
    assert venda.valor_iva == Decimal("4.41")
    assert venda.valor_bruto == Decimal("35.91")
    assert venda.forma_pagamento == "Cartão"


def test_valores_informados_nao_sao_recalculados():
    resultado = normalizar_planilha_vendas([
        ["Data", "Valor Líquido", "Taxa IVA", "Valor IVA", "Total"],
        ["01/09/2025", "100", "14", "20", "120"],
    ])

    venda = resultado.vendas[0]
    assert venda.valor_iva == Decimal("20")
    assert venda.valor_bruto == Decimal("120")


def test_descarta_linhas_vazias_e_sem_data():
    resultado = normalizar_planilha_vendas([
        ["Data", "Fatura", "Total"],
        ["01/09/2025", "F001", "50"],
        ["", "", ""],
        ["Total do mes", "", "50"],
        ["03/09/2025", "F002", "1.234,56"],
    ])

    assert resultado.linhas_processadas == 2
    assert [v.numero_fatura for v in resultado.vendas] == ["F001", "F002"]
    assert resultado.vendas[1].valor_bruto == Decimal("1234.56")
    assert len(resultado.registros_brutos) == 4


def test_dataframe_do_excel_com_celulas_tipadas():
    df = pd.DataFrame({
        "Data": [pd.Timestamp("2025-09-05"), pd.NaT],
        "Fatura": [1001.0, float("nan")],
        "Cliente": ["Loja Central", None],
        "Liquido": [250.0, float("nan")],
        "Taxa IVA": [14, float("nan")],
        "Pagamento": ["Cartão Multicaixa", None],
    })

    resultado = normalizar_planilha_vendas(df)

    assert resultado.linhas_processadas == 1
    venda = resultado.vendas[0]
    assert venda.data == date(2025, 9, 5)
    assert venda.numero_fatura == "1001"
    assert venda.valor_iva == Decimal("35")
    assert venda.valor_bruto == Decimal("285")


def test_mes_dominante_da_planilha():
    resultado = normalizar_planilha_vendas([
        {"Data": "31/08/2025", "Total": "10"},
        {"Data": "01/09/2025", "Total": "10"},
        {"Data": "02/09/2025", "Total": "10"},
    ])
    assert resultado.mes == "2025-09"


def test_planilha_sem_linhas():
    resultado = normalizar_planilha_vendas([])
    assert resultado.vendas == []
    assert resultado.mes == ""
    assert resultado.linhas_processadas == 0


def test_entrada_invalida():
    with pytest.raises(ValueError):
        normalizar_planilha_vendas(42)
