"""
Módulo base com utilitários compartilhados para processamento de vendas e extratos.

Este módulo contém funções de uso comum entre a planilha de vendas e o
extrato bancário:
- Parse de números em formato PT-PT (1.234,56)
- Parse de datas em vários formatos ambíguos
- Inferência do mês de referência de um lote de datas
- Registros canônicos (venda, transação, dia de reconciliação)
"""

import re
import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

import pandas as pd

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Excel usa epoch 30/12/1899
EPOCH_EXCEL = date(1899, 12, 30)

# Ordem importa: ISO primeiro para nao ler 2025-09-01 como dia/mes.
# %d e %m do strptime aceitam 1 ou 2 digitos; %Y exige 4 e %y exige 2.
FORMATOS_DATA = [
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d/%m/%y",
    "%d-%m-%y",
]

PADRAO_MES = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
_PADRAO_NUMERO = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


# =============================================================================
# REGISTROS CANÔNICOS
# =============================================================================

@dataclass(frozen=True)
class VendaCanonica:
    """Linha de venda normalizada, independente do layout da planilha."""
    data: date
    numero_fatura: str = ""
    cliente: str = ""
    produto: str = ""
    quantidade: Decimal = ZERO
    preco_unitario: Decimal = ZERO
    taxa_iva: Decimal = ZERO
    valor_liquido: Decimal = ZERO
    valor_iva: Decimal = ZERO
    valor_bruto: Decimal = ZERO
    forma_pagamento: str = ""


@dataclass(frozen=True)
class TransacaoCanonica:
    """Movimento do extrato bancario normalizado."""
    data: date
    descricao: str
    debito: Optional[Decimal] = None
    credito: Optional[Decimal] = None
    saldo: Decimal = ZERO
    e_liquidacao_tpa: bool = False
    e_comissao: bool = False
    e_iva_comissao: bool = False


@dataclass(frozen=True)
class DiaReconciliacao:
    """Resultado da reconciliacao de cartao para um dia."""
    mes: str
    data: date
    vendas_cartao: Decimal
    liquidacao_banco: Decimal
    comissoes: Decimal
    delta: Decimal
    delta_percentual: Decimal
    aprovado: bool


# =============================================================================
# FUNÇÕES DE PARSE DE NÚMEROS
# =============================================================================

def valor_vazio(valor: Any) -> bool:
    if valor is None:
        return True
    if isinstance(valor, str):
        return not valor.strip()
    try:
        return bool(pd.isna(valor))
    except (TypeError, ValueError):
        return False


def parse_numero_pt(valor: Any) -> Decimal:
    """
    Converte números em formato PT-PT para Decimal.

    Formatos suportados:
    - 1.234,56 (com separador de milhar)
    - 100,00
    - 228 (inteiro)
    - valores já numéricos (int, float, Decimal)

    Conversão tolerante: texto vazio ou não numérico vira 0, nunca erro.
    """
    if valor_vazio(valor):
        return ZERO

    if isinstance(valor, Decimal):
        return valor

    if isinstance(valor, bool):
        return Decimal(int(valor))

    if isinstance(valor, int):
        return Decimal(valor)

    if isinstance(valor, float):
        return Decimal(str(valor))

    s = re.sub(r"\s+", "", str(valor))
    # Ponto = milhar, virgula = decimal
    s = s.replace(".", "").replace(",", ".", 1)

    match = _PADRAO_NUMERO.match(s)
    if not match:
        return ZERO

    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return ZERO


# =============================================================================
# FUNÇÕES DE PARSE DE DATAS
# =============================================================================

def _data_serial_excel(valor: float) -> Optional[date]:
    try:
        return EPOCH_EXCEL + timedelta(days=int(valor))
    except (OverflowError, ValueError):
        return None


def _parse_texto_data(texto: str) -> Optional[date]:
    for formato in FORMATOS_DATA:
        try:
            return datetime.strptime(texto, formato).date()
        except ValueError:
            continue
    return None


def parse_data_pt(valor: Any) -> Optional[date]:
    """
    Converte uma célula ou token de texto em data (sem hora).

    Aceita:
    - date / datetime / pandas.Timestamp
    - número serial do Excel (dias desde 30/12/1899, parte fracionária ignorada)
    - texto em ISO (yyyy-MM-dd) ou dia/mês com "/" ou "-" e ano com 2 ou 4 dígitos

    Returns:
        A data encontrada ou None quando nenhum formato se aplica
    """
    if valor_vazio(valor):
        return None

    if isinstance(valor, datetime):
        return valor.date()

    if isinstance(valor, date):
        return valor

    if isinstance(valor, bool):
        return None

    if isinstance(valor, (int, float, Decimal)):
        return _data_serial_excel(float(valor))

    texto = str(valor).strip()

    data = _parse_texto_data(texto)
    if data is not None:
        return data

    # Celula lida como texto pelo pandas: "2025-09-01 00:00:00"
    partes = texto.split()
    if len(partes) > 1:
        data = _parse_texto_data(partes[0])
        if data is not None:
            return data

    # Serial do Excel em formato texto
    if re.fullmatch(r"\d+(\.\d+)?", texto) and float(texto) > 1000:
        return _data_serial_excel(float(texto))

    return None


def mes_da_data(data: date) -> str:
    """Formata a chave de mes YYYY-MM de uma data."""
    return f"{data.year}-{data.month:02d}"


def inferir_mes_dominante(datas: Iterable[Optional[date]]) -> str:
    """
    Retorna o mes (YYYY-MM) com mais ocorrencias no lote.

    Em caso de empate vence o mes que apareceu primeiro na ordem de
    leitura. Lote vazio ou sem datas validas retorna "".
    """
    contagem: dict = {}
    for data in datas:
        if not isinstance(data, date):
            continue
        chave = mes_da_data(data)
        contagem[chave] = contagem.get(chave, 0) + 1

    mes_dominante = ""
    maximo = 0
    for chave, qtd in contagem.items():
        if qtd > maximo:
            maximo = qtd
            mes_dominante = chave

    return mes_dominante


def validar_mes(mes: Optional[str]) -> str:
    """Valida o parametro de mes no formato YYYY-MM."""
    if not mes or not isinstance(mes, str):
        raise ValueError("Parametro mes obrigatorio (YYYY-MM)")
    mes = mes.strip()
    if not PADRAO_MES.match(mes):
        raise ValueError(f"Formato de mes invalido: {mes} (esperado YYYY-MM)")
    return mes


COLUNAS_VALOR_VENDA = [
    "quantidade",
    "preco_unitario",
    "taxa_iva",
    "valor_liquido",
    "valor_iva",
    "valor_bruto",
]


def vendas_para_dataframe(vendas: Iterable[VendaCanonica]) -> pd.DataFrame:
    """
    Monta um DataFrame das vendas para relatorios (valores em float).

    Sempre devolve todas as colunas, mesmo sem vendas.
    """
    colunas = list(VendaCanonica.__dataclass_fields__.keys())
    df = pd.DataFrame([asdict(v) for v in vendas], columns=colunas)
    for col in COLUNAS_VALOR_VENDA:
        df[col] = df[col].astype(float)
    return df
