"""
Verificacoes de qualidade sobre as vendas de um mes.

Regras (uma venda pode cair em varias):
- inconsistent_total: IVA != liquido * taxa / 100, ou bruto != liquido + IVA
- invalid_date: data da venda fora do mes consultado
- negative: valor bruto ou liquido negativo (provavel nota de credito)
- duplicate: mesma fatura + produto repetida no mes

Somente leitura: nenhuma venda e alterada ou descartada.
"""

import logging
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Sequence

import pandas as pd

from tools.base import VendaCanonica, mes_da_data

logger = logging.getLogger(__name__)

TOLERANCIA = Decimal("0.02")


class TipoAnomalia(str, Enum):
    TOTAL_INCONSISTENTE = "inconsistent_total"
    DATA_INVALIDA = "invalid_date"
    VALOR_NEGATIVO = "negative"
    DUPLICADO = "duplicate"


class Severidade(str, Enum):
    ERRO = "error"
    AVISO = "warning"


@dataclass
class Anomalia:
    """Problema de qualidade encontrado num ou mais registros."""
    tipo: TipoAnomalia
    severidade: Severidade
    mensagem: str
    registro: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ResultadoAnomalias:
    mes: str
    anomalias: List[Anomalia]
    resumo: Dict[str, int]


def _fmt(valor: Decimal) -> str:
    return f"{valor:.2f}"


def _referencia(venda: VendaCanonica, *campos: str) -> Dict[str, Any]:
    ref: Dict[str, Any] = {
        "data": venda.data.isoformat(),
        "fatura": venda.numero_fatura,
        "produto": venda.produto,
    }
    for campo in campos:
        ref[campo] = getattr(venda, campo)
    return ref


# =============================================================================
# VERIFICACOES
# =============================================================================

def verificar_totais(venda: VendaCanonica, tolerancia: Decimal = TOLERANCIA) -> List[Anomalia]:
    anomalias = []

    iva_esperado = venda.valor_liquido * venda.taxa_iva / Decimal("100")
    diferenca_iva = abs(venda.valor_iva - iva_esperado)
    if diferenca_iva > tolerancia:
        ref = _referencia(venda, "valor_liquido", "taxa_iva", "valor_iva")
        ref["diferenca"] = diferenca_iva.quantize(Decimal("0.01"))
        anomalias.append(Anomalia(
            tipo=TipoAnomalia.TOTAL_INCONSISTENTE,
            severidade=Severidade.AVISO,
            mensagem=f"VAT amount mismatch: expected {_fmt(iva_esperado)}, got {_fmt(venda.valor_iva)}",
            registro=ref,
        ))

    bruto_esperado = venda.valor_liquido + venda.valor_iva
    diferenca_bruto = abs(venda.valor_bruto - bruto_esperado)
    if diferenca_bruto > tolerancia:
        ref = _referencia(venda, "valor_liquido", "valor_iva", "valor_bruto")
        ref["diferenca"] = diferenca_bruto.quantize(Decimal("0.01"))
        anomalias.append(Anomalia(
            tipo=TipoAnomalia.TOTAL_INCONSISTENTE,
            severidade=Severidade.AVISO,
            mensagem=f"Gross amount mismatch: expected {_fmt(bruto_esperado)}, got {_fmt(venda.valor_bruto)}",
            registro=ref,
        ))

    return anomalias


def verificar_data(venda: VendaCanonica, mes: str) -> List[Anomalia]:
    if mes_da_data(venda.data) == mes:
        return []
    return [Anomalia(
        tipo=TipoAnomalia.DATA_INVALIDA,
        severidade=Severidade.ERRO,
        mensagem=f"Date {venda.data.isoformat()} does not match month {mes}",
        registro=_referencia(venda),
    )]


def verificar_negativos(venda: VendaCanonica) -> List[Anomalia]:
    if venda.valor_bruto >= 0 and venda.valor_liquido >= 0:
        return []
    return [Anomalia(
        tipo=TipoAnomalia.VALOR_NEGATIVO,
        severidade=Severidade.AVISO,
        mensagem="Negative amount detected (possibly a credit note)",
        registro=_referencia(venda, "valor_liquido", "valor_bruto"),
    )]


def verificar_duplicados(vendas: Sequence[VendaCanonica]) -> List[Anomalia]:
    """Um aviso por grupo (fatura, produto) com mais de um registro."""
    if not vendas:
        return []

    df = pd.DataFrame([asdict(v) for v in vendas])
    anomalias = []

    grupos = df.groupby(["numero_fatura", "produto"], sort=False)
    for (fatura, produto), grupo in grupos:
        if len(grupo) < 2:
            continue
        anomalias.append(Anomalia(
            tipo=TipoAnomalia.DUPLICADO,
            severidade=Severidade.AVISO,
            mensagem=f"Potential duplicate: {len(grupo)} records with same invoice and product",
            registro={
                "fatura": fatura,
                "produto": produto,
                "count": int(len(grupo)),
                "datas": [d.isoformat() for d in grupo["data"]],
            },
        ))

    return anomalias


# =============================================================================
# FUNCAO PRINCIPAL
# =============================================================================

def detectar_anomalias(
    vendas: Sequence[VendaCanonica],
    mes: str,
    tolerancia: Decimal = TOLERANCIA,
) -> ResultadoAnomalias:
    """
    Executa todas as verificacoes sobre as vendas do mes.

    Args:
        vendas: Vendas gravadas para o mes
        mes: Mes consultado (YYYY-MM)
        tolerancia: Diferenca absoluta aceita nas verificacoes de totais

    Returns:
        ResultadoAnomalias com a lista completa e contagem por severidade
    """
    tolerancia = Decimal(str(tolerancia))
    anomalias: List[Anomalia] = []

    for venda in vendas:
        anomalias.extend(verificar_totais(venda, tolerancia))
    for venda in vendas:
        anomalias.extend(verificar_data(venda, mes))
    for venda in vendas:
        anomalias.extend(verificar_negativos(venda))
    anomalias.extend(verificar_duplicados(vendas))

    resumo = {
        "total": len(anomalias),
        "errors": sum(1 for a in anomalias if a.severidade == Severidade.ERRO),
        "warnings": sum(1 for a in anomalias if a.severidade == Severidade.AVISO),
    }

    logger.info(
        f"[QUALIDADE] Mes {mes}: {resumo['total']} anomalias "
        f"({resumo['errors']} erros, {resumo['warnings']} avisos)"
    )

    return ResultadoAnomalias(mes=mes, anomalias=anomalias, resumo=resumo)
