"""
Modulo de reconciliacao diaria das vendas com cartao contra o extrato.

Para cada dia com vendas:
- Soma as vendas pagas com cartao (valor bruto)
- Soma os creditos de fecho TPA no dia e no dia seguinte (liquidacao D+1)
- Soma as comissoes e o IVA sobre comissoes na mesma janela
- delta = vendas - liquidacao - comissoes; aprovado se |delta %| <= limiar

Funcoes puras: nao leem nem gravam no banco. A gravacao (upsert por
mes + data) fica no ReconciliacaoService.
"""

import logging
from dataclasses import asdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Sequence

import pandas as pd

from tools.base import ZERO, DiaReconciliacao, TransacaoCanonica, VendaCanonica

logger = logging.getLogger(__name__)

# Limiares padrao (sobrescritos por core.config nos services)
LIMIAR_DELTA_PERCENTUAL = Decimal("5")
LIMIAR_TAXA_APROVACAO = 90.0

TOKENS_CARTAO = ("cartão", "cartao", "card")

# Liquidacao no proprio dia ou no dia util seguinte
DIAS_JANELA_LIQUIDACAO = 1


def e_pagamento_cartao(forma_pagamento: str) -> bool:
    """Forma de pagamento contem algum token de cartao (sem diferenciar maiusculas)."""
    forma = (forma_pagamento or "").lower()
    return any(token in forma for token in TOKENS_CARTAO)


def janela_liquidacao(data: date) -> tuple[date, date]:
    """Intervalo [data, data + 1] (inclusivo) onde o fecho TPA e esperado."""
    return data, data + timedelta(days=DIAS_JANELA_LIQUIDACAO)


def calcular_dia_reconciliacao(
    mes: str,
    data: date,
    vendas: Iterable[VendaCanonica],
    transacoes: Iterable[TransacaoCanonica],
    limiar_delta_percentual: Decimal = LIMIAR_DELTA_PERCENTUAL,
) -> DiaReconciliacao:
    """
    Reconcilia um unico dia.

    Vendas de outras datas e transacoes fora da janela sao ignoradas, entao
    tanto listas ja filtradas quanto o mes inteiro podem ser passados.
    """
    inicio, fim = janela_liquidacao(data)

    vendas_cartao = sum(
        (v.valor_bruto for v in vendas
         if v.data == data and e_pagamento_cartao(v.forma_pagamento)),
        ZERO,
    )

    na_janela = [t for t in transacoes if inicio <= t.data <= fim]

    liquidacao_banco = sum(
        (t.credito or ZERO for t in na_janela if t.e_liquidacao_tpa),
        ZERO,
    )
    comissoes = sum(
        (t.debito or ZERO for t in na_janela if t.e_comissao or t.e_iva_comissao),
        ZERO,
    )

    delta = vendas_cartao - liquidacao_banco - comissoes
    if vendas_cartao == ZERO:
        delta_percentual = ZERO
    else:
        delta_percentual = delta / vendas_cartao * Decimal("100")

    aprovado = abs(delta_percentual) <= Decimal(str(limiar_delta_percentual))

    return DiaReconciliacao(
        mes=mes,
        data=data,
        vendas_cartao=vendas_cartao,
        liquidacao_banco=liquidacao_banco,
        comissoes=comissoes,
        delta=delta,
        delta_percentual=delta_percentual,
        aprovado=aprovado,
    )


def calcular_reconciliacao_cartao(
    vendas: Sequence[VendaCanonica],
    transacoes: Sequence[TransacaoCanonica],
    mes: str,
    limiar_delta_percentual: Decimal = LIMIAR_DELTA_PERCENTUAL,
) -> List[DiaReconciliacao]:
    """
    Calcula a reconciliacao de cartao AGRUPADA POR DIA.

    Parametros:
    -----------
    vendas : Sequence[VendaCanonica]
        Vendas do mes (como foram gravadas para o mes)
    transacoes : Sequence[TransacaoCanonica]
        Movimentos do extrato do mes
    mes : str
        Mes de referencia YYYY-MM

    Retorna:
    --------
    Lista de DiaReconciliacao ordenada por data, um por data distinta de venda
    """
    logger.info(f"[RECONCILIACAO CARTAO] Mes {mes}: {len(vendas)} vendas, {len(transacoes)} movimentos")

    if not vendas:
        return []

    df_vendas = pd.DataFrame([asdict(v) for v in vendas])
    datas = sorted(df_vendas["data"].unique())

    dias = [
        calcular_dia_reconciliacao(
            mes=mes,
            data=data,
            vendas=vendas,
            transacoes=transacoes,
            limiar_delta_percentual=limiar_delta_percentual,
        )
        for data in datas
    ]

    resumo = resumir_reconciliacao(dias)
    logger.info(
        f"[RECONCILIACAO CARTAO] Dias: {resumo['total_dias']} | "
        f"Aprovados: {resumo['dias_aprovados']} | Taxa: {resumo['taxa_aprovacao']:.2f}%"
    )
    return dias


def resumir_reconciliacao(
    dias: Iterable[Any],
    limiar_taxa_aprovacao: float = LIMIAR_TAXA_APROVACAO,
) -> Dict[str, Any]:
    """
    Resumo mensal a partir dos registros diarios (nao e gravado).

    Aceita DiaReconciliacao ou registros do banco (qualquer objeto com
    o atributo ``aprovado``).
    """
    dias = list(dias)
    total_dias = len(dias)
    dias_aprovados = sum(1 for d in dias if d.aprovado)
    taxa_aprovacao = (dias_aprovados / total_dias * 100) if total_dias else 0.0

    return {
        "total_dias": total_dias,
        "dias_aprovados": dias_aprovados,
        "taxa_aprovacao": round(taxa_aprovacao, 2),
        "aprovado_geral": taxa_aprovacao >= limiar_taxa_aprovacao,
    }
