"""
Servico de Reconciliacao de Cartao.

Orquestra a reconciliacao diaria entre as vendas pagas com cartao e os
fechos TPA / comissoes do extrato, gravando um registro por (mes, data).
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import settings
from services.repositorio import FILTRO_RECONCILIACAO, RepositorioFinanceiro
from tools.base import validar_mes
from tools.banco.calc_reconciliacao_cartao import (
    calcular_dia_reconciliacao,
    janela_liquidacao,
    resumir_reconciliacao,
)

logger = logging.getLogger(__name__)


def _dois_decimais(valor: Any) -> float:
    return round(float(valor or 0), 2)


def formatar_dia(dia: Any) -> Dict[str, Any]:
    """Registro diario (dataclass ou modelo) no formato da resposta."""
    return {
        "data": dia.data.isoformat(),
        "vendas_cartao": _dois_decimais(dia.vendas_cartao),
        "liquidacao_banco": _dois_decimais(dia.liquidacao_banco),
        "comissoes": _dois_decimais(dia.comissoes),
        "delta": _dois_decimais(dia.delta),
        "delta_percentual": _dois_decimais(dia.delta_percentual),
        "aprovado": bool(dia.aprovado),
    }


class ReconciliacaoService:
    """Servico para calcular e consultar a reconciliacao de cartao."""

    def __init__(self):
        self.limiar_delta = Decimal(str(settings.LIMIAR_DELTA_PERCENTUAL))
        self.limiar_aprovacao = settings.LIMIAR_TAXA_APROVACAO

    def executar(self, db: Session, mes: str) -> Dict[str, Any]:
        """
        Recalcula a reconciliacao do mes e grava (upsert) cada dia.

        Fluxo:
        1. Carrega as vendas do mes
        2. Para cada data distinta busca os movimentos de [data, data + 1]
        3. Calcula o dia e grava num SAVEPOINT proprio

        Uma falha ao gravar um dia nao impede os demais; o dia aparece em
        ``falhas`` no resultado.
        """
        mes = validar_mes(mes)

        logger.info("=" * 50)
        logger.info(f"RECONCILIACAO CARTAO - INICIO ({mes})")
        logger.info("=" * 50)

        repo = RepositorioFinanceiro(db)
        vendas = repo.vendas_do_mes(mes)
        datas = sorted({v.data for v in vendas})
        logger.info(f"   Vendas no mes: {len(vendas)} | Dias com vendas: {len(datas)}")

        dias = []
        falhas: List[Dict[str, Any]] = []

        for data in datas:
            inicio, fim = janela_liquidacao(data)
            transacoes = repo.transacoes_na_janela(mes, inicio, fim, FILTRO_RECONCILIACAO)
            vendas_dia = [v for v in vendas if v.data == data]

            dia = calcular_dia_reconciliacao(
                mes=mes,
                data=data,
                vendas=vendas_dia,
                transacoes=transacoes,
                limiar_delta_percentual=self.limiar_delta,
            )

            try:
                with db.begin_nested():
                    repo.upsert_reconciliacao_dia(dia)
            except SQLAlchemyError as e:
                logger.exception(f"   ERRO ao gravar reconciliacao de {data}: {str(e)}")
                falhas.append({"data": data.isoformat(), "erro": str(e)})
                continue

            dias.append(dia)

        db.commit()

        resumo = resumir_reconciliacao(dias, self.limiar_aprovacao)

        logger.info(f"   Dias gravados: {len(dias)} | Falhas: {len(falhas)}")
        logger.info("=" * 50)
        logger.info(
            f"RECONCILIACAO CARTAO - {'APROVADA' if resumo['aprovado_geral'] else 'REPROVADA'}"
        )
        logger.info("=" * 50)

        return {
            "mes": mes,
            "diario": [formatar_dia(d) for d in dias],
            "resumo": resumo,
            "falhas": falhas,
        }

    def consultar(self, db: Session, mes: str) -> Dict[str, Any]:
        """Le os registros diarios gravados e calcula o resumo do mes."""
        mes = validar_mes(mes)

        registros = RepositorioFinanceiro(db).reconciliacoes_do_mes(mes)

        return {
            "mes": mes,
            "diario": [formatar_dia(r) for r in registros],
            "resumo": resumir_reconciliacao(registros, self.limiar_aprovacao),
            "falhas": [],
        }
