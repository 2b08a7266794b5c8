"""
Service para os indicadores (KPIs) de vendas do mes.
"""
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from services.repositorio import RepositorioFinanceiro
from tools.base import validar_mes, vendas_para_dataframe

logger = logging.getLogger(__name__)


class KpiService:
    """Service para calcular KPIs a partir das vendas gravadas."""

    def _carregar(self, db: Session, mes: str):
        mes = validar_mes(mes)
        vendas = RepositorioFinanceiro(db).vendas_do_mes(mes)
        return mes, vendas_para_dataframe(vendas)

    def resumo(self, db: Session, mes: str) -> Dict[str, Any]:
        """Receita, numero de faturas, ticket medio e divisao por forma de pagamento."""
        mes, df = self._carregar(db, mes)

        if df.empty:
            return {
                "mes": mes,
                "receita": 0.0,
                "faturas": 0,
                "ticket_medio": 0.0,
                "divisao_pagamento": {},
            }

        receita = float(df["valor_bruto"].sum())
        faturas = int(df["numero_fatura"].nunique())
        ticket_medio = receita / faturas if faturas else 0.0

        divisao = df.groupby("forma_pagamento", sort=False)["valor_bruto"].sum()

        return {
            "mes": mes,
            "receita": round(receita, 2),
            "faturas": faturas,
            "ticket_medio": round(ticket_medio, 2),
            "divisao_pagamento": {
                str(forma): round(float(total), 2) for forma, total in divisao.items()
            },
        }

    def diario(self, db: Session, mes: str) -> Dict[str, Any]:
        """Serie de receita por dia, ordenada por data."""
        mes, df = self._carregar(db, mes)

        serie = []
        if not df.empty:
            por_dia = df.groupby("data")["valor_bruto"].sum().sort_index()
            serie = [
                {"data": data.isoformat(), "receita": round(float(total), 2)}
                for data, total in por_dia.items()
            ]

        return {"mes": mes, "serie": serie}

    def top_clientes(self, db: Session, mes: str, limite: int = 10) -> Dict[str, Any]:
        """Clientes com maior receita no mes."""
        if limite <= 0:
            raise ValueError("limite deve ser maior que zero")

        mes, df = self._carregar(db, mes)

        clientes = []
        if not df.empty:
            agrupado = df.groupby("cliente").agg(
                receita=("valor_bruto", "sum"),
                faturas=("numero_fatura", "nunique"),
            ).sort_values("receita", ascending=False, kind="mergesort").head(limite)

            clientes = [
                {
                    "cliente": str(cliente),
                    "receita": round(float(linha["receita"]), 2),
                    "faturas": int(linha["faturas"]),
                }
                for cliente, linha in agrupado.iterrows()
            ]

        return {"mes": mes, "clientes": clientes}

    def top_produtos(self, db: Session, mes: str, limite: int = 10) -> Dict[str, Any]:
        """Produtos com maior receita no mes, com a quantidade vendida."""
        if limite <= 0:
            raise ValueError("limite deve ser maior que zero")

        mes, df = self._carregar(db, mes)

        produtos = []
        if not df.empty:
            agrupado = df.groupby("produto").agg(
                receita=("valor_bruto", "sum"),
                quantidade=("quantidade", "sum"),
            ).sort_values("receita", ascending=False, kind="mergesort").head(limite)

            produtos = [
                {
                    "produto": str(produto),
                    "receita": round(float(linha["receita"]), 2),
                    "quantidade": round(float(linha["quantidade"]), 2),
                }
                for produto, linha in agrupado.iterrows()
            ]

        return {"mes": mes, "produtos": produtos}
