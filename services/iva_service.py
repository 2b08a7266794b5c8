"""
Service para o relatorio de IVA e a exportacao CSV das vendas.
"""
import logging
from typing import Any, Dict, List

import pandas as pd
from sqlalchemy.orm import Session

from services.repositorio import RepositorioFinanceiro
from tools.base import validar_mes, vendas_para_dataframe

logger = logging.getLogger(__name__)

# Cabecalho do CSV exportado (layout esperado pela contabilidade)
COLUNAS_CSV = {
    "data": "Date",
    "numero_fatura": "Invoice",
    "cliente": "Customer",
    "produto": "Product",
    "quantidade": "Quantity",
    "preco_unitario": "Unit Price",
    "taxa_iva": "VAT Rate",
    "valor_liquido": "Net Amount",
    "valor_iva": "VAT Amount",
    "valor_bruto": "Gross Amount",
    "forma_pagamento": "Payment Method",
}


def _rotulo_taxa(taxa: float) -> str:
    return f"{taxa:g}%"


def _totais(grupo: pd.DataFrame) -> Dict[str, float]:
    return {
        "base_tributavel": round(float(grupo["valor_liquido"].sum()), 2),
        "valor_iva": round(float(grupo["valor_iva"].sum()), 2),
        "valor_bruto": round(float(grupo["valor_bruto"].sum()), 2),
    }


class IvaService:
    """Agrega as vendas por dia e taxa de IVA."""

    def relatorio(self, db: Session, mes: str) -> Dict[str, Any]:
        mes = validar_mes(mes)
        df = vendas_para_dataframe(RepositorioFinanceiro(db).vendas_do_mes(mes))

        diario: List[Dict[str, Any]] = []
        totais_por_taxa: List[Dict[str, Any]] = []

        if not df.empty:
            for data, grupo_dia in df.groupby("data", sort=True):
                diario.append({
                    "data": data.isoformat(),
                    "por_taxa": [
                        {"taxa": _rotulo_taxa(taxa), **_totais(grupo)}
                        for taxa, grupo in grupo_dia.groupby("taxa_iva", sort=False)
                    ],
                })

            totais_por_taxa = [
                {"taxa": _rotulo_taxa(taxa), **_totais(grupo)}
                for taxa, grupo in df.groupby("taxa_iva", sort=False)
            ]

        logger.info(f"[IVA] Relatorio {mes}: {len(diario)} dias, {len(totais_por_taxa)} taxas")

        return {
            "mes": mes,
            "diario": diario,
            "totais_por_taxa": totais_por_taxa,
            "total_geral": _totais(df),
        }

    def exportar_csv(self, db: Session, mes: str) -> str:
        """CSV das vendas do mes, ordenadas por data."""
        mes = validar_mes(mes)
        df = vendas_para_dataframe(RepositorioFinanceiro(db).vendas_do_mes(mes))

        df = df.sort_values("data", kind="mergesort")
        df["data"] = df["data"].apply(lambda d: d.isoformat())
        for col in ["preco_unitario", "valor_liquido", "valor_iva", "valor_bruto"]:
            df[col] = df[col].map(lambda v: f"{v:.2f}")
        for col in ["quantidade", "taxa_iva"]:
            df[col] = df[col].map(lambda v: f"{v:g}")

        df = df[list(COLUNAS_CSV.keys())].rename(columns=COLUNAS_CSV)
        return df.to_csv(index=False, lineterminator="\n")
