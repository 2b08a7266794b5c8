"""
Schemas para os relatorios de KPIs e de IVA.
"""
from pydantic import BaseModel
from typing import Dict, List


# ==================================================
# KPIs
# ==================================================
class KpiResumoResponse(BaseModel):
    """Indicadores do mes."""
    mes: str
    receita: float
    faturas: int
    ticket_medio: float
    divisao_pagamento: Dict[str, float]  # forma de pagamento -> receita


class PontoReceita(BaseModel):
    data: str
    receita: float


class KpiDiarioResponse(BaseModel):
    mes: str
    serie: List[PontoReceita]


class ClienteReceita(BaseModel):
    cliente: str
    receita: float
    faturas: int


class TopClientesResponse(BaseModel):
    mes: str
    clientes: List[ClienteReceita]


class ProdutoReceita(BaseModel):
    produto: str
    receita: float
    quantidade: float


class TopProdutosResponse(BaseModel):
    mes: str
    produtos: List[ProdutoReceita]


# ==================================================
# IVA
# ==================================================
class TotaisIva(BaseModel):
    base_tributavel: float
    valor_iva: float
    valor_bruto: float


class TotaisTaxaIva(TotaisIva):
    taxa: str  # "14%"


class DiaIva(BaseModel):
    data: str
    por_taxa: List[TotaisTaxaIva]


class RelatorioIvaResponse(BaseModel):
    mes: str
    diario: List[DiaIva]
    totais_por_taxa: List[TotaisTaxaIva]
    total_geral: TotaisIva
