"""
Schemas para a Reconciliacao de Cartao.
"""
from pydantic import BaseModel
from typing import List


class DiaReconciliacaoResponse(BaseModel):
    """Reconciliacao de um dia (valores arredondados a 2 casas)."""
    data: str
    vendas_cartao: float
    liquidacao_banco: float
    comissoes: float
    delta: float
    delta_percentual: float
    aprovado: bool


class ResumoReconciliacao(BaseModel):
    """Resumo mensal: o mes passa com taxa de dias aprovados >= limiar."""
    total_dias: int
    dias_aprovados: int
    taxa_aprovacao: float  # Percentual 0-100
    aprovado_geral: bool


class FalhaDia(BaseModel):
    data: str
    erro: str


class ReconciliacaoResponse(BaseModel):
    mes: str
    diario: List[DiaReconciliacaoResponse]
    resumo: ResumoReconciliacao
    falhas: List[FalhaDia] = []
