"""
Schemas para as anomalias de qualidade dos dados.
"""
from pydantic import BaseModel
from typing import Any, Dict, List


class AnomaliaResponse(BaseModel):
    tipo: str  # "inconsistent_total", "invalid_date", "negative", "duplicate"
    severidade: str  # "error" ou "warning"
    mensagem: str
    registro: Dict[str, Any]


class ResumoAnomalias(BaseModel):
    total: int
    errors: int
    warnings: int


class AnomaliasResponse(BaseModel):
    mes: str
    anomalias: List[AnomaliaResponse]
    resumo: ResumoAnomalias
