"""
Schemas para o upload de arquivos.
"""
from pydantic import BaseModel
from typing import List, Optional

from schemas.reconciliacao_schema import ResumoReconciliacao


class MetricasArquivo(BaseModel):
    """Metricas de processamento de um arquivo enviado."""
    nome_arquivo: str
    tipo: str  # "sales" ou "bank"
    linhas_lidas: int
    duracao_ms: int
    mes: str  # YYYY-MM ou "" quando nenhuma data valida


class UploadResponse(BaseModel):
    """Response do upload de vendas e/ou extrato."""
    sucesso: bool
    mes_inferido: str
    resultados: List[MetricasArquivo]
    reconciliacao: Optional[ResumoReconciliacao] = None


class UltimoMesResponse(BaseModel):
    mes: str
