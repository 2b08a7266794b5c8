"""Verificacoes de qualidade das vendas canonicas."""

from .anomalias import (
    Anomalia,
    ResultadoAnomalias,
    Severidade,
    TipoAnomalia,
    detectar_anomalias,
)

__all__ = [
    "Anomalia",
    "ResultadoAnomalias",
    "Severidade",
    "TipoAnomalia",
    "detectar_anomalias",
]
