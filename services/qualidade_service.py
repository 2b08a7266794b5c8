"""
Servico de qualidade dos dados de vendas.
"""
import logging
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from core.config import settings
from services.repositorio import RepositorioFinanceiro
from tools.base import validar_mes
from tools.qualidade.anomalias import Anomalia, detectar_anomalias

logger = logging.getLogger(__name__)


def _valor_json(valor: Any) -> Any:
    if isinstance(valor, Decimal):
        return round(float(valor), 2)
    return valor


def formatar_anomalia(anomalia: Anomalia) -> Dict[str, Any]:
    return {
        "tipo": anomalia.tipo.value,
        "severidade": anomalia.severidade.value,
        "mensagem": anomalia.mensagem,
        "registro": {k: _valor_json(v) for k, v in anomalia.registro.items()},
    }


class QualidadeService:
    """Executa as verificacoes de anomalias sobre as vendas gravadas."""

    def detectar(self, db: Session, mes: str) -> Dict[str, Any]:
        mes = validar_mes(mes)

        vendas = RepositorioFinanceiro(db).vendas_do_mes(mes)
        logger.info(f"[QUALIDADE] Verificando {len(vendas)} vendas de {mes}")

        resultado = detectar_anomalias(
            vendas,
            mes,
            tolerancia=Decimal(str(settings.TOLERANCIA_ANOMALIA)),
        )

        return {
            "mes": mes,
            "anomalias": [formatar_anomalia(a) for a in resultado.anomalias],
            "resumo": resultado.resumo,
        }
