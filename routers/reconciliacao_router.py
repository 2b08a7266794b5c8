"""
Router para endpoints da Reconciliacao de Cartao.

Endpoints:
- GET  /reconciliacao/cartao?mes=YYYY-MM - Reconciliacao gravada do mes
- POST /reconciliacao/cartao?mes=YYYY-MM - Recalcula e grava a reconciliacao
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from db import get_db
from schemas.reconciliacao_schema import ReconciliacaoResponse
from services.reconciliacao_service import ReconciliacaoService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reconciliacao",
    tags=["Reconciliacao Cartao"],
)


@router.get("/cartao", response_model=ReconciliacaoResponse)
def consultar_reconciliacao(mes: Optional[str] = None, db: Session = Depends(get_db)):
    """Registros diarios gravados, ordenados por data, e o resumo do mes."""
    try:
        return ReconciliacaoService().consultar(db, mes)

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        logger.exception(f"Erro interno: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Erro interno ao consultar reconciliacao: {str(e)}"
        )


@router.post("/cartao", response_model=ReconciliacaoResponse)
def executar_reconciliacao(mes: Optional[str] = None, db: Session = Depends(get_db)):
    """Recalcula a reconciliacao de cartao do mes (idempotente)."""
    logger.info("=" * 50)
    logger.info(f"ENDPOINT: POST /reconciliacao/cartao?mes={mes}")
    logger.info("=" * 50)

    try:
        return ReconciliacaoService().executar(db, mes)

    except ValueError as e:
        logger.error(f"Erro de validacao: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        logger.exception(f"Erro interno: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Erro interno ao processar reconciliacao: {str(e)}"
        )
