"""
Router para as verificacoes de qualidade das vendas.
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from db import get_db
from schemas.qualidade_schema import AnomaliasResponse
from services.qualidade_service import QualidadeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/qualidade", tags=["Qualidade"])


@router.get("/anomalias", response_model=AnomaliasResponse)
def listar_anomalias(mes: Optional[str] = None, db: Session = Depends(get_db)):
    """Anomalias das vendas do mes e contagem por severidade."""
    try:
        return QualidadeService().detectar(db, mes)

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        logger.exception(f"Erro interno: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Erro interno ao detectar anomalias: {str(e)}"
        )
