"""
Router para os indicadores de vendas.

Endpoints:
- GET /kpi/resumo?mes=YYYY-MM
- GET /kpi/diario?mes=YYYY-MM
- GET /kpi/top-clientes?mes=YYYY-MM&limite=10
- GET /kpi/top-produtos?mes=YYYY-MM&limite=10
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from db import get_db
from schemas.relatorio_schema import (
    KpiDiarioResponse,
    KpiResumoResponse,
    TopClientesResponse,
    TopProdutosResponse,
)
from services.kpi_service import KpiService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/kpi", tags=["KPIs"])


def _executar(funcao, *args):
    try:
        return funcao(*args)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Erro interno: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Erro interno ao calcular KPIs: {str(e)}"
        )


@router.get("/resumo", response_model=KpiResumoResponse)
def resumo(mes: Optional[str] = None, db: Session = Depends(get_db)):
    return _executar(KpiService().resumo, db, mes)


@router.get("/diario", response_model=KpiDiarioResponse)
def diario(mes: Optional[str] = None, db: Session = Depends(get_db)):
    return _executar(KpiService().diario, db, mes)


@router.get("/top-clientes", response_model=TopClientesResponse)
def top_clientes(mes: Optional[str] = None, limite: int = 10, db: Session = Depends(get_db)):
    return _executar(KpiService().top_clientes, db, mes, limite)


@router.get("/top-produtos", response_model=TopProdutosResponse)
def top_produtos(mes: Optional[str] = None, limite: int = 10, db: Session = Depends(get_db)):
    return _executar(KpiService().top_produtos, db, mes, limite)
