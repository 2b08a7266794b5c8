"""
Router para o relatorio de IVA e a exportacao CSV.
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from db import get_db
from schemas.relatorio_schema import RelatorioIvaResponse
from services.iva_service import IvaService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/iva", tags=["IVA"])


@router.get("/relatorio", response_model=RelatorioIvaResponse)
def relatorio_iva(mes: Optional[str] = None, db: Session = Depends(get_db)):
    """Base tributavel, IVA e bruto por dia e taxa, com totais."""
    try:
        return IvaService().relatorio(db, mes)

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        logger.exception(f"Erro interno: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Erro interno ao gerar relatorio de IVA: {str(e)}"
        )


@router.get("/export.csv")
def exportar_csv(mes: Optional[str] = None, db: Session = Depends(get_db)):
    """Vendas do mes em CSV, para a contabilidade."""
    try:
        conteudo = IvaService().exportar_csv(db, mes)

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        logger.exception(f"Erro interno: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Erro interno ao exportar CSV: {str(e)}"
        )

    return Response(
        content=conteudo,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="vat-{mes}.csv"'},
    )
