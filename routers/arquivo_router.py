"""
Router para o upload dos arquivos de vendas e do extrato bancario.

Endpoints:
- POST /arquivos/upload - Processa vendas e/ou extrato e reconcilia o mes
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from core.config import settings
from db import get_db
from schemas.arquivo_schema import UploadResponse
from services.arquivo_service import ArquivoService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/arquivos", tags=["Arquivos"])


async def _ler_arquivo(arquivo: Optional[UploadFile]):
    """Le o conteudo do upload respeitando o limite de tamanho."""
    if arquivo is None:
        return None

    conteudo = await arquivo.read()
    limite = settings.MAX_UPLOAD_MB * 1024 * 1024
    if len(conteudo) > limite:
        raise HTTPException(
            status_code=413,
            detail=f"Arquivo '{arquivo.filename}' excede o limite de {settings.MAX_UPLOAD_MB} MB"
        )
    return conteudo, arquivo.filename or ""


@router.post("/upload", response_model=UploadResponse)
async def upload_arquivos(
    vendas: Optional[UploadFile] = File(None),
    banco: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db)
):
    """
    Faz upload da planilha de vendas e/ou do extrato bancario.

    Recebe:
    - vendas: planilha .xlsx/.xls/.csv
    - banco: extrato .pdf/.txt

    Retorna:
    - Metricas de cada arquivo, mes inferido e resumo da reconciliacao
    """
    logger.info("=" * 50)
    logger.info("ENDPOINT: POST /arquivos/upload")
    logger.info("=" * 50)

    arquivo_vendas = await _ler_arquivo(vendas)
    arquivo_banco = await _ler_arquivo(banco)

    try:
        return ArquivoService().processar_upload(
            db,
            vendas=arquivo_vendas,
            banco=arquivo_banco,
        )

    except ValueError as e:
        logger.error(f"Erro de validacao: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        logger.exception(f"Erro interno: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Erro interno ao processar upload: {str(e)}"
        )
