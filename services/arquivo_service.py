"""
Service para processamento dos arquivos enviados (vendas e extrato).

Fluxo de um upload:
1. Le o arquivo (planilha xlsx/xls/csv ou extrato pdf/txt)
2. Normaliza para registros canonicos
3. Grava vendas/movimentos com o mes inferido e registra o arquivo
4. Recalcula a reconciliacao de cartao do mes, se houver mes
"""
import io
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import pandas as pd
import pdfplumber
from sqlalchemy.orm import Session

from services.reconciliacao_service import ReconciliacaoService
from services.repositorio import RepositorioFinanceiro
from tools.banco.extrato_texto import normalizar_extrato_texto
from tools.vendas.planilha_vendas import normalizar_planilha_vendas

logger = logging.getLogger(__name__)

EXTENSOES_PLANILHA = (".xlsx", ".xls", ".csv")
EXTENSOES_EXTRATO = (".pdf", ".txt")

TIPO_VENDAS = "sales"
TIPO_BANCO = "bank"

# (conteudo, nome do arquivo)
ArquivoEnviado = Tuple[bytes, str]


def _extensao(nome_arquivo: str) -> str:
    return Path(nome_arquivo or "").suffix.lower()


def _separador_csv(conteudo: bytes) -> str:
    """Exportacoes PT usam ';' (a virgula e o separador decimal)."""
    cabecalho = conteudo.split(b"\n", 1)[0]
    return ";" if cabecalho.count(b";") > cabecalho.count(b",") else ","


def validar_arquivo(
    conteudo: bytes, nome_arquivo: str, extensoes: Tuple[str, ...], rotulo: str
) -> str:
    """Confere extensao e conteudo antes de qualquer leitura; devolve a extensao."""
    extensao = _extensao(nome_arquivo)

    if extensao not in extensoes:
        raise ValueError(
            f"Formato de {rotulo} nao suportado: '{nome_arquivo}'. "
            f"Use {', '.join(extensoes)}"
        )

    if not conteudo:
        raise ValueError(f"Arquivo vazio: '{nome_arquivo}'")

    return extensao


def ler_planilha(conteudo: bytes, nome_arquivo: str) -> pd.DataFrame:
    """Le a planilha de vendas; CSV vem como texto, Excel mantem os tipos das celulas."""
    extensao = validar_arquivo(conteudo, nome_arquivo, EXTENSOES_PLANILHA, "planilha")

    if extensao == ".csv":
        return pd.read_csv(io.BytesIO(conteudo), dtype=str, sep=_separador_csv(conteudo))

    return pd.read_excel(io.BytesIO(conteudo))


def extrair_texto_extrato(conteudo: bytes, nome_arquivo: str) -> str:
    """Texto do extrato: paginas do PDF unidas por quebra de linha, ou o proprio .txt."""
    extensao = validar_arquivo(conteudo, nome_arquivo, EXTENSOES_EXTRATO, "extrato")

    if extensao == ".pdf":
        paginas = []
        with pdfplumber.open(io.BytesIO(conteudo)) as pdf:
            for pagina in pdf.pages:
                paginas.append(pagina.extract_text() or "")
        logger.info(f"[EXTRATO] PDF '{nome_arquivo}': {len(paginas)} paginas")
        return "\n".join(paginas)

    try:
        return conteudo.decode("utf-8")
    except UnicodeDecodeError:
        return conteudo.decode("latin-1")


def _duracao_ms(inicio: float) -> int:
    return int(round((time.perf_counter() - inicio) * 1000))


class ArquivoService:
    """Service para ingestao dos arquivos de vendas e do extrato bancario."""

    def processar_arquivo_vendas(
        self, db: Session, conteudo: bytes, nome_arquivo: str, commit: bool = True
    ) -> Dict[str, Any]:
        inicio = time.perf_counter()

        df = ler_planilha(conteudo, nome_arquivo)
        resultado = normalizar_planilha_vendas(df)

        repo = RepositorioFinanceiro(db)
        for venda in resultado.vendas:
            repo.salvar_venda(venda, resultado.mes)

        duracao = _duracao_ms(inicio)
        repo.registrar_arquivo(
            nome_arquivo=nome_arquivo,
            tipo_arquivo=TIPO_VENDAS,
            mes=resultado.mes,
            linhas_lidas=resultado.linhas_processadas,
            duracao_ms=duracao,
            conteudo_bruto=json.dumps(resultado.registros_brutos, default=str, ensure_ascii=False),
        )
        if commit:
            db.commit()

        logger.info(
            f"[UPLOAD VENDAS] '{nome_arquivo}': {resultado.linhas_processadas} linhas, "
            f"mes={resultado.mes or '-'}, {duracao} ms"
        )

        return {
            "nome_arquivo": nome_arquivo,
            "tipo": TIPO_VENDAS,
            "linhas_lidas": resultado.linhas_processadas,
            "duracao_ms": duracao,
            "mes": resultado.mes,
        }

    def processar_arquivo_banco(
        self, db: Session, conteudo: bytes, nome_arquivo: str, commit: bool = True
    ) -> Dict[str, Any]:
        inicio = time.perf_counter()

        texto = extrair_texto_extrato(conteudo, nome_arquivo)
        resultado = normalizar_extrato_texto(texto)

        repo = RepositorioFinanceiro(db)
        for transacao in resultado.transacoes:
            repo.salvar_transacao(transacao, resultado.mes)

        duracao = _duracao_ms(inicio)
        repo.registrar_arquivo(
            nome_arquivo=nome_arquivo,
            tipo_arquivo=TIPO_BANCO,
            mes=resultado.mes,
            linhas_lidas=len(resultado.transacoes),
            duracao_ms=duracao,
            conteudo_bruto=resultado.texto_bruto,
        )
        if commit:
            db.commit()

        logger.info(
            f"[UPLOAD BANCO] '{nome_arquivo}': {len(resultado.transacoes)} movimentos, "
            f"mes={resultado.mes or '-'}, {duracao} ms"
        )

        return {
            "nome_arquivo": nome_arquivo,
            "tipo": TIPO_BANCO,
            "linhas_lidas": len(resultado.transacoes),
            "duracao_ms": duracao,
            "mes": resultado.mes,
        }

    def processar_upload(
        self,
        db: Session,
        vendas: Optional[ArquivoEnviado] = None,
        banco: Optional[ArquivoEnviado] = None,
    ) -> Dict[str, Any]:
        """
        Processa os arquivos enviados e dispara a reconciliacao do mes.

        O mes inferido e o das vendas; sem vendas, o do extrato. Os arquivos
        sao gravados numa unica transacao: se um deles falhar nada e gravado.
        """
        if vendas is None and banco is None:
            raise ValueError("Nenhum arquivo enviado. Envie 'vendas' e/ou 'banco'")

        if vendas is not None:
            validar_arquivo(*vendas, EXTENSOES_PLANILHA, "planilha")
        if banco is not None:
            validar_arquivo(*banco, EXTENSOES_EXTRATO, "extrato")

        logger.info("=" * 50)
        logger.info("UPLOAD - INICIO")
        logger.info("=" * 50)

        arquivos = []
        mes_vendas = ""
        mes_banco = ""

        try:
            if vendas is not None:
                metricas = self.processar_arquivo_vendas(db, *vendas, commit=False)
                mes_vendas = metricas["mes"]
                arquivos.append(metricas)

            if banco is not None:
                metricas = self.processar_arquivo_banco(db, *banco, commit=False)
                mes_banco = metricas["mes"]
                arquivos.append(metricas)

            db.commit()
        except Exception:
            db.rollback()
            logger.error("   Upload cancelado; nenhum arquivo gravado")
            raise

        mes = mes_vendas or mes_banco

        reconciliacao = None
        if mes:
            reconciliacao = ReconciliacaoService().executar(db, mes)["resumo"]
        else:
            logger.warning("   Nenhum mes inferido; reconciliacao nao executada")

        logger.info("=" * 50)
        logger.info(f"UPLOAD - FIM ({len(arquivos)} arquivos, mes={mes or '-'})")
        logger.info("=" * 50)

        return {
            "sucesso": True,
            "mes_inferido": mes,
            "resultados": arquivos,
            "reconciliacao": reconciliacao,
        }
