"""
Modulo de normalizacao de Extrato Bancario em texto (PDF ja convertido).

Processa o texto do extrato linha a linha extraindo:
- Data do movimento (inicio da linha)
- Descricao
- Debito / credito
- Saldo (ultimo numero da linha)
- Classificacao: fecho TPA, comissao, IVA sobre comissao

Layout esperado (uma linha por movimento):
DATA  DESCRICAO  [DEBITO]  [CREDITO]  SALDO

Linhas sem data no inicio (titulos, cabecalhos, separadores) sao ignoradas.
"""

import re
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple

from tools.base import (
    ZERO,
    TransacaoCanonica,
    inferir_mes_dominante,
    parse_data_pt,
    parse_numero_pt,
)
from tools.banco.classificacao import (
    classificar_transacao,
    tem_palavra_credito,
    tem_palavra_debito,
)

logger = logging.getLogger(__name__)

DESCRICAO_VAZIA = "N/A"

PADRAO_DATA_INICIO = re.compile(
    r"^(\d{4}-\d{2}-\d{2}|\d{2}[-/]\d{2}[-/]\d{4}|\d{1,2}[-/]\d{1,2}[-/]\d{4})"
)

# Sequencias de digitos, "." e ","; um "." isolado conta como 0
PADRAO_NUMERO = re.compile(r"[\d.,]+")


# =============================================================================
# FUNCOES AUXILIARES
# =============================================================================

def _remover_numeros_descricao(texto: str, numeros: List[str]) -> str:
    """Corta da descricao os ultimos 2-3 numeros (debito, credito, saldo)."""
    descricao = texto
    for numero in numeros[-3:]:
        posicao = descricao.rfind(numero)
        if posicao != -1:
            descricao = descricao[:posicao].strip()
    return descricao.strip()


def _atribuir_valores(
    numeros: List[str],
    descricao: str,
) -> Tuple[Optional[Decimal], Optional[Decimal], Decimal]:
    """
    Distribui os numeros da linha em (debito, credito, saldo).

    - ultimo numero: saldo
    - 3+ numeros: os dois antes do saldo sao candidatos (debito, credito);
      se so um for diferente de zero vai direto, senao decide pelas
      palavras-chave da descricao
    - 2 numeros: um valor + saldo, credito ou debito pelas palavras-chave
    """
    debito: Optional[Decimal] = None
    credito: Optional[Decimal] = None

    if not numeros:
        return debito, credito, ZERO

    saldo = parse_numero_pt(numeros[-1])

    if len(numeros) >= 3:
        candidato_debito = parse_numero_pt(numeros[-3])
        candidato_credito = parse_numero_pt(numeros[-2])

        if candidato_debito > 0 and candidato_credito == ZERO:
            debito = candidato_debito
        elif candidato_credito > 0 and candidato_debito == ZERO:
            credito = candidato_credito
        elif tem_palavra_debito(descricao):
            debito = candidato_debito
            credito = candidato_credito if candidato_credito > 0 else None
        else:
            credito = candidato_credito
            debito = candidato_debito if candidato_debito > 0 else None

    elif len(numeros) == 2:
        valor = parse_numero_pt(numeros[0])
        if tem_palavra_credito(descricao):
            credito = valor
        else:
            debito = valor

    return debito, credito, saldo


def parse_linha_extrato(linha: str) -> Optional[TransacaoCanonica]:
    """Converte uma linha do extrato em transacao, ou None se nao for movimento."""
    linha = (linha or "").strip()
    if not linha:
        return None

    match = PADRAO_DATA_INICIO.match(linha)
    if not match:
        return None

    data = parse_data_pt(match.group(1))
    if data is None:
        return None

    resto = linha[match.end():].strip()
    numeros = PADRAO_NUMERO.findall(resto)

    descricao = _remover_numeros_descricao(resto, numeros)
    debito, credito, saldo = _atribuir_valores(numeros, descricao)

    return TransacaoCanonica(
        data=data,
        descricao=descricao or DESCRICAO_VAZIA,
        debito=debito,
        credito=credito,
        saldo=saldo,
        **classificar_transacao(descricao),
    )


# =============================================================================
# FUNCAO PRINCIPAL
# =============================================================================

@dataclass
class ResultadoExtratoBancario:
    """Resultado da normalizacao do extrato em texto."""
    transacoes: List[TransacaoCanonica]
    mes: str
    linhas_lidas: int
    texto_bruto: str = ""


def normalizar_extrato_texto(texto: str) -> ResultadoExtratoBancario:
    """
    Normaliza o texto de um extrato bancario em transacoes canonicas.

    Parser tolerante: linhas que nao tem o formato de movimento sao
    ignoradas sem erro.

    Args:
        texto: Texto completo do extrato (uma linha por movimento)

    Returns:
        ResultadoExtratoBancario com transacoes, mes dominante e contagem
    """
    logger.info("[EXTRATO TEXTO] Iniciando normalizacao")

    texto = texto or ""
    linhas = [l.strip() for l in texto.splitlines() if l.strip()]
    logger.info(f"[EXTRATO TEXTO] Linhas nao vazias: {len(linhas)}")

    transacoes: List[TransacaoCanonica] = []
    for linha in linhas:
        transacao = parse_linha_extrato(linha)
        if transacao is not None:
            transacoes.append(transacao)

    mes = inferir_mes_dominante(t.data for t in transacoes)

    logger.debug(f"[EXTRATO TEXTO] Linhas ignoradas: {len(linhas) - len(transacoes)}")
    logger.info(f"[EXTRATO TEXTO] Movimentos normalizados: {len(transacoes)}")
    logger.info(
        f"[EXTRATO TEXTO] Fechos TPA: {sum(1 for t in transacoes if t.e_liquidacao_tpa)} | "
        f"Comissoes: {sum(1 for t in transacoes if t.e_comissao or t.e_iva_comissao)}"
    )
    logger.info(f"[EXTRATO TEXTO] Mes inferido: {mes or '(nenhum)'}")

    return ResultadoExtratoBancario(
        transacoes=transacoes,
        mes=mes,
        linhas_lidas=len(transacoes),
        texto_bruto=texto,
    )
