"""
Modulo de normalizacao da Planilha de Vendas.

Processa a exportacao mensal de vendas (PT-PT) extraindo:
- Data da venda
- Fatura, cliente, produto
- Quantidade, preco unitario e taxa de IVA
- Valores liquido, IVA e bruto (calculados quando faltam)
- Forma de pagamento

Os cabecalhos variam de ficheiro para ficheiro ("Liquido", "Valor Líquido",
"Base"...), por isso cada coluna passa por uma tabela de aliases.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List

import pandas as pd

from tools.base import (
    ZERO,
    VendaCanonica,
    valor_vazio,
    inferir_mes_dominante,
    parse_data_pt,
    parse_numero_pt,
)

logger = logging.getLogger(__name__)

CEM = Decimal("100")


# =============================================================================
# MAPEAMENTO DE CABECALHOS
# =============================================================================

ALIASES_CABECALHO: Dict[str, str] = {
    # Data
    "data": "data",

    # Fatura
    "fatura": "numero_fatura",
    "factura": "numero_fatura",
    "n° fatura": "numero_fatura",
    "nº fatura": "numero_fatura",
    "numero": "numero_fatura",

    # Cliente
    "cliente": "cliente",
    "nome": "cliente",

    # Produto
    "produto": "produto",
    "artigo": "produto",
    "descrição": "produto",
    "descricao": "produto",

    # Quantidade
    "quantidade": "quantidade",
    "qtd": "quantidade",

    # Preco unitario (sem IVA)
    "preço unitário": "preco_unitario",
    "preco unitario": "preco_unitario",
    "p.u.": "preco_unitario",
    "preço": "preco_unitario",
    "preco": "preco_unitario",

    # Taxa de IVA
    "taxa iva": "taxa_iva",
    "taxa": "taxa_iva",
    "iva %": "taxa_iva",
    "%iva": "taxa_iva",

    # Valor liquido
    "valor liquido": "valor_liquido",
    "valor líquido": "valor_liquido",
    "liquido": "valor_liquido",
    "líquido": "valor_liquido",
    "base": "valor_liquido",

    # Valor do IVA
    "valor iva": "valor_iva",
    "iva": "valor_iva",

    # Valor bruto
    "valor total": "valor_bruto",
    "total": "valor_bruto",
    "bruto": "valor_bruto",

    # Forma de pagamento
    "pagamento": "forma_pagamento",
    "forma pagamento": "forma_pagamento",
    "metodo": "forma_pagamento",
    "método": "forma_pagamento",
}

# Montado uma vez no import
_ALIASES_CASEFOLD: Dict[str, str] = {
    alias.casefold(): campo for alias, campo in ALIASES_CABECALHO.items()
}


def normalizar_nome_cabecalho(cabecalho: Any) -> str:
    """
    Converte o cabecalho de uma coluna no nome do campo canonico.

    Tenta o alias exato e depois sem diferenciar maiusculas. Cabecalhos
    desconhecidos voltam como vieram (sem espacos nas pontas).
    """
    if valor_vazio(cabecalho):
        return ""

    limpo = str(cabecalho).strip()

    if limpo in ALIASES_CABECALHO:
        return ALIASES_CABECALHO[limpo]

    return _ALIASES_CASEFOLD.get(limpo.casefold(), limpo)


# =============================================================================
# FUNCOES AUXILIARES
# =============================================================================

def _texto(valor: Any) -> str:
    """Converte celula em texto limpo ("" quando vazia)."""
    if valor_vazio(valor):
        return ""
    if isinstance(valor, float) and valor.is_integer():
        return str(int(valor))
    return str(valor).strip()


def _linhas_para_registros(entrada: Any) -> List[Dict[str, Any]]:
    """Aceita DataFrame, lista de dicts ou lista de linhas com cabecalho."""
    if isinstance(entrada, pd.DataFrame):
        return entrada.to_dict("records")

    if isinstance(entrada, str):
        return pd.read_excel(entrada).to_dict("records")

    if isinstance(entrada, (list, tuple)):
        if not entrada:
            return []
        if all(isinstance(linha, dict) for linha in entrada):
            return [dict(linha) for linha in entrada]
        if all(isinstance(linha, (list, tuple)) for linha in entrada):
            cabecalho = list(entrada[0])
            return [
                dict(zip(cabecalho, linha))
                for linha in entrada[1:]
            ]

    raise ValueError(
        "entrada deve ser DataFrame, caminho de arquivo ou lista de linhas"
    )


def _linha_vazia(registro: Dict[str, Any]) -> bool:
    return all(valor_vazio(v) for v in registro.values())


def _mapear_linha(registro: Dict[str, Any]) -> Dict[str, Any]:
    mapeado: Dict[str, Any] = {}
    for cabecalho, valor in registro.items():
        mapeado[normalizar_nome_cabecalho(cabecalho)] = valor
    return mapeado


def _normalizar_linha(mapeado: Dict[str, Any]):
    data = parse_data_pt(mapeado.get("data"))
    if data is None:
        return None

    quantidade = parse_numero_pt(mapeado.get("quantidade"))
    preco_unitario = parse_numero_pt(mapeado.get("preco_unitario"))
    taxa_iva = parse_numero_pt(mapeado.get("taxa_iva"))
    valor_liquido = parse_numero_pt(mapeado.get("valor_liquido"))
    valor_iva = parse_numero_pt(mapeado.get("valor_iva"))
    valor_bruto = parse_numero_pt(mapeado.get("valor_bruto"))

    # Campos derivados, nesta ordem e so quando vierem zerados
    if valor_liquido == ZERO and quantidade > 0 and preco_unitario > 0:
        valor_liquido = quantidade * preco_unitario

    if valor_iva == ZERO and valor_liquido > 0 and taxa_iva > 0:
        valor_iva = valor_liquido * taxa_iva / CEM

    if valor_bruto == ZERO and valor_liquido > 0:
        valor_bruto = valor_liquido + valor_iva

    return VendaCanonica(
        data=data,
        numero_fatura=_texto(mapeado.get("numero_fatura")),
        cliente=_texto(mapeado.get("cliente")),
        produto=_texto(mapeado.get("produto")),
        quantidade=quantidade,
        preco_unitario=preco_unitario,
        taxa_iva=taxa_iva,
        valor_liquido=valor_liquido,
        valor_iva=valor_iva,
        valor_bruto=valor_bruto,
        forma_pagamento=_texto(mapeado.get("forma_pagamento")),
    )


# =============================================================================
# FUNCAO PRINCIPAL
# =============================================================================

@dataclass
class ResultadoPlanilhaVendas:
    """Resultado da normalizacao da planilha de vendas."""
    vendas: List[VendaCanonica]
    mes: str
    linhas_processadas: int
    registros_brutos: List[Dict[str, Any]] = field(default_factory=list)


def normalizar_planilha_vendas(entrada: Any) -> ResultadoPlanilhaVendas:
    """
    Normaliza a planilha de vendas em registros canonicos.

    Linhas totalmente vazias e linhas sem data valida sao descartadas sem
    erro; quem chama avalia a qualidade pelo numero de linhas processadas.

    Args:
        entrada: DataFrame, caminho para arquivo Excel, lista de dicts
            (cabecalho -> celula) ou lista de linhas com o cabecalho primeiro

    Returns:
        ResultadoPlanilhaVendas com as vendas, o mes dominante e a contagem
    """
    logger.info("[PLANILHA VENDAS] Iniciando normalizacao")

    registros = _linhas_para_registros(entrada)
    logger.info(f"[PLANILHA VENDAS] Registros lidos: {len(registros)}")

    if registros:
        colunas = list(registros[0].keys())
        logger.info(
            f"[PLANILHA VENDAS] Colunas mapeadas: "
            f"{ {str(c): normalizar_nome_cabecalho(c) for c in colunas} }"
        )

    vendas: List[VendaCanonica] = []
    vazias = 0
    sem_data = 0

    for registro in registros:
        if _linha_vazia(registro):
            vazias += 1
            continue

        venda = _normalizar_linha(_mapear_linha(registro))
        if venda is None:
            sem_data += 1
            continue

        vendas.append(venda)

    mes = inferir_mes_dominante(v.data for v in vendas)

    if vazias or sem_data:
        logger.debug(
            f"[PLANILHA VENDAS] Linhas descartadas: {vazias} vazias, {sem_data} sem data valida"
        )
    logger.info(f"[PLANILHA VENDAS] Vendas normalizadas: {len(vendas)}")
    logger.info(f"[PLANILHA VENDAS] Mes inferido: {mes or '(nenhum)'}")

    return ResultadoPlanilhaVendas(
        vendas=vendas,
        mes=mes,
        linhas_processadas=len(vendas),
        registros_brutos=registros,
    )
