"""
Pacote de processamento da planilha de vendas.

Uso básico:
    >>> from tools.vendas import normalizar_planilha_vendas
    >>> resultado = normalizar_planilha_vendas(linhas)
    >>> resultado.mes, resultado.linhas_processadas
"""

from .planilha_vendas import (
    ALIASES_CABECALHO,
    ResultadoPlanilhaVendas,
    normalizar_nome_cabecalho,
    normalizar_planilha_vendas,
)

__all__ = [
    "ALIASES_CABECALHO",
    "ResultadoPlanilhaVendas",
    "normalizar_nome_cabecalho",
    "normalizar_planilha_vendas",
]
