"""
Modulo de processamento do Extrato Bancario e da Reconciliacao de Cartao.

Contem ferramentas para normalizar o extrato em texto, classificar os
movimentos (fecho TPA, comissoes) e reconciliar as vendas com cartao por dia.
"""

from .extrato_texto import normalizar_extrato_texto, ResultadoExtratoBancario
from .classificacao import classificar_transacao
from .calc_reconciliacao_cartao import (
    calcular_dia_reconciliacao,
    calcular_reconciliacao_cartao,
    resumir_reconciliacao,
)

__all__ = [
    "normalizar_extrato_texto",
    "ResultadoExtratoBancario",
    "classificar_transacao",
    "calcular_dia_reconciliacao",
    "calcular_reconciliacao_cartao",
    "resumir_reconciliacao",
]
