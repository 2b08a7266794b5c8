# models/__init__.py
"""
Importações dos modelos para registrar todas as tabelas no metadata.

Os modelos sao independentes entre si (sem FK): o vinculo entre vendas,
movimentos e reconciliacoes e o mes de referencia (YYYY-MM).
"""

# Importa Base do db.py
from db import Base

from .arquivo_carregado import ArquivoCarregado
from .venda import Venda
from .transacao_bancaria import TransacaoBancaria
from .reconciliacao_diaria import ReconciliacaoDiaria

# Lista todos os modelos exportados
__all__ = [
    "Base",
    "ArquivoCarregado",
    "Venda",
    "TransacaoBancaria",
    "ReconciliacaoDiaria",
]
