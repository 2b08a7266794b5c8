# models/venda.py
from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric
from sqlalchemy.sql import func
from db import Base


class Venda(Base):
    """Venda canonica extraida da planilha mensal."""

    __tablename__ = "vendas"

    # Colunas
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    mes = Column(String(7), nullable=False, index=True)  # YYYY-MM inferido do arquivo
    data = Column(Date, nullable=False, index=True)
    numero_fatura = Column(String(100), nullable=False, default="")
    cliente = Column(String(255), nullable=False, default="")
    produto = Column(String(255), nullable=False, default="")
    quantidade = Column(Numeric(18, 4), nullable=False, default=0)
    preco_unitario = Column(Numeric(18, 4), nullable=False, default=0)
    taxa_iva = Column(Numeric(9, 4), nullable=False, default=0)
    valor_liquido = Column(Numeric(18, 4), nullable=False, default=0)
    valor_iva = Column(Numeric(18, 4), nullable=False, default=0)
    valor_bruto = Column(Numeric(18, 4), nullable=False, default=0)
    forma_pagamento = Column(String(100), nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Venda(id={self.id}, data={self.data}, fatura='{self.numero_fatura}')>"
