# models/transacao_bancaria.py
from sqlalchemy import Boolean, Column, Integer, String, Date, DateTime, Numeric
from sqlalchemy.sql import func
from db import Base


class TransacaoBancaria(Base):
    """Movimento do extrato bancario ja classificado."""

    __tablename__ = "transacoes_bancarias"

    # Colunas
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    mes = Column(String(7), nullable=False, index=True)
    data = Column(Date, nullable=False, index=True)
    descricao = Column(String(500), nullable=False)
    debito = Column(Numeric(18, 4), nullable=True)
    credito = Column(Numeric(18, 4), nullable=True)
    saldo = Column(Numeric(18, 4), nullable=False, default=0)

    # Classificacao (marcas independentes)
    e_liquidacao_tpa = Column(Boolean, nullable=False, default=False)
    e_comissao = Column(Boolean, nullable=False, default=False)
    e_iva_comissao = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<TransacaoBancaria(id={self.id}, data={self.data}, descricao='{self.descricao[:30]}')>"
