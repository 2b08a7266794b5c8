# models/reconciliacao_diaria.py
from sqlalchemy import Boolean, Column, Integer, String, Date, DateTime, Numeric, UniqueConstraint
from sqlalchemy.sql import func
from db import Base


class ReconciliacaoDiaria(Base):
    """Reconciliacao de cartao de um dia. Um registro por (mes, data)."""

    __tablename__ = "reconciliacoes_diarias"
    __table_args__ = (
        UniqueConstraint("mes", "data", name="uq_reconciliacao_mes_data"),
    )

    # Colunas
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    mes = Column(String(7), nullable=False, index=True)
    data = Column(Date, nullable=False)
    vendas_cartao = Column(Numeric(18, 4), nullable=False, default=0)
    liquidacao_banco = Column(Numeric(18, 4), nullable=False, default=0)
    comissoes = Column(Numeric(18, 4), nullable=False, default=0)
    delta = Column(Numeric(18, 4), nullable=False, default=0)
    delta_percentual = Column(Numeric(18, 4), nullable=False, default=0)
    aprovado = Column(Boolean, nullable=False, default=False)

    # Timestamps - padrão snake_case
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<ReconciliacaoDiaria(mes='{self.mes}', data={self.data}, aprovado={self.aprovado})>"
