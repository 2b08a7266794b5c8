# models/arquivo_carregado.py
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from db import Base


class ArquivoCarregado(Base):
    """Registro de cada arquivo enviado (planilha de vendas ou extrato)."""

    __tablename__ = "arquivos_carregados"

    # Colunas
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    nome_arquivo = Column(String(255), nullable=False)
    tipo_arquivo = Column(String(20), nullable=False, index=True)  # sales, bank
    mes = Column(String(7), nullable=False, default="", index=True)
    linhas_lidas = Column(Integer, nullable=False, default=0)
    duracao_ms = Column(Integer, nullable=False, default=0)
    conteudo_bruto = Column(Text, nullable=True)

    carregado_em = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<ArquivoCarregado(id={self.id}, nome='{self.nome_arquivo}', mes='{self.mes}')>"
