"""create financeiro tables

Revision ID: c3d4e5f6a7b8
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'c3d4e5f6a7b8'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema - Vendas, movimentos, reconciliacao diaria e arquivos."""

    # Vendas normalizadas
    op.create_table(
        'vendas',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('mes', sa.String(length=7), nullable=False),
        sa.Column('data', sa.Date(), nullable=False),
        sa.Column('numero_fatura', sa.String(length=100), nullable=False),
        sa.Column('cliente', sa.String(length=255), nullable=False),
        sa.Column('produto', sa.String(length=255), nullable=False),
        sa.Column('quantidade', sa.Numeric(18, 4), nullable=False),
        sa.Column('preco_unitario', sa.Numeric(18, 4), nullable=False),
        sa.Column('taxa_iva', sa.Numeric(9, 4), nullable=False),
        sa.Column('valor_liquido', sa.Numeric(18, 4), nullable=False),
        sa.Column('valor_iva', sa.Numeric(18, 4), nullable=False),
        sa.Column('valor_bruto', sa.Numeric(18, 4), nullable=False),
        sa.Column('forma_pagamento', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_vendas_id', 'vendas', ['id'], unique=False)
    op.create_index('ix_vendas_mes', 'vendas', ['mes'], unique=False)
    op.create_index('ix_vendas_data', 'vendas', ['data'], unique=False)

    # Movimentos do extrato bancario
    op.create_table(
        'transacoes_bancarias',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('mes', sa.String(length=7), nullable=False),
        sa.Column('data', sa.Date(), nullable=False),
        sa.Column('descricao', sa.String(length=500), nullable=False),
        sa.Column('debito', sa.Numeric(18, 4), nullable=True),
        sa.Column('credito', sa.Numeric(18, 4), nullable=True),
        sa.Column('saldo', sa.Numeric(18, 4), nullable=False),
        sa.Column('e_liquidacao_tpa', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('e_comissao', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('e_iva_comissao', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_transacoes_bancarias_id', 'transacoes_bancarias', ['id'], unique=False)
    op.create_index('ix_transacoes_bancarias_mes', 'transacoes_bancarias', ['mes'], unique=False)
    op.create_index('ix_transacoes_bancarias_data', 'transacoes_bancarias', ['data'], unique=False)

    # Reconciliacao diaria de cartao (um registro por mes/data)
    op.create_table(
        'reconciliacoes_diarias',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('mes', sa.String(length=7), nullable=False),
        sa.Column('data', sa.Date(), nullable=False),
        sa.Column('vendas_cartao', sa.Numeric(18, 4), nullable=False),
        sa.Column('liquidacao_banco', sa.Numeric(18, 4), nullable=False),
        sa.Column('comissoes', sa.Numeric(18, 4), nullable=False),
        sa.Column('delta', sa.Numeric(18, 4), nullable=False),
        sa.Column('delta_percentual', sa.Numeric(18, 4), nullable=False),
        sa.Column('aprovado', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('mes', 'data', name='uq_reconciliacao_mes_data')
    )
    op.create_index('ix_reconciliacoes_diarias_id', 'reconciliacoes_diarias', ['id'], unique=False)
    op.create_index('ix_reconciliacoes_diarias_mes', 'reconciliacoes_diarias', ['mes'], unique=False)

    # Arquivos enviados
    op.create_table(
        'arquivos_carregados',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('nome_arquivo', sa.String(length=255), nullable=False),
        sa.Column('tipo_arquivo', sa.String(length=20), nullable=False),
        sa.Column('mes', sa.String(length=7), nullable=False),
        sa.Column('linhas_lidas', sa.Integer(), nullable=False),
        sa.Column('duracao_ms', sa.Integer(), nullable=False),
        sa.Column('conteudo_bruto', sa.Text(), nullable=True),
        sa.Column('carregado_em', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_arquivos_carregados_id', 'arquivos_carregados', ['id'], unique=False)
    op.create_index('ix_arquivos_carregados_tipo_arquivo', 'arquivos_carregados', ['tipo_arquivo'], unique=False)
    op.create_index('ix_arquivos_carregados_mes', 'arquivos_carregados', ['mes'], unique=False)
    op.create_index('ix_arquivos_carregados_carregado_em', 'arquivos_carregados', ['carregado_em'], unique=False)


def downgrade() -> None:
    """Downgrade schema - Remove as tabelas financeiras."""
    op.drop_table('arquivos_carregados')
    op.drop_table('reconciliacoes_diarias')
    op.drop_table('transacoes_bancarias')
    op.drop_table('vendas')
