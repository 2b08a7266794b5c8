"""
Repositorio de persistencia das vendas, movimentos e reconciliacoes.

Os services de reconciliacao e qualidade consomem os resultados destas
consultas (registros canonicos); nenhuma regra de negocio fica aqui.
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models import ArquivoCarregado, ReconciliacaoDiaria, TransacaoBancaria, Venda
from tools.base import DiaReconciliacao, TransacaoCanonica, VendaCanonica

logger = logging.getLogger(__name__)

# Filtros aceitos em transacoes_na_janela
FILTRO_LIQUIDACAO_TPA = "liquidacao_tpa"
FILTRO_COMISSAO = "comissao"
FILTRO_RECONCILIACAO = "reconciliacao"  # fecho TPA ou comissao ou IVA s/ comissao


class RepositorioFinanceiro:
    """Acesso ao banco para os registros canonicos."""

    def __init__(self, db: Session):
        self.db = db

    # ==================================================
    # CONVERSOES
    # ==================================================
    @staticmethod
    def _venda_canonica(venda: Venda) -> VendaCanonica:
        return VendaCanonica(
            data=venda.data,
            numero_fatura=venda.numero_fatura,
            cliente=venda.cliente,
            produto=venda.produto,
            quantidade=venda.quantidade,
            preco_unitario=venda.preco_unitario,
            taxa_iva=venda.taxa_iva,
            valor_liquido=venda.valor_liquido,
            valor_iva=venda.valor_iva,
            valor_bruto=venda.valor_bruto,
            forma_pagamento=venda.forma_pagamento,
        )

    @staticmethod
    def _transacao_canonica(transacao: TransacaoBancaria) -> TransacaoCanonica:
        return TransacaoCanonica(
            data=transacao.data,
            descricao=transacao.descricao,
            debito=transacao.debito,
            credito=transacao.credito,
            saldo=transacao.saldo,
            e_liquidacao_tpa=transacao.e_liquidacao_tpa,
            e_comissao=transacao.e_comissao,
            e_iva_comissao=transacao.e_iva_comissao,
        )

    # ==================================================
    # GRAVACAO
    # ==================================================
    def salvar_venda(self, venda: VendaCanonica, mes: str) -> Venda:
        db_venda = Venda(
            mes=mes,
            data=venda.data,
            numero_fatura=venda.numero_fatura,
            cliente=venda.cliente,
            produto=venda.produto,
            quantidade=venda.quantidade,
            preco_unitario=venda.preco_unitario,
            taxa_iva=venda.taxa_iva,
            valor_liquido=venda.valor_liquido,
            valor_iva=venda.valor_iva,
            valor_bruto=venda.valor_bruto,
            forma_pagamento=venda.forma_pagamento,
        )
        self.db.add(db_venda)
        return db_venda

    def salvar_transacao(self, transacao: TransacaoCanonica, mes: str) -> TransacaoBancaria:
        db_transacao = TransacaoBancaria(
            mes=mes,
            data=transacao.data,
            descricao=transacao.descricao,
            debito=transacao.debito,
            credito=transacao.credito,
            saldo=transacao.saldo,
            e_liquidacao_tpa=transacao.e_liquidacao_tpa,
            e_comissao=transacao.e_comissao,
            e_iva_comissao=transacao.e_iva_comissao,
        )
        self.db.add(db_transacao)
        return db_transacao

    def upsert_reconciliacao_dia(self, dia: DiaReconciliacao) -> ReconciliacaoDiaria:
        """Cria ou substitui por completo o registro de (mes, data)."""
        registro = self.db.query(ReconciliacaoDiaria).filter(
            ReconciliacaoDiaria.mes == dia.mes,
            ReconciliacaoDiaria.data == dia.data,
        ).first()

        if registro is None:
            registro = ReconciliacaoDiaria(mes=dia.mes, data=dia.data)
            self.db.add(registro)

        registro.vendas_cartao = dia.vendas_cartao
        registro.liquidacao_banco = dia.liquidacao_banco
        registro.comissoes = dia.comissoes
        registro.delta = dia.delta
        registro.delta_percentual = dia.delta_percentual
        registro.aprovado = dia.aprovado

        self.db.flush()
        return registro

    def registrar_arquivo(
        self,
        nome_arquivo: str,
        tipo_arquivo: str,
        mes: str,
        linhas_lidas: int,
        duracao_ms: int,
        conteudo_bruto: Optional[str] = None,
    ) -> ArquivoCarregado:
        arquivo = ArquivoCarregado(
            nome_arquivo=nome_arquivo,
            tipo_arquivo=tipo_arquivo,
            mes=mes,
            linhas_lidas=linhas_lidas,
            duracao_ms=duracao_ms,
            conteudo_bruto=conteudo_bruto,
        )
        self.db.add(arquivo)
        return arquivo

    # ==================================================
    # CONSULTAS
    # ==================================================
    def vendas_do_mes(self, mes: str) -> List[VendaCanonica]:
        vendas = self.db.query(Venda).filter(
            Venda.mes == mes
        ).order_by(Venda.data, Venda.id).all()
        return [self._venda_canonica(v) for v in vendas]

    def transacoes_na_janela(
        self,
        mes: str,
        inicio: date,
        fim: date,
        filtro: Optional[str] = None,
    ) -> List[TransacaoCanonica]:
        """Movimentos do mes com data em [inicio, fim], opcionalmente filtrados."""
        query = self.db.query(TransacaoBancaria).filter(
            TransacaoBancaria.mes == mes,
            TransacaoBancaria.data >= inicio,
            TransacaoBancaria.data <= fim,
        )

        if filtro == FILTRO_LIQUIDACAO_TPA:
            query = query.filter(TransacaoBancaria.e_liquidacao_tpa.is_(True))
        elif filtro == FILTRO_COMISSAO:
            query = query.filter(or_(
                TransacaoBancaria.e_comissao.is_(True),
                TransacaoBancaria.e_iva_comissao.is_(True),
            ))
        elif filtro == FILTRO_RECONCILIACAO:
            query = query.filter(or_(
                TransacaoBancaria.e_liquidacao_tpa.is_(True),
                TransacaoBancaria.e_comissao.is_(True),
                TransacaoBancaria.e_iva_comissao.is_(True),
            ))
        elif filtro is not None:
            raise ValueError(f"Filtro de transacoes desconhecido: {filtro}")

        transacoes = query.order_by(TransacaoBancaria.data, TransacaoBancaria.id).all()
        return [self._transacao_canonica(t) for t in transacoes]

    def reconciliacoes_do_mes(self, mes: str) -> List[ReconciliacaoDiaria]:
        return self.db.query(ReconciliacaoDiaria).filter(
            ReconciliacaoDiaria.mes == mes
        ).order_by(ReconciliacaoDiaria.data).all()

    def ultimo_mes_carregado(self) -> str:
        """Mes do arquivo enviado mais recentemente ("" se nenhum)."""
        arquivo = self.db.query(ArquivoCarregado).filter(
            ArquivoCarregado.mes != ""
        ).order_by(
            ArquivoCarregado.carregado_em.desc(),
            ArquivoCarregado.id.desc(),
        ).first()
        return arquivo.mes if arquivo else ""
