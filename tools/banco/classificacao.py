"""
Classificacao dos movimentos do extrato pela descricao.

Cada regra e um predicado pequeno sobre a descricao em minusculas, para
que novas palavras-chave entrem aqui sem mexer no parser do extrato.
"""

from typing import Dict

PALAVRAS_DEBITO = ("debito", "pagamento", "transferencia")
PALAVRAS_CREDITO = ("credito", "fecho tpa", "deposito")


def _minusculas(descricao: str) -> str:
    return (descricao or "").lower()


def e_fecho_tpa(descricao: str) -> bool:
    """Liquidacao diaria do terminal de pagamento (TPA / Multicaixa)."""
    desc = _minusculas(descricao)
    return (
        "fecho tpa" in desc
        or "fechotpa" in desc
        or ("tpa" in desc and "fecho" in desc)
        or ("multicaixa" in desc and "credito" in desc)
    )


def e_comissao(descricao: str) -> bool:
    """Comissao ou taxa bancaria (inclui comissao de transferencia STC)."""
    desc = _minusculas(descricao)
    return (
        "comissão" in desc
        or "comissao" in desc
        or "taxa" in desc
        or ("stc" in desc and "transf" in desc)
    )


def e_iva_comissao(descricao: str) -> bool:
    """IVA cobrado sobre uma comissao."""
    desc = _minusculas(descricao)
    return "iva" in desc and ("comissão" in desc or "comissao" in desc)


def tem_palavra_debito(descricao: str) -> bool:
    desc = _minusculas(descricao)
    return any(p in desc for p in PALAVRAS_DEBITO)


def tem_palavra_credito(descricao: str) -> bool:
    desc = _minusculas(descricao)
    return any(p in desc for p in PALAVRAS_CREDITO)


def classificar_transacao(descricao: str) -> Dict[str, bool]:
    """Calcula as tres marcas (independentes) de uma descricao."""
    return {
        "e_liquidacao_tpa": e_fecho_tpa(descricao),
        "e_comissao": e_comissao(descricao),
        "e_iva_comissao": e_iva_comissao(descricao),
    }
