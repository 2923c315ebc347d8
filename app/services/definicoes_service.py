# app/services/definicoes_service.py
"""
CRUD das tabelas auxiliares (definições): fornecedores, clientes,
transportadoras, feriados e graus de complexidade.
"""
import logging
from typing import Any, Dict, List

from app import db
from app.models_sqla import Cliente, Complexidade, Feriado, Fornecedor, Transportadora
from app.services.erros import RegistoNaoEncontrado
from app.utils.datas import parse_data

logger = logging.getLogger(__name__)

# tabela -> (modelo, campos editáveis, campo de nome em maiúsculas, ordenação)
TABELAS: Dict[str, tuple] = {
    "fornecedores": (Fornecedor, ("nome_forn",), "nome_forn", "nome_forn"),
    "clientes": (Cliente, ("nome_cl", "morada", "codigo_pos"), "nome_cl", "nome_cl"),
    "transportadoras": (Transportadora, ("name",), "name", "name"),
    "feriados": (Feriado, ("holiday_date", "description"), None, "holiday_date"),
    "complexidades": (Complexidade, ("grau",), "grau", "grau"),
}


def _tabela(nome: str) -> tuple:
    if nome not in TABELAS:
        raise RegistoNaoEncontrado(f"Tabela desconhecida: {nome}")
    return TABELAS[nome]


def _normalizar(campos_validos, campo_nome, payload: dict) -> dict:
    dados = {}
    for campo in campos_validos:
        if campo not in payload:
            continue
        valor = payload[campo]
        if campo == "holiday_date":
            valor = parse_data(valor)
            if valor is None:
                raise ValueError("Data do feriado inválida.")
        elif isinstance(valor, str):
            valor = valor.strip() or None
        if campo == campo_nome and valor:
            valor = valor.upper()
        dados[campo] = valor
    return dados


def listar(nome: str) -> List[dict]:
    modelo, _, _, ordem = _tabela(nome)
    return [r.as_dict() for r in modelo.query.order_by(getattr(modelo, ordem).asc()).all()]


def criar(nome: str, payload: dict) -> Any:
    modelo, campos, campo_nome, _ = _tabela(nome)
    dados = _normalizar(campos, campo_nome, payload)
    obrigatorio = campo_nome or campos[0]
    if not dados.get(obrigatorio):
        raise ValueError(f"O campo '{obrigatorio}' é obrigatório.")

    registo = modelo(**dados)
    try:
        db.session.add(registo)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Definicoes] Erro ao criar registo em {nome}: {str(e)}")
        raise
    logger.info(f"[Definicoes] {nome}: registo {registo.id} criado")
    return registo


def atualizar(nome: str, registo_id: int, payload: dict) -> Any:
    modelo, campos, campo_nome, _ = _tabela(nome)
    registo = db.session.get(modelo, registo_id)
    if not registo:
        raise RegistoNaoEncontrado(f"Registo {registo_id} não encontrado em {nome}")
    for campo, valor in _normalizar(campos, campo_nome, payload).items():
        setattr(registo, campo, valor)
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Definicoes] Erro ao atualizar {nome}/{registo_id}: {str(e)}")
        raise
    return registo


def remover(nome: str, registo_id: int) -> None:
    modelo, _, _, _ = _tabela(nome)
    registo = db.session.get(modelo, registo_id)
    if not registo:
        raise RegistoNaoEncontrado(f"Registo {registo_id} não encontrado em {nome}")
    try:
        db.session.delete(registo)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Definicoes] Erro ao remover {nome}/{registo_id}: {str(e)}")
        raise
    logger.info(f"[Definicoes] {nome}: registo {registo_id} removido")
