# app/services/paletes_service.py
"""
Paletes de cartão: numeração sequencial P1, P2, ... e registo por fornecedor/autor.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import func, or_

from app import db
from app.models_sqla import Fornecedor, Material, Palete, Profile
from app.services.erros import RegistoDuplicado, RegistoNaoEncontrado
from app.utils.datas import parse_data
from app.utils.ordenacao import to_int

logger = logging.getLogger(__name__)

PREFIXO = "P"


def proximo_numero_palete() -> str:
    maior = 0
    for (numero,) in db.session.query(Palete.no_palete).all():
        numero = (numero or "").strip()
        if not numero.upper().startswith(PREFIXO):
            continue
        sufixo = numero[1:]
        if sufixo.isdigit():
            maior = max(maior, int(sufixo))
    return f"{PREFIXO}{maior + 1}"


def palete_duplicada(no_palete: str, excluir_id: Optional[int] = None) -> Optional[Palete]:
    numero = (no_palete or "").strip()
    if not numero:
        return None
    qry = Palete.query.filter(func.lower(Palete.no_palete) == numero.lower())
    if excluir_id is not None:
        qry = qry.filter(Palete.id != excluir_id)
    return qry.first()


def _validar(dados: dict, excluir_id: Optional[int] = None) -> None:
    if not dados.get("fornecedor_id"):
        raise ValueError("Fornecedor é obrigatório.")
    if not dados.get("author_id"):
        raise ValueError("Autor é obrigatório.")
    qt = dados.get("qt_palete")
    if qt is None or qt <= 0:
        raise ValueError("Quantidade da palete deve ser maior que zero.")
    existente = palete_duplicada(dados.get("no_palete"), excluir_id)
    if existente:
        raise RegistoDuplicado(
            f"Já existe uma palete com o número {existente.no_palete}.", existente
        )


def _normalizar(payload: dict) -> dict:
    dados = {}
    if "no_palete" in payload:
        dados["no_palete"] = (payload.get("no_palete") or "").strip()
    for campo in ("fornecedor_id", "author_id", "qt_palete"):
        if campo in payload:
            dados[campo] = to_int(payload.get(campo))
    for campo in ("no_guia_forn", "ref_cartao"):
        if campo in payload:
            dados[campo] = (payload.get(campo) or "").strip() or None
    if "data" in payload:
        dados["data"] = parse_data(payload.get("data"))
    return dados


def criar_palete(payload: dict) -> Palete:
    dados = _normalizar(payload)
    if not dados.get("no_palete"):
        dados["no_palete"] = proximo_numero_palete()
    dados.setdefault("data", None)
    if dados["data"] is None:
        dados["data"] = date.today()
    _validar(dados)

    palete = Palete(**dados)
    try:
        db.session.add(palete)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Paletes] Erro ao criar palete {dados.get('no_palete')}: {str(e)}")
        raise
    logger.info(f"[Paletes] Palete criada: {palete.no_palete}")
    return palete


def atualizar_palete(palete_id: int, payload: dict) -> Palete:
    palete = db.session.get(Palete, palete_id)
    if not palete:
        raise RegistoNaoEncontrado(f"Palete não encontrada: {palete_id}")

    dados = {
        "no_palete": palete.no_palete,
        "fornecedor_id": palete.fornecedor_id,
        "author_id": palete.author_id,
        "qt_palete": palete.qt_palete,
    }
    dados.update(_normalizar(payload))
    _validar(dados, excluir_id=palete_id)

    for campo, valor in dados.items():
        setattr(palete, campo, valor)
    palete.updated_at = datetime.utcnow()
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Paletes] Erro ao atualizar palete {palete_id}: {str(e)}")
        raise
    return palete


def remover_palete(palete_id: int) -> None:
    palete = db.session.get(Palete, palete_id)
    if not palete:
        raise RegistoNaoEncontrado(f"Palete não encontrada: {palete_id}")
    try:
        db.session.delete(palete)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Paletes] Erro ao remover palete {palete_id}: {str(e)}")
        raise
    logger.info(f"[Paletes] Palete removida: id={palete_id}")


def listar_paletes(filtros: Optional[dict] = None) -> List[dict]:
    """
    Filtros aceites: search, referencia, fornecedor, author, date_from, date_to.
    """
    filtros = filtros or {}
    qry = (
        db.session.query(Palete, Fornecedor, Profile)
        .outerjoin(Fornecedor, Fornecedor.id == Palete.fornecedor_id)
        .outerjoin(Profile, Profile.id == Palete.author_id)
    )

    search = (filtros.get("search") or "").strip()
    if search:
        like = f"%{search}%"
        qry = qry.filter(
            or_(
                Palete.no_palete.ilike(like),
                Palete.no_guia_forn.ilike(like),
                Palete.ref_cartao.ilike(like),
            )
        )
    referencia = (filtros.get("referencia") or "").strip()
    if referencia:
        qry = qry.filter(Palete.ref_cartao == referencia)
    fornecedor = (filtros.get("fornecedor") or "").strip()
    if fornecedor:
        qry = qry.filter(Fornecedor.nome_forn.ilike(f"%{fornecedor}%"))
    author = (filtros.get("author") or "").strip()
    if author:
        like = f"%{author}%"
        qry = qry.filter(
            or_(Profile.first_name.ilike(like), Profile.last_name.ilike(like))
        )
    data_de = parse_data(filtros.get("date_from"))
    if data_de:
        qry = qry.filter(Palete.data >= data_de)
    data_ate = parse_data(filtros.get("date_to"))
    if data_ate:
        qry = qry.filter(Palete.data <= data_ate)

    resultado = []
    for palete, forn, autor in qry.order_by(Palete.created_at.desc(), Palete.id.desc()).all():
        row = palete.as_dict()
        row["fornecedor"] = forn.nome_forn if forn else ""
        row["autor"] = autor.nome if autor else ""
        resultado.append(row)
    return resultado


def referencias_cartao() -> List[str]:
    rows = (
        db.session.query(Material.referencia)
        .filter(func.lower(Material.material) == "cartão")
        .filter(Material.referencia.isnot(None))
        .distinct()
        .order_by(Material.referencia.asc())
        .all()
    )
    return [r[0] for r in rows]
