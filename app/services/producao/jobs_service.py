# -*- coding: utf-8 -*-
"""
app/services/producao/jobs_service.py

Folhas de Obra (jobs) e os seus itens.

Expõe:
- listar_jobs(filtros, page, page_size)  → listagem filtrada e paginada com estado calculado
- obter_job(job_id)                      → job + itens + entregas + designer
- criar_job / atualizar_job              → gravação campo-a-campo com pré-verificação ORC/FO
- aceitar_item(job_id, payload)          → cria item_base + designer_item + logistica_entrega
- atualizar_item(item_id, campos)
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import or_

from app import db
from app.models_sqla import (
    Cliente,
    DesignerItem,
    FolhaObra,
    ItemBase,
    LogisticaEntrega,
)
from app.services.erros import RegistoDuplicado, RegistoNaoEncontrado
from app.services.producao import conclusao_service
from app.services.producao.duplicados_service import (
    verificar_fo_duplicado,
    verificar_orc_duplicado,
)
from app.utils.datas import parse_data, parse_datahora, subtrair_meses
from app.utils.ordenacao import parse_numeric_field, to_bool, to_int

logger = logging.getLogger(__name__)

TAB_EM_CURSO = "em_curso"
TAB_CONCLUIDOS = "concluidos"
MESES_CONCLUIDOS = 2

_CAMPOS_JOB_TEXTO = ("numero_fo", "nome_campanha", "cliente", "notas")
_CAMPOS_JOB_BOOL = ("prioridade", "concluido", "saiu", "fatura")
_CAMPOS_ITEM_BOOL = ("brindes", "concluido", "paginacao")


def get_job(job_id: int) -> FolhaObra:
    job = db.session.get(FolhaObra, job_id)
    if not job:
        raise RegistoNaoEncontrado(f"Folha de obra não encontrada: {job_id}")
    return job


def get_item(item_id: int) -> ItemBase:
    item = db.session.get(ItemBase, item_id)
    if not item:
        raise RegistoNaoEncontrado(f"Item não encontrado: {item_id}")
    return item


# ---------------------------------------------------------------------
# Listagem
# ---------------------------------------------------------------------
def _query_base():
    return FolhaObra.query.filter(
        FolhaObra.numero_orc.isnot(None), FolhaObra.numero_orc != 0
    )


_PESO_COR_ARTES = {conclusao_service.VERDE: 2, conclusao_service.LARANJA: 1}
_PESO_COR_CORTE = {conclusao_service.VERDE: 2}


def _texto(valor: Any) -> str:
    return (valor or "").lower()


def chave_ordenacao(coluna: str, agora: Optional[datetime] = None):
    """
    Chave de ordenação de uma linha da listagem (job + estado calculado).
    ORC/FO numéricos com texto no fim; P/A/C pelo peso da cor.
    """
    if coluna in ("numero_orc", "numero_fo"):
        return lambda r: parse_numeric_field(r.get(coluna))
    if coluna in ("cliente", "nome_campanha", "notas"):
        return lambda r: _texto(r.get(coluna))
    if coluna == "prioridade":
        return lambda r: conclusao_service.peso_prioridade(r, agora)
    if coluna in ("concluido", "saiu", "fatura"):
        return lambda r: bool(r.get(coluna))
    if coluna == "artwork":
        return lambda r: _PESO_COR_ARTES.get(r.get("cor_artes"), 0)
    if coluna == "corte":
        return lambda r: _PESO_COR_CORTE.get(r.get("cor_corte"), 0)
    if coluna == "created_at":
        return lambda r: parse_datahora(r.get("data_in")) or datetime.min
    raise ValueError(f"Coluna de ordenação desconhecida: {coluna}")


def listar_jobs(
    filtros: Optional[dict] = None,
    page: int = 1,
    page_size: int = 50,
    agora: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Filtros:
      - item: pesquisa global por descrição/código do item (ignora os restantes)
      - fo, campanha, cliente: ilike
      - fatura: "true" → faturados; "false" → não faturados (null ou False)
      - tab: em_curso | concluidos (concluidos limita aos últimos 2 meses)
      - sort / dir: coluna de ordenação (ver chave_ordenacao) e asc|desc;
        sem sort mantém a ordem por data de entrada mais recente
    """
    filtros = filtros or {}
    agora = agora or datetime.utcnow()
    qry = _query_base()

    texto_item = (filtros.get("item") or "").strip()
    if texto_item:
        like = f"%{texto_item}%"
        job_ids = [
            r[0]
            for r in db.session.query(ItemBase.folha_obra_id)
            .filter(or_(ItemBase.descricao.ilike(like), ItemBase.codigo.ilike(like)))
            .distinct()
            .all()
        ]
        qry = qry.filter(FolhaObra.id.in_(job_ids))
    else:
        fo = (filtros.get("fo") or "").strip()
        if fo:
            qry = qry.filter(FolhaObra.numero_fo.ilike(f"%{fo}%"))
        campanha = (filtros.get("campanha") or "").strip()
        if campanha:
            qry = qry.filter(FolhaObra.nome_campanha.ilike(f"%{campanha}%"))
        cliente = (filtros.get("cliente") or "").strip()
        if cliente:
            qry = qry.filter(FolhaObra.cliente.ilike(f"%{cliente}%"))
        fatura = filtros.get("fatura")
        if fatura not in (None, ""):
            if to_bool(fatura):
                qry = qry.filter(FolhaObra.fatura.is_(True))
            else:
                qry = qry.filter(
                    or_(FolhaObra.fatura.is_(None), FolhaObra.fatura.is_(False))
                )

    # a pesquisa por item é global: não respeita o separador
    tab = None if texto_item else (filtros.get("tab") or TAB_EM_CURSO)
    if tab == TAB_CONCLUIDOS:
        qry = qry.filter(FolhaObra.data_in >= subtrair_meses(agora, MESES_CONCLUIDOS))

    jobs = qry.order_by(FolhaObra.data_in.desc(), FolhaObra.id.desc()).all()
    estado = conclusao_service.estado_jobs(jobs, agora)

    if tab == TAB_CONCLUIDOS:
        jobs = [j for j in jobs if estado[j.id]["completo"]]
    elif tab == TAB_EM_CURSO:
        jobs = [j for j in jobs if not estado[j.id]["completo"]]

    linhas = [dict(j.as_dict(), **estado[j.id]) for j in jobs]
    coluna = (filtros.get("sort") or "").strip()
    if coluna:
        linhas.sort(
            key=chave_ordenacao(coluna, agora),
            reverse=(filtros.get("dir") or "asc").lower() == "desc",
        )

    total = len(linhas)
    page = max(page, 1)
    inicio = (page - 1) * page_size

    return {
        "items": linhas[inicio : inicio + page_size],
        "page": page,
        "page_size": page_size,
        "total": total,
        "pages": (total + page_size - 1) // page_size if page_size else 1,
    }


def obter_job(job_id: int) -> dict:
    job = get_job(job_id)
    rel = conclusao_service.carregar_relacoes([job.id])
    items = []
    for item in rel["items"].get(job.id, []):
        d = item.as_dict()
        designer = rel["designer"].get(item.id)
        d["designer"] = designer.as_dict() if designer else None
        d["logistica"] = [e.as_dict() for e in rel["logistica"].get(item.id, [])]
        items.append(d)
    dados = job.as_dict()
    dados.update(conclusao_service.estado_jobs([job])[job.id])
    dados["items"] = items
    return dados


# ---------------------------------------------------------------------
# Escrita
# ---------------------------------------------------------------------
def _normalizar_job(campos: dict) -> dict:
    dados: Dict[str, Any] = {}
    for campo in _CAMPOS_JOB_TEXTO:
        if campo in campos:
            valor = campos[campo]
            dados[campo] = str(valor).strip() if valor not in (None, "") else None
    for campo in _CAMPOS_JOB_BOOL:
        if campo in campos:
            dados[campo] = to_bool(campos[campo])
    if "numero_orc" in campos:
        dados["numero_orc"] = to_int(campos["numero_orc"])
    for campo in ("id_cliente", "profile_id"):
        if campo in campos:
            dados[campo] = to_int(campos[campo])
    if "data_in" in campos:
        dados["data_in"] = parse_datahora(campos["data_in"])
    if "data_saida" in campos:
        dados["data_saida"] = parse_data(campos["data_saida"])
    if "data_concluido" in campos:
        dados["data_concluido"] = parse_datahora(campos["data_concluido"])

    if dados.get("id_cliente") and not dados.get("cliente"):
        cliente = db.session.get(Cliente, dados["id_cliente"])
        if cliente:
            dados["cliente"] = cliente.nome_cl
    return dados


def _verificar_duplicados(dados: dict, job_id: Any = None) -> None:
    if "numero_orc" in dados:
        existente = verificar_orc_duplicado(dados["numero_orc"], job_id)
        if existente:
            raise RegistoDuplicado(
                f"O ORC {dados['numero_orc']} já existe na FO {existente.numero_fo}.",
                existente,
            )
    if "numero_fo" in dados:
        existente = verificar_fo_duplicado(dados["numero_fo"], job_id)
        if existente:
            raise RegistoDuplicado(
                f"A FO {dados['numero_fo']} já existe.", existente
            )


def criar_job(campos: dict, confirmar: bool = False) -> FolhaObra:
    dados = _normalizar_job(campos)
    if not confirmar:
        _verificar_duplicados(dados)

    dados.setdefault("data_in", None)
    if dados["data_in"] is None:
        dados["data_in"] = datetime.utcnow()
    job = FolhaObra(**dados)
    try:
        db.session.add(job)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Producao] Erro ao criar FO {dados.get('numero_fo')}: {str(e)}")
        raise
    logger.info(f"[Producao] FO criada: id={job.id} fo={job.numero_fo} orc={job.numero_orc}")
    return job


def atualizar_job(job_id: int, campos: dict, confirmar: bool = False) -> FolhaObra:
    job = get_job(job_id)
    dados = _normalizar_job(campos)
    if not confirmar:
        _verificar_duplicados(dados, job_id)

    for campo, valor in dados.items():
        setattr(job, campo, valor)
    if "concluido" in dados:
        job.data_concluido = datetime.utcnow() if dados["concluido"] else None
    job.updated_at = datetime.utcnow()
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Producao] Erro ao atualizar FO {job_id}: {str(e)}")
        raise
    return job


def aceitar_item(job_id: int, payload: dict) -> Dict[str, Any]:
    """
    Aceita um novo item no job: items_base → designer_items → logistica_entregas.
    """
    job = get_job(job_id)
    descricao = (payload.get("descricao") or "").strip()
    if not descricao:
        raise ValueError("A descrição do item é obrigatória.")

    agora = datetime.utcnow()
    try:
        item = ItemBase(
            folha_obra_id=job.id,
            descricao=descricao,
            codigo=(payload.get("codigo") or "").strip() or None,
            quantidade=to_int(payload.get("quantidade")),
            brindes=to_bool(payload.get("brindes", False)),
        )
        db.session.add(item)
        db.session.flush()  # obtém o ID antes de criar as linhas dependentes

        designer = DesignerItem(
            item_id=item.id,
            em_curso=True,
            duvidas=False,
            maquete_enviada1=False,
            paginacao=False,
            data_in=agora,
            data_em_curso=agora,
        )
        entrega = LogisticaEntrega(
            item_id=item.id,
            descricao=descricao,
            quantidade=item.quantidade,
            data=date.today(),
            is_entrega=True,
        )
        db.session.add(designer)
        db.session.add(entrega)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Producao] Erro ao aceitar item na FO {job.numero_fo}: {str(e)}")
        raise

    logger.info(f"[Producao] Item {item.id} aceite na FO {job.numero_fo}")
    return {"item": item, "designer": designer, "logistica": entrega}


def atualizar_item(item_id: int, campos: dict) -> ItemBase:
    item = get_item(item_id)
    if "descricao" in campos:
        item.descricao = (campos.get("descricao") or "").strip() or None
    if "codigo" in campos:
        item.codigo = (campos.get("codigo") or "").strip() or None
    if "quantidade" in campos:
        item.quantidade = to_int(campos.get("quantidade"))
    for campo in _CAMPOS_ITEM_BOOL:
        if campo in campos:
            setattr(item, campo, to_bool(campos[campo]))
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Producao] Erro ao atualizar item {item_id}: {str(e)}")
        raise
    return item


def linhas_export_producao(filtros: Optional[dict] = None) -> List[dict]:
    """Uma linha por item dos jobs filtrados, com a primeira entrega de logística."""
    jobs = listar_jobs(filtros, page=1, page_size=10**6)["items"]
    rel = conclusao_service.carregar_relacoes([j["id"] for j in jobs])
    linhas = []
    for job in jobs:
        for item in rel["items"].get(job["id"], []):
            entregas = rel["logistica"].get(item.id) or []
            primeira = entregas[0] if entregas else None
            linhas.append(
                {
                    "numero_orc": job["numero_orc"],
                    "numero_fo": job["numero_fo"],
                    "cliente": job["cliente"],
                    "quantidade": item.quantidade,
                    "nome_campanha": job["nome_campanha"],
                    "descricao": item.descricao,
                    "data_in": job["data_in"],
                    "data_concluido": job["data_concluido"],
                    "transportadora": primeira.transportadora if primeira else None,
                    "local_entrega": primeira.local_entrega if primeira else None,
                }
            )
    return linhas


def listar_items(job_id: int) -> List[dict]:
    get_job(job_id)
    return [
        i.as_dict()
        for i in ItemBase.query.filter_by(folha_obra_id=job_id).order_by(ItemBase.id.asc())
    ]
