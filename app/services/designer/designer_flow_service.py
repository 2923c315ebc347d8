# -*- coding: utf-8 -*-
"""
app/services/designer/designer_flow_service.py

Fluxo de trabalho dos designers sobre os itens das Folhas de Obra.

Cada flag do designer_item tem um carimbo ``data_<flag>``: marcar grava a
hora atual, desmarcar limpa. A paginação fecha o trabalho do designer e
regista o caminho dos ficheiros.

Expõe:
- listar_jobs_designer(filtros)
- toggle_flag(designer_item_id, flag, valor)
- marcar_paginacao(designer_item_id, path_trabalho)
- definir_complexidade(item_id, complexidade_id)
- percentagem_paginacao(items, designer_por_item)
- ultima_aprovacao(designer_item)
- duracoes(designer_item, data_in_job)
- job_fechado(items, designer_por_item)
- estado_entrega(items, logistica_por_item, feriados, hoje)
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import or_

from app import db
from app.models_sqla import (
    Complexidade,
    DesignerItem,
    Feriado,
    FolhaObra,
    ItemBase,
)
from app.services.erros import RegistoNaoEncontrado
from app.services.producao import conclusao_service
from app.utils.datas import dias_entre, dias_uteis_ate, parse_data
from app.utils.ordenacao import arredondar, to_bool, to_int

logger = logging.getLogger(__name__)

N_MAQUETES = 6
FLAGS: Tuple[str, ...] = (
    ("em_curso", "duvidas")
    + tuple(f"maquete_enviada{i}" for i in range(1, N_MAQUETES + 1))
    + tuple(f"aprovacao_recebida{i}" for i in range(1, N_MAQUETES + 1))
    + ("paginacao",)
)
COMPLEXIDADE_OFFSET = "OFFSET"
PATH_OFFSET = "P:"

ENTREGA_URGENTE = "red"
ENTREGA_PROXIMA = "yellow"


def _campo(obj: Any, nome: str, padrao: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(nome, padrao)
    return getattr(obj, nome, padrao)


def _get_designer(designer_item_id: int) -> DesignerItem:
    d = db.session.get(DesignerItem, designer_item_id)
    if not d:
        raise RegistoNaoEncontrado(f"Designer item não encontrado: {designer_item_id}")
    return d


def _commit(msg_erro: str) -> None:
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Designer] {msg_erro}: {str(e)}")
        raise


def _sincronizar_item(designer: DesignerItem) -> None:
    item = db.session.get(ItemBase, designer.item_id)
    if item is not None:
        item.paginacao = bool(designer.paginacao)


# ---------------------------------------------------------------------
# Flags
# ---------------------------------------------------------------------
def toggle_flag(designer_item_id: int, flag: str, valor: bool) -> DesignerItem:
    if flag not in FLAGS:
        raise ValueError(f"Flag desconhecida: {flag}")

    designer = _get_designer(designer_item_id)
    agora = datetime.utcnow()
    valor = to_bool(valor)
    setattr(designer, flag, valor)
    setattr(designer, f"data_{flag}", agora if valor else None)
    if flag == "paginacao":
        designer.data_saida = agora if valor else None
        _sincronizar_item(designer)
    designer.updated_at = agora
    _commit(f"Erro ao alterar {flag} do designer item {designer_item_id}")
    logger.info(f"[Designer] Item {designer.item_id}: {flag}={valor}")
    return designer


def marcar_paginacao(designer_item_id: int, path_trabalho: str) -> DesignerItem:
    caminho = (path_trabalho or "").strip()
    if not caminho:
        raise ValueError("O caminho do trabalho é obrigatório para paginar.")

    designer = _get_designer(designer_item_id)
    agora = datetime.utcnow()
    designer.paginacao = True
    designer.path_trabalho = caminho
    designer.data_paginacao = agora
    designer.data_saida = agora
    designer.updated_at = agora
    _sincronizar_item(designer)
    _commit(f"Erro ao paginar designer item {designer_item_id}")
    logger.info(f"[Designer] Item {designer.item_id} paginado em {caminho}")
    return designer


def definir_complexidade(item_id: int, complexidade_id: Any) -> ItemBase:
    """
    Guarda a complexidade do item. Trabalhos OFFSET não passam pelo designer:
    ficam logo paginados com o caminho "P:".
    """
    item = db.session.get(ItemBase, item_id)
    if not item:
        raise RegistoNaoEncontrado(f"Item não encontrado: {item_id}")

    cid = to_int(complexidade_id)
    complexidade = db.session.get(Complexidade, cid) if cid else None
    if cid and not complexidade:
        raise ValueError(f"Complexidade inválida: {complexidade_id}")
    item.complexidade_id = cid

    if complexidade and (complexidade.grau or "").strip().upper() == COMPLEXIDADE_OFFSET:
        agora = datetime.utcnow()
        designer = DesignerItem.query.filter_by(item_id=item.id).first()
        if designer is None:
            designer = DesignerItem(item_id=item.id, data_in=agora)
            db.session.add(designer)
        designer.paginacao = True
        designer.path_trabalho = PATH_OFFSET
        designer.data_paginacao = agora
        designer.data_saida = agora
        designer.updated_at = agora
        item.paginacao = True
        logger.info(f"[Designer] Item {item.id} OFFSET: paginação automática")

    _commit(f"Erro ao definir complexidade do item {item_id}")
    return item


# ---------------------------------------------------------------------
# Regras puras
# ---------------------------------------------------------------------
def percentagem_paginacao(items: Sequence[Any], designer_por_item: Mapping[Any, Any]) -> int:
    designers = [designer_por_item.get(_campo(i, "id")) for i in items]
    designers = [d for d in designers if d is not None]
    if not designers:
        return 0
    paginados = sum(1 for d in designers if _campo(d, "paginacao") is True)
    return arredondar(paginados / len(designers) * 100)


def ultima_aprovacao(designer_item: Any) -> Optional[datetime]:
    for i in range(N_MAQUETES, 0, -1):
        data = _campo(designer_item, f"data_aprovacao_recebida{i}")
        if data:
            return data
    return None


def duracoes(designer_item: Any, data_in_job: Any = None) -> Dict[str, str]:
    """Tempos entre etapas ("N dias"); vazio quando falta uma das datas."""
    resultado = {
        f"maquete{i}": dias_entre(
            _campo(designer_item, f"data_maquete_enviada{i}"),
            _campo(designer_item, f"data_aprovacao_recebida{i}"),
        )
        for i in range(1, N_MAQUETES + 1)
    }
    paginacao = _campo(designer_item, "data_paginacao")
    resultado["aprovacao_paginacao"] = dias_entre(ultima_aprovacao(designer_item), paginacao)
    resultado["duvidas_paginacao"] = dias_entre(_campo(designer_item, "data_duvidas"), paginacao)
    resultado["total"] = dias_entre(data_in_job, paginacao)
    return resultado


def job_fechado(items: Sequence[Any], designer_por_item: Mapping[Any, Any]) -> bool:
    """Fechado: tem designer items e estão todos paginados."""
    designers = [designer_por_item.get(_campo(i, "id")) for i in items]
    designers = [d for d in designers if d is not None]
    return bool(designers) and all(_campo(d, "paginacao") for d in designers)


def estado_entrega(
    items: Sequence[Any],
    logistica_por_item: Mapping[Any, Sequence[Any]],
    feriados: Optional[Iterable[Any]] = None,
    hoje: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Considera as entregas com data_saida preenchida e ainda não saídas,
    ignorando itens já paginados. 1 dia útil → "red", 2 → "yellow".
    Devolve {"status": str|None, "proxima_entrega": date|None}.
    """
    feriados = list(feriados or [])
    status = None
    datas: List[date] = []
    for item in items:
        if _campo(item, "paginacao") is True:
            continue
        for entrega in logistica_por_item.get(_campo(item, "id")) or ():
            d = parse_data(_campo(entrega, "data_saida"))
            if d is None or _campo(entrega, "saiu") is True:
                continue
            datas.append(d)
            diff = dias_uteis_ate(d, hoje, feriados)
            if diff == 1:
                status = ENTREGA_URGENTE
            elif diff == 2 and status != ENTREGA_URGENTE:
                status = ENTREGA_PROXIMA
    return {"status": status, "proxima_entrega": min(datas) if datas else None}


def feriados_registados() -> List[date]:
    return [f.holiday_date for f in Feriado.query.all()]


# ---------------------------------------------------------------------
# Listagem
# ---------------------------------------------------------------------
def _serialize_item(item: ItemBase, designer: Optional[DesignerItem], job: FolhaObra) -> dict:
    data = item.as_dict()
    data["designer"] = designer.as_dict() if designer else None
    data["ultima_aprovacao"] = ultima_aprovacao(designer) if designer else None
    data["duracoes"] = duracoes(designer, job.data_in) if designer else None
    return data


def listar_jobs_designer(filtros: Optional[dict] = None, hoje: Optional[date] = None) -> List[dict]:
    """
    Jobs com FO e ORC preenchidos. Filtros: designer (profile_id), po (FO),
    campanha, item (descrição/código) e fechados ("true" só os totalmente
    paginados, "false" os em aberto). Ordenados por urgência de entrega e
    depois pela próxima data de entrega.
    """
    filtros = filtros or {}
    qry = FolhaObra.query.filter(
        FolhaObra.numero_fo.isnot(None),
        FolhaObra.numero_fo != "",
        FolhaObra.numero_orc.isnot(None),
        FolhaObra.numero_orc != 0,
    )
    designer = to_int(filtros.get("designer"))
    if designer:
        qry = qry.filter(FolhaObra.profile_id == designer)
    po = (filtros.get("po") or "").strip()
    if po:
        qry = qry.filter(FolhaObra.numero_fo.ilike(f"%{po}%"))
    campanha = (filtros.get("campanha") or "").strip()
    if campanha:
        qry = qry.filter(FolhaObra.nome_campanha.ilike(f"%{campanha}%"))
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

    jobs = qry.order_by(FolhaObra.data_in.desc(), FolhaObra.id.desc()).all()
    rel = conclusao_service.carregar_relacoes([j.id for j in jobs])
    feriados = feriados_registados()

    fechados = filtros.get("fechados")
    if fechados not in (None, ""):
        fechados = to_bool(fechados)
        jobs = [
            j
            for j in jobs
            if job_fechado(rel["items"].get(j.id, []), rel["designer"]) == fechados
        ]

    resultado = []
    for job in jobs:
        items = rel["items"].get(job.id, [])
        entrega = estado_entrega(items, rel["logistica"], feriados, hoje)
        row = job.as_dict()
        row.update(
            {
                "percentagem_paginacao": percentagem_paginacao(items, rel["designer"]),
                "entrega_status": entrega["status"],
                "proxima_entrega": entrega["proxima_entrega"],
                "items": [_serialize_item(i, rel["designer"].get(i.id), job) for i in items],
            }
        )
        resultado.append(row)

    peso = {ENTREGA_URGENTE: 2, ENTREGA_PROXIMA: 1}
    resultado.sort(
        key=lambda r: (
            -peso.get(r["entrega_status"], 0),
            r["proxima_entrega"] or date.max,
        )
    )
    return resultado
