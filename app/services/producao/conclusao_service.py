# -*- coding: utf-8 -*-
"""
app/services/producao/conclusao_service.py

Regras de conclusão de uma Folha de Obra (job) a partir dos seus itens e
das entregas de logística de cada item. Funções puras aceitam modelos ou
dicts, para poderem ser usadas tanto pelas rotas como nos exports.

Expõe:
- job_completo(items, logistica_por_item)          → bool
- percentagem_conclusao(items, logistica_por_item) → int (0..100)
- job_saiu(items, logistica_por_item)              → bool
- estado_jobs(jobs, agora)                         → {job_id: {...}} lido da BD
- auto_concluir(job)                               → marca concluido quando completo
- cor_prioridade / cor_artes / cor_corte           → semáforos P / A / C
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from app import db
from app.models_sqla import (
    DesignerItem,
    FolhaObra,
    ItemBase,
    LogisticaEntrega,
    ProducaoOperacao,
)
from app.utils.datas import parse_datahora
from app.utils.ordenacao import arredondar

logger = logging.getLogger(__name__)

VERMELHO = "red"
AZUL = "blue"
VERDE = "green"
LARANJA = "orange"

PESO_PRIORIDADE: Dict[str, int] = {VERMELHO: 2, AZUL: 1, VERDE: 0}
DIAS_ANTIGO = 3


def _campo(obj: Any, nome: str, padrao: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(nome, padrao)
    return getattr(obj, nome, padrao)


def _entregas(logistica_por_item: Mapping[Any, Sequence[Any]], item: Any) -> Sequence[Any]:
    return logistica_por_item.get(_campo(item, "id")) or ()


# ---------------------------------------------------------------------
# Regras puras
# ---------------------------------------------------------------------
def job_completo(items: Sequence[Any], logistica_por_item: Mapping[Any, Sequence[Any]]) -> bool:
    """
    Completo sse existe pelo menos um item e TODOS os itens têm pelo menos
    uma entrega e todas essas entregas estão concluídas.
    """
    if not items:
        return False
    for item in items:
        entregas = _entregas(logistica_por_item, item)
        if not entregas:
            return False
        if not all(_campo(e, "concluido") is True for e in entregas):
            return False
    return True


def item_concluido(entregas: Iterable[Any]) -> bool:
    return any(
        _campo(e, "concluido") is True and _campo(e, "data_saida") is not None
        for e in entregas
    )


def percentagem_conclusao(
    items: Sequence[Any], logistica_por_item: Mapping[Any, Sequence[Any]]
) -> int:
    if not items:
        return 0
    feitos = sum(1 for item in items if item_concluido(_entregas(logistica_por_item, item)))
    return arredondar(feitos / len(items) * 100)


def job_saiu(items: Sequence[Any], logistica_por_item: Mapping[Any, Sequence[Any]]) -> bool:
    """Todos os itens têm a primeira entrega marcada como 'saiu'."""
    if not items:
        return False
    for item in items:
        entregas = _entregas(logistica_por_item, item)
        if not entregas or _campo(entregas[0], "saiu") is not True:
            return False
    return True


def cor_prioridade(job: Any, agora: Optional[datetime] = None) -> str:
    if _campo(job, "prioridade"):
        return VERMELHO
    data_in = parse_datahora(_campo(job, "data_in"))
    agora = agora or datetime.utcnow()
    if data_in and (agora - data_in).total_seconds() / 86400 > DIAS_ANTIGO:
        return AZUL
    return VERDE


def peso_prioridade(job: Any, agora: Optional[datetime] = None) -> int:
    return PESO_PRIORIDADE[cor_prioridade(job, agora)]


def cor_artes(items: Sequence[Any], designer_por_item: Mapping[Any, Any]) -> str:
    """Semáforo de artes finais: vermelho sem paginação, verde tudo paginado."""
    if not items:
        return VERMELHO
    designers = [
        designer_por_item[_campo(i, "id")]
        for i in items
        if designer_por_item.get(_campo(i, "id")) is not None
    ]
    if not designers:
        return VERMELHO
    paginados = sum(1 for d in designers if _campo(d, "paginacao") is True)
    if paginados == 0:
        return VERMELHO
    if paginados == len(designers):
        return VERDE
    return LARANJA


def cor_corte(operacoes: Iterable[Any]) -> str:
    return VERDE if any(_campo(op, "concluido") is True for op in operacoes) else VERMELHO


# ---------------------------------------------------------------------
# Leitura agregada da BD
# ---------------------------------------------------------------------
def carregar_relacoes(job_ids: Sequence[int]) -> Dict[str, Any]:
    """Busca itens, entregas, designer e operações dos jobs de uma só vez."""
    items_por_job: Dict[int, List[ItemBase]] = defaultdict(list)
    logistica_por_item: Dict[int, List[LogisticaEntrega]] = defaultdict(list)
    designer_por_item: Dict[int, DesignerItem] = {}
    operacoes_por_job: Dict[int, List[ProducaoOperacao]] = defaultdict(list)

    if not job_ids:
        return {
            "items": items_por_job,
            "logistica": logistica_por_item,
            "designer": designer_por_item,
            "operacoes": operacoes_por_job,
        }

    items = (
        ItemBase.query.filter(ItemBase.folha_obra_id.in_(job_ids))
        .order_by(ItemBase.id.asc())
        .all()
    )
    for item in items:
        items_por_job[item.folha_obra_id].append(item)

    item_ids = [i.id for i in items]
    if item_ids:
        for entrega in (
            LogisticaEntrega.query.filter(LogisticaEntrega.item_id.in_(item_ids))
            .order_by(LogisticaEntrega.id.asc())
            .all()
        ):
            logistica_por_item[entrega.item_id].append(entrega)
        for d in DesignerItem.query.filter(DesignerItem.item_id.in_(item_ids)).all():
            designer_por_item.setdefault(d.item_id, d)

    for op in ProducaoOperacao.query.filter(ProducaoOperacao.folha_obra_id.in_(job_ids)).all():
        operacoes_por_job[op.folha_obra_id].append(op)

    return {
        "items": items_por_job,
        "logistica": logistica_por_item,
        "designer": designer_por_item,
        "operacoes": operacoes_por_job,
    }


def estado_jobs(jobs: Sequence[FolhaObra], agora: Optional[datetime] = None) -> Dict[int, dict]:
    rel = carregar_relacoes([j.id for j in jobs])
    estado: Dict[int, dict] = {}
    for job in jobs:
        items = rel["items"].get(job.id, [])
        estado[job.id] = {
            "completo": job_completo(items, rel["logistica"]),
            "percentagem": percentagem_conclusao(items, rel["logistica"]),
            "saiu": job_saiu(items, rel["logistica"]),
            "cor_prioridade": cor_prioridade(job, agora),
            "cor_artes": cor_artes(items, rel["designer"]),
            "cor_corte": cor_corte(rel["operacoes"].get(job.id, [])),
        }
    return estado


def auto_concluir(job: FolhaObra) -> bool:
    """
    Marca o job como concluído (concluido=True, data_concluido=agora) quando
    todas as entregas estão concluídas. Devolve True se houve alteração.
    """
    if job.concluido:
        return False
    rel = carregar_relacoes([job.id])
    if not job_completo(rel["items"].get(job.id, []), rel["logistica"]):
        return False

    try:
        job.concluido = True
        job.data_concluido = datetime.utcnow()
        job.updated_at = datetime.utcnow()
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Producao] Erro ao concluir automaticamente FO {job.numero_fo}: {str(e)}")
        raise

    logger.info(f"[Producao] FO {job.numero_fo} concluída automaticamente.")
    return True
