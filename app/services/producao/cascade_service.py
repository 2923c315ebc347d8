"""
Remoção em cascata de uma Folha de Obra.

Os deletes são feitos em sequência, cada um com o seu commit:
producao_operacoes → designer_items → logistica_entregas → items_base → folhas_obras.
Falhas nos passos intermédios ficam registadas e a sequência continua
(sem compensação); só a falha ao remover o próprio job é propagada.
"""
from __future__ import annotations

import logging
from typing import Dict, List

from sqlalchemy import or_

from app import db
from app.models_sqla import (
    DesignerItem,
    FolhaObra,
    ItemBase,
    LogisticaEntrega,
    ProducaoOperacao,
)
from app.services.erros import RegistoNaoEncontrado

logger = logging.getLogger(__name__)


def _apagar_passo(nome: str, qry) -> bool:
    try:
        removidos = qry.delete(synchronize_session=False)
        db.session.commit()
        logger.info(f"[Producao] Cascade {nome}: {removidos} linha(s) removida(s)")
        return True
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Producao] Cascade {nome} falhou: {str(e)}")
        return False


def apagar_job(job_id: int) -> Dict[str, object]:
    job = db.session.get(FolhaObra, job_id)
    if not job:
        raise RegistoNaoEncontrado(f"Folha de obra não encontrada: {job_id}")

    item_ids: List[int] = [
        r[0] for r in db.session.query(ItemBase.id).filter_by(folha_obra_id=job_id).all()
    ]
    falhas: List[str] = []

    filtro_ops = ProducaoOperacao.folha_obra_id == job_id
    if item_ids:
        filtro_ops = or_(filtro_ops, ProducaoOperacao.item_id.in_(item_ids))
    if not _apagar_passo("producao_operacoes", ProducaoOperacao.query.filter(filtro_ops)):
        falhas.append("producao_operacoes")

    if item_ids:
        passos = (
            ("designer_items", DesignerItem.query.filter(DesignerItem.item_id.in_(item_ids))),
            (
                "logistica_entregas",
                LogisticaEntrega.query.filter(LogisticaEntrega.item_id.in_(item_ids)),
            ),
            ("items_base", ItemBase.query.filter(ItemBase.id.in_(item_ids))),
        )
        for nome, qry in passos:
            if not _apagar_passo(nome, qry):
                falhas.append(nome)

    try:
        FolhaObra.query.filter_by(id=job_id).delete(synchronize_session=False)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Producao] Erro ao remover FO {job_id}: {str(e)}")
        raise

    logger.info(f"[Producao] FO {job_id} removida ({len(item_ids)} item(s))")
    return {"job_id": job_id, "items": len(item_ids), "falhas": falhas}
