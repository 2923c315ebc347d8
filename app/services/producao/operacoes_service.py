"""
Operações de produção (impressão/corte). As placas de corte consomem stock
do material, por isso cada registo passa pela validação de stock.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from app import db
from app.models_sqla import ProducaoOperacao
from app.services import estoque_service
from app.services.erros import RegistoNaoEncontrado
from app.utils.datas import parse_data
from app.utils.ordenacao import to_bool, to_float, to_int

logger = logging.getLogger(__name__)


def registar_operacao(payload: dict) -> dict:
    material_id = to_int(payload.get("material_id"))
    corte = to_float(payload.get("num_placas_corte")) or 0
    aviso = None

    if material_id is not None and corte > 0:
        validacao = estoque_service.validar_operacao(material_id, corte)
        if not validacao["valid"]:
            logger.warning(
                f"[Producao] Operação recusada (material={material_id}): {validacao['message']}"
            )
            raise ValueError(validacao["message"])
        aviso = validacao["message"]

    op = ProducaoOperacao(
        folha_obra_id=to_int(payload.get("folha_obra_id")),
        item_id=to_int(payload.get("item_id")),
        material_id=material_id,
        operador_id=to_int(payload.get("operador_id")),
        tipo_op=(payload.get("tipo_op") or "").strip() or None,
        num_placas_print=to_float(payload.get("num_placas_print")) or 0,
        num_placas_corte=corte,
        data_operacao=parse_data(payload.get("data_operacao")) or date.today(),
        concluido=to_bool(payload.get("concluido", False)),
        notas=payload.get("notas"),
    )
    try:
        db.session.add(op)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Producao] Erro ao registar operação: {str(e)}")
        raise

    logger.info(f"[Producao] Operação {op.id} registada (material={material_id}, corte={corte})")
    return {"operacao": op, "aviso": aviso}


def concluir_operacao(op_id: int, valor: bool) -> ProducaoOperacao:
    op = db.session.get(ProducaoOperacao, op_id)
    if not op:
        raise RegistoNaoEncontrado(f"Operação não encontrada: {op_id}")
    op.concluido = to_bool(valor)
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Producao] Erro ao concluir operação {op_id}: {str(e)}")
        raise
    return op


def listar_operacoes(job_id: Optional[int] = None) -> List[dict]:
    qry = ProducaoOperacao.query
    if job_id is not None:
        qry = qry.filter_by(folha_obra_id=job_id)
    return [op.as_dict() for op in qry.order_by(ProducaoOperacao.created_at.desc()).all()]
