# -*- coding: utf-8 -*-
"""
app/services/producao/logistica_service.py

Entregas de logística de cada item (local de recolha/entrega, transportadora,
guia, datas de saída e conclusão).
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from app import db
from app.models_sqla import Cliente, FolhaObra, ItemBase, LogisticaEntrega
from app.services.erros import RegistoNaoEncontrado
from app.services.producao import conclusao_service
from app.utils.datas import parse_data
from app.utils.ordenacao import to_bool, to_int

logger = logging.getLogger(__name__)

_CAMPOS_TEXTO = (
    "descricao",
    "notas",
    "local_recolha",
    "local_entrega",
    "transportadora",
    "contacto",
    "telefone",
    "contacto_entrega",
    "telefone_entrega",
)
_CAMPOS_BOOL = ("saiu", "is_entrega", "brindes")
_CAMPOS_DATA = ("data", "data_saida")
_CAMPOS_DUPLICAR = _CAMPOS_TEXTO + ("id_local_recolha", "id_local_entrega", "brindes", "data_saida")


def parse_guia(valor: Any) -> Optional[int]:
    """Nº de guia inteiro; vazio ou inválido → None."""
    return to_int(valor)


def get_entrega(entrega_id: int) -> LogisticaEntrega:
    entrega = db.session.get(LogisticaEntrega, entrega_id)
    if not entrega:
        raise RegistoNaoEncontrado(f"Entrega não encontrada: {entrega_id}")
    return entrega


def _commit(msg_erro: str) -> None:
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Logistica] {msg_erro}: {str(e)}")
        raise


def _job_da_entrega(entrega: LogisticaEntrega) -> Optional[FolhaObra]:
    item = db.session.get(ItemBase, entrega.item_id)
    return db.session.get(FolhaObra, item.folha_obra_id) if item else None


def toggle_concluido(entrega_id: int, valor: bool, hoje: Optional[date] = None) -> LogisticaEntrega:
    """
    Marcar concluído preenche data_concluido e data_saida com hoje;
    desmarcar limpa as duas datas.
    """
    entrega = get_entrega(entrega_id)
    hoje = hoje or date.today()
    valor = to_bool(valor)
    entrega.concluido = valor
    entrega.data_concluido = hoje if valor else None
    entrega.data_saida = hoje if valor else None
    _commit(f"Erro ao alterar conclusão da entrega {entrega_id}")
    logger.info(f"[Logistica] Entrega {entrega_id} concluido={entrega.concluido}")

    if valor:
        job = _job_da_entrega(entrega)
        if job:
            conclusao_service.auto_concluir(job)
    return entrega


def atualizar_data_saida(entrega_id: int, valor: Any) -> LogisticaEntrega:
    entrega = get_entrega(entrega_id)
    entrega.data_saida = parse_data(valor)
    _commit(f"Erro ao atualizar data de saída da entrega {entrega_id}")
    return entrega


def atualizar_logistica(entrega_id: int, campos: dict) -> LogisticaEntrega:
    entrega = get_entrega(entrega_id)
    for campo in _CAMPOS_TEXTO:
        if campo in campos:
            valor = campos[campo]
            setattr(entrega, campo, str(valor).strip() if valor not in (None, "") else None)
    for campo in _CAMPOS_BOOL:
        if campo in campos:
            setattr(entrega, campo, to_bool(campos[campo]))
    for campo in _CAMPOS_DATA:
        if campo in campos:
            setattr(entrega, campo, parse_data(campos[campo]))
    if "guia" in campos:
        entrega.guia = parse_guia(campos["guia"])
    if "quantidade" in campos:
        entrega.quantidade = to_int(campos["quantidade"])
    for campo in ("id_local_recolha", "id_local_entrega"):
        if campo in campos:
            cliente_id = to_int(campos[campo])
            setattr(entrega, campo, cliente_id)
            # mantém o texto do local alinhado com o cliente escolhido
            cliente = db.session.get(Cliente, cliente_id) if cliente_id else None
            texto = campo.replace("id_", "")
            if cliente and texto not in campos:
                setattr(entrega, texto, cliente.nome_cl)
    _commit(f"Erro ao atualizar entrega {entrega_id}")

    if "concluido" in campos:
        return toggle_concluido(entrega_id, to_bool(campos["concluido"]))
    return entrega


def duplicar_logistica(entrega_id: int) -> LogisticaEntrega:
    """Copia a entrega para uma nova linha sem guia, com data de hoje."""
    origem = get_entrega(entrega_id)
    item = db.session.get(ItemBase, origem.item_id)

    nova = LogisticaEntrega(item_id=origem.item_id)
    for campo in _CAMPOS_DUPLICAR:
        setattr(nova, campo, getattr(origem, campo))
    nova.guia = None
    nova.quantidade = origem.quantidade if origem.quantidade is not None else (
        item.quantidade if item else None
    )
    nova.data = date.today()
    nova.is_entrega = True
    nova.concluido = False
    nova.saiu = False

    db.session.add(nova)
    _commit(f"Erro ao duplicar entrega {entrega_id}")
    logger.info(f"[Logistica] Entrega {entrega_id} duplicada → {nova.id}")
    return nova


def remover_entrega(entrega_id: int) -> None:
    entrega = get_entrega(entrega_id)
    db.session.delete(entrega)
    _commit(f"Erro ao remover entrega {entrega_id}")


def listar_logistica(filtros: Optional[dict] = None) -> List[Dict[str, Any]]:
    """
    Linhas planas (entrega + item + job) para a tabela e o export de logística.
    Filtro opcional ``data`` (data_saida) e ``concluido``.
    """
    filtros = filtros or {}
    qry = (
        db.session.query(LogisticaEntrega, ItemBase, FolhaObra)
        .join(ItemBase, ItemBase.id == LogisticaEntrega.item_id)
        .join(FolhaObra, FolhaObra.id == ItemBase.folha_obra_id)
    )
    d = parse_data(filtros.get("data"))
    if d:
        qry = qry.filter(LogisticaEntrega.data_saida == d)
    if filtros.get("concluido") not in (None, ""):
        concluido = str(filtros["concluido"]).lower() in {"1", "true", "sim"}
        qry = qry.filter(LogisticaEntrega.concluido.is_(concluido))

    linhas = []
    for entrega, item, job in qry.order_by(LogisticaEntrega.id.asc()).all():
        row = entrega.as_dict()
        row.update(
            {
                "numero_orc": job.numero_orc,
                "numero_fo": job.numero_fo,
                "cliente": job.cliente,
                "id_cliente": job.id_cliente,
                "nome_campanha": job.nome_campanha,
                "item_descricao": item.descricao,
                "item_quantidade": item.quantidade,
            }
        )
        linhas.append(row)
    return linhas
