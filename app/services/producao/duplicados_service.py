"""
Verificação de ORC/FO duplicados antes de gravar um job.

É um read-then-write sem restrição na BD: o utilizador decide se confirma
a gravação quando já existe outro job com o mesmo número.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from app.models_sqla import FolhaObra
from app.utils.ordenacao import to_int

logger = logging.getLogger(__name__)

PREFIXO_TEMPORARIO = "temp-"


def _id_excluido(job_id_atual: Any) -> Optional[int]:
    """Ids temporários ("temp-...") ainda não existem na BD, logo não excluem nada."""
    if job_id_atual is None:
        return None
    if str(job_id_atual).startswith(PREFIXO_TEMPORARIO):
        return None
    return to_int(job_id_atual)


def verificar_orc_duplicado(numero_orc: Any, job_id_atual: Any = None) -> Optional[FolhaObra]:
    numero = to_int(numero_orc)
    if not numero:
        return None
    qry = FolhaObra.query.filter(FolhaObra.numero_orc == numero)
    excluir = _id_excluido(job_id_atual)
    if excluir is not None:
        qry = qry.filter(FolhaObra.id != excluir)
    existente = qry.first()
    if existente:
        logger.info(f"[Producao] ORC {numero} já usado pela FO {existente.numero_fo}")
    return existente


def verificar_fo_duplicado(numero_fo: Any, job_id_atual: Any = None) -> Optional[FolhaObra]:
    numero = str(numero_fo).strip() if numero_fo is not None else ""
    if not numero or numero == "0":
        return None
    qry = FolhaObra.query.filter(FolhaObra.numero_fo == numero)
    excluir = _id_excluido(job_id_atual)
    if excluir is not None:
        qry = qry.filter(FolhaObra.id != excluir)
    existente = qry.first()
    if existente:
        logger.info(f"[Producao] FO {numero} já existe (id={existente.id})")
    return existente
