# -*- coding: utf-8 -*-
# app/routes/producao_routes/logistica.py
from flask import Blueprint, request

from app.permissions import page_required
from app.routes.utilidades import ok, payload_json, resposta_erro
from app.services.producao import logistica_service
from app.utils.ordenacao import to_bool

logistica_bp = Blueprint("logistica_bp", __name__, url_prefix="/producao/logistica")

PAGINA = "/producao"


@logistica_bp.get("")
@page_required(PAGINA)
def listar_logistica():
    filtros = {"data": request.args.get("data"), "concluido": request.args.get("concluido")}
    return ok(items=logistica_service.listar_logistica(filtros))


@logistica_bp.patch("/<int:entrega_id>")
@page_required(PAGINA)
def atualizar_logistica(entrega_id):
    try:
        return ok(entrega=logistica_service.atualizar_logistica(entrega_id, payload_json()))
    except Exception as e:
        return resposta_erro(e, "LOGISTICA_API")


@logistica_bp.post("/<int:entrega_id>/concluido")
@page_required(PAGINA)
def toggle_concluido(entrega_id):
    valor = to_bool(payload_json().get("concluido", True))
    try:
        return ok(entrega=logistica_service.toggle_concluido(entrega_id, valor))
    except Exception as e:
        return resposta_erro(e, "LOGISTICA_API")


@logistica_bp.patch("/<int:entrega_id>/data-saida")
@page_required(PAGINA)
def atualizar_data_saida(entrega_id):
    try:
        entrega = logistica_service.atualizar_data_saida(
            entrega_id, payload_json().get("data_saida")
        )
        return ok(entrega=entrega)
    except Exception as e:
        return resposta_erro(e, "LOGISTICA_API")


@logistica_bp.post("/<int:entrega_id>/duplicar")
@page_required(PAGINA)
def duplicar(entrega_id):
    try:
        return ok(201, entrega=logistica_service.duplicar_logistica(entrega_id))
    except Exception as e:
        return resposta_erro(e, "LOGISTICA_API")


@logistica_bp.delete("/<int:entrega_id>")
@page_required(PAGINA)
def remover(entrega_id):
    try:
        logistica_service.remover_entrega(entrega_id)
        return ok()
    except Exception as e:
        return resposta_erro(e, "LOGISTICA_API")
