# app/routes/estoque_routes/paletes.py
from flask import Blueprint, request

from app.permissions import page_required
from app.routes.utilidades import ok, payload_json, resposta_erro
from app.services import paletes_service

paletes_bp = Blueprint("paletes_bp", __name__, url_prefix="/estoque/paletes")

PAGINA = "/definicoes/stocks"
FILTROS = ("search", "referencia", "fornecedor", "author", "date_from", "date_to")


@paletes_bp.get("")
@page_required(PAGINA)
def listar_paletes():
    filtros = {k: request.args.get(k) for k in FILTROS}
    return ok(items=paletes_service.listar_paletes(filtros))


@paletes_bp.get("/proximo-numero")
@page_required(PAGINA)
def proximo_numero():
    return ok(no_palete=paletes_service.proximo_numero_palete())


@paletes_bp.get("/referencias")
@page_required(PAGINA)
def referencias():
    return ok(items=paletes_service.referencias_cartao())


@paletes_bp.post("")
@page_required(PAGINA)
def criar_palete():
    try:
        return ok(201, palete=paletes_service.criar_palete(payload_json()))
    except Exception as e:
        return resposta_erro(e, "PALETES_API")


@paletes_bp.patch("/<int:palete_id>")
@page_required(PAGINA)
def atualizar_palete(palete_id):
    try:
        return ok(palete=paletes_service.atualizar_palete(palete_id, payload_json()))
    except Exception as e:
        return resposta_erro(e, "PALETES_API")


@paletes_bp.delete("/<int:palete_id>")
@page_required(PAGINA)
def remover_palete(palete_id):
    try:
        paletes_service.remover_palete(palete_id)
        return ok()
    except Exception as e:
        return resposta_erro(e, "PALETES_API")
