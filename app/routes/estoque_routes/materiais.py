# app/routes/estoque_routes/materiais.py
from flask import Blueprint, request

from app.permissions import page_required
from app.routes.utilidades import ok, payload_json, resposta_erro
from app.services import estoque_service

materiais_bp = Blueprint("materiais_bp", __name__, url_prefix="/estoque/materiais")

PAGINA = "/definicoes/materiais"


@materiais_bp.get("")
@page_required(PAGINA)
def listar_materiais():
    return ok(items=estoque_service.listar_materiais(request.args.get("q")))


@materiais_bp.post("")
@page_required(PAGINA)
def criar_material():
    try:
        material = estoque_service.criar_material(payload_json())
        return ok(201, material=material)
    except Exception as e:
        return resposta_erro(e, "MATERIAIS_API")


@materiais_bp.patch("/<int:material_id>")
@page_required(PAGINA)
def atualizar_material(material_id):
    try:
        return ok(material=estoque_service.atualizar_material(material_id, payload_json()))
    except Exception as e:
        return resposta_erro(e, "MATERIAIS_API")


@materiais_bp.delete("/<int:material_id>")
@page_required(PAGINA)
def remover_material(material_id):
    try:
        estoque_service.remover_material(material_id)
        return ok()
    except Exception as e:
        return resposta_erro(e, "MATERIAIS_API")


@materiais_bp.patch("/<int:material_id>/limites")
@page_required("/definicoes/stocks")
def atualizar_limites(material_id):
    dados = payload_json()
    try:
        material = estoque_service.atualizar_limites(
            material_id, dados.get("stock_minimo"), dados.get("stock_critico")
        )
        return ok(material=material)
    except Exception as e:
        return resposta_erro(e, "MATERIAIS_API")


@materiais_bp.patch("/<int:material_id>/correcao")
@page_required("/definicoes/stocks")
def guardar_correcao(material_id):
    try:
        material = estoque_service.guardar_correcao(
            material_id, payload_json().get("stock_correct")
        )
        return ok(material=material)
    except Exception as e:
        return resposta_erro(e, "MATERIAIS_API")


@materiais_bp.post("/<int:material_id>/correcao")
@page_required("/definicoes/stocks")
def aplicar_correcao(material_id):
    """Aplica a correção manual (enviada ou guardada) como entrada de ajuste."""
    try:
        entrada = estoque_service.aplicar_correcao(
            material_id, payload_json().get("correcao")
        )
        return ok(201, entrada=entrada)
    except Exception as e:
        return resposta_erro(e, "MATERIAIS_API")
