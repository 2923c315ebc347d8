# app/routes/designer_routes/designer_flow.py
from flask import Blueprint, request

from app.permissions import page_required
from app.routes.utilidades import ok, payload_json, resposta_erro
from app.services.designer import designer_flow_service
from app.utils.ordenacao import to_bool

designer_flow_bp = Blueprint(
    "designer_flow_bp", __name__, url_prefix="/designer-flow"
)

PAGINA = "/designer-flow"
FILTROS = ("designer", "po", "campanha", "item", "fechados")


@designer_flow_bp.get("/jobs")
@page_required(PAGINA)
def listar_jobs():
    filtros = {k: request.args.get(k) for k in FILTROS}
    return ok(items=designer_flow_service.listar_jobs_designer(filtros))


@designer_flow_bp.post("/items/<int:designer_item_id>/flag")
@page_required(PAGINA)
def toggle_flag(designer_item_id):
    dados = payload_json()
    try:
        designer = designer_flow_service.toggle_flag(
            designer_item_id, dados.get("flag"), to_bool(dados.get("valor"))
        )
        return ok(designer=designer)
    except Exception as e:
        return resposta_erro(e, "DESIGNER_API")


@designer_flow_bp.post("/items/<int:designer_item_id>/paginacao")
@page_required(PAGINA)
def marcar_paginacao(designer_item_id):
    try:
        designer = designer_flow_service.marcar_paginacao(
            designer_item_id, payload_json().get("path_trabalho")
        )
        return ok(designer=designer)
    except Exception as e:
        return resposta_erro(e, "DESIGNER_API")


@designer_flow_bp.patch("/items/<int:item_id>/complexidade")
@page_required(PAGINA)
def definir_complexidade(item_id):
    try:
        item = designer_flow_service.definir_complexidade(
            item_id, payload_json().get("complexidade_id")
        )
        return ok(item=item)
    except Exception as e:
        return resposta_erro(e, "DESIGNER_API")
