# app/routes/producao_routes/operacoes.py
from flask import Blueprint, request

from app.permissions import page_required
from app.routes.utilidades import ok, payload_json, resposta_erro
from app.services.producao import operacoes_service
from app.utils.ordenacao import to_bool

operacoes_bp = Blueprint("operacoes_bp", __name__, url_prefix="/producao/operacoes")

PAGINA = "/producao/operacoes"


@operacoes_bp.get("")
@page_required(PAGINA)
def listar_operacoes():
    return ok(items=operacoes_service.listar_operacoes(request.args.get("job_id", type=int)))


@operacoes_bp.post("")
@page_required(PAGINA)
def registar_operacao():
    try:
        resultado = operacoes_service.registar_operacao(payload_json())
        return ok(201, **resultado)
    except Exception as e:
        return resposta_erro(e, "OPERACOES_API")


@operacoes_bp.post("/<int:op_id>/concluido")
@page_required(PAGINA)
def concluir_operacao(op_id):
    try:
        op = operacoes_service.concluir_operacao(
            op_id, to_bool(payload_json().get("concluido", True))
        )
        return ok(operacao=op)
    except Exception as e:
        return resposta_erro(e, "OPERACOES_API")
