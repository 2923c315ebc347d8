# app/routes/definicoes_routes/lookups.py
from flask import Blueprint

from app.permissions import page_required
from app.routes.utilidades import ok, payload_json, resposta_erro
from app.services import definicoes_service

definicoes_bp = Blueprint("definicoes_bp", __name__, url_prefix="/definicoes")

# Todas as tabelas auxiliares partilham as mesmas rotas:
#   GET/POST   /definicoes/<tabela>
#   PATCH/DELETE /definicoes/<tabela>/<id>


@definicoes_bp.get("/<tabela>")
@page_required("/definicoes")
def listar(tabela):
    try:
        return ok(items=definicoes_service.listar(tabela))
    except Exception as e:
        return resposta_erro(e, "DEFINICOES_API")


@definicoes_bp.post("/<tabela>")
@page_required("/definicoes")
def criar(tabela):
    try:
        return ok(201, registo=definicoes_service.criar(tabela, payload_json()))
    except Exception as e:
        return resposta_erro(e, "DEFINICOES_API")


@definicoes_bp.patch("/<tabela>/<int:registo_id>")
@page_required("/definicoes")
def atualizar(tabela, registo_id):
    try:
        registo = definicoes_service.atualizar(tabela, registo_id, payload_json())
        return ok(registo=registo)
    except Exception as e:
        return resposta_erro(e, "DEFINICOES_API")


@definicoes_bp.delete("/<tabela>/<int:registo_id>")
@page_required("/definicoes")
def remover(tabela, registo_id):
    try:
        definicoes_service.remover(tabela, registo_id)
        return ok()
    except Exception as e:
        return resposta_erro(e, "DEFINICOES_API")
