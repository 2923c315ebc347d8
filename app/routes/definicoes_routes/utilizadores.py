# app/routes/definicoes_routes/utilizadores.py
from flask import Blueprint

from app.permissions import PAGINA_UTILIZADORES, page_required
from app.routes.utilidades import ok, payload_json, resposta_erro
from app.services import utilizadores_service

utilizadores_bp = Blueprint("utilizadores_bp", __name__, url_prefix="/admin")


# -------------------------------
# Roles e permissões
# -------------------------------
@utilizadores_bp.get("/roles")
@page_required(PAGINA_UTILIZADORES)
def listar_roles():
    return ok(items=utilizadores_service.listar_roles())


@utilizadores_bp.post("/roles")
@page_required(PAGINA_UTILIZADORES)
def criar_role():
    try:
        return ok(201, role=utilizadores_service.criar_role(payload_json()))
    except Exception as e:
        return resposta_erro(e, "ADMIN_API")


@utilizadores_bp.get("/roles/<int:role_id>/permissoes")
@page_required(PAGINA_UTILIZADORES)
def permissoes_role(role_id):
    try:
        return ok(permissoes=utilizadores_service.permissoes_role(role_id))
    except Exception as e:
        return resposta_erro(e, "ADMIN_API")


@utilizadores_bp.put("/roles/<int:role_id>/permissoes")
@page_required(PAGINA_UTILIZADORES)
def atualizar_permissoes(role_id):
    try:
        permissoes = utilizadores_service.atualizar_permissoes(
            role_id, payload_json().get("permissoes")
        )
        return ok(permissoes=permissoes)
    except Exception as e:
        return resposta_erro(e, "ADMIN_API")


@utilizadores_bp.post("/roles/<int:role_id>/permissoes/inicializar")
@page_required(PAGINA_UTILIZADORES)
def inicializar_permissoes(role_id):
    try:
        return ok(201, permissoes=utilizadores_service.inicializar_permissoes(role_id))
    except Exception as e:
        return resposta_erro(e, "ADMIN_API")


# -------------------------------
# Utilizadores
# -------------------------------
@utilizadores_bp.get("/utilizadores")
@page_required(PAGINA_UTILIZADORES)
def listar_utilizadores():
    return ok(items=utilizadores_service.listar_utilizadores())


@utilizadores_bp.post("/utilizadores")
@page_required(PAGINA_UTILIZADORES)
def criar_utilizador():
    try:
        return ok(201, user=utilizadores_service.criar_utilizador(payload_json()))
    except Exception as e:
        return resposta_erro(e, "ADMIN_API")


@utilizadores_bp.patch("/utilizadores/<int:profile_id>")
@page_required(PAGINA_UTILIZADORES)
def atualizar_utilizador(profile_id):
    try:
        user = utilizadores_service.atualizar_utilizador(profile_id, payload_json())
        return ok(user=user)
    except Exception as e:
        return resposta_erro(e, "ADMIN_API")


@utilizadores_bp.delete("/utilizadores/<int:profile_id>")
@page_required(PAGINA_UTILIZADORES)
def remover_utilizador(profile_id):
    try:
        utilizadores_service.remover_utilizador(profile_id)
        return ok()
    except Exception as e:
        return resposta_erro(e, "ADMIN_API")
