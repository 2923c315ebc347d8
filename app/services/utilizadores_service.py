# -*- coding: utf-8 -*-
"""
app/services/utilizadores_service.py

Administração de utilizadores, roles e permissões por página.

Expõe:
- listar_roles() / criar_role(payload)
- permissoes_role(role_id)                 → {page_path: can_access}
- atualizar_permissoes(role_id, permissoes) → upsert por (role_id, page_path)
- inicializar_permissoes(role_id)          → todas as páginas, só as básicas com acesso
- listar_utilizadores() / criar_utilizador / atualizar_utilizador / remover_utilizador
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from app import db
from app.models_sqla import Profile, Role, RolePermission
from app.services.erros import RegistoNaoEncontrado
from app.utils.ordenacao import to_bool, to_int

logger = logging.getLogger(__name__)

# Páginas verificadas pelas rotas (page_required) mais as básicas
PAGINAS = (
    "/",
    "/dashboard",
    "/definicoes",
    "/definicoes/materiais",
    "/definicoes/stocks",
    "/definicoes/utilizadores",
    "/designer-flow",
    "/producao",
    "/producao/operacoes",
)
PAGINAS_BASICAS = ("/", "/dashboard")


def _commit(msg_erro: str) -> None:
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Utilizadores] {msg_erro}: {str(e)}")
        raise


def _get_role(role_id: int) -> Role:
    role = db.session.get(Role, role_id)
    if not role:
        raise RegistoNaoEncontrado(f"Role não encontrada: {role_id}")
    return role


def _get_profile(profile_id: int) -> Profile:
    p = db.session.get(Profile, profile_id)
    if not p:
        raise RegistoNaoEncontrado(f"Utilizador não encontrado: {profile_id}")
    return p


# ---------------------------------------------------------------------
# Roles e permissões
# ---------------------------------------------------------------------
def listar_roles() -> List[dict]:
    return [r.as_dict() for r in Role.query.order_by(Role.name.asc()).all()]


def criar_role(payload: dict) -> Role:
    nome = (payload.get("name") or "").strip().upper()
    if not nome:
        raise ValueError("O nome da role é obrigatório.")
    if Role.query.filter_by(name=nome).first():
        raise ValueError(f"A role {nome} já existe.")

    role = Role(name=nome, description=(payload.get("description") or "").strip() or None)
    db.session.add(role)
    _commit(f"Erro ao criar role {nome}")
    logger.info(f"[Utilizadores] Role criada: {nome}")
    return role


def permissoes_role(role_id: int) -> Dict[str, bool]:
    _get_role(role_id)
    return {
        p.page_path: bool(p.can_access)
        for p in RolePermission.query.filter_by(role_id=role_id).all()
    }


def atualizar_permissoes(role_id: int, permissoes: Any) -> Dict[str, bool]:
    if not isinstance(permissoes, dict) or not permissoes:
        raise ValueError("Indique as permissões no formato {page_path: bool}.")
    _get_role(role_id)

    existentes = {
        p.page_path: p for p in RolePermission.query.filter_by(role_id=role_id).all()
    }
    for page_path, can_access in permissoes.items():
        linha = existentes.get(page_path)
        if linha is None:
            linha = RolePermission(role_id=role_id, page_path=page_path)
            db.session.add(linha)
        linha.can_access = to_bool(can_access)
    _commit(f"Erro ao atualizar permissões da role {role_id}")
    logger.info(f"[Utilizadores] Permissões atualizadas: role={role_id} ({len(permissoes)} página(s))")
    return permissoes_role(role_id)


def inicializar_permissoes(role_id: int) -> Dict[str, bool]:
    """Cria as linhas em falta; as já existentes não são alteradas."""
    _get_role(role_id)
    existentes = {
        p.page_path for p in RolePermission.query.filter_by(role_id=role_id).all()
    }
    for page_path in PAGINAS:
        if page_path not in existentes:
            db.session.add(
                RolePermission(
                    role_id=role_id,
                    page_path=page_path,
                    can_access=page_path in PAGINAS_BASICAS,
                )
            )
    _commit(f"Erro ao inicializar permissões da role {role_id}")
    return permissoes_role(role_id)


# ---------------------------------------------------------------------
# Utilizadores
# ---------------------------------------------------------------------
def listar_utilizadores() -> List[dict]:
    return [p.as_dict() for p in Profile.query.order_by(Profile.username.asc()).all()]


def _aplicar_role(profile: Profile, valor: Any) -> None:
    role_id = to_int(valor)
    if role_id is not None:
        _get_role(role_id)
    profile.role_id = role_id


def criar_utilizador(payload: dict) -> Profile:
    username = (payload.get("username") or "").strip()
    senha = payload.get("password") or ""
    if not username or not senha:
        raise ValueError("Username e password são obrigatórios.")
    if Profile.query.filter_by(username=username).first():
        raise ValueError("Este nome de usuário já existe.")

    profile = Profile(
        username=username,
        first_name=(payload.get("first_name") or "").strip() or None,
        last_name=(payload.get("last_name") or "").strip() or None,
        email=(payload.get("email") or "").strip() or None,
    )
    profile.set_password(senha)
    if "role_id" in payload:
        _aplicar_role(profile, payload["role_id"])
    db.session.add(profile)
    _commit(f"Erro ao criar utilizador {username}")
    logger.info(f"[Utilizadores] Utilizador criado: {username}")
    return profile


def atualizar_utilizador(profile_id: int, payload: dict) -> Profile:
    profile = _get_profile(profile_id)
    for campo in ("first_name", "last_name", "email"):
        if campo in payload:
            setattr(profile, campo, (payload[campo] or "").strip() or None)
    if payload.get("password"):
        profile.set_password(payload["password"])
    if "role_id" in payload:
        _aplicar_role(profile, payload["role_id"])
    if "active" in payload:
        profile.active = to_bool(payload["active"])
    _commit(f"Erro ao atualizar utilizador {profile_id}")
    logger.info(f"[Utilizadores] Utilizador atualizado: {profile.username}")
    return profile


def remover_utilizador(profile_id: int) -> None:
    profile = _get_profile(profile_id)
    db.session.delete(profile)
    _commit(f"Erro ao remover utilizador {profile_id}")
    logger.info(f"[Utilizadores] Utilizador removido: {profile.username}")
