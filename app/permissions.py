from functools import wraps
from typing import List, Optional

from flask import current_app, jsonify
from flask_login import current_user

from app.models_sqla import Profile, RolePermission

ROLE_ADMIN = "ADMIN"
ROLE_PRODUCAO = "PRODUCAO"

# Produção tem acesso às áreas operacionais mesmo sem linha explícita
PRODUCAO_PREFIXOS = ("/producao", "/definicoes", "/designer-flow")
# Só com linha explícita em role_permissions (ou ADMIN)
PAGINA_UTILIZADORES = "/definicoes/utilizadores"


def _role_name(user: Optional[Profile]) -> Optional[str]:
    role = getattr(user, "role", None)
    return role.name if role else None


def pode_aceder(user: Optional[Profile], page_path: str) -> bool:
    if user is None or not getattr(user, "is_authenticated", False):
        return False

    role_id = getattr(user, "role_id", None)
    if role_id is not None:
        explicita = RolePermission.query.filter_by(
            role_id=role_id, page_path=page_path
        ).first()
        if explicita is not None:
            return bool(explicita.can_access)

    role = _role_name(user)
    if role == ROLE_ADMIN:
        return True
    if page_path == PAGINA_UTILIZADORES:
        return False
    if role == ROLE_PRODUCAO and page_path.startswith(PRODUCAO_PREFIXOS):
        return True
    return False


def paginas_acessiveis(user: Optional[Profile]) -> List[str]:
    role_id = getattr(user, "role_id", None)
    if role_id is None:
        return []
    return [
        p.page_path
        for p in RolePermission.query.filter_by(role_id=role_id, can_access=True)
        .order_by(RolePermission.page_path.asc())
        .all()
    ]


# -------------------------------
# Verificação por página
# -------------------------------
def page_required(page_path: str):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if current_app.config.get("LOGIN_DISABLED"):
                return fn(*args, **kwargs)

            if not current_user.is_authenticated:
                return jsonify({"ok": False, "error": "Autenticação necessária."}), 401

            if not pode_aceder(current_user, page_path):
                current_app.logger.warning(
                    "[Auth] Acesso negado: user=%s page=%s", current_user.username, page_path
                )
                return jsonify({"ok": False, "error": "Sem permissão para esta página."}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
