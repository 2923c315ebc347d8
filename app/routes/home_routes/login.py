from flask import Blueprint, current_app, jsonify
from flask_login import current_user, login_required, login_user, logout_user

from app import db
from app.models_sqla import Profile
from app.permissions import paginas_acessiveis
from app.routes.utilidades import ok, payload_json

login_bp = Blueprint("login_bp", __name__)


@login_bp.post("/login")
def login():
    dados = payload_json()
    usuario_form = (dados.get("username") or "").strip()
    senha_form = dados.get("password") or ""

    # Busca usuário no banco
    user = Profile.query.filter_by(username=usuario_form).first()

    # Verifica se existe, se está ativo e se a senha bate
    if user and user.is_active and user.check_password(senha_form):
        login_user(user)
        current_app.logger.info("[Auth] Login: %s", user.username)
        return ok(user=user.as_dict(), paginas=paginas_acessiveis(user))

    current_app.logger.warning("[Auth] Login falhou para: %s", usuario_form)
    return jsonify({"ok": False, "error": "Usuário ou senha incorretos."}), 401


@login_bp.post("/registro")
def registro():
    """Cadastro de novos utilizadores (sem role: o admin atribui depois)."""
    dados = payload_json()
    usuario_form = (dados.get("username") or "").strip()
    senha_form = dados.get("password") or ""
    confirmar_senha = dados.get("confirmar_password") or ""

    erro = None
    if not usuario_form or not senha_form:
        erro = "Preencha todos os campos."
    elif senha_form != confirmar_senha:
        erro = "As senhas não coincidem."
    elif Profile.query.filter_by(username=usuario_form).first():
        erro = "Este nome de usuário já existe."
    if erro:
        return jsonify({"ok": False, "error": erro}), 400

    novo_usuario = Profile(
        username=usuario_form,
        first_name=(dados.get("first_name") or "").strip() or None,
        last_name=(dados.get("last_name") or "").strip() or None,
        email=(dados.get("email") or "").strip() or None,
    )
    novo_usuario.set_password(senha_form)
    try:
        db.session.add(novo_usuario)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("[Auth] Erro ao registar %s", usuario_form)
        raise
    return ok(201, user=novo_usuario.as_dict())


@login_bp.get("/me")
@login_required
def me():
    return ok(user=current_user.as_dict(), paginas=paginas_acessiveis(current_user))


@login_bp.post("/logout")
@login_required
def logout():
    logout_user()
    return ok()
