# app/__init__.py
"""
Application Factory do Flask para a Gestão Gráfica (stock, designer flow, produção).

Este arquivo segue o padrão de factory:
- NÃO registra blueprints fora da função create_app().
- Evita importações precoces que causam circular import.
- Torna o boot robusto (módulos opcionais não derrubam a app).

Para adicionar um novo blueprint, crie o módulo em app/routes/<area>/ e
registre aqui com _try_register(app, "app.routes.<area>.<modulo>", "<nome>_bp").

Execução:
- CLI (recomendado): FLASK_APP="app:create_app" flask run
"""

import logging
import os
from typing import Optional

from flask import Flask, jsonify
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# ---------------------------------------------------------------------
# Extensões globais (instanciadas aqui, inicializadas na factory)
# ---------------------------------------------------------------------
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()


# ---------------------------------------------------------------------
# Helper: registro dinâmico e seguro de blueprints
# ---------------------------------------------------------------------
def _try_register(
    app: Flask,
    import_line: str,
    attr: str,
    *,
    required: bool = False,
    alias: Optional[str] = None,
) -> None:
    """
    Importa dinamicamente e registra um blueprint, com tratamento de erros.

    Parâmetros:
      - import_line: caminho do módulo (ex.: "app.routes.home_routes.login")
      - attr: nome do objeto Blueprint dentro do módulo (ex.: "login_bp")
      - required: se True, falha interrompe o boot (raise); se False, apenas loga warning
      - alias: nome amigável para aparecer no log (opcional)
    """
    import importlib

    name = alias or attr
    try:
        mod = importlib.import_module(import_line)
        bp = getattr(mod, attr)
        app.register_blueprint(bp)
        app.logger.info(
            "[BOOT] Blueprint registrado: %s (%s.%s)", name, import_line, attr
        )
    except Exception as e:
        msg = (
            f"[BOOT] Falha ao registrar blueprint: {name} ({import_line}.{attr}) -> {e}"
        )
        if required:
            app.logger.exception(msg)
            raise
        else:
            app.logger.warning(msg)


def _database_url() -> str:
    url = os.environ.get("DATABASE_URL", "sqlite:///gestao_grafica.db")
    # Heroku/Render ainda entregam o esquema antigo
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


# ---------------------------------------------------------------------
# Factory principal
# ---------------------------------------------------------------------
def create_app(config: Optional[dict] = None) -> Flask:
    """
    Cria e configura a aplicação Flask:
      - Carrega configurações essenciais (env + override opcional).
      - Inicializa extensões (db, migrate, login).
      - Registra blueprints de forma resiliente.
    """
    app = Flask(__name__)

    # -----------------------------------------------------------------
    # Configurações básicas
    # -----------------------------------------------------------------
    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    app.config["SQLALCHEMY_DATABASE_URI"] = _database_url()
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["PAGE_SIZE"] = int(os.environ.get("PAGE_SIZE", "50"))
    app.json.ensure_ascii = False

    if config:
        app.config.update(config)

    if not app.logger.handlers:
        logging.basicConfig(level=logging.INFO)

    # -----------------------------------------------------------------
    # Inicialização de extensões
    # -----------------------------------------------------------------
    db.init_app(app)
    login_manager.init_app(app)

    # -----------------------------------------------------------------
    # Models (import após db.init_app, antes do migrate)
    # -----------------------------------------------------------------
    from app.models_sqla import (  # noqa: F401
        Cliente,
        Complexidade,
        DesignerItem,
        Feriado,
        FolhaObra,
        Fornecedor,
        ItemBase,
        LogisticaEntrega,
        Material,
        Palete,
        ProducaoOperacao,
        Profile,
        Role,
        RolePermission,
        StockEntry,
        Transportadora,
    )

    app.logger.info("[BOOT] Modelos SQLAlchemy importados para migrações.")

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(Profile, int(user_id))

    @login_manager.unauthorized_handler
    def _unauthorized():
        return jsonify({"ok": False, "error": "Autenticação necessária."}), 401

    migrate.init_app(app, db)

    # -----------------------------------------------------------------
    # REGISTROS: Blueprints
    # -----------------------------------------------------------------
    # 1) Home / Auth
    _try_register(app, "app.routes.home_routes.login", "login_bp", required=True)

    # 2) Estoque
    _try_register(
        app, "app.routes.estoque_routes.materiais", "materiais_bp", required=True
    )
    _try_register(app, "app.routes.estoque_routes.stocks", "stocks_bp", required=True)
    _try_register(
        app, "app.routes.estoque_routes.paletes", "paletes_bp", required=True
    )
    _try_register(
        app,
        "app.routes.estoque_routes.export_csv",
        "estoque_export_bp",
        required=True,
        alias="Export CSV",
    )

    # 3) Produção / Logística
    _try_register(app, "app.routes.producao_routes.jobs", "jobs_bp", required=True)
    _try_register(
        app, "app.routes.producao_routes.logistica", "logistica_bp", required=True
    )
    _try_register(
        app, "app.routes.producao_routes.operacoes", "operacoes_bp", required=True
    )
    _try_register(
        app,
        "app.routes.producao_routes.export_excel",
        "producao_export_bp",
        required=True,
        alias="Export Excel",
    )

    # 4) Designer flow
    _try_register(
        app, "app.routes.designer_routes.designer_flow", "designer_flow_bp", required=True
    )

    # 5) Definições (tabelas auxiliares)
    _try_register(
        app, "app.routes.definicoes_routes.lookups", "definicoes_bp", required=True
    )
    _try_register(
        app,
        "app.routes.definicoes_routes.utilizadores",
        "utilizadores_bp",
        required=True,
        alias="Administração de utilizadores",
    )

    app.logger.info("[BOOT] Aplicação inicializada com sucesso.")
    return app
