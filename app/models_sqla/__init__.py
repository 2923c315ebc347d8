"""SQLAlchemy models da Gestão Gráfica.

Tabelas de stock (materiais, stocks, paletes), produção (folhas_obras,
items_base, logistica_entregas, producao_operacoes), designer flow
(designer_items) e tabelas auxiliares (fornecedores, clientes,
transportadora, feriados, complexidade, perfis e permissões).

Usage:
    from app import db
    from app.models_sqla import Material, FolhaObra, ItemBase

O ``db`` é inicializado por ``db.init_app(app)`` na factory.

Os relacionamentos foram mantidos mínimos: as ligações são chaves
estrangeiras simples e os deletes em cascata são feitos pelo serviço
(``app.services.producao.cascade_service``), não pelo ORM.
"""

from datetime import datetime

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from app import db  # reuse the SQLAlchemy instance from the app


class _AsDictMixin:
    def as_dict(self) -> dict:
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}


# ============================
# Tabelas auxiliares
# ============================


class Fornecedor(_AsDictMixin, db.Model):
    __tablename__ = "fornecedores"

    id = db.Column(db.Integer, primary_key=True)
    nome_forn = db.Column(db.String(150), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=True)


class Cliente(_AsDictMixin, db.Model):
    __tablename__ = "clientes"

    id = db.Column(db.Integer, primary_key=True)
    nome_cl = db.Column(db.String(150), nullable=False)
    morada = db.Column(db.String(255), nullable=True)
    codigo_pos = db.Column(db.String(20), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class Transportadora(_AsDictMixin, db.Model):
    __tablename__ = "transportadora"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class Feriado(_AsDictMixin, db.Model):
    __tablename__ = "feriados"

    id = db.Column(db.Integer, primary_key=True)
    holiday_date = db.Column(db.Date, nullable=False, unique=True)
    description = db.Column(db.String(150), nullable=True)


class Complexidade(_AsDictMixin, db.Model):
    __tablename__ = "complexidade"

    id = db.Column(db.Integer, primary_key=True)
    grau = db.Column(db.String(50), nullable=False)


# ============================
# Utilizadores e permissões
# ============================


class Role(_AsDictMixin, db.Model):
    __tablename__ = "roles"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False, unique=True)
    description = db.Column(db.String(255), nullable=True)


class RolePermission(_AsDictMixin, db.Model):
    __tablename__ = "role_permissions"
    __table_args__ = (db.UniqueConstraint("role_id", "page_path"),)

    id = db.Column(db.Integer, primary_key=True)
    role_id = db.Column(db.Integer, db.ForeignKey("roles.id"), nullable=False)
    page_path = db.Column(db.String(120), nullable=False)
    can_access = db.Column(db.Boolean, nullable=False, default=False)


class Profile(UserMixin, db.Model):
    __tablename__ = "profiles"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), nullable=False, unique=True)
    first_name = db.Column(db.String(80), nullable=True)
    last_name = db.Column(db.String(80), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    password_hash = db.Column(db.String(255), nullable=True)
    role_id = db.Column(db.Integer, db.ForeignKey("roles.id"), nullable=True)
    active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    role = db.relationship("Role")

    @property
    def is_active(self):
        return bool(self.active)

    @property
    def nome(self) -> str:
        partes = [self.first_name, self.last_name]
        return " ".join(p for p in partes if p) or self.username

    def set_password(self, senha: str):
        self.password_hash = generate_password_hash(senha)

    def check_password(self, senha: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, senha)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "role": self.role.name if self.role else None,
            "active": self.active,
        }

    def __repr__(self):
        return f"<Profile {self.username}>"


# ============================
# Stock
# ============================


class Material(_AsDictMixin, db.Model):
    __tablename__ = "materiais"

    id = db.Column(db.Integer, primary_key=True)
    tipo = db.Column(db.String(50), nullable=True)
    referencia = db.Column(db.String(80), nullable=True)
    ref_fornecedor = db.Column(db.String(80), nullable=True)
    material = db.Column(db.String(100), nullable=True)
    carateristica = db.Column(db.String(100), nullable=True)
    cor = db.Column(db.String(50), nullable=True)
    valor_m2 = db.Column(db.Float, nullable=True)
    valor_m2_custo = db.Column(db.Float, nullable=True)
    valor_placa = db.Column(db.Float, nullable=True)
    qt_palete = db.Column(db.Integer, nullable=True)
    fornecedor_id = db.Column(
        db.Integer, db.ForeignKey("fornecedores.id"), nullable=True
    )
    stock_minimo = db.Column(db.Float, nullable=True)
    stock_critico = db.Column(db.Float, nullable=True)
    stock_correct = db.Column(db.Float, nullable=True)
    stock_correct_updated_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=True)


class StockEntry(_AsDictMixin, db.Model):
    __tablename__ = "stocks"

    id = db.Column(db.Integer, primary_key=True)
    data = db.Column(db.Date, nullable=True)
    fornecedor_id = db.Column(
        db.Integer, db.ForeignKey("fornecedores.id"), nullable=True
    )
    material_id = db.Column(db.Integer, db.ForeignKey("materiais.id"), nullable=False)
    no_guia_forn = db.Column(db.String(80), nullable=True)
    quantidade = db.Column(db.Float, nullable=False, default=0)
    quantidade_disponivel = db.Column(db.Float, nullable=True)
    vl_m2 = db.Column(db.Float, nullable=True)
    preco_unitario = db.Column(db.Float, nullable=True)
    valor_total = db.Column(db.Float, nullable=True)
    notas = db.Column(db.Text, nullable=True)
    n_palet = db.Column(db.String(50), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=True)


class Palete(_AsDictMixin, db.Model):
    __tablename__ = "paletes"

    id = db.Column(db.Integer, primary_key=True)
    no_palete = db.Column(db.String(30), nullable=False, unique=True)
    fornecedor_id = db.Column(
        db.Integer, db.ForeignKey("fornecedores.id"), nullable=False
    )
    no_guia_forn = db.Column(db.String(80), nullable=True)
    ref_cartao = db.Column(db.String(80), nullable=True)
    qt_palete = db.Column(db.Integer, nullable=False)
    data = db.Column(db.Date, nullable=True)
    author_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=True)


# ============================
# Produção
# ============================


class FolhaObra(_AsDictMixin, db.Model):
    __tablename__ = "folhas_obras"

    id = db.Column(db.Integer, primary_key=True)
    numero_fo = db.Column(db.String(30), nullable=True)
    numero_orc = db.Column(db.Integer, nullable=True)
    nome_campanha = db.Column(db.String(255), nullable=True)
    cliente = db.Column(db.String(150), nullable=True)
    id_cliente = db.Column(db.Integer, db.ForeignKey("clientes.id"), nullable=True)
    data_in = db.Column(db.DateTime, nullable=True, default=datetime.utcnow)
    data_saida = db.Column(db.Date, nullable=True)
    data_concluido = db.Column(db.DateTime, nullable=True)
    prioridade = db.Column(db.Boolean, nullable=False, default=False)
    notas = db.Column(db.Text, nullable=True)
    concluido = db.Column(db.Boolean, nullable=False, default=False)
    saiu = db.Column(db.Boolean, nullable=False, default=False)
    fatura = db.Column(db.Boolean, nullable=True, default=False)
    profile_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=True)


class ItemBase(_AsDictMixin, db.Model):
    __tablename__ = "items_base"

    id = db.Column(db.Integer, primary_key=True)
    folha_obra_id = db.Column(
        db.Integer, db.ForeignKey("folhas_obras.id"), nullable=False
    )
    descricao = db.Column(db.String(255), nullable=True)
    codigo = db.Column(db.String(80), nullable=True)
    quantidade = db.Column(db.Integer, nullable=True)
    brindes = db.Column(db.Boolean, nullable=False, default=False)
    concluido = db.Column(db.Boolean, nullable=False, default=False)
    paginacao = db.Column(db.Boolean, nullable=False, default=False)
    complexidade_id = db.Column(
        db.Integer, db.ForeignKey("complexidade.id"), nullable=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class DesignerItem(_AsDictMixin, db.Model):
    __tablename__ = "designer_items"

    id = db.Column(db.Integer, primary_key=True)
    item_id = db.Column(db.Integer, db.ForeignKey("items_base.id"), nullable=False)

    em_curso = db.Column(db.Boolean, nullable=False, default=True)
    duvidas = db.Column(db.Boolean, nullable=False, default=False)
    maquete_enviada1 = db.Column(db.Boolean, nullable=False, default=False)
    maquete_enviada2 = db.Column(db.Boolean, nullable=False, default=False)
    maquete_enviada3 = db.Column(db.Boolean, nullable=False, default=False)
    maquete_enviada4 = db.Column(db.Boolean, nullable=False, default=False)
    maquete_enviada5 = db.Column(db.Boolean, nullable=False, default=False)
    maquete_enviada6 = db.Column(db.Boolean, nullable=False, default=False)
    aprovacao_recebida1 = db.Column(db.Boolean, nullable=False, default=False)
    aprovacao_recebida2 = db.Column(db.Boolean, nullable=False, default=False)
    aprovacao_recebida3 = db.Column(db.Boolean, nullable=False, default=False)
    aprovacao_recebida4 = db.Column(db.Boolean, nullable=False, default=False)
    aprovacao_recebida5 = db.Column(db.Boolean, nullable=False, default=False)
    aprovacao_recebida6 = db.Column(db.Boolean, nullable=False, default=False)
    paginacao = db.Column(db.Boolean, nullable=False, default=False)

    data_in = db.Column(db.DateTime, nullable=True)
    data_em_curso = db.Column(db.DateTime, nullable=True)
    data_duvidas = db.Column(db.DateTime, nullable=True)
    data_maquete_enviada1 = db.Column(db.DateTime, nullable=True)
    data_maquete_enviada2 = db.Column(db.DateTime, nullable=True)
    data_maquete_enviada3 = db.Column(db.DateTime, nullable=True)
    data_maquete_enviada4 = db.Column(db.DateTime, nullable=True)
    data_maquete_enviada5 = db.Column(db.DateTime, nullable=True)
    data_maquete_enviada6 = db.Column(db.DateTime, nullable=True)
    data_aprovacao_recebida1 = db.Column(db.DateTime, nullable=True)
    data_aprovacao_recebida2 = db.Column(db.DateTime, nullable=True)
    data_aprovacao_recebida3 = db.Column(db.DateTime, nullable=True)
    data_aprovacao_recebida4 = db.Column(db.DateTime, nullable=True)
    data_aprovacao_recebida5 = db.Column(db.DateTime, nullable=True)
    data_aprovacao_recebida6 = db.Column(db.DateTime, nullable=True)
    data_paginacao = db.Column(db.DateTime, nullable=True)
    data_saida = db.Column(db.DateTime, nullable=True)

    path_trabalho = db.Column(db.String(255), nullable=True)
    notas = db.Column(db.Text, nullable=True)
    updated_at = db.Column(db.DateTime, nullable=True)


class LogisticaEntrega(_AsDictMixin, db.Model):
    __tablename__ = "logistica_entregas"

    id = db.Column(db.Integer, primary_key=True)
    item_id = db.Column(db.Integer, db.ForeignKey("items_base.id"), nullable=False)
    descricao = db.Column(db.String(255), nullable=True)
    guia = db.Column(db.Integer, nullable=True)
    quantidade = db.Column(db.Integer, nullable=True)
    notas = db.Column(db.Text, nullable=True)
    local_recolha = db.Column(db.String(255), nullable=True)
    local_entrega = db.Column(db.String(255), nullable=True)
    id_local_recolha = db.Column(
        db.Integer, db.ForeignKey("clientes.id"), nullable=True
    )
    id_local_entrega = db.Column(
        db.Integer, db.ForeignKey("clientes.id"), nullable=True
    )
    transportadora = db.Column(db.String(150), nullable=True)
    contacto = db.Column(db.String(120), nullable=True)
    telefone = db.Column(db.String(40), nullable=True)
    contacto_entrega = db.Column(db.String(120), nullable=True)
    telefone_entrega = db.Column(db.String(40), nullable=True)
    data = db.Column(db.Date, nullable=True)
    data_saida = db.Column(db.Date, nullable=True)
    data_concluido = db.Column(db.Date, nullable=True)
    concluido = db.Column(db.Boolean, nullable=False, default=False)
    saiu = db.Column(db.Boolean, nullable=False, default=False)
    is_entrega = db.Column(db.Boolean, nullable=False, default=True)
    brindes = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


class ProducaoOperacao(_AsDictMixin, db.Model):
    __tablename__ = "producao_operacoes"

    id = db.Column(db.Integer, primary_key=True)
    folha_obra_id = db.Column(
        db.Integer, db.ForeignKey("folhas_obras.id"), nullable=True
    )
    item_id = db.Column(db.Integer, db.ForeignKey("items_base.id"), nullable=True)
    material_id = db.Column(db.Integer, db.ForeignKey("materiais.id"), nullable=True)
    operador_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=True)
    tipo_op = db.Column(db.String(30), nullable=True)
    num_placas_print = db.Column(db.Float, nullable=True)
    num_placas_corte = db.Column(db.Float, nullable=True)
    data_operacao = db.Column(db.Date, nullable=True)
    concluido = db.Column(db.Boolean, nullable=False, default=False)
    notas = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)


__all__ = [
    # Auxiliares
    "Fornecedor",
    "Cliente",
    "Transportadora",
    "Feriado",
    "Complexidade",
    # Utilizadores
    "Role",
    "RolePermission",
    "Profile",
    # Stock
    "Material",
    "StockEntry",
    "Palete",
    # Produção
    "FolhaObra",
    "ItemBase",
    "DesignerItem",
    "LogisticaEntrega",
    "ProducaoOperacao",
]
