"""
Fixtures partilhadas: app com SQLite em memória e registos base.
"""
import pytest

from app import create_app, db as _db
from app.models_sqla import Cliente, Fornecedor, Material, Profile, Role
from app.services.producao import jobs_service


@pytest.fixture
def app():
    """App de teste com login desligado (rotas sem page_required ativo)."""
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "LOGIN_DISABLED": True,
            "SECRET_KEY": "test",
        }
    )
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def app_com_login():
    """App de teste com autenticação e permissões ativas."""
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "SECRET_KEY": "test",
        }
    )
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def fornecedor(db):
    """Fornecedor de cartão."""
    f = Fornecedor(nome_forn="PAPELARIA CENTRAL")
    db.session.add(f)
    db.session.commit()
    return f


@pytest.fixture
def cliente(db):
    c = Cliente(nome_cl="LOJAS NORTE", morada="Rua A 10", codigo_pos="4000-001")
    db.session.add(c)
    db.session.commit()
    return c


@pytest.fixture
def material(db, fornecedor):
    """Material com 50 placas por palete e preço de placa 2.5."""
    m = Material(
        material="Cartão",
        cor="Branco",
        tipo="Placa",
        carateristica="3mm",
        referencia="CT-3",
        qt_palete=50,
        valor_placa=2.5,
        valor_m2_custo=1.2,
        fornecedor_id=fornecedor.id,
    )
    db.session.add(m)
    db.session.commit()
    return m


@pytest.fixture
def autor(db):
    role = Role(name="PRODUCAO")
    db.session.add(role)
    db.session.flush()
    p = Profile(username="joana", first_name="Joana", last_name="Silva", role_id=role.id)
    p.set_password("segredo")
    db.session.add(p)
    db.session.commit()
    return p


@pytest.fixture
def job(db):
    """Folha de obra com ORC e FO preenchidos."""
    return jobs_service.criar_job(
        {"numero_orc": 1001, "numero_fo": "FO-1", "nome_campanha": "Verão", "cliente": "LOJAS NORTE"}
    )


@pytest.fixture
def job_com_item(job):
    """Job com um item aceite (cria designer_item e entrega de logística)."""
    criado = jobs_service.aceitar_item(job.id, {"descricao": "Expositor", "quantidade": 20})
    return job, criado
