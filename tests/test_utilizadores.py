"""
Administração de utilizadores, roles e permissões.
"""
import pytest

from app import db as _db
from app.models_sqla import Profile, Role, RolePermission
from app.permissions import pode_aceder
from app.services import utilizadores_service
from app.services.erros import RegistoNaoEncontrado


class TestRolesEPermissoes:
    def test_criar_role_em_maiusculas(self, db):
        role = utilizadores_service.criar_role({"name": " designer "})
        assert role.name == "DESIGNER"
        with pytest.raises(ValueError):
            utilizadores_service.criar_role({"name": "Designer"})
        with pytest.raises(ValueError):
            utilizadores_service.criar_role({"name": ""})

    def test_inicializar_so_basicas_com_acesso(self, db):
        role = utilizadores_service.criar_role({"name": "DESIGNER"})
        permissoes = utilizadores_service.inicializar_permissoes(role.id)

        assert set(permissoes) == set(utilizadores_service.PAGINAS)
        assert sorted(p for p, acesso in permissoes.items() if acesso) == ["/", "/dashboard"]

    def test_inicializar_nao_altera_existentes(self, db):
        role = utilizadores_service.criar_role({"name": "DESIGNER"})
        utilizadores_service.atualizar_permissoes(role.id, {"/designer-flow": True})
        permissoes = utilizadores_service.inicializar_permissoes(role.id)
        assert permissoes["/designer-flow"] is True
        assert RolePermission.query.filter_by(role_id=role.id).count() == len(
            utilizadores_service.PAGINAS
        )

    def test_atualizar_permissoes_faz_upsert(self, db):
        role = utilizadores_service.criar_role({"name": "DESIGNER"})
        utilizadores_service.atualizar_permissoes(role.id, {"/producao": True})
        permissoes = utilizadores_service.atualizar_permissoes(
            role.id, {"/producao": "false", "/designer-flow": 1}
        )
        assert permissoes == {"/producao": False, "/designer-flow": True}

    def test_permissoes_invalidas(self, db):
        role = utilizadores_service.criar_role({"name": "DESIGNER"})
        with pytest.raises(ValueError):
            utilizadores_service.atualizar_permissoes(role.id, ["/producao"])
        with pytest.raises(RegistoNaoEncontrado):
            utilizadores_service.atualizar_permissoes(999, {"/producao": True})


class TestUtilizadores:
    def test_criar_com_role(self, db):
        role = utilizadores_service.criar_role({"name": "PRODUCAO"})
        p = utilizadores_service.criar_utilizador(
            {"username": "rui", "password": "x1", "first_name": "Rui", "role_id": role.id}
        )
        assert p.check_password("x1")
        assert p.as_dict()["role"] == "PRODUCAO"

        with pytest.raises(ValueError):
            utilizadores_service.criar_utilizador({"username": "rui", "password": "y"})

    def test_atribuir_role_e_desativar(self, db):
        p = utilizadores_service.criar_utilizador({"username": "rui", "password": "x1"})
        role = utilizadores_service.criar_role({"name": "DESIGNER"})

        p = utilizadores_service.atualizar_utilizador(
            p.id, {"role_id": str(role.id), "active": "false", "password": "nova"}
        )
        assert p.role_id == role.id
        assert p.is_active is False
        assert p.check_password("nova")

        with pytest.raises(RegistoNaoEncontrado):
            utilizadores_service.atualizar_utilizador(p.id, {"role_id": 999})

    def test_remover(self, db):
        p = utilizadores_service.criar_utilizador({"username": "rui", "password": "x1"})
        utilizadores_service.remover_utilizador(p.id)
        assert Profile.query.count() == 0
        with pytest.raises(RegistoNaoEncontrado):
            utilizadores_service.remover_utilizador(p.id)


# -------------------------------
# API com login ativo
# -------------------------------
def _utilizador(username, role_name):
    role = Role.query.filter_by(name=role_name).first() or Role(name=role_name)
    _db.session.add(role)
    _db.session.flush()
    p = Profile(username=username, role_id=role.id)
    p.set_password("segredo")
    _db.session.add(p)
    _db.session.commit()
    return p


@pytest.fixture
def client_login(app_com_login):
    return app_com_login.test_client()


def _login(client, username):
    return client.post("/login", json={"username": username, "password": "segredo"})


def test_producao_nao_administra_utilizadores(client_login):
    operador = _utilizador("operador", "PRODUCAO")
    assert pode_aceder(operador, "/definicoes/utilizadores") is False
    assert pode_aceder(operador, "/definicoes") is True

    _login(client_login, "operador")
    assert client_login.get("/admin/utilizadores").status_code == 403


def test_admin_atribui_role_e_permissoes(client_login):
    _utilizador("admin", "ADMIN")
    assert _login(client_login, "admin").status_code == 200

    resp = client_login.post("/admin/roles", json={"name": "designer"})
    assert resp.status_code == 201
    role_id = resp.get_json()["role"]["id"]

    resp = client_login.put(
        f"/admin/roles/{role_id}/permissoes",
        json={"permissoes": {"/designer-flow": True}},
    )
    assert resp.get_json()["permissoes"] == {"/designer-flow": True}

    resp = client_login.post(
        "/admin/utilizadores",
        json={"username": "ana", "password": "segredo", "role_id": role_id},
    )
    assert resp.status_code == 201
    assert resp.get_json()["user"]["role"] == "DESIGNER"

    nomes = [u["username"] for u in client_login.get("/admin/utilizadores").get_json()["items"]]
    assert nomes == ["admin", "ana"]

    client_login.post("/logout")
    _login(client_login, "ana")
    assert client_login.get("/designer-flow/jobs").status_code == 200
    assert client_login.get("/producao/jobs").status_code == 403
    assert client_login.get("/admin/roles").status_code == 403


def test_role_inexistente_devolve_404(client_login):
    _utilizador("admin", "ADMIN")
    _login(client_login, "admin")
    assert client_login.get("/admin/roles/999/permissoes").status_code == 404
