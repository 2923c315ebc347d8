"""
Permissões por página e autenticação (app com login ativo).
"""
import pytest

from app import db
from app.models_sqla import Profile, Role, RolePermission
from app.permissions import paginas_acessiveis, pode_aceder


def _utilizador(username, role_name=None, senha="segredo"):
    role = None
    if role_name:
        role = Role.query.filter_by(name=role_name).first() or Role(name=role_name)
        db.session.add(role)
        db.session.flush()
    p = Profile(username=username, role_id=role.id if role else None)
    p.set_password(senha)
    db.session.add(p)
    db.session.commit()
    return p


@pytest.fixture
def client(app_com_login):
    return app_com_login.test_client()


def _login(client, username, senha="segredo"):
    return client.post("/login", json={"username": username, "password": senha})


class TestPodeAceder:
    def test_admin_acede_a_tudo(self, app_com_login):
        admin = _utilizador("admin", "ADMIN")
        assert pode_aceder(admin, "/definicoes/stocks")
        assert pode_aceder(admin, "/qualquer")

    def test_linha_explicita_prevalece(self, app_com_login):
        admin = _utilizador("admin", "ADMIN")
        db.session.add(
            RolePermission(role_id=admin.role_id, page_path="/definicoes/stocks", can_access=False)
        )
        db.session.commit()
        assert not pode_aceder(admin, "/definicoes/stocks")

    def test_producao_por_prefixo(self, app_com_login):
        operador = _utilizador("operador", "PRODUCAO")
        assert pode_aceder(operador, "/producao/operacoes")
        assert pode_aceder(operador, "/designer-flow")
        assert not pode_aceder(operador, "/estoque")

    def test_sem_role_ou_anonimo(self, app_com_login):
        sem_role = _utilizador("visita")
        assert not pode_aceder(sem_role, "/producao")
        assert not pode_aceder(None, "/producao")

    def test_paginas_acessiveis(self, app_com_login):
        designer = _utilizador("ana", "DESIGNER")
        db.session.add_all(
            [
                RolePermission(role_id=designer.role_id, page_path="/designer-flow", can_access=True),
                RolePermission(role_id=designer.role_id, page_path="/producao", can_access=False),
            ]
        )
        db.session.commit()
        assert paginas_acessiveis(designer) == ["/designer-flow"]


class TestRotasProtegidas:
    def test_sem_sessao_devolve_401(self, client):
        resp = client.get("/producao/jobs")
        assert resp.status_code == 401
        assert resp.get_json()["ok"] is False

    def test_login_invalido(self, client):
        _utilizador("operador", "PRODUCAO")
        resp = _login(client, "operador", "errada")
        assert resp.status_code == 401

    def test_utilizador_inativo_nao_entra(self, client):
        p = _utilizador("antigo", "PRODUCAO")
        p.active = False
        db.session.commit()
        assert _login(client, "antigo").status_code == 401

    def test_producao_acede_aos_jobs(self, client):
        _utilizador("operador", "PRODUCAO")
        resp = _login(client, "operador")
        assert resp.status_code == 200
        assert resp.get_json()["user"]["role"] == "PRODUCAO"

        assert client.get("/producao/jobs").status_code == 200
        assert client.get("/me").get_json()["user"]["username"] == "operador"

    def test_sem_permissao_devolve_403(self, client):
        designer = _utilizador("ana", "DESIGNER")
        db.session.add(
            RolePermission(role_id=designer.role_id, page_path="/designer-flow", can_access=True)
        )
        db.session.commit()
        _login(client, "ana")

        assert client.get("/designer-flow/jobs").status_code == 200
        assert client.get("/producao/jobs").status_code == 403

    def test_logout(self, client):
        _utilizador("operador", "PRODUCAO")
        _login(client, "operador")
        assert client.post("/logout").status_code == 200
        assert client.get("/producao/jobs").status_code == 401


def test_registo_de_utilizador(client):
    resp = client.post(
        "/registro",
        json={"username": "novo", "password": "abc", "confirmar_password": "abc"},
    )
    assert resp.status_code == 201
    assert resp.get_json()["user"]["role"] is None

    repetido = client.post(
        "/registro",
        json={"username": "novo", "password": "abc", "confirmar_password": "abc"},
    )
    assert repetido.status_code == 400
