"""
Testes das APIs JSON (login desligado).
"""
from io import BytesIO

from openpyxl import load_workbook

from app.services.export.csv_export import BOM


def _criar_job(client, **dados):
    payload = {"numero_orc": 1001, "numero_fo": "FO-1", "cliente": "LOJAS NORTE"}
    payload.update(dados)
    return client.post("/producao/jobs", json=payload)


class TestJobsApi:
    def test_criar_e_obter(self, client):
        resp = _criar_job(client)
        assert resp.status_code == 201
        job_id = resp.get_json()["job"]["id"]

        resp = client.post(f"/producao/jobs/{job_id}/items", json={"descricao": "Expositor"})
        assert resp.status_code == 201
        assert resp.get_json()["designer"]["em_curso"] is True

        job = client.get(f"/producao/jobs/{job_id}").get_json()["job"]
        assert job["numero_fo"] == "FO-1"
        assert job["percentagem"] == 0
        assert job["items"][0]["logistica"][0]["is_entrega"] is True

    def test_orc_duplicado_devolve_409(self, client):
        _criar_job(client)
        resp = _criar_job(client, numero_fo="FO-2")
        assert resp.status_code == 409
        corpo = resp.get_json()
        assert corpo["ok"] is False
        assert corpo["duplicado"]["numero_fo"] == "FO-1"

        resp = client.post(
            "/producao/jobs?confirmar=1", json={"numero_orc": 1001, "numero_fo": "FO-2"}
        )
        assert resp.status_code == 201

    def test_check_fo(self, client):
        _criar_job(client)
        assert client.get("/producao/jobs/check-fo?numero_fo=FO-1").get_json()["duplicado"]
        assert client.get("/producao/jobs/check-fo?numero_fo=FO-9").get_json()["duplicado"] is None

    def test_job_inexistente_devolve_404(self, client):
        assert client.get("/producao/jobs/999").status_code == 404

    def test_apagar_em_cascata(self, client):
        job_id = _criar_job(client).get_json()["job"]["id"]
        client.post(f"/producao/jobs/{job_id}/items", json={"descricao": "Expositor"})

        resp = client.delete(f"/producao/jobs/{job_id}")
        assert resp.status_code == 200
        assert resp.get_json()["items"] == 1
        assert client.get(f"/producao/jobs/{job_id}").status_code == 404

    def test_listagem(self, client):
        _criar_job(client)
        corpo = client.get("/producao/jobs?tab=em_curso").get_json()
        assert corpo["total"] == 1
        assert corpo["items"][0]["cor_prioridade"] == "green"


class TestLogisticaApi:
    def test_concluir_e_duplicar(self, client):
        job_id = _criar_job(client).get_json()["job"]["id"]
        criado = client.post(
            f"/producao/jobs/{job_id}/items", json={"descricao": "Expositor", "quantidade": 4}
        ).get_json()
        entrega_id = criado["logistica"]["id"]

        resp = client.post(f"/producao/logistica/{entrega_id}/concluido", json={"concluido": True})
        assert resp.get_json()["entrega"]["data_saida"] is not None
        assert client.get(f"/producao/jobs/{job_id}").get_json()["job"]["concluido"] is True

        resp = client.post(f"/producao/logistica/{entrega_id}/duplicar")
        assert resp.status_code == 201
        assert resp.get_json()["entrega"]["quantidade"] == 4
        assert len(client.get("/producao/logistica").get_json()["items"]) == 2

    def test_flags_em_texto(self, client):
        job_id = _criar_job(client).get_json()["job"]["id"]
        criado = client.post(
            f"/producao/jobs/{job_id}/items", json={"descricao": "Expositor"}
        ).get_json()
        entrega_id = criado["logistica"]["id"]

        resp = client.post(f"/producao/logistica/{entrega_id}/concluido", json={"concluido": "false"})
        assert resp.get_json()["entrega"]["concluido"] is False
        resp = client.patch(f"/producao/logistica/{entrega_id}", json={"saiu": "false"})
        assert resp.get_json()["entrega"]["saiu"] is False
        assert client.get(f"/producao/jobs/{job_id}").get_json()["job"]["concluido"] is False

        resp = client.post(
            f"/designer-flow/items/{criado['designer']['id']}/flag",
            json={"flag": "duvidas", "valor": "false"},
        )
        assert resp.get_json()["designer"]["duvidas"] is False


class TestEstoqueApi:
    def test_material_sem_nome_devolve_400(self, client):
        resp = client.post("/estoque/materiais", json={"cor": "Branco"})
        assert resp.status_code == 400

    def test_stock_atual_com_status(self, client, material):
        client.post("/estoque/stocks", json={"material_id": material.id, "quantidade": 8})
        linha = client.get("/estoque/stock-atual").get_json()["items"][0]
        assert linha["stock_atual"] == 8
        assert linha["stock_final"] == 8
        assert linha["status"] == "BAIXO"

    def test_validar_operacao(self, client, material):
        assert client.get("/estoque/validar-operacao").status_code == 400
        corpo = client.get(
            f"/estoque/validar-operacao?material_id={material.id}&quantidade=1"
        ).get_json()
        assert corpo["valid"] is False

    def test_paletes(self, client, fornecedor, autor):
        assert client.get("/estoque/paletes/proximo-numero").get_json()["no_palete"] == "P1"
        payload = {"fornecedor_id": fornecedor.id, "author_id": autor.id, "qt_palete": 10}
        assert client.post("/estoque/paletes", json=payload).status_code == 201
        resp = client.post("/estoque/paletes", json=dict(payload, no_palete="P1"))
        assert resp.status_code == 409

    def test_export_csv(self, client, material):
        client.post("/estoque/stocks", json={"material_id": material.id, "n_palet": 1})
        resp = client.get("/estoque/export/stock-atual.csv")
        assert resp.status_code == 200
        assert resp.data.startswith(BOM.encode("utf-8"))
        assert "stock_atual_" in resp.headers["Content-Disposition"]
        assert "CT-3" in resp.data.decode("utf-8")


def test_export_excel_producao(client):
    job_id = _criar_job(client).get_json()["job"]["id"]
    client.post(f"/producao/jobs/{job_id}/items", json={"descricao": "Expositor"})

    resp = client.get("/producao/export/producao.xlsx?tab=em_curso")
    assert resp.status_code == 200
    ws = load_workbook(BytesIO(resp.data)).active
    assert ws.cell(row=1, column=1).value == "RELATÓRIO DE PRODUÇÃO - EM CURSO"
    assert ws.cell(row=5, column=2).value == "FO-1"
    assert ws.cell(row=5, column=6).value == "EXPOSITOR"


def test_definicoes_api(client):
    resp = client.post("/definicoes/fornecedores", json={"nome_forn": "papelaria sul"})
    assert resp.status_code == 201
    assert resp.get_json()["registo"]["nome_forn"] == "PAPELARIA SUL"
    assert client.get("/definicoes/maquinas").status_code == 404


def test_designer_flow_api(client):
    job_id = _criar_job(client).get_json()["job"]["id"]
    criado = client.post(
        f"/producao/jobs/{job_id}/items", json={"descricao": "Expositor"}
    ).get_json()
    designer_id = criado["designer"]["id"]

    resp = client.post(
        f"/designer-flow/items/{designer_id}/flag", json={"flag": "duvidas", "valor": True}
    )
    assert resp.get_json()["designer"]["duvidas"] is True
    resp = client.post(f"/designer-flow/items/{designer_id}/paginacao", json={})
    assert resp.status_code == 400

    jobs = client.get("/designer-flow/jobs").get_json()["items"]
    assert jobs[0]["percentagem_paginacao"] == 0
