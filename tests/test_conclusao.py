from datetime import date, datetime, timedelta

from app.services.producao.conclusao_service import (
    cor_artes,
    cor_corte,
    cor_prioridade,
    job_completo,
    job_saiu,
    peso_prioridade,
    percentagem_conclusao,
)

ITEMS = [{"id": 1}, {"id": 2}]
AGORA = datetime(2024, 5, 10, 12, 0)


def _entrega(concluido=False, data_saida=None, saiu=False):
    return {"concluido": concluido, "data_saida": data_saida, "saiu": saiu}


class TestJobCompleto:
    def test_sem_itens_nunca_esta_completo(self):
        assert job_completo([], {}) is False

    def test_item_sem_entregas_bloqueia(self):
        logistica = {1: [_entrega(True)]}
        assert job_completo(ITEMS, logistica) is False

    def test_todas_as_entregas_concluidas(self):
        logistica = {1: [_entrega(True)], 2: [_entrega(True), _entrega(True)]}
        assert job_completo(ITEMS, logistica) is True

    def test_uma_entrega_pendente(self):
        logistica = {1: [_entrega(True)], 2: [_entrega(True), _entrega(False)]}
        assert job_completo(ITEMS, logistica) is False


class TestPercentagem:
    def test_sem_itens(self):
        assert percentagem_conclusao([], {}) == 0

    def test_exige_data_de_saida(self):
        logistica = {1: [_entrega(True, date(2024, 5, 1))], 2: [_entrega(True)]}
        assert percentagem_conclusao(ITEMS, logistica) == 50

    def test_arredonda_half_up(self):
        items = [{"id": i} for i in range(1, 9)]
        logistica = {1: [_entrega(True, date(2024, 5, 1))]}
        # 1/8 = 12.5%
        assert percentagem_conclusao(items, logistica) == 13

    def test_qualquer_entrega_concluida_conta(self):
        items = [{"id": 1}, {"id": 2}, {"id": 3}]
        logistica = {
            1: [_entrega(False), _entrega(True, date(2024, 5, 1))],
            2: [_entrega(True, date(2024, 5, 2))],
            3: [_entrega(False)],
        }
        assert percentagem_conclusao(items, logistica) == 67


def test_job_saiu_usa_a_primeira_entrega():
    logistica = {1: [_entrega(saiu=True)], 2: [_entrega(saiu=True), _entrega()]}
    assert job_saiu(ITEMS, logistica) is True
    logistica[2] = [_entrega(), _entrega(saiu=True)]
    assert job_saiu(ITEMS, logistica) is False
    assert job_saiu([], {}) is False


class TestCores:
    def test_prioridade_manual_e_vermelha(self):
        job = {"prioridade": True, "data_in": AGORA}
        assert cor_prioridade(job, AGORA) == "red"
        assert peso_prioridade(job, AGORA) == 2

    def test_jobs_antigos_ficam_azuis(self):
        job = {"prioridade": False, "data_in": AGORA - timedelta(days=4)}
        assert cor_prioridade(job, AGORA) == "blue"

    def test_jobs_recentes_ficam_verdes(self):
        job = {"prioridade": False, "data_in": AGORA - timedelta(days=1)}
        assert cor_prioridade(job, AGORA) == "green"
        assert peso_prioridade(job, AGORA) == 0

    def test_cor_artes(self):
        assert cor_artes(ITEMS, {}) == "red"
        designer = {1: {"paginacao": True}, 2: {"paginacao": False}}
        assert cor_artes(ITEMS, designer) == "orange"
        designer[2] = {"paginacao": True}
        assert cor_artes(ITEMS, designer) == "green"

    def test_cor_corte(self):
        assert cor_corte([]) == "red"
        assert cor_corte([{"concluido": False}, {"concluido": True}]) == "green"
