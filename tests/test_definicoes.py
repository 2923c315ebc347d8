from datetime import date

import pytest

from app.services import definicoes_service
from app.services.erros import RegistoNaoEncontrado


def test_nomes_em_maiusculas(db):
    forn = definicoes_service.criar("fornecedores", {"nome_forn": "  papelaria sul "})
    assert forn.nome_forn == "PAPELARIA SUL"

    cl = definicoes_service.criar(
        "clientes", {"nome_cl": "lojas norte", "morada": "Rua A 10"}
    )
    assert cl.nome_cl == "LOJAS NORTE"
    assert cl.morada == "Rua A 10"


def test_listar_ordenado(db):
    for nome in ("tnt", "dhl", "ctt"):
        definicoes_service.criar("transportadoras", {"name": nome})
    assert [t["name"] for t in definicoes_service.listar("transportadoras")] == [
        "CTT",
        "DHL",
        "TNT",
    ]


def test_feriados(db):
    f = definicoes_service.criar(
        "feriados", {"holiday_date": "2024-06-10", "description": "Dia de Portugal"}
    )
    assert f.holiday_date == date(2024, 6, 10)
    with pytest.raises(ValueError):
        definicoes_service.criar("feriados", {"holiday_date": "amanhã"})


def test_campo_obrigatorio(db):
    with pytest.raises(ValueError):
        definicoes_service.criar("complexidades", {"grau": ""})


def test_atualizar_e_remover(db):
    c = definicoes_service.criar("complexidades", {"grau": "simples"})
    assert definicoes_service.atualizar("complexidades", c.id, {"grau": "media"}).grau == "MEDIA"
    definicoes_service.remover("complexidades", c.id)
    assert definicoes_service.listar("complexidades") == []
    with pytest.raises(RegistoNaoEncontrado):
        definicoes_service.remover("complexidades", c.id)


def test_tabela_desconhecida(db):
    with pytest.raises(RegistoNaoEncontrado):
        definicoes_service.listar("maquinas")
