from datetime import date

import pytest

from app.models_sqla import Material
from app.services import paletes_service
from app.services.erros import RegistoDuplicado


def _payload(fornecedor, autor, **extra):
    dados = {"fornecedor_id": fornecedor.id, "author_id": autor.id, "qt_palete": 50}
    dados.update(extra)
    return dados


class TestNumeracao:
    def test_primeira_palete(self, db):
        assert paletes_service.proximo_numero_palete() == "P1"

    def test_segue_o_maior_numero(self, fornecedor, autor):
        paletes_service.criar_palete(_payload(fornecedor, autor, no_palete="P7"))
        paletes_service.criar_palete(_payload(fornecedor, autor, no_palete="X99"))
        assert paletes_service.proximo_numero_palete() == "P8"

    def test_criar_sem_numero_usa_o_proximo(self, fornecedor, autor):
        palete = paletes_service.criar_palete(_payload(fornecedor, autor))
        assert palete.no_palete == "P1"
        assert palete.data == date.today()


class TestValidacao:
    def test_numero_duplicado_ignora_maiusculas(self, fornecedor, autor):
        paletes_service.criar_palete(_payload(fornecedor, autor, no_palete="P1"))
        with pytest.raises(RegistoDuplicado) as exc:
            paletes_service.criar_palete(_payload(fornecedor, autor, no_palete="p1"))
        assert exc.value.existente.no_palete == "P1"

    def test_quantidade_positiva(self, fornecedor, autor):
        with pytest.raises(ValueError):
            paletes_service.criar_palete(_payload(fornecedor, autor, qt_palete=0))

    def test_fornecedor_obrigatorio(self, autor):
        with pytest.raises(ValueError):
            paletes_service.criar_palete({"author_id": autor.id, "qt_palete": 10})

    def test_atualizar_mantem_o_proprio_numero(self, fornecedor, autor):
        palete = paletes_service.criar_palete(_payload(fornecedor, autor, no_palete="P3"))
        atualizada = paletes_service.atualizar_palete(
            palete.id, {"no_palete": "P3", "qt_palete": 40}
        )
        assert atualizada.qt_palete == 40


def test_listar_paletes_com_fornecedor_e_autor(fornecedor, autor):
    paletes_service.criar_palete(_payload(fornecedor, autor, ref_cartao="CT-3"))
    linhas = paletes_service.listar_paletes({"fornecedor": "central"})
    assert len(linhas) == 1
    assert linhas[0]["fornecedor"] == "PAPELARIA CENTRAL"
    assert linhas[0]["autor"] == "Joana Silva"
    assert paletes_service.listar_paletes({"referencia": "CT-9"}) == []


def test_referencias_de_cartao(db, material):
    db.session.add(Material(material="Vinil", referencia="VN-1"))
    db.session.commit()
    assert paletes_service.referencias_cartao() == ["CT-3"]
