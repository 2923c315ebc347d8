from datetime import date

import pytest

from app.models_sqla import Material, StockEntry
from app.services import estoque_service
from app.services.producao import operacoes_service


def _entrada(material, **extra):
    payload = {"material_id": material.id, "n_palet": 2}
    payload.update(extra)
    return estoque_service.criar_entrada(payload)


class TestPrepararEntrada:
    def test_herda_valores_do_material_e_calcula_paletes(self, material):
        dados = estoque_service.preparar_entrada({"material_id": material.id, "n_palet": 2})
        assert dados["quantidade"] == 100
        assert dados["quantidade_disponivel"] == 100
        assert dados["preco_unitario"] == 2.5
        assert dados["vl_m2"] == 1.2
        assert dados["valor_total"] == 250.0
        assert dados["fornecedor_id"] == material.fornecedor_id
        assert dados["n_palet"] == "2"
        assert dados["data"] == date.today()

    def test_quantidade_manual_sem_paletes(self, material):
        dados = estoque_service.preparar_entrada(
            {"material_id": material.id, "quantidade": "7", "preco_unitario": "1.333"}
        )
        assert dados["quantidade"] == 7
        assert dados["valor_total"] == 9.33

    def test_material_obrigatorio(self, db):
        with pytest.raises(ValueError):
            estoque_service.preparar_entrada({"quantidade": 3})


def test_editar_quantidade_nao_recalcula_paletes(material):
    entrada = _entrada(material)
    atualizada = estoque_service.atualizar_entrada(entrada.id, {"quantidade": 80})
    assert atualizada.quantidade == 80
    assert atualizada.quantidade_disponivel == 80
    assert atualizada.valor_total == 200.0


class TestStockAtual:
    def test_recebido_menos_consumido(self, db, material):
        _entrada(material)
        operacoes_service.registar_operacao(
            {"material_id": material.id, "num_placas_corte": 30}
        )
        row = estoque_service.stock_atual_material(material.id)
        assert row["total_recebido"] == 100
        assert row["total_consumido"] == 30
        assert row["stock_atual"] == 70
        assert row["nome"] == "Cartão - Branco - Placa - 3mm"
        assert row["fornecedor"] == "PAPELARIA CENTRAL"

    def test_ordenado_do_menor_para_o_maior(self, db, material):
        vazio = Material(material="Vinil", cor="Preto")
        db.session.add(vazio)
        db.session.commit()
        _entrada(material)

        linhas = estoque_service.listar_stock_atual()
        assert [r["id"] for r in linhas] == [vazio.id, material.id]
        assert linhas[0]["stock_atual"] == 0

    def test_correcao_manual_prevalece(self):
        assert estoque_service.stock_final({"stock_atual": 40, "stock_correct": 12}) == 12
        assert estoque_service.stock_final({"stock_atual": 40, "stock_correct": None}) == 40


@pytest.mark.parametrize(
    "stock, minimo, critico, esperado",
    [
        (0, None, None, "CRÍTICO"),
        (5, None, None, "BAIXO"),
        (10, None, None, "BAIXO"),
        (11, None, None, "OK"),
        (15, 20, 2, "BAIXO"),
        (2, 20, 2, "CRÍTICO"),
    ],
)
def test_stock_status(stock, minimo, critico, esperado):
    assert estoque_service.stock_status(stock, minimo, critico) == esperado


class TestCorrecao:
    def test_aplicar_correcao_cria_entrada_de_ajuste(self, db, material):
        estoque_service.guardar_correcao(material.id, -5)
        entrada = estoque_service.aplicar_correcao(material.id)

        assert entrada.quantidade == -5
        assert entrada.quantidade_disponivel == 0
        assert entrada.notas.startswith("AJUSTE MANUAL - Correção aplicada em ")
        assert db.session.get(Material, material.id).stock_correct == 0

    def test_correcao_zero_e_invalida(self, material):
        with pytest.raises(ValueError):
            estoque_service.aplicar_correcao(material.id, 0)
        with pytest.raises(ValueError):
            estoque_service.aplicar_correcao(material.id, "abc")

    def test_limites_negativos(self, material):
        with pytest.raises(ValueError):
            estoque_service.atualizar_limites(material.id, -1, 0)
        m = estoque_service.atualizar_limites(material.id, "20", "5")
        assert (m.stock_minimo, m.stock_critico) == (20, 5)


class TestValidarOperacao:
    def test_material_sem_entradas(self, material):
        r = estoque_service.validar_operacao(material.id, 1)
        assert r == {
            "valid": False,
            "message": "Material não encontrado no stock",
            "disponivel": None,
        }

    def test_stock_insuficiente(self, material):
        _entrada(material)
        r = estoque_service.validar_operacao(material.id, 150)
        assert r["valid"] is False
        assert r["message"].startswith("Stock insuficiente. Disponível: 100")

    def test_avisos(self, material):
        _entrada(material)
        r = estoque_service.validar_operacao(material.id, 95)
        assert r["valid"] is True
        assert "Restará apenas 5" in r["message"]

        r = estoque_service.validar_operacao(material.id, 100)
        assert r["valid"] is True
        assert "esgotará o stock" in r["message"]

        r = estoque_service.validar_operacao(material.id, 10)
        assert r == {"valid": True, "message": None, "disponivel": 100}

    def test_valida_apos_aplicar_correcao(self, db, material):
        _entrada(material)
        estoque_service.guardar_correcao(material.id, 20)
        estoque_service.aplicar_correcao(material.id)

        r = estoque_service.validar_operacao(material.id, 5)
        assert r == {"valid": True, "message": None, "disponivel": 120}

    def test_correcao_guardada_nao_altera_validacao(self, db, material):
        _entrada(material)
        estoque_service.guardar_correcao(material.id, 0)
        r = estoque_service.validar_operacao(material.id, 5)
        assert r["valid"] is True
        assert r["disponivel"] == 100

    def test_operacao_recusada_sem_stock(self, db, material):
        _entrada(material, n_palet=None, quantidade=3)
        with pytest.raises(ValueError, match="Stock insuficiente"):
            operacoes_service.registar_operacao(
                {"material_id": material.id, "num_placas_corte": 5}
            )


def test_material_com_entradas_nao_pode_ser_removido(db, material):
    _entrada(material)
    with pytest.raises(ValueError):
        estoque_service.remover_material(material.id)
    assert StockEntry.query.count() == 1


def test_listar_entradas_filtra_por_referencia(db, material):
    _entrada(material)
    assert len(estoque_service.listar_entradas({"referencia": "CT"})) == 1
    assert estoque_service.listar_entradas({"referencia": "XX"}) == []
    linha = estoque_service.listar_entradas()[0]
    assert linha["material"] == "Cartão - Branco - Placa - 3mm"
    assert linha["fornecedor"] == "PAPELARIA CENTRAL"
