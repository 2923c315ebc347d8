from datetime import date, datetime

from app.services.export.csv_export import (
    BOM,
    CABECALHO_PALETES,
    csv_entradas,
    csv_paletes,
    csv_stock_atual,
    escapar_campo,
    gerar_csv,
    nome_ficheiro,
)


class TestEscaparCampo:
    def test_texto_simples_nao_leva_aspas(self):
        assert escapar_campo("Cartão") == "Cartão"
        assert escapar_campo('diz "olá"') == 'diz "olá"'

    def test_separadores_e_quebras_de_linha(self):
        assert escapar_campo("a;b") == '"a;b"'
        assert escapar_campo("a,b") == '"a,b"'
        assert escapar_campo("linha1\nlinha2") == '"linha1\nlinha2"'

    def test_aspas_internas_sao_duplicadas(self):
        assert escapar_campo('caixa "A", grande') == '"caixa ""A"", grande"'

    def test_valores(self):
        assert escapar_campo(None) == ""
        assert escapar_campo(5.0) == "5"
        assert escapar_campo(2.5) == "2.5"
        assert escapar_campo(date(2024, 5, 3)) == "03/05/2024"


def test_gerar_csv_com_bom_e_separador():
    conteudo = gerar_csv(["A", "B"], [[1, "x;y"], [None, 2]])
    assert conteudo.startswith(BOM)
    assert conteudo[len(BOM):].split("\n") == ["A;B", '1;"x;y"', ";2"]


def test_csv_vazio_mantem_cabecalho():
    conteudo = csv_paletes([])
    assert conteudo == BOM + ";".join(CABECALHO_PALETES)


def test_nome_ficheiro():
    assert nome_ficheiro("stock_atual", date(2024, 5, 3)) == "stock_atual_2024-05-03.csv"


def test_csv_stock_atual_calcula_final_e_status():
    stocks = [
        {
            "referencia": "CT-3",
            "nome": "Cartão - Branco",
            "total_recebido": 11.6,
            "total_consumido": 2,
            "stock_atual": 9.6,
            "stock_minimo": None,
            "stock_critico": None,
            "stock_correct": None,
            "stock_correct_updated_at": None,
        },
        {
            "referencia": "CT-5",
            "nome": "Cartão - Preto",
            "total_recebido": 100,
            "total_consumido": 0,
            "stock_atual": 100,
            "stock_minimo": 5,
            "stock_critico": 1,
            "stock_correct": 0,
            "stock_correct_updated_at": datetime(2024, 5, 3, 9, 30),
        },
    ]
    linhas = csv_stock_atual(stocks)[len(BOM):].split("\n")
    assert linhas[1] == "CT-3;Cartão - Branco;12;2;10;;;;9.6;BAIXO;"
    assert linhas[2] == "CT-5;Cartão - Preto;100;0;100;5;1;0;0;CRÍTICO;03/05/2024"


def test_csv_entradas_formata_datas_e_valores_em_falta():
    entradas = [
        {
            "data": date(2024, 5, 3),
            "referencia": "CT-3",
            "material": "Cartão - Branco",
            "fornecedor": "PAPELARIA CENTRAL",
            "quantidade": 100.0,
            "vl_m2": None,
            "preco_unitario": 2.5,
            "valor_total": 250.0,
            "n_palet": "2",
            "no_guia_forn": "G-77",
            "notas": "entrega parcial, falta 1",
            "created_at": datetime(2024, 5, 3, 10, 0),
        }
    ]
    linha = csv_entradas(entradas)[len(BOM):].split("\n")[1]
    assert linha == (
        "03/05/2024;CT-3;Cartão - Branco;PAPELARIA CENTRAL;100;;2.5;250;2;G-77;"
        '"entrega parcial, falta 1";03/05/2024'
    )
