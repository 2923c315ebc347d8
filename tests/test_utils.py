from datetime import date, datetime

from app.utils.datas import (
    SEM_PRAZO,
    dias_entre,
    dias_uteis_ate,
    formatar_data_pt,
    is_dia_util,
    parse_data,
    subtrair_meses,
)
from app.utils.ordenacao import arredondar, parse_numeric_field, to_bool, to_float, to_int

# 2024-05-10 é uma sexta-feira
SEXTA = date(2024, 5, 10)


class TestParseNumericField:
    def test_vazios_valem_zero(self):
        assert parse_numeric_field(None) == 0
        assert parse_numeric_field("") == 0

    def test_texto_numerico(self):
        assert parse_numeric_field("12") == 12.0
        assert parse_numeric_field(" 3.5 ") == 3.5

    def test_texto_nao_numerico_vai_para_o_fim(self):
        assert parse_numeric_field("abc") == 999999 + ord("a")
        assert parse_numeric_field("abc") > parse_numeric_field("100000")

    def test_booleanos(self):
        assert parse_numeric_field(True) == 1
        assert parse_numeric_field(False) == 0


class TestArredondar:
    def test_half_up(self):
        assert arredondar(2.5) == 3
        assert arredondar(12.5) == 13
        assert arredondar(66.666) == 67

    def test_casas_decimais(self):
        assert arredondar(0.125, 2) == 0.13
        assert arredondar(249.999, 2) == 250.0

    def test_metades_negativas_sobem(self):
        assert arredondar(-2.5) == -2
        assert arredondar(-2.6) == -3
        assert arredondar(-0.125, 2) == -0.12


def test_to_float_e_to_int():
    assert to_float("1.5") == 1.5
    assert to_float("abc") is None
    assert to_float(float("nan")) is None
    assert to_int("12") == 12
    assert to_int("12.0") == 12
    assert to_int("x") is None


def test_to_bool_aceita_texto():
    assert to_bool("false") is False
    assert to_bool("0") is False
    assert to_bool("") is False
    assert to_bool(" True ") is True
    assert to_bool("sim") is True
    assert to_bool(1) is True
    assert to_bool(None) is False


class TestDatas:
    def test_parse_data(self):
        assert parse_data("2024-05-03") == date(2024, 5, 3)
        assert parse_data("2024-05-03T10:20:00") == date(2024, 5, 3)
        assert parse_data(datetime(2024, 5, 3, 8)) == date(2024, 5, 3)
        assert parse_data("") is None
        assert parse_data("ontem") is None

    def test_formatar_data_pt(self):
        assert formatar_data_pt(date(2024, 5, 3)) == "03/05/2024"
        assert formatar_data_pt(None) == ""

    def test_subtrair_meses_limita_ao_fim_do_mes(self):
        assert subtrair_meses(datetime(2024, 3, 31), 1) == datetime(2024, 2, 29)
        assert subtrair_meses(datetime(2024, 1, 15), 2) == datetime(2023, 11, 15)

    def test_dia_util(self):
        assert is_dia_util(SEXTA)
        assert not is_dia_util(date(2024, 5, 11))
        assert not is_dia_util(SEXTA, feriados=["2024-05-10"])


class TestDiasUteis:
    def test_proxima_segunda_e_um_dia_util(self):
        assert dias_uteis_ate(date(2024, 5, 13), SEXTA) == 1
        assert dias_uteis_ate(date(2024, 5, 14), SEXTA) == 2

    def test_feriados_nao_contam(self):
        assert dias_uteis_ate(date(2024, 5, 14), SEXTA, [date(2024, 5, 13)]) == 1

    def test_datas_passadas_ou_hoje_nao_tem_prazo(self):
        assert dias_uteis_ate(SEXTA, SEXTA) == SEM_PRAZO
        assert dias_uteis_ate(date(2024, 5, 1), SEXTA) == SEM_PRAZO
        assert dias_uteis_ate(None, SEXTA) == SEM_PRAZO


def test_dias_entre():
    assert dias_entre("2024-01-01T00:00:00", "2024-01-01T12:00:00") == "1 dia"
    assert dias_entre(date(2024, 1, 4), date(2024, 1, 1)) == "3 dias"
    assert dias_entre(None, date(2024, 1, 1)) == ""
