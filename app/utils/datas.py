"""
Utilitários de datas: formatação pt-PT, parsing ISO e dias úteis.

Dias úteis excluem sábado, domingo e os feriados registados (conjunto de
datas ``date`` ou strings ``YYYY-MM-DD``).
"""
from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Set, Union

SEM_PRAZO = 10**9

DataLike = Union[date, datetime, str, None]


def parse_data(valor: DataLike) -> Optional[date]:
    """Converte ``YYYY-MM-DD`` (ou ISO completo), date ou datetime para ``date``."""
    if valor is None or valor == "":
        return None
    if isinstance(valor, datetime):
        return valor.date()
    if isinstance(valor, date):
        return valor
    texto = str(valor).strip()
    try:
        return datetime.fromisoformat(texto).date()
    except ValueError:
        pass
    try:
        return datetime.strptime(texto[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_datahora(valor: DataLike) -> Optional[datetime]:
    if valor is None or valor == "":
        return None
    if isinstance(valor, datetime):
        return valor
    if isinstance(valor, date):
        return datetime(valor.year, valor.month, valor.day)
    try:
        return datetime.fromisoformat(str(valor).strip())
    except ValueError:
        d = parse_data(valor)
        return datetime(d.year, d.month, d.day) if d else None


def formatar_data_pt(valor: DataLike) -> str:
    """dd/mm/yyyy; vazio quando não há data."""
    d = parse_data(valor)
    return d.strftime("%d/%m/%Y") if d else ""


def subtrair_meses(d: datetime, meses: int) -> datetime:
    """Recua ``meses`` mantendo o dia (limitado ao último dia do mês)."""
    total = d.year * 12 + (d.month - 1) - meses
    ano, mes = divmod(total, 12)
    mes += 1
    proximo = date(ano + (mes // 12), mes % 12 + 1, 1)
    ultimo_dia = (proximo - timedelta(days=1)).day
    return d.replace(year=ano, month=mes, day=min(d.day, ultimo_dia))


def _normalizar_feriados(feriados: Optional[Iterable[DataLike]]) -> Set[date]:
    resultado: Set[date] = set()
    for f in feriados or ():
        d = parse_data(f)
        if d:
            resultado.add(d)
    return resultado


def is_dia_util(d: date, feriados: Optional[Iterable[DataLike]] = None) -> bool:
    if d.weekday() >= 5:
        return False
    return d not in _normalizar_feriados(feriados)


def dias_uteis_ate(
    alvo: DataLike,
    hoje: Optional[date] = None,
    feriados: Optional[Iterable[DataLike]] = None,
) -> int:
    """
    Número de dias úteis entre hoje (exclusivo) e ``alvo`` (inclusivo).
    Datas alvo iguais ou anteriores a hoje devolvem ``SEM_PRAZO``.
    """
    d_alvo = parse_data(alvo)
    hoje = hoje or date.today()
    if d_alvo is None or d_alvo <= hoje:
        return SEM_PRAZO

    fer = _normalizar_feriados(feriados)
    contagem = 0
    cursor = hoje
    while cursor < d_alvo:
        cursor += timedelta(days=1)
        if is_dia_util(cursor, fer):
            contagem += 1
    return contagem


def dias_entre(inicio: DataLike, fim: DataLike) -> str:
    """Diferença absoluta arredondada para cima: "1 dia" ou "N dias"."""
    a = parse_datahora(inicio)
    b = parse_datahora(fim)
    if a is None or b is None:
        return ""
    segundos = abs((b - a).total_seconds())
    dias = math.ceil(segundos / 86400)
    return "1 dia" if dias == 1 else f"{dias} dias"
