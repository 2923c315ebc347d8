"""Helpers numéricos para ordenação e arredondamento."""
from __future__ import annotations

import math
from decimal import ROUND_FLOOR, Decimal
from typing import Any, Optional

# Textos não numéricos vão para o fim, ordenados pelo primeiro caractere
_OFFSET_TEXTO = 999999


def parse_numeric_field(valor: Any) -> float:
    if valor is None or valor == "":
        return 0
    if isinstance(valor, bool):
        return int(valor)
    if isinstance(valor, (int, float)):
        return valor
    texto = str(valor).strip()
    if not texto:
        return 0
    try:
        return float(texto)
    except ValueError:
        return _OFFSET_TEXTO + ord(texto[0])


def arredondar(valor: float, casas: int = 0) -> float:
    """Metades sempre para cima (2.5 -> 3, -2.5 -> -2), ao contrário do round() bancário."""
    escala = Decimal(1).scaleb(casas)
    resultado = (Decimal(str(valor)) * escala + Decimal("0.5")).to_integral_value(
        rounding=ROUND_FLOOR
    ) / escala
    return int(resultado) if casas == 0 else float(resultado)


def to_float(valor: Any) -> Optional[float]:
    """Converte para float; None/vazio/NaN/inválido -> None."""
    if valor is None or valor == "":
        return None
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        return None
    if math.isnan(numero):
        return None
    return numero


def to_int(valor: Any) -> Optional[int]:
    if valor is None or valor == "":
        return None
    texto = str(valor).strip()
    try:
        return int(texto)
    except ValueError:
        pass
    try:
        return int(float(texto))
    except (OverflowError, ValueError):
        return None


def to_bool(valor: Any) -> bool:
    """Flags vindas de query string ou JSON: "false"/"0"/"" contam como False."""
    if isinstance(valor, str):
        return valor.strip().lower() in {"1", "true", "sim", "on"}
    return bool(valor)
