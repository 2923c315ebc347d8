"""
Relatórios Excel (openpyxl) de produção e de logística.

Layout comum: título fundido na linha 1, data na linha 2, linha 3 vazia,
cabeçalho na linha 4 e dados a partir da linha 5.
"""
from __future__ import annotations

import logging
from datetime import date
from io import BytesIO
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from app.utils.datas import formatar_data_pt
from app.utils.ordenacao import to_float

logger = logging.getLogger(__name__)

COLUNAS_PRODUCAO: List[Tuple[str, str]] = [
    ("ORC", "numero_orc"),
    ("FO", "numero_fo"),
    ("CLIENTE", "cliente"),
    ("QUANT.", "quantidade"),
    ("CAMPANHA", "nome_campanha"),
    ("ITEM", "descricao"),
    ("DATA ENTRADA", "data_in"),
    ("DATA CONCLUÍDO", "data_concluido"),
    ("TRANSPORTADORA", "transportadora"),
    ("ENTREGA", "local_entrega"),
]
COLUNAS_LOGISTICA: List[Tuple[str, str]] = [
    ("ORC", "numero_orc"),
    ("FO", "numero_fo"),
    ("Descrição", "item_descricao"),
    ("Guia", "guia"),
    ("Cliente", "cliente"),
    ("Local Recolha", "local_recolha"),
    ("Local Entrega", "local_entrega"),
    ("Transportadora", "transportadora"),
    ("Notas", "notas"),
    ("QT", "quantidade"),
]
TITULO_TAB = {"em_curso": "EM CURSO", "concluidos": "CONCLUÍDOS"}

_FINO = Side(style="thin")
_CABECALHO_FILL = PatternFill("solid", fgColor="FF4F4F4F")
_ZEBRA_FILL = PatternFill("solid", fgColor="FFF3F4F6")
_BRANCO_FILL = PatternFill("solid", fgColor="FFFFFFFF")


def _wb_to_bytes(wb: Workbook) -> BytesIO:
    bio = BytesIO()
    wb.save(bio)
    bio.seek(0)
    return bio


def _montar_folha(ws, titulo: str, cabecalho: Sequence[str], linhas: List[List[Any]], hoje: date) -> None:
    n = len(cabecalho)
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=n)
    ws.cell(row=1, column=1, value=titulo).font = Font(size=18, bold=True)
    ws.cell(row=1, column=1).alignment = Alignment(horizontal="center", vertical="center")

    ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=n)
    ws.cell(row=2, column=1, value=formatar_data_pt(hoje)).font = Font(size=12)
    ws.cell(row=2, column=1).alignment = Alignment(horizontal="center", vertical="center")

    ws.merge_cells(start_row=3, start_column=1, end_row=3, end_column=n)

    for col, texto in enumerate(cabecalho, start=1):
        cell = ws.cell(row=4, column=col, value=texto)
        cell.fill = _CABECALHO_FILL
        cell.font = Font(color="FFFFFFFF", bold=True)
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = Border(top=_FINO, left=_FINO, bottom=_FINO, right=_FINO)

    for idx, valores in enumerate(linhas):
        linha = 5 + idx
        fill = _BRANCO_FILL if idx % 2 == 0 else _ZEBRA_FILL
        for col, valor in enumerate(valores, start=1):
            cell = ws.cell(row=linha, column=col, value=valor)
            cell.fill = fill
            cell.border = Border(left=_FINO, right=_FINO)
            cell.alignment = Alignment(vertical="top", wrap_text=isinstance(valor, str))

    if linhas:
        ultima = 4 + len(linhas)
        for col in range(1, n + 1):
            cell = ws.cell(row=ultima, column=col)
            cell.border = Border(left=_FINO, right=_FINO, bottom=_FINO)

    for col, texto in enumerate(cabecalho, start=1):
        ws.column_dimensions[ws.cell(row=4, column=col).column_letter].width = max(
            12, min(40, len(texto) + 6)
        )


def _maiusculas(valor: Any) -> Any:
    return valor.upper() if isinstance(valor, str) else valor


# ---------------------------------------------------------------------
# Produção
# ---------------------------------------------------------------------
def ordenar_producao(rows: List[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    return sorted(rows, key=lambda r: str(r.get("numero_fo") or ""))


def excel_producao(rows: List[Mapping[str, Any]], tab: str = "em_curso", hoje: Optional[date] = None) -> Tuple[BytesIO, str]:
    hoje = hoje or date.today()
    wb = Workbook()
    ws = wb.active
    ws.title = "Producao"

    linhas = []
    for r in ordenar_producao(rows):
        valores = []
        for _, chave in COLUNAS_PRODUCAO:
            valor = r.get(chave)
            if chave in ("data_in", "data_concluido"):
                valor = formatar_data_pt(valor)
            elif valor is None:
                valor = ""
            valores.append(_maiusculas(valor))
        linhas.append(valores)

    titulo = f"RELATÓRIO DE PRODUÇÃO - {TITULO_TAB.get(tab, 'EM CURSO')}"
    _montar_folha(ws, titulo, [c for c, _ in COLUNAS_PRODUCAO], linhas, hoje)

    nome = f"PRODUCAO_{tab.upper()}_{hoje.isoformat()}.xlsx"
    logger.info(f"[Export] Excel produção ({tab}): {len(linhas)} linha(s)")
    return _wb_to_bytes(wb), nome


# ---------------------------------------------------------------------
# Logística
# ---------------------------------------------------------------------
def descrever_local(row: Mapping[str, Any], tipo: str, clientes: Mapping[int, Any]) -> str:
    """Nome do cliente + morada/código postal; cai para o texto livre do local."""
    cliente = clientes.get(row.get(f"id_local_{tipo}"))
    if cliente is not None:
        morada = " ".join(p for p in (cliente.morada, cliente.codigo_pos) if p)
        return cliente.nome_cl + (f" {morada}" if morada else "")
    return row.get(f"local_{tipo}") or ""


def ordenar_logistica(rows: List[Mapping[str, Any]], clientes: Mapping[int, Any]) -> List[Mapping[str, Any]]:
    def chave(r):
        return (
            to_float(r.get("numero_fo")) or 0,
            descrever_local(r, "recolha", clientes).lower(),
            descrever_local(r, "entrega", clientes).lower(),
        )

    return sorted(rows, key=chave)


def excel_logistica(
    rows: List[Mapping[str, Any]],
    clientes: Optional[Mapping[int, Any]] = None,
    data: Optional[date] = None,
    hoje: Optional[date] = None,
) -> Tuple[BytesIO, str]:
    clientes = clientes or {}
    hoje = hoje or date.today()
    wb = Workbook()
    ws = wb.active
    ws.title = "Logistica"

    linhas = []
    for r in ordenar_logistica(rows, clientes):
        valores: Dict[str, Any] = dict(r)
        valores["local_recolha"] = descrever_local(r, "recolha", clientes)
        valores["local_entrega"] = descrever_local(r, "entrega", clientes)
        linhas.append(
            [valores.get(chave) if valores.get(chave) is not None else "" for _, chave in COLUNAS_LOGISTICA]
        )

    _montar_folha(ws, "RELATÓRIO DE LOGÍSTICA", [c for c, _ in COLUNAS_LOGISTICA], linhas, hoje)

    nome = f"logistica_{data.isoformat() if data else 'all'}.xlsx"
    logger.info(f"[Export] Excel logística: {len(linhas)} linha(s)")
    return _wb_to_bytes(wb), nome
