"""
Exportação CSV para Excel PT: separador ';', UTF-8 com BOM, linhas com '\\n'.

Campos com ';', ',' ou quebra de linha vão entre aspas, com as aspas
internas duplicadas.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Sequence

from app.services.estoque_service import material_nome, stock_final, stock_status
from app.utils.datas import formatar_data_pt
from app.utils.ordenacao import arredondar

logger = logging.getLogger(__name__)

BOM = "\ufeff"
SEPARADOR = ";"

CABECALHO_ENTRADAS = [
    "Data",
    "Referência",
    "Material",
    "Fornecedor",
    "Quantidade",
    "VL_m2",
    "Preço Unitário",
    "Valor Total",
    "Nº Palete",
    "Nº Guia Fornecedor",
    "Notas",
    "Criado em",
]
CABECALHO_STOCK_ATUAL = [
    "Referência",
    "Material",
    "Total Recebido",
    "Total Consumido",
    "Stock Atual",
    "Stock Mínimo",
    "Stock Crítico",
    "Correção Manual",
    "Stock Final",
    "Status",
    "Última Correção",
]
CABECALHO_PALETES = [
    "Nº Palete",
    "Fornecedor",
    "Nº Guia",
    "Ref. Cartão",
    "Qt. Palete",
    "Data",
    "Autor",
    "Criado em",
]


def _texto(valor: Any) -> str:
    if valor is None:
        return ""
    if isinstance(valor, bool):
        return "true" if valor else "false"
    if isinstance(valor, float) and valor.is_integer():
        return str(int(valor))
    if isinstance(valor, (date, datetime)):
        return formatar_data_pt(valor)
    return str(valor)


def escapar_campo(valor: Any) -> str:
    texto = _texto(valor)
    if ";" in texto or "," in texto or "\n" in texto:
        return '"' + texto.replace('"', '""') + '"'
    return texto


def gerar_csv(cabecalho: Sequence[str], linhas: Iterable[Sequence[Any]]) -> str:
    conteudo = [SEPARADOR.join(escapar_campo(h) for h in cabecalho)]
    for linha in linhas:
        conteudo.append(SEPARADOR.join(escapar_campo(v) for v in linha))
    return BOM + "\n".join(conteudo)


def nome_ficheiro(prefixo: str, hoje: Optional[date] = None) -> str:
    return f"{prefixo}_{(hoje or date.today()).isoformat()}.csv"


def _ou(valor: Any, padrao: Any) -> Any:
    return valor if valor not in (None, "") else padrao


# ---------------------------------------------------------------------
# Exports de stock
# ---------------------------------------------------------------------
def csv_entradas(entradas: List[dict]) -> str:
    linhas = [
        [
            formatar_data_pt(e.get("data")),
            e.get("referencia") or "",
            e.get("material") or "",
            e.get("fornecedor") or "",
            _ou(e.get("quantidade"), 0),
            _ou(e.get("vl_m2"), ""),
            _ou(e.get("preco_unitario"), 0),
            _ou(e.get("valor_total"), 0),
            e.get("n_palet") or "",
            e.get("no_guia_forn") or "",
            e.get("notas") or "",
            formatar_data_pt(e.get("created_at")),
        ]
        for e in entradas
    ]
    logger.info(f"[Export] CSV entradas: {len(linhas)} linha(s)")
    return gerar_csv(CABECALHO_ENTRADAS, linhas)


def csv_stock_atual(stocks: List[dict]) -> str:
    linhas = []
    for s in stocks:
        final = stock_final(s)
        linhas.append(
            [
                s.get("referencia") or "",
                s.get("nome") or material_nome(s),
                arredondar(s.get("total_recebido") or 0),
                arredondar(s.get("total_consumido") or 0),
                arredondar(s.get("stock_atual") or 0),
                _ou(s.get("stock_minimo"), ""),
                _ou(s.get("stock_critico"), ""),
                _ou(s.get("stock_correct"), ""),
                final,
                stock_status(final, s.get("stock_minimo"), s.get("stock_critico")),
                formatar_data_pt(s.get("stock_correct_updated_at")),
            ]
        )
    logger.info(f"[Export] CSV stock atual: {len(linhas)} linha(s)")
    return gerar_csv(CABECALHO_STOCK_ATUAL, linhas)


def csv_paletes(paletes: List[dict]) -> str:
    linhas = [
        [
            p.get("no_palete") or "",
            p.get("fornecedor") or "",
            p.get("no_guia_forn") or "",
            p.get("ref_cartao") or "",
            _ou(p.get("qt_palete"), 0),
            formatar_data_pt(p.get("data")),
            p.get("autor") or "",
            formatar_data_pt(p.get("created_at")),
        ]
        for p in paletes
    ]
    logger.info(f"[Export] CSV paletes: {len(linhas)} linha(s)")
    return gerar_csv(CABECALHO_PALETES, linhas)
