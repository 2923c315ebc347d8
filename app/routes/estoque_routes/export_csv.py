# app/routes/estoque_routes/export_csv.py
from flask import Blueprint, current_app, request

from app.permissions import page_required
from app.services import estoque_service, paletes_service
from app.services.export import csv_export

estoque_export_bp = Blueprint(
    "estoque_export_bp", __name__, url_prefix="/estoque/export"
)

PAGINA = "/definicoes/stocks"


def _csv_response(conteudo: str, prefixo: str):
    nome = csv_export.nome_ficheiro(prefixo)
    return current_app.response_class(
        conteudo.encode("utf-8"),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={nome}"},
    )


@estoque_export_bp.get("/entradas.csv")
@page_required(PAGINA)
def exportar_entradas():
    filtros = {
        "material": request.args.get("material"),
        "referencia": request.args.get("referencia"),
        "date_from": request.args.get("date_from"),
        "date_to": request.args.get("date_to"),
    }
    entradas = estoque_service.listar_entradas(filtros)
    return _csv_response(csv_export.csv_entradas(entradas), "entradas_stock")


@estoque_export_bp.get("/stock-atual.csv")
@page_required(PAGINA)
def exportar_stock_atual():
    stocks = estoque_service.listar_stock_atual()
    return _csv_response(csv_export.csv_stock_atual(stocks), "stock_atual")


@estoque_export_bp.get("/paletes.csv")
@page_required(PAGINA)
def exportar_paletes():
    filtros = {
        k: request.args.get(k)
        for k in ("search", "referencia", "fornecedor", "author", "date_from", "date_to")
    }
    paletes = paletes_service.listar_paletes(filtros)
    return _csv_response(csv_export.csv_paletes(paletes), "paletes")
