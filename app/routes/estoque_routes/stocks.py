# app/routes/estoque_routes/stocks.py
from flask import Blueprint, jsonify, request

from app.permissions import page_required
from app.routes.utilidades import ok, payload_json, resposta_erro
from app.services import estoque_service

stocks_bp = Blueprint("stocks_bp", __name__, url_prefix="/estoque")

PAGINA = "/definicoes/stocks"


@stocks_bp.get("/stocks")
@page_required(PAGINA)
def listar_entradas():
    filtros = {
        "material": request.args.get("material"),
        "referencia": request.args.get("referencia"),
        "date_from": request.args.get("date_from"),
        "date_to": request.args.get("date_to"),
    }
    return ok(items=estoque_service.listar_entradas(filtros))


@stocks_bp.post("/stocks")
@page_required(PAGINA)
def criar_entrada():
    try:
        return ok(201, entrada=estoque_service.criar_entrada(payload_json()))
    except Exception as e:
        return resposta_erro(e, "STOCKS_API")


@stocks_bp.patch("/stocks/<int:entrada_id>")
@page_required(PAGINA)
def atualizar_entrada(entrada_id):
    try:
        return ok(entrada=estoque_service.atualizar_entrada(entrada_id, payload_json()))
    except Exception as e:
        return resposta_erro(e, "STOCKS_API")


@stocks_bp.delete("/stocks/<int:entrada_id>")
@page_required(PAGINA)
def remover_entrada(entrada_id):
    try:
        estoque_service.remover_entrada(entrada_id)
        return ok()
    except Exception as e:
        return resposta_erro(e, "STOCKS_API")


@stocks_bp.get("/stock-atual")
@page_required(PAGINA)
def stock_atual():
    """Stock derivado por material, com valor final e status."""
    linhas = estoque_service.listar_stock_atual()
    for row in linhas:
        final = estoque_service.stock_final(row)
        row["stock_final"] = final
        row["status"] = estoque_service.stock_status(
            final, row["stock_minimo"], row["stock_critico"]
        )
    return ok(items=linhas)


@stocks_bp.get("/validar-operacao")
@page_required("/producao/operacoes")
def validar_operacao():
    material_id = request.args.get("material_id", type=int)
    if material_id is None:
        return jsonify({"ok": False, "error": "material_id é obrigatório."}), 400
    resultado = estoque_service.validar_operacao(
        material_id, request.args.get("quantidade")
    )
    return ok(**resultado)
