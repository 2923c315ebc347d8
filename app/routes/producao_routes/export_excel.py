# app/routes/producao_routes/export_excel.py
from flask import Blueprint, request, send_file

from app.models_sqla import Cliente
from app.permissions import page_required
from app.services.export import excel_export
from app.services.producao import jobs_service, logistica_service
from app.utils.datas import parse_data

producao_export_bp = Blueprint(
    "producao_export_bp", __name__, url_prefix="/producao/export"
)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@producao_export_bp.get("/producao.xlsx")
@page_required("/producao")
def exportar_producao():
    filtros = {
        k: request.args.get(k) for k in ("tab", "fo", "campanha", "cliente", "item", "fatura")
    }
    tab = filtros.get("tab") or "em_curso"
    linhas = jobs_service.linhas_export_producao(filtros)
    bio, nome = excel_export.excel_producao(linhas, tab)
    return send_file(bio, mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=nome)


@producao_export_bp.get("/logistica.xlsx")
@page_required("/producao")
def exportar_logistica():
    data = parse_data(request.args.get("data"))
    linhas = logistica_service.listar_logistica({"data": data})
    clientes = {c.id: c for c in Cliente.query.all()}
    bio, nome = excel_export.excel_logistica(linhas, clientes, data)
    return send_file(bio, mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=nome)
