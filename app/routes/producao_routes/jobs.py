# -*- coding: utf-8 -*-
# app/routes/producao_routes/jobs.py
from flask import Blueprint, current_app, request

from app.permissions import page_required
from app.routes.utilidades import flag_confirmar, ok, payload_json, resposta_erro
from app.services.producao import cascade_service, conclusao_service, jobs_service
from app.services.producao.duplicados_service import (
    verificar_fo_duplicado,
    verificar_orc_duplicado,
)

jobs_bp = Blueprint("jobs_bp", __name__, url_prefix="/producao")

PAGINA = "/producao"
FILTROS = ("tab", "fo", "campanha", "cliente", "item", "fatura", "sort", "dir")


@jobs_bp.get("/jobs")
@page_required(PAGINA)
def listar_jobs():
    filtros = {k: request.args.get(k) for k in FILTROS}
    page = request.args.get("page", 1, type=int)
    try:
        resultado = jobs_service.listar_jobs(
            filtros, page=page, page_size=current_app.config.get("PAGE_SIZE", 50)
        )
        return ok(**resultado)
    except Exception as e:
        return resposta_erro(e, "JOBS_API")


@jobs_bp.get("/jobs/<int:job_id>")
@page_required(PAGINA)
def obter_job(job_id):
    try:
        return ok(job=jobs_service.obter_job(job_id))
    except Exception as e:
        return resposta_erro(e, "JOBS_API")


@jobs_bp.post("/jobs")
@page_required(PAGINA)
def criar_job():
    try:
        job = jobs_service.criar_job(payload_json(), confirmar=flag_confirmar())
        return ok(201, job=job)
    except Exception as e:
        return resposta_erro(e, "JOBS_API")


@jobs_bp.patch("/jobs/<int:job_id>")
@page_required(PAGINA)
def atualizar_job(job_id):
    try:
        job = jobs_service.atualizar_job(job_id, payload_json(), confirmar=flag_confirmar())
        return ok(job=job)
    except Exception as e:
        return resposta_erro(e, "JOBS_API")


@jobs_bp.delete("/jobs/<int:job_id>")
@page_required(PAGINA)
def apagar_job(job_id):
    """Remove o job e os seus itens/designer/logística em sequência."""
    try:
        return ok(**cascade_service.apagar_job(job_id))
    except Exception as e:
        return resposta_erro(e, "JOBS_API")


@jobs_bp.post("/jobs/<int:job_id>/verificar-conclusao")
@page_required(PAGINA)
def verificar_conclusao(job_id):
    try:
        job = jobs_service.get_job(job_id)
        alterado = conclusao_service.auto_concluir(job)
        return ok(job=job, concluido_agora=alterado)
    except Exception as e:
        return resposta_erro(e, "JOBS_API")


# ---------------------------
# Pré-verificação de duplicados
# ---------------------------
@jobs_bp.get("/jobs/check-orc")
@page_required(PAGINA)
def check_orc():
    existente = verificar_orc_duplicado(
        request.args.get("numero_orc"), request.args.get("job_id")
    )
    return ok(duplicado=existente)


@jobs_bp.get("/jobs/check-fo")
@page_required(PAGINA)
def check_fo():
    existente = verificar_fo_duplicado(
        request.args.get("numero_fo"), request.args.get("job_id")
    )
    return ok(duplicado=existente)


# ---------------------------
# Itens
# ---------------------------
@jobs_bp.get("/jobs/<int:job_id>/items")
@page_required(PAGINA)
def listar_items(job_id):
    try:
        return ok(items=jobs_service.listar_items(job_id))
    except Exception as e:
        return resposta_erro(e, "JOBS_API")


@jobs_bp.post("/jobs/<int:job_id>/items")
@page_required(PAGINA)
def aceitar_item(job_id):
    try:
        criado = jobs_service.aceitar_item(job_id, payload_json())
        return ok(201, **criado)
    except Exception as e:
        return resposta_erro(e, "JOBS_API")


@jobs_bp.patch("/items/<int:item_id>")
@page_required(PAGINA)
def atualizar_item(item_id):
    try:
        return ok(item=jobs_service.atualizar_item(item_id, payload_json()))
    except Exception as e:
        return resposta_erro(e, "JOBS_API")
