# app/routes/utilidades.py
"""Helpers partilhados pelas APIs JSON (serialização e respostas de erro)."""
from datetime import date, datetime
from typing import Any

from flask import current_app, jsonify, request

from app.services.erros import RegistoDuplicado, RegistoNaoEncontrado


def serializar(valor: Any) -> Any:
    if isinstance(valor, (datetime, date)):
        return valor.isoformat()
    if isinstance(valor, dict):
        return {k: serializar(v) for k, v in valor.items()}
    if isinstance(valor, (list, tuple)):
        return [serializar(v) for v in valor]
    if hasattr(valor, "as_dict"):
        return serializar(valor.as_dict())
    return valor


def ok(status: int = 200, **dados):
    return jsonify({"ok": True, **serializar(dados)}), status


def payload_json() -> dict:
    return request.get_json(silent=True) or {}


def flag_confirmar() -> bool:
    valor = request.args.get("confirmar") or payload_json().get("confirmar")
    return str(valor).lower() in {"1", "true", "sim"}


def resposta_erro(e: Exception, contexto: str):
    """Converte exceções de serviço em respostas JSON com o status adequado."""
    if isinstance(e, RegistoDuplicado):
        return (
            jsonify(
                {
                    "ok": False,
                    "error": str(e),
                    "duplicado": serializar(e.existente) if e.existente is not None else None,
                }
            ),
            409,
        )
    if isinstance(e, RegistoNaoEncontrado):
        return jsonify({"ok": False, "error": str(e)}), 404
    if isinstance(e, ValueError):
        return jsonify({"ok": False, "error": str(e)}), 400
    current_app.logger.exception(f"[{contexto}] Erro inesperado: {e}")
    return jsonify({"ok": False, "error": "Erro interno."}), 500
