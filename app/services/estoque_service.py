# app/services/estoque_service.py
"""
Serviço de stock de materiais.

Funções públicas:
- material_nome(material)              → "MATERIAL - COR - TIPO - CARATERISTICA"
- listar_materiais / criar_material / atualizar_material / remover_material
- listar_stock_atual()                 → stock derivado por material (recebido − consumido)
- stock_final(row) / stock_status(...) → valor final e classificação OK/BAIXO/CRÍTICO
- atualizar_limites(...)               → stock_minimo / stock_critico
- guardar_correcao(...) / aplicar_correcao(...)
- preparar_entrada(payload)            → normaliza uma entrada de stock
- listar_entradas / criar_entrada / atualizar_entrada / remover_entrada
- validar_operacao(material_id, qtd)   → verificação de stock antes de uma operação
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_

from app import db
from app.models_sqla import Fornecedor, Material, ProducaoOperacao, StockEntry
from app.services.erros import RegistoNaoEncontrado
from app.utils.datas import formatar_data_pt, parse_data
from app.utils.ordenacao import arredondar, to_float, to_int

logger = logging.getLogger(__name__)

STOCK_MINIMO_PADRAO = 10
STOCK_CRITICO_PADRAO = 0
LIMIAR_AVISO_OPERACAO = 10

STATUS_OK = "OK"
STATUS_BAIXO = "BAIXO"
STATUS_CRITICO = "CRÍTICO"

_CAMPOS_MATERIAL = (
    "tipo",
    "referencia",
    "ref_fornecedor",
    "material",
    "carateristica",
    "cor",
    "valor_m2",
    "valor_m2_custo",
    "valor_placa",
    "qt_palete",
    "fornecedor_id",
    "stock_minimo",
    "stock_critico",
)

_CAMPOS_ENTRADA = (
    "data",
    "fornecedor_id",
    "material_id",
    "no_guia_forn",
    "quantidade",
    "quantidade_disponivel",
    "vl_m2",
    "preco_unitario",
    "valor_total",
    "notas",
    "n_palet",
)


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def _get_material(material_id: int) -> Material:
    material = db.session.get(Material, material_id)
    if not material:
        raise RegistoNaoEncontrado(f"Material não encontrado: {material_id}")
    return material


def _get_entrada(entrada_id: int) -> StockEntry:
    entrada = db.session.get(StockEntry, entrada_id)
    if not entrada:
        raise RegistoNaoEncontrado(f"Entrada de stock não encontrada: {entrada_id}")
    return entrada


def _commit(msg_erro: str) -> None:
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Estoque] {msg_erro}: {str(e)}")
        raise


def material_nome(material: Any) -> str:
    """Junta material, cor, tipo e carateristica com " - ", ignorando vazios."""
    if material is None:
        return ""
    if isinstance(material, dict):
        partes = [material.get(k) for k in ("material", "cor", "tipo", "carateristica")]
    else:
        partes = [
            material.material,
            material.cor,
            material.tipo,
            material.carateristica,
        ]
    return " - ".join(str(p) for p in partes if p)


def _serialize_material(m: Material, fornecedores: Dict[int, str]) -> dict:
    data = m.as_dict()
    data["nome"] = material_nome(m)
    data["fornecedor"] = fornecedores.get(m.fornecedor_id, "")
    return data


def _mapa_fornecedores() -> Dict[int, str]:
    return {f.id: f.nome_forn for f in Fornecedor.query.all()}


# ---------------------------------------------------------------------
# Materiais
# ---------------------------------------------------------------------
def listar_materiais(texto: Optional[str] = None) -> List[dict]:
    qry = Material.query
    if texto:
        like = f"%{texto.strip()}%"
        qry = qry.filter(
            or_(
                Material.material.ilike(like),
                Material.referencia.ilike(like),
                Material.cor.ilike(like),
                Material.tipo.ilike(like),
            )
        )
    fornecedores = _mapa_fornecedores()
    return [
        _serialize_material(m, fornecedores)
        for m in qry.order_by(Material.material.asc(), Material.id.asc()).all()
    ]


def _aplicar_campos_material(material: Material, payload: dict) -> None:
    for campo in _CAMPOS_MATERIAL:
        if campo not in payload:
            continue
        valor = payload[campo]
        if campo in ("valor_m2", "valor_m2_custo", "valor_placa", "stock_minimo", "stock_critico"):
            valor = to_float(valor)
        elif campo in ("qt_palete", "fornecedor_id"):
            valor = to_int(valor)
        elif isinstance(valor, str):
            valor = valor.strip() or None
        setattr(material, campo, valor)


def criar_material(payload: dict) -> Material:
    if not (payload.get("material") or "").strip():
        raise ValueError("O campo 'material' é obrigatório.")
    material = Material()
    _aplicar_campos_material(material, payload)
    db.session.add(material)
    _commit("Erro ao criar material")
    logger.info(f"[Estoque] Material criado: id={material.id} ({material_nome(material)})")
    return material


def atualizar_material(material_id: int, payload: dict) -> Material:
    material = _get_material(material_id)
    _aplicar_campos_material(material, payload)
    material.updated_at = datetime.utcnow()
    _commit(f"Erro ao atualizar material {material_id}")
    return material


def remover_material(material_id: int) -> None:
    material = _get_material(material_id)
    em_uso = StockEntry.query.filter_by(material_id=material_id).first()
    if em_uso:
        raise ValueError("Material com entradas de stock não pode ser removido.")
    db.session.delete(material)
    _commit(f"Erro ao remover material {material_id}")
    logger.info(f"[Estoque] Material removido: id={material_id}")


# ---------------------------------------------------------------------
# Stock atual (derivado)
# ---------------------------------------------------------------------
def listar_stock_atual() -> List[dict]:
    """
    Calcula o stock atual de todos os materiais:
      total_recebido  = Σ stocks.quantidade
      total_consumido = Σ producao_operacoes.num_placas_corte
      stock_atual     = recebido − consumido
    Ordenado por stock_atual ascendente (os mais em falta primeiro).
    """
    recebidos = {
        row.material_id: (row.recebido or 0, row.disponivel or 0)
        for row in db.session.query(
            StockEntry.material_id,
            func.sum(StockEntry.quantidade).label("recebido"),
            func.sum(StockEntry.quantidade_disponivel).label("disponivel"),
        )
        .group_by(StockEntry.material_id)
        .all()
    }
    consumidos = {
        row.material_id: row.consumido or 0
        for row in db.session.query(
            ProducaoOperacao.material_id,
            func.sum(ProducaoOperacao.num_placas_corte).label("consumido"),
        )
        .filter(ProducaoOperacao.material_id.isnot(None))
        .group_by(ProducaoOperacao.material_id)
        .all()
    }
    fornecedores = _mapa_fornecedores()

    resultado = []
    for m in Material.query.all():
        recebido, disponivel = recebidos.get(m.id, (0, 0))
        consumido = consumidos.get(m.id, 0)
        resultado.append(
            {
                "id": m.id,
                "material": m.material,
                "cor": m.cor,
                "tipo": m.tipo,
                "carateristica": m.carateristica,
                "nome": material_nome(m),
                "referencia": m.referencia,
                "fornecedor_id": m.fornecedor_id,
                "fornecedor": fornecedores.get(m.fornecedor_id, ""),
                "total_recebido": recebido,
                "total_consumido": consumido,
                "stock_atual": recebido - consumido,
                "quantidade_disponivel": disponivel,
                "stock_minimo": m.stock_minimo,
                "stock_critico": m.stock_critico,
                "stock_correct": m.stock_correct,
                "stock_correct_updated_at": m.stock_correct_updated_at,
            }
        )

    resultado.sort(key=lambda r: r["stock_atual"])
    return resultado


def stock_final(row: dict) -> float:
    correcao = row.get("stock_correct")
    return correcao if correcao is not None else row.get("stock_atual", 0)


def stock_status(
    stock: float, minimo: Optional[float] = None, critico: Optional[float] = None
) -> str:
    minimo = STOCK_MINIMO_PADRAO if minimo is None else minimo
    critico = STOCK_CRITICO_PADRAO if critico is None else critico
    if stock <= critico:
        return STATUS_CRITICO
    if stock <= minimo:
        return STATUS_BAIXO
    return STATUS_OK


def stock_atual_material(material_id: int) -> Optional[dict]:
    for row in listar_stock_atual():
        if row["id"] == material_id:
            return row
    return None


def atualizar_limites(
    material_id: int, stock_minimo: Any = None, stock_critico: Any = None
) -> Material:
    minimo = to_float(stock_minimo)
    critico = to_float(stock_critico)
    if (minimo is not None and minimo < 0) or (critico is not None and critico < 0):
        raise ValueError("Os limites de stock não podem ser negativos.")

    material = _get_material(material_id)
    material.stock_minimo = minimo
    material.stock_critico = critico
    material.updated_at = datetime.utcnow()
    _commit(f"Erro ao atualizar limites do material {material_id}")
    logger.info(
        f"[Estoque] Limites atualizados: material={material_id} minimo={minimo} critico={critico}"
    )
    return material


def guardar_correcao(material_id: int, valor: Any) -> Material:
    """Guarda (ou limpa, com None/vazio) a correção manual sem a aplicar."""
    material = _get_material(material_id)
    material.stock_correct = to_float(valor)
    material.stock_correct_updated_at = datetime.utcnow()
    _commit(f"Erro ao guardar correção do material {material_id}")
    return material


def aplicar_correcao(material_id: int, correcao: Any = None) -> StockEntry:
    """
    Aplica a correção manual como uma entrada de ajuste:
      quantidade = correção (pode ser negativa)
      quantidade_disponivel = max(correção, 0)
    Depois repõe stock_correct = 0.
    """
    material = _get_material(material_id)
    valor = to_float(correcao if correcao is not None else material.stock_correct)
    if valor is None or valor == 0:
        raise ValueError("Valor de correção inválido.")

    hoje = date.today()
    entrada = StockEntry(
        material_id=material.id,
        fornecedor_id=material.fornecedor_id,
        data=hoje,
        quantidade=valor,
        quantidade_disponivel=max(valor, 0),
        vl_m2=None,
        preco_unitario=0,
        valor_total=0,
        notas=f"AJUSTE MANUAL - Correção aplicada em {formatar_data_pt(hoje)}",
    )
    try:
        db.session.add(entrada)
        material.stock_correct = 0
        material.stock_correct_updated_at = datetime.utcnow()
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"[Estoque] Erro ao aplicar correção ao material {material_id}: {str(e)}")
        raise

    logger.info(f"[Estoque] Correção aplicada: material={material_id} valor={valor}")
    return entrada


# ---------------------------------------------------------------------
# Entradas de stock
# ---------------------------------------------------------------------
def preparar_entrada(payload: dict, recalcular_paletes: bool = True) -> dict:
    """
    Normaliza os campos de uma entrada de stock:
      - herda fornecedor_id, vl_m2 (valor_m2_custo) e preco_unitario (valor_placa)
        do material quando não vêm preenchidos;
      - quantidade = qt_palete × n_palet quando ambos > 0 (se recalcular_paletes);
      - quantidade_disponivel assume a quantidade;
      - valor_total = quantidade × preco_unitario (2 casas).
    """
    dados = {k: payload.get(k) for k in _CAMPOS_ENTRADA if k in payload}
    material_id = to_int(payload.get("material_id"))
    if material_id is None:
        raise ValueError("O campo 'material_id' é obrigatório.")
    material = _get_material(material_id)
    dados["material_id"] = material_id

    if to_int(dados.get("fornecedor_id")) is None:
        dados["fornecedor_id"] = material.fornecedor_id
    else:
        dados["fornecedor_id"] = to_int(dados["fornecedor_id"])
    if to_float(dados.get("vl_m2")) is None:
        dados["vl_m2"] = material.valor_m2_custo
    if to_float(dados.get("preco_unitario")) is None:
        dados["preco_unitario"] = material.valor_placa or 0

    qt_palete = to_float(payload.get("qt_palete"))
    if qt_palete is None:
        qt_palete = material.qt_palete
    n_palet = to_float(payload.get("n_palet"))
    quantidade = to_float(dados.get("quantidade"))
    if recalcular_paletes and qt_palete and n_palet and qt_palete > 0 and n_palet > 0:
        quantidade = qt_palete * n_palet
    if quantidade is None:
        raise ValueError("Quantidade inválida.")
    dados["quantidade"] = quantidade

    disponivel = to_float(dados.get("quantidade_disponivel"))
    dados["quantidade_disponivel"] = quantidade if disponivel is None else disponivel

    preco = to_float(dados.get("preco_unitario")) or 0
    dados["preco_unitario"] = preco
    dados["vl_m2"] = to_float(dados.get("vl_m2"))
    dados["valor_total"] = arredondar(quantidade * preco, 2)
    dados["data"] = parse_data(dados.get("data")) or date.today()
    if dados.get("n_palet") is not None:
        dados["n_palet"] = str(dados["n_palet"])
    return dados


def _serialize_entrada(e: StockEntry, materiais: Dict[int, Material], fornecedores: Dict[int, str]) -> dict:
    data = e.as_dict()
    m = materiais.get(e.material_id)
    data["material"] = material_nome(m)
    data["referencia"] = m.referencia if m else None
    data["fornecedor"] = fornecedores.get(e.fornecedor_id, "")
    return data


def listar_entradas(filtros: Optional[dict] = None) -> List[dict]:
    filtros = filtros or {}
    qry = StockEntry.query.join(Material, Material.id == StockEntry.material_id)

    texto = (filtros.get("material") or "").strip()
    if texto:
        like = f"%{texto}%"
        qry = qry.filter(
            or_(
                Material.material.ilike(like),
                Material.cor.ilike(like),
                Material.tipo.ilike(like),
            )
        )
    referencia = (filtros.get("referencia") or "").strip()
    if referencia:
        qry = qry.filter(Material.referencia.ilike(f"%{referencia}%"))
    data_de = parse_data(filtros.get("date_from"))
    if data_de:
        qry = qry.filter(StockEntry.data >= data_de)
    data_ate = parse_data(filtros.get("date_to"))
    if data_ate:
        qry = qry.filter(StockEntry.data <= data_ate)

    entradas = qry.order_by(StockEntry.created_at.desc(), StockEntry.id.desc()).all()
    materiais = {m.id: m for m in Material.query.all()}
    fornecedores = _mapa_fornecedores()
    return [_serialize_entrada(e, materiais, fornecedores) for e in entradas]


def criar_entrada(payload: dict) -> StockEntry:
    dados = preparar_entrada(payload)
    entrada = StockEntry(**dados)
    db.session.add(entrada)
    _commit("Erro ao criar entrada de stock")
    logger.info(
        f"[Estoque] Entrada criada: material={entrada.material_id} quantidade={entrada.quantidade}"
    )
    return entrada


def atualizar_entrada(entrada_id: int, payload: dict) -> StockEntry:
    entrada = _get_entrada(entrada_id)
    base = entrada.as_dict()
    base.update(payload)
    # recalcula disponível só quando a quantidade muda e não foi enviada
    if "quantidade" in payload and "quantidade_disponivel" not in payload:
        base["quantidade_disponivel"] = None
    if "preco_unitario" not in payload and "material_id" in payload:
        base["preco_unitario"] = None
    dados = preparar_entrada(
        base, recalcular_paletes="n_palet" in payload or "qt_palete" in payload
    )
    for campo, valor in dados.items():
        setattr(entrada, campo, valor)
    entrada.updated_at = datetime.utcnow()
    _commit(f"Erro ao atualizar entrada {entrada_id}")
    return entrada


def remover_entrada(entrada_id: int) -> None:
    entrada = _get_entrada(entrada_id)
    db.session.delete(entrada)
    _commit(f"Erro ao remover entrada {entrada_id}")
    logger.info(f"[Estoque] Entrada removida: id={entrada_id}")


# ---------------------------------------------------------------------
# Validação para operações de produção
# ---------------------------------------------------------------------
def validar_operacao(material_id: int, quantidade: Any) -> dict:
    """
    Verifica se há stock para consumir ``quantidade`` do material.
    Devolve {"valid": bool, "message": str|None, "disponivel": float|None}.
    """
    tem_entradas = StockEntry.query.filter_by(material_id=material_id).first()
    if not tem_entradas:
        return {
            "valid": False,
            "message": "Material não encontrado no stock",
            "disponivel": None,
        }

    # recebido - consumido; a correção manual só afeta a apresentação
    row = stock_atual_material(material_id)
    disponivel = (row.get("stock_atual") or 0) if row else 0
    pedido = to_float(quantidade) or 0

    if disponivel <= 0:
        return {"valid": False, "message": "Material em falta no stock", "disponivel": disponivel}
    if disponivel < pedido:
        return {
            "valid": False,
            "message": f"Stock insuficiente. Disponível: {disponivel}",
            "disponivel": disponivel,
        }

    restante = disponivel - pedido
    mensagem = None
    if restante <= 0:
        mensagem = "Atenção: Operação esgotará o stock deste material"
    elif restante <= LIMIAR_AVISO_OPERACAO:
        mensagem = f"Atenção: Restará apenas {restante} após a operação"
    return {"valid": True, "message": mensagem, "disponivel": disponivel}
