import os
import sys

import pandas as pd

from app import create_app, db
from app.models_sqla import Fornecedor, Material

# Caminho do ficheiro Excel (pode ser passado como argumento)
excel_path = sys.argv[1] if len(sys.argv) > 1 else os.environ.get(
    "MATERIAIS_XLSX", "materiais.xlsx"
)

# Cabeçalho está na primeira linha da folha
df = pd.read_excel(excel_path)

# Renomeia colunas relevantes
df = df.rename(columns={
    df.columns[0]: "referencia",
    df.columns[1]: "ref_fornecedor",
    df.columns[2]: "tipo",
    df.columns[3]: "material",
    df.columns[4]: "carateristica",
    df.columns[5]: "cor",
    df.columns[6]: "fornecedor",
    df.columns[7]: "valor_m2_custo",
    df.columns[8]: "valor_placa",
    df.columns[9]: "qt_palete",
})


def _texto(valor):
    return None if pd.isna(valor) else str(valor).strip()


def _numero(valor):
    return None if pd.isna(valor) else float(valor)


app = create_app()

with app.app_context():
    fornecedores = {f.nome_forn.upper(): f for f in Fornecedor.query.all()}
    novos = 0

    for _, row in df.iterrows():
        if pd.isna(row["referencia"]) or pd.isna(row["material"]):
            continue  # ignora linhas incompletas

        # Evita duplicidade
        existente = Material.query.filter_by(referencia=_texto(row["referencia"])).first()
        if existente:
            print(f"Já existe: {row['referencia']}")
            continue

        fornecedor = None
        nome_forn = _texto(row["fornecedor"])
        if nome_forn:
            fornecedor = fornecedores.get(nome_forn.upper())
            if fornecedor is None:
                fornecedor = Fornecedor(nome_forn=nome_forn.upper())
                db.session.add(fornecedor)
                db.session.flush()  # obtém o ID antes de ligar ao material
                fornecedores[nome_forn.upper()] = fornecedor

        novo_material = Material(
            referencia=_texto(row["referencia"]),
            ref_fornecedor=_texto(row["ref_fornecedor"]),
            tipo=_texto(row["tipo"]),
            material=_texto(row["material"]),
            carateristica=_texto(row["carateristica"]),
            cor=_texto(row["cor"]),
            valor_m2_custo=_numero(row["valor_m2_custo"]),
            valor_placa=_numero(row["valor_placa"]),
            qt_palete=int(row["qt_palete"]) if not pd.isna(row["qt_palete"]) else None,
            fornecedor_id=fornecedor.id if fornecedor else None,
        )
        db.session.add(novo_material)
        novos += 1

    db.session.commit()
    print(f"Importação concluída com sucesso ({novos} materiais).")
