"""Schema inicial: stock, produção, designer flow e definições

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-19 09:12:44.512318

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1a9c2d7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # --- 1. Tabelas auxiliares ---
    op.create_table('fornecedores',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nome_forn', sa.String(length=150), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('clientes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('nome_cl', sa.String(length=150), nullable=False),
        sa.Column('morada', sa.String(length=255), nullable=True),
        sa.Column('codigo_pos', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('transportadora',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('feriados',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('holiday_date', sa.Date(), nullable=False),
        sa.Column('description', sa.String(length=150), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('holiday_date')
    )
    op.create_table('complexidade',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('grau', sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # --- 2. Utilizadores e permissões ---
    op.create_table('roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_table('role_permissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.Column('page_path', sa.String(length=120), nullable=False),
        sa.Column('can_access', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('role_id', 'page_path')
    )
    op.create_table('profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('first_name', sa.String(length=80), nullable=True),
        sa.Column('last_name', sa.String(length=80), nullable=True),
        sa.Column('email', sa.String(length=120), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('role_id', sa.Integer(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username')
    )

    # --- 3. Stock ---
    op.create_table('materiais',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tipo', sa.String(length=50), nullable=True),
        sa.Column('referencia', sa.String(length=80), nullable=True),
        sa.Column('ref_fornecedor', sa.String(length=80), nullable=True),
        sa.Column('material', sa.String(length=100), nullable=True),
        sa.Column('carateristica', sa.String(length=100), nullable=True),
        sa.Column('cor', sa.String(length=50), nullable=True),
        sa.Column('valor_m2', sa.Float(), nullable=True),
        sa.Column('valor_m2_custo', sa.Float(), nullable=True),
        sa.Column('valor_placa', sa.Float(), nullable=True),
        sa.Column('qt_palete', sa.Integer(), nullable=True),
        sa.Column('fornecedor_id', sa.Integer(), nullable=True),
        sa.Column('stock_minimo', sa.Float(), nullable=True),
        sa.Column('stock_critico', sa.Float(), nullable=True),
        sa.Column('stock_correct', sa.Float(), nullable=True),
        sa.Column('stock_correct_updated_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['fornecedor_id'], ['fornecedores.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('stocks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('data', sa.Date(), nullable=True),
        sa.Column('fornecedor_id', sa.Integer(), nullable=True),
        sa.Column('material_id', sa.Integer(), nullable=False),
        sa.Column('no_guia_forn', sa.String(length=80), nullable=True),
        sa.Column('quantidade', sa.Float(), nullable=False),
        sa.Column('quantidade_disponivel', sa.Float(), nullable=True),
        sa.Column('vl_m2', sa.Float(), nullable=True),
        sa.Column('preco_unitario', sa.Float(), nullable=True),
        sa.Column('valor_total', sa.Float(), nullable=True),
        sa.Column('notas', sa.Text(), nullable=True),
        sa.Column('n_palet', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['fornecedor_id'], ['fornecedores.id']),
        sa.ForeignKeyConstraint(['material_id'], ['materiais.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('paletes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('no_palete', sa.String(length=30), nullable=False),
        sa.Column('fornecedor_id', sa.Integer(), nullable=False),
        sa.Column('no_guia_forn', sa.String(length=80), nullable=True),
        sa.Column('ref_cartao', sa.String(length=80), nullable=True),
        sa.Column('qt_palete', sa.Integer(), nullable=False),
        sa.Column('data', sa.Date(), nullable=True),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['author_id'], ['profiles.id']),
        sa.ForeignKeyConstraint(['fornecedor_id'], ['fornecedores.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('no_palete')
    )

    # --- 4. Produção ---
    op.create_table('folhas_obras',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('numero_fo', sa.String(length=30), nullable=True),
        sa.Column('numero_orc', sa.Integer(), nullable=True),
        sa.Column('nome_campanha', sa.String(length=255), nullable=True),
        sa.Column('cliente', sa.String(length=150), nullable=True),
        sa.Column('id_cliente', sa.Integer(), nullable=True),
        sa.Column('data_in', sa.DateTime(), nullable=True),
        sa.Column('data_saida', sa.Date(), nullable=True),
        sa.Column('data_concluido', sa.DateTime(), nullable=True),
        sa.Column('prioridade', sa.Boolean(), nullable=False),
        sa.Column('notas', sa.Text(), nullable=True),
        sa.Column('concluido', sa.Boolean(), nullable=False),
        sa.Column('saiu', sa.Boolean(), nullable=False),
        sa.Column('fatura', sa.Boolean(), nullable=True),
        sa.Column('profile_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['id_cliente'], ['clientes.id']),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('items_base',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('folha_obra_id', sa.Integer(), nullable=False),
        sa.Column('descricao', sa.String(length=255), nullable=True),
        sa.Column('codigo', sa.String(length=80), nullable=True),
        sa.Column('quantidade', sa.Integer(), nullable=True),
        sa.Column('brindes', sa.Boolean(), nullable=False),
        sa.Column('concluido', sa.Boolean(), nullable=False),
        sa.Column('paginacao', sa.Boolean(), nullable=False),
        sa.Column('complexidade_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['complexidade_id'], ['complexidade.id']),
        sa.ForeignKeyConstraint(['folha_obra_id'], ['folhas_obras.id']),
        sa.PrimaryKeyConstraint('id')
    )

    flags = ['em_curso', 'duvidas'] + \
        [f'maquete_enviada{i}' for i in range(1, 7)] + \
        [f'aprovacao_recebida{i}' for i in range(1, 7)] + ['paginacao']
    op.create_table('designer_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('item_id', sa.Integer(), nullable=False),
        *[sa.Column(f, sa.Boolean(), nullable=False) for f in flags],
        sa.Column('data_in', sa.DateTime(), nullable=True),
        *[sa.Column(f'data_{f}', sa.DateTime(), nullable=True) for f in flags],
        sa.Column('data_saida', sa.DateTime(), nullable=True),
        sa.Column('path_trabalho', sa.String(length=255), nullable=True),
        sa.Column('notas', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['item_id'], ['items_base.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('logistica_entregas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('item_id', sa.Integer(), nullable=False),
        sa.Column('descricao', sa.String(length=255), nullable=True),
        sa.Column('guia', sa.Integer(), nullable=True),
        sa.Column('quantidade', sa.Integer(), nullable=True),
        sa.Column('notas', sa.Text(), nullable=True),
        sa.Column('local_recolha', sa.String(length=255), nullable=True),
        sa.Column('local_entrega', sa.String(length=255), nullable=True),
        sa.Column('id_local_recolha', sa.Integer(), nullable=True),
        sa.Column('id_local_entrega', sa.Integer(), nullable=True),
        sa.Column('transportadora', sa.String(length=150), nullable=True),
        sa.Column('contacto', sa.String(length=120), nullable=True),
        sa.Column('telefone', sa.String(length=40), nullable=True),
        sa.Column('contacto_entrega', sa.String(length=120), nullable=True),
        sa.Column('telefone_entrega', sa.String(length=40), nullable=True),
        sa.Column('data', sa.Date(), nullable=True),
        sa.Column('data_saida', sa.Date(), nullable=True),
        sa.Column('data_concluido', sa.Date(), nullable=True),
        sa.Column('concluido', sa.Boolean(), nullable=False),
        sa.Column('saiu', sa.Boolean(), nullable=False),
        sa.Column('is_entrega', sa.Boolean(), nullable=False),
        sa.Column('brindes', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['id_local_entrega'], ['clientes.id']),
        sa.ForeignKeyConstraint(['id_local_recolha'], ['clientes.id']),
        sa.ForeignKeyConstraint(['item_id'], ['items_base.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('producao_operacoes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('folha_obra_id', sa.Integer(), nullable=True),
        sa.Column('item_id', sa.Integer(), nullable=True),
        sa.Column('material_id', sa.Integer(), nullable=True),
        sa.Column('operador_id', sa.Integer(), nullable=True),
        sa.Column('tipo_op', sa.String(length=30), nullable=True),
        sa.Column('num_placas_print', sa.Float(), nullable=True),
        sa.Column('num_placas_corte', sa.Float(), nullable=True),
        sa.Column('data_operacao', sa.Date(), nullable=True),
        sa.Column('concluido', sa.Boolean(), nullable=False),
        sa.Column('notas', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['folha_obra_id'], ['folhas_obras.id']),
        sa.ForeignKeyConstraint(['item_id'], ['items_base.id']),
        sa.ForeignKeyConstraint(['material_id'], ['materiais.id']),
        sa.ForeignKeyConstraint(['operador_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade():
    # Ordem inversa das dependências
    op.drop_table('producao_operacoes')
    op.drop_table('logistica_entregas')
    op.drop_table('designer_items')
    op.drop_table('items_base')
    op.drop_table('folhas_obras')
    op.drop_table('paletes')
    op.drop_table('stocks')
    op.drop_table('materiais')
    op.drop_table('profiles')
    op.drop_table('role_permissions')
    op.drop_table('roles')
    op.drop_table('complexidade')
    op.drop_table('feriados')
    op.drop_table('transportadora')
    op.drop_table('clientes')
    op.drop_table('fornecedores')
