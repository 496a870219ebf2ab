"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

user_role = postgresql.ENUM('admin', 'student-assistant', 'student', name='user_role', create_type=False)
department = postgresql.ENUM('college', 'senior-high', name='department', create_type=False)
thesis_status = postgresql.ENUM('pending', 'approved', 'rejected', name='thesis_status', create_type=False)


def upgrade() -> None:
    conn = op.get_bind()
    existing_tables = sa.inspect(conn).get_table_names()

    # department is shared by two tables, so enum types are created up front
    for enum_type in (user_role, department, thesis_status):
        enum_type.create(conn, checkfirst=True)

    if 'users' not in existing_tables:
        op.create_table('users',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('username', sa.String(length=255), nullable=False),
            sa.Column('first_name', sa.String(length=100), nullable=False),
            sa.Column('last_name', sa.String(length=100), nullable=False),
            sa.Column('hashed_password', sa.String(length=255), nullable=False),
            sa.Column('role', user_role, nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
            sa.Column('last_login', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_users_username', 'users', ['username'], unique=True)
        op.create_index('ix_users_role', 'users', ['role'], unique=False)

    if 'theses' not in existing_tables:
        op.create_table('theses',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('title', sa.String(length=500), nullable=False),
            sa.Column('abstract', sa.Text(), nullable=True),
            sa.Column('authors', sa.Text(), nullable=False),
            sa.Column('advisors', sa.Text(), nullable=False),
            sa.Column('department', department, nullable=False),
            sa.Column('program', sa.String(length=200), nullable=True),
            sa.Column('year', sa.Integer(), nullable=True),
            sa.Column('pdf_url', sa.String(length=1000), nullable=True),
            sa.Column('shelf_location', sa.String(length=255), nullable=True),
            sa.Column('status', thesis_status, nullable=False),
            sa.Column('submitted_by', sa.String(length=36), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
            sa.ForeignKeyConstraint(['submitted_by'], ['users.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id')
        )
        for column in ('title', 'department', 'program', 'year', 'status', 'submitted_by'):
            op.create_index(f'ix_theses_{column}', 'theses', [column], unique=False)

    if 'programs' not in existing_tables:
        op.create_table('programs',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(length=200), nullable=False),
            sa.Column('department', department, nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('department', 'name', name='uq_programs_department_name')
        )
        op.create_index('ix_programs_department', 'programs', ['department'], unique=False)

    if 'system_settings' not in existing_tables:
        op.create_table('system_settings',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('school_name', sa.String(length=200), nullable=False),
            sa.Column('school_logo', sa.String(length=1000), nullable=False),
            sa.Column('header_background', sa.String(length=1000), nullable=True),
            sa.Column('about_content', sa.Text(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )


def downgrade() -> None:
    op.drop_table('system_settings')
    op.drop_index('ix_programs_department', table_name='programs')
    op.drop_table('programs')
    for column in ('title', 'department', 'program', 'year', 'status', 'submitted_by'):
        op.drop_index(f'ix_theses_{column}', table_name='theses')
    op.drop_table('theses')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')

    conn = op.get_bind()
    for enum_type in (thesis_status, department, user_role):
        enum_type.drop(conn, checkfirst=True)
