"""scoring engine schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-18 10:12:41.203118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'departments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
    )
    op.create_index('ix_departments_id', 'departments', ['id'])

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_code', sa.String(length=20), nullable=False, unique=True),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('position', sa.String(length=100), nullable=True),
        sa.Column('hire_date', sa.Date(), nullable=True),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index('ix_employees_id', 'employees', ['id'])
    op.create_index('ix_employees_department_id', 'employees', ['department_id'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=100), nullable=False, unique=True),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='employee'),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'criteria',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=False, server_default='Other'),
        sa.Column('weight', sa.Float(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index('ix_criteria_id', 'criteria', ['id'])

    op.create_table(
        'evaluation_periods',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False, server_default='quarterly'),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_evaluation_periods_id', 'evaluation_periods', ['id'])

    op.create_table(
        'evaluations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('evaluator_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('period_id', sa.Integer(), sa.ForeignKey('evaluation_periods.id'), nullable=False),
        sa.Column('criterion_id', sa.Integer(), sa.ForeignKey('criteria.id'), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('employee_id', 'evaluator_id', 'period_id', 'criterion_id',
                            name='uq_evaluation_evaluator_criterion'),
        sa.CheckConstraint('score >= 1 AND score <= 5', name='ck_evaluation_score_range'),
    )
    op.create_index('ix_evaluations_id', 'evaluations', ['id'])

    op.create_table(
        'employee_scores',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('period_id', sa.Integer(), sa.ForeignKey('evaluation_periods.id'), nullable=False),
        sa.Column('total_score', sa.Float(), nullable=False),
        sa.Column('weighted_score', sa.Float(), nullable=False),
        sa.Column('rank_overall', sa.Integer(), nullable=True),
        sa.Column('rank_in_department', sa.Integer(), nullable=True),
        sa.Column('is_best_overall', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_best_in_department', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('calculated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('employee_id', 'period_id', name='uq_employee_period'),
    )
    op.create_index('ix_employee_scores_id', 'employee_scores', ['id'])
    op.create_index('ix_employee_scores_period_id', 'employee_scores', ['period_id'])


def downgrade() -> None:
    op.drop_table('employee_scores')
    op.drop_table('evaluations')
    op.drop_table('evaluation_periods')
    op.drop_table('criteria')
    op.drop_table('users')
    op.drop_table('employees')
    op.drop_table('departments')
