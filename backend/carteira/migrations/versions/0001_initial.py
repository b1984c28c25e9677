"""
Initial schema for fund valuations and performance histories.

Revision ID: 0001_initial
Revises:
Create Date: 2025-12-01 00:00:00.000000
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    ]


def upgrade() -> None:
    op.create_table(
        "portfolio",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "investment_fund",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("cnpj", sa.String(length=18), nullable=False, unique=True),
        sa.Column("fund_name", sa.String(length=255), nullable=False),
        sa.Column("administrator_name", sa.String(length=255), nullable=True),
    )
    op.create_index("ix_investment_fund_name", "investment_fund", ["fund_name"])

    op.create_table(
        "fund_investment",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("portfolio_id", sa.Integer(), sa.ForeignKey("portfolio.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "investment_fund_id",
            sa.Integer(),
            sa.ForeignKey("investment_fund.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("total_invested_value", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("total_quotas_held", sa.Numeric(24, 8), nullable=False, server_default="0"),
        sa.Column("percentage_allocation", sa.Numeric(7, 4), nullable=True),
        sa.UniqueConstraint("portfolio_id", "investment_fund_id", name="uq_fund_investment_portfolio_fund"),
    )

    op.create_table(
        "fund_valuation",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("fund_cnpj", sa.String(length=18), nullable=False),
        sa.Column("quota_value", sa.Numeric(15, 6), nullable=False),
        sa.Column("source", sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("date", "fund_cnpj", name="uq_fund_valuation_date_cnpj"),
    )
    op.create_index("ix_fund_valuation_cnpj_date", "fund_valuation", ["fund_cnpj", "date"])

    op.create_table(
        "performance_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("portfolio_id", sa.Integer(), sa.ForeignKey("portfolio.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "fund_investment_id",
            sa.Integer(),
            sa.ForeignKey("fund_investment.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("period", sa.Date(), nullable=False),
        sa.Column("monthly_return", sa.Numeric(18, 8), nullable=False),
        sa.Column("yearly_return", sa.Numeric(18, 8), nullable=True),
        sa.Column("last_12_months_return", sa.Numeric(18, 8), nullable=True),
        sa.Column("earnings", sa.Numeric(18, 2), nullable=False),
        sa.Column("initial_balance", sa.Numeric(18, 2), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "portfolio_id",
            "fund_investment_id",
            "period",
            name="uq_performance_history_portfolio_holding_period",
        ),
    )
    op.create_index(
        "ix_performance_history_portfolio_period",
        "performance_history",
        ["portfolio_id", "period"],
    )


def downgrade() -> None:
    op.drop_index("ix_performance_history_portfolio_period", table_name="performance_history")
    op.drop_table("performance_history")
    op.drop_index("ix_fund_valuation_cnpj_date", table_name="fund_valuation")
    op.drop_table("fund_valuation")
    op.drop_table("fund_investment")
    op.drop_index("ix_investment_fund_name", table_name="investment_fund")
    op.drop_table("investment_fund")
    op.drop_table("portfolio")
