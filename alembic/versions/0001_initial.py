"""Initial schema

Revision ID: 0001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS pgcrypto;')

    # Create users table
    op.create_table('users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('full_name', sa.String(length=128), nullable=False),
        sa.Column('user_type', sa.String(length=16), nullable=False, server_default='both'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('verification_level', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    # Create wallets table
    op.create_table('wallets',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('balance_cents', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('total_earned_cents', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('total_spent_cents', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint('balance_cents >= 0', name='chk_balance_nonneg'),
        sa.CheckConstraint('total_earned_cents >= 0', name='chk_earned_nonneg'),
        sa.CheckConstraint('total_spent_cents >= 0', name='chk_spent_nonneg')
    )

    # Create gigs table
    op.create_table('gigs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('poster_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('location', sa.String(length=200), nullable=False),
        sa.Column('budget_min_cents', sa.BigInteger(), nullable=True),
        sa.Column('budget_max_cents', sa.BigInteger(), nullable=True),
        sa.Column('is_urgent', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='open'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['poster_id'], ['users.id']),
        sa.CheckConstraint(
            'budget_min_cents IS NULL OR budget_max_cents IS NULL OR budget_min_cents <= budget_max_cents',
            name='chk_gig_budget_range'
        )
    )

    # Create gig_applications table
    op.create_table('gig_applications',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('gig_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('worker_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('proposed_rate_cents', sa.BigInteger(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id']),
        sa.ForeignKeyConstraint(['worker_id'], ['users.id']),
        sa.UniqueConstraint('gig_id', 'worker_id', name='uq_application_gig_worker')
    )

    # Create credit_transactions (ledger) table
    op.create_table('credit_transactions',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('balance_after_cents', sa.BigInteger(), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='completed'),
        sa.Column('reference_entry_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('gig_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['reference_entry_id'], ['credit_transactions.id']),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id']),
        sa.ForeignKeyConstraint(['application_id'], ['gig_applications.id'])
    )

    # Create gig_payments table
    op.create_table('gig_payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('application_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('gig_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('payer_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('payee_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('gross_amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('service_fee_cents', sa.BigInteger(), nullable=False),
        sa.Column('net_amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('payment_status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('application_id', name='uq_payment_application'),
        sa.ForeignKeyConstraint(['application_id'], ['gig_applications.id']),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id']),
        sa.ForeignKeyConstraint(['payer_id'], ['users.id']),
        sa.ForeignKeyConstraint(['payee_id'], ['users.id']),
        sa.CheckConstraint('gross_amount_cents > 0', name='chk_payment_gross_pos'),
        sa.CheckConstraint(
            'gross_amount_cents = service_fee_cents + net_amount_cents',
            name='chk_payment_conservation'
        )
    )

    # Create credit_purchases table
    op.create_table('credit_purchases',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('credits_cents', sa.BigInteger(), nullable=False),
        sa.Column('payment_provider', sa.String(length=64), nullable=False, server_default='manual'),
        sa.Column('external_transaction_id', sa.String(length=128), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('failure_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('external_transaction_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'])
    )

    # Create withdrawal_requests table
    op.create_table('withdrawal_requests',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('withdrawal_fee_cents', sa.BigInteger(), nullable=False),
        sa.Column('net_amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('payout_reference', sa.String(length=256), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('processing_notes', sa.Text(), nullable=True),
        sa.Column('processed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.CheckConstraint(
            'amount_cents = withdrawal_fee_cents + net_amount_cents',
            name='chk_withdrawal_conservation'
        )
    )

    # Create sa_id_verification table
    op.create_table('sa_id_verification',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('id_number', sa.String(length=13), nullable=False),
        sa.Column('first_names', sa.String(length=128), nullable=False),
        sa.Column('surname', sa.String(length=128), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('gender', sa.String(length=16), nullable=False),
        sa.Column('citizenship', sa.String(length=32), nullable=False),
        sa.Column('verification_status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('verification_notes', sa.Text(), nullable=True),
        sa.Column('verified_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'])
    )

    # Create audit_logs table
    op.create_table('audit_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('admin_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('action', sa.String(length=128), nullable=False),
        sa.Column('details', postgresql.JSONB(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id')
    )

    # Create indexes
    op.create_index('idx_gigs_poster_id', 'gigs', ['poster_id'])
    op.create_index('idx_gigs_status_created', 'gigs', ['status', 'created_at'])
    op.create_index('idx_gig_applications_gig_id', 'gig_applications', ['gig_id'])
    op.create_index('idx_gig_applications_worker_id', 'gig_applications', ['worker_id'])
    op.create_index('idx_credit_transactions_user_created', 'credit_transactions', ['user_id', 'created_at'])
    op.create_index('idx_credit_transactions_application_id', 'credit_transactions', ['application_id'])
    op.create_index('idx_gig_payments_payer_id', 'gig_payments', ['payer_id'])
    op.create_index('idx_gig_payments_payee_id', 'gig_payments', ['payee_id'])
    op.create_index('idx_credit_purchases_user_id', 'credit_purchases', ['user_id'])
    op.create_index('idx_withdrawal_requests_user_id', 'withdrawal_requests', ['user_id'])
    op.create_index('idx_withdrawal_requests_status', 'withdrawal_requests', ['status'])
    op.create_index('idx_audit_logs_created_at', 'audit_logs', ['created_at'])


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('sa_id_verification')
    op.drop_table('withdrawal_requests')
    op.drop_table('credit_purchases')
    op.drop_table('gig_payments')
    op.drop_table('credit_transactions')
    op.drop_table('gig_applications')
    op.drop_table('gigs')
    op.drop_table('wallets')
    op.drop_table('users')
