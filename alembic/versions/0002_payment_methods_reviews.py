"""Add payment methods and reviews

Revision ID: 0002_payment_methods_reviews
Revises: 0001
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0002_payment_methods_reviews'
down_revision = '0001'
branch_labels = None
depends_on = None


def upgrade():
    """Add payment_methods and reviews, and link withdrawals to a payment method."""
    # Create payment_methods table
    op.create_table('payment_methods',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('provider', sa.String(length=64), nullable=True),
        sa.Column('bank_name', sa.String(length=128), nullable=True),
        sa.Column('account_holder_name', sa.String(length=128), nullable=True),
        sa.Column('account_number', sa.String(length=32), nullable=True),
        sa.Column('branch_code', sa.String(length=16), nullable=True),
        sa.Column('account_type', sa.String(length=16), nullable=True),
        sa.Column('card_last_four', sa.String(length=4), nullable=True),
        sa.Column('card_brand', sa.String(length=32), nullable=True),
        sa.Column('paypal_email', sa.String(length=255), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'])
    )

    # Create reviews table
    op.create_table('reviews',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('gig_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('reviewer_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('reviewee_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('review_text', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id']),
        sa.ForeignKeyConstraint(['reviewer_id'], ['users.id']),
        sa.ForeignKeyConstraint(['reviewee_id'], ['users.id']),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='chk_review_rating'),
        sa.UniqueConstraint('reviewer_id', 'gig_id', name='uq_review_reviewer_gig')
    )

    # Withdrawals pay out to a saved method; older rows keep only the reference
    op.add_column('withdrawal_requests',
        sa.Column('payment_method_id', postgresql.UUID(as_uuid=True), nullable=True))
    op.create_foreign_key(
        'fk_withdrawal_payment_method', 'withdrawal_requests', 'payment_methods',
        ['payment_method_id'], ['id']
    )

    op.create_index('idx_payment_methods_user_id', 'payment_methods', ['user_id'])
    op.create_index('idx_reviews_gig_id', 'reviews', ['gig_id'])
    op.create_index('idx_reviews_reviewee_id', 'reviews', ['reviewee_id'])


def downgrade():
    """Remove payment methods and reviews."""
    # Drop indexes first
    op.drop_index('idx_reviews_reviewee_id', table_name='reviews')
    op.drop_index('idx_reviews_gig_id', table_name='reviews')
    op.drop_index('idx_payment_methods_user_id', table_name='payment_methods')

    op.drop_constraint('fk_withdrawal_payment_method', 'withdrawal_requests', type_='foreignkey')
    op.drop_column('withdrawal_requests', 'payment_method_id')

    op.drop_table('reviews')
    op.drop_table('payment_methods')
