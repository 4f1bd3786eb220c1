
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'gestionale_disableddate',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False),
    )
    op.create_index('ix_gestionale_disableddate_date', 'gestionale_disableddate', ['date'], unique=True)

    op.create_table(
        'gestionale_disabledtimeslot',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('reason', sa.String(length=255), nullable=True),
    )
    op.create_index('ix_gestionale_disabledtimeslot_date', 'gestionale_disabledtimeslot', ['date'])

    op.create_table(
        'gestionale_reservation',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('restaurant_id', sa.String(length=50), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone_number', sa.String(length=32), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('guests', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('reservation_date', sa.Date(), nullable=False),
        sa.Column('reservation_time', sa.Time(), nullable=False),
        sa.Column('cookie_consent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('profiling_consent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('promotional_sms_consent', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('accept_all', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_gestionale_reservation_restaurant_id', 'gestionale_reservation', ['restaurant_id'])
    op.create_index('ix_gestionale_reservation_reservation_date', 'gestionale_reservation', ['reservation_date'])

    op.create_table(
        'gestionale_customer',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('phone_number', sa.String(length=32), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('numero_prenotazioni', sa.Integer(), nullable=False, server_default='1'),
    )
    op.create_index('ix_gestionale_customer_phone_number', 'gestionale_customer', ['phone_number'], unique=True)

def downgrade():
    op.drop_index('ix_gestionale_customer_phone_number', table_name='gestionale_customer')
    op.drop_table('gestionale_customer')
    op.drop_index('ix_gestionale_reservation_reservation_date', table_name='gestionale_reservation')
    op.drop_index('ix_gestionale_reservation_restaurant_id', table_name='gestionale_reservation')
    op.drop_table('gestionale_reservation')
    op.drop_index('ix_gestionale_disabledtimeslot_date', table_name='gestionale_disabledtimeslot')
    op.drop_table('gestionale_disabledtimeslot')
    op.drop_index('ix_gestionale_disableddate_date', table_name='gestionale_disableddate')
    op.drop_table('gestionale_disableddate')
