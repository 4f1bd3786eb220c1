
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002_reservation_cancel_token'
down_revision = '001_initial'
branch_labels = None
depends_on = None

def upgrade():
    op.add_column('gestionale_reservation', sa.Column('cancel_token', sa.String(length=64), nullable=True))
    op.create_index('ix_gestionale_reservation_cancel_token', 'gestionale_reservation', ['cancel_token'])

def downgrade():
    op.drop_index('ix_gestionale_reservation_cancel_token', table_name='gestionale_reservation')
    op.drop_column('gestionale_reservation', 'cancel_token')
