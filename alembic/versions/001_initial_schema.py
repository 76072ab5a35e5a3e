"""Initial schema: tenants, offices, rooms, occupancy events

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Tenants table
    op.create_table(
        'tenants',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(100), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('settings', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
    )
    op.create_index('ix_tenants_slug', 'tenants', ['slug'])
    op.create_index('ix_tenants_active', 'tenants', ['active'])

    # Offices table
    op.create_table(
        'offices',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('tenant_id', sa.String(36), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column('timezone', sa.String(50), nullable=False, server_default='UTC'),
        sa.Column('total_capacity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('metadata', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
    )
    op.create_index('ix_office_tenant_active', 'offices', ['tenant_id', 'active'])
    op.create_index('ix_offices_location', 'offices', ['location'])

    # Rooms table
    op.create_table(
        'rooms',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('tenant_id', sa.String(36), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('office_id', sa.String(36), sa.ForeignKey('offices.id', ondelete='CASCADE'), nullable=False),
        sa.Column('room_id', sa.String(100), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(50), nullable=False, server_default='general'),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('floor', sa.String(10), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=False, server_default='{}'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'room_id', name='uq_rooms_tenant_room'),
    )
    op.create_index('ix_room_tenant_office_active', 'rooms', ['tenant_id', 'office_id', 'active'])
    op.create_index('ix_room_tenant_type', 'rooms', ['tenant_id', 'type'])

    # Occupancy events table
    op.create_table(
        'occupancy_events',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('tenant_id', sa.String(36), sa.ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('room_id', sa.String(100), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('people_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('metadata', sa.JSON(), nullable=False, server_default='{}'),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['tenant_id', 'room_id'],
            ['rooms.tenant_id', 'rooms.room_id'],
            name='fk_occupancy_events_tenant_room_rooms',
        ),
    )
    op.create_index('ix_occupancy_tenant_room_timestamp', 'occupancy_events', ['tenant_id', 'room_id', 'timestamp'])
    op.create_index('ix_occupancy_tenant_timestamp', 'occupancy_events', ['tenant_id', 'timestamp'])

    # Row-level security: only rows of the tenant bound via app.current_tenant are visible
    if op.get_bind().dialect.name == 'postgresql':
        op.execute("ALTER TABLE occupancy_events ENABLE ROW LEVEL SECURITY")
        op.execute("""
            CREATE POLICY tenant_isolation_occupancy_events ON occupancy_events
            FOR ALL TO PUBLIC
            USING (tenant_id = current_setting('app.current_tenant', true))
        """)


def downgrade() -> None:
    if op.get_bind().dialect.name == 'postgresql':
        op.execute('DROP POLICY IF EXISTS tenant_isolation_occupancy_events ON occupancy_events')
    op.drop_table('occupancy_events')
    op.drop_table('rooms')
    op.drop_table('offices')
    op.drop_table('tenants')
