# perfmon/schema.py
"""
Table definitions for the performance monitor database.

Queries elsewhere use raw SQL; these definitions exist so a fresh
database (or the SQLite test database) can be created with the same
columns and enumeration constraints.
"""

import logging

from sqlalchemy import (
    MetaData, Table, Column, String, Integer, Float, Boolean, Date,
    DateTime, Text, JSON, Enum, ForeignKey, UniqueConstraint, func,
)

from .constants import (
    ROLES, DIVISIONS, PLATFORMS, ACCOUNT_TYPES, ACCOUNT_STATUSES,
    KPI_PERIODS, TARGET_FOR_TYPES,
)

logger = logging.getLogger(__name__)

metadata = MetaData()


def _id_column():
    return Column('id', String(36), primary_key=True)


def _timestamps():
    return [
        Column('created_at', DateTime, nullable=False, server_default=func.current_timestamp()),
        Column('updated_at', DateTime, nullable=False, server_default=func.current_timestamp()),
    ]


def _enum(values, name):
    return Enum(*values, name=name, create_constraint=True)


users = Table(
    'users', metadata,
    _id_column(),
    Column('email', String(255), nullable=False, unique=True),
    Column('password_hash', String(64), nullable=False),
    Column('password_salt', String(64), nullable=False),
    Column('is_active', Boolean, nullable=False, server_default='1'),
    Column('last_login', DateTime),
    Column('created_at', DateTime, nullable=False, server_default=func.current_timestamp()),
)

users_meta = Table(
    'users_meta', metadata,
    Column('id', String(36), ForeignKey('users.id'), primary_key=True),
    Column('full_name', String(255), nullable=False),
    Column('username', String(100), nullable=False, unique=True),
    Column('role', _enum(ROLES, 'app_role'), nullable=False, server_default='karyawan'),
    Column('division', _enum(DIVISIONS, 'division_type')),
    Column('profile', JSON),
    Column('registered_at', DateTime, nullable=False, server_default=func.current_timestamp()),
    *_timestamps(),
)

teams = Table(
    'teams', metadata,
    _id_column(),
    Column('name', String(255), nullable=False),
    Column('description', Text),
    Column('division', _enum(DIVISIONS, 'division_type')),
    *_timestamps(),
)

team_members = Table(
    'team_members', metadata,
    _id_column(),
    Column('team_id', String(36), ForeignKey('teams.id'), nullable=False),
    Column('user_id', String(36), ForeignKey('users_meta.id'), nullable=False),
    Column('role_in_team', String(100)),
    Column('joined_at', DateTime, nullable=False, server_default=func.current_timestamp()),
    UniqueConstraint('team_id', 'user_id', name='uq_team_members_team_user'),
)

accounts = Table(
    'accounts', metadata,
    _id_column(),
    Column('platform', _enum(PLATFORMS, 'platform_type'), nullable=False),
    Column('username', String(255), nullable=False),
    Column('followers', Integer),
    Column('account_type', _enum(ACCOUNT_TYPES, 'account_type'), nullable=False),
    Column('status', _enum(ACCOUNT_STATUSES, 'account_status'), server_default='active'),
    Column('keranjang_kuning', Boolean, server_default='0'),
    Column('team_id', String(36), ForeignKey('teams.id')),
    Column('managed_by', String(36)),
    Column('notes', Text),
    *_timestamps(),
)

kpi_targets = Table(
    'kpi_targets', metadata,
    _id_column(),
    Column('target_for_type', _enum(TARGET_FOR_TYPES, 'target_for_type'), nullable=False),
    Column('target_for_id', String(36), nullable=False),
    Column('metric', String(100), nullable=False),
    Column('target_value', Float, nullable=False),
    Column('period', _enum(KPI_PERIODS, 'period_type'), nullable=False),
    Column('start_date', Date, nullable=False),
    Column('end_date', Date, nullable=False),
    Column('created_by', String(36), nullable=False),
    *_timestamps(),
)

performance_logs = Table(
    'performance_logs', metadata,
    _id_column(),
    Column('date', Date, nullable=False),
    Column('user_id', String(36)),
    Column('team_id', String(36), ForeignKey('teams.id')),
    Column('division', _enum(DIVISIONS, 'division_type')),
    Column('metric', String(100), nullable=False),
    Column('value', Float, nullable=False),
    Column('meta', JSON),
    Column('created_at', DateTime, nullable=False, server_default=func.current_timestamp()),
)

tutorials = Table(
    'tutorials', metadata,
    _id_column(),
    Column('title', String(255), nullable=False),
    Column('body', Text),
    Column('youtube_url', String(512)),
    Column('file_path', String(512)),
    Column('is_public', Boolean, server_default='0'),
    Column('created_by', String(36), nullable=False),
    *_timestamps(),
)

sops = Table(
    'sops', metadata,
    _id_column(),
    Column('title', String(255), nullable=False),
    Column('description', Text),
    Column('file_path', String(512)),
    Column('created_by', String(36), nullable=False),
    *_timestamps(),
)

tools = Table(
    'tools', metadata,
    _id_column(),
    Column('title', String(255), nullable=False),
    Column('description', Text),
    Column('url', String(512), nullable=False),
    Column('created_by', String(36), nullable=False),
    *_timestamps(),
)

products = Table(
    'products', metadata,
    _id_column(),
    Column('title', String(255), nullable=False),
    Column('description', Text),
    Column('spreadsheet_url', String(512), nullable=False),
    Column('created_by', String(36), nullable=False),
    *_timestamps(),
)


def create_all(engine=None):
    """Create every table that does not exist yet"""
    if engine is None:
        from .db import get_db_engine
        engine = get_db_engine()
    metadata.create_all(engine)
    logger.info(f"✅ Schema ready ({len(metadata.tables)} tables)")


def drop_all(engine=None):
    if engine is None:
        from .db import get_db_engine
        engine = get_db_engine()
    metadata.drop_all(engine)
