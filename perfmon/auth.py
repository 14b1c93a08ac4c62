# perfmon/auth.py
"""
Authentication Manager for the Performance Monitor

Version: 1.0.0
Features:
- SHA256 password hashing with per-user salt
- Email/password sign-in against the users table
- Sign-up creating identity + profile in one transaction
- Explicit SessionContext stored under a single session key
- Session timeout
"""

import hashlib
import logging
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, MutableMapping, Optional, Tuple

import streamlit as st
from sqlalchemy import text

from .config import config
from .constants import DEFAULT_ROLE, ROLE_MANAGER
from .db import get_db_engine, get_transaction, now_timestamp, from_json

logger = logging.getLogger(__name__)

SESSION_KEY = 'perfmon_session'


@dataclass
class UserProfile:
    """Row of users_meta"""
    id: str
    full_name: str
    username: str
    role: str
    division: Optional[str] = None
    profile: Dict[str, Any] = field(default_factory=dict)
    registered_at: Optional[Any] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'UserProfile':
        return cls(
            id=row['id'],
            full_name=row['full_name'],
            username=row['username'],
            role=row['role'],
            division=row.get('division'),
            profile=from_json(row.get('profile')),
            registered_at=row.get('registered_at'),
        )


@dataclass
class SessionContext:
    """Signed-in user: identity plus the (possibly missing) profile"""
    user_id: str
    email: str
    login_time: datetime
    profile: Optional[UserProfile] = None

    @property
    def profile_loaded(self) -> bool:
        return self.profile is not None

    @property
    def role(self) -> Optional[str]:
        return self.profile.role if self.profile else None

    @property
    def division(self) -> Optional[str]:
        return self.profile.division if self.profile else None

    @property
    def is_manager(self) -> bool:
        # A missing profile degrades to non-manager
        return self.role == ROLE_MANAGER

    @property
    def display_name(self) -> str:
        if self.profile and self.profile.full_name:
            return self.profile.full_name
        return self.email

    @property
    def initials(self) -> str:
        parts = self.display_name.replace('@', ' ').split()
        return ''.join(p[0] for p in parts[:2]).upper() or '?'

    def is_expired(self, timeout: timedelta, now: Optional[datetime] = None) -> bool:
        return ((now or datetime.now()) - self.login_time) > timeout


class AuthManager:
    """Authentication manager for Streamlit apps"""

    def __init__(self, state: Optional[MutableMapping] = None):
        self.session_timeout = timedelta(
            hours=config.get_app_setting("SESSION_TIMEOUT_HOURS", 8)
        )
        self._state = state if state is not None else st.session_state

    # ==================== PASSWORD HASHING ====================

    def hash_password(self, password: str, salt: str = None) -> Tuple[str, str]:
        """
        Hash password with SHA256 + salt

        Returns:
            Tuple of (hash, salt)
        """
        if not salt:
            salt = secrets.token_hex(32)

        pwd_hash = hashlib.sha256((password + salt).encode()).hexdigest()
        return pwd_hash, salt

    def verify_password(self, password: str, stored_hash: str, salt: str) -> bool:
        pwd_hash, _ = self.hash_password(password, salt)
        return secrets.compare_digest(pwd_hash, stored_hash)

    # ==================== AUTHENTICATION ====================

    def authenticate(self, email: str, password: str) -> Tuple[bool, Dict]:
        """
        Authenticate user against database

        Returns:
            Tuple of (success, user_info or {"error": message})
        """
        email = (email or '').strip().lower()
        try:
            engine = get_db_engine()
            query = text("""
                SELECT id, email, password_hash, password_salt, is_active
                FROM users
                WHERE email = :email
            """)

            with engine.connect() as conn:
                result = conn.execute(query, {'email': email}).fetchone()

            if not result:
                logger.warning(f"Login attempt for non-existent user: {email}")
                return False, {"error": "Invalid email or password"}

            user = dict(result._mapping)

            if not user['is_active']:
                logger.warning(f"Login attempt for inactive user: {email}")
                return False, {"error": "Account is inactive. Please contact your manager."}

            if not self.verify_password(password, user['password_hash'], user['password_salt']):
                logger.warning(f"Invalid password for user: {email}")
                return False, {"error": "Invalid email or password"}

            self._update_last_login(user['id'])
            logger.info(f"User {email} authenticated successfully")

            return True, {
                'id': user['id'],
                'email': user['email'],
                'login_time': datetime.now(),
            }

        except Exception as e:
            logger.error(f"Authentication error: {e}")
            return False, {"error": "Authentication failed. Please try again."}

    def _update_last_login(self, user_id: str):
        try:
            engine = get_db_engine()
            with engine.connect() as conn:
                conn.execute(
                    text("UPDATE users SET last_login = :now WHERE id = :user_id"),
                    {'now': now_timestamp(), 'user_id': user_id}
                )
                conn.commit()
        except Exception as e:
            logger.warning(f"Could not update last_login: {e}")

    def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        username: str,
        role: str = DEFAULT_ROLE,
        division: Optional[str] = None,
    ) -> Tuple[bool, str]:
        """Create the identity and its profile row together"""
        email = email.strip().lower()
        try:
            engine = get_db_engine()
            with engine.connect() as conn:
                if conn.execute(
                    text("SELECT 1 FROM users WHERE email = :email"), {'email': email}
                ).fetchone():
                    return False, "Email already registered"
                if conn.execute(
                    text("SELECT 1 FROM users_meta WHERE username = :username"),
                    {'username': username}
                ).fetchone():
                    return False, "Username already taken"

            user_id = str(uuid.uuid4())
            pwd_hash, salt = self.hash_password(password)
            now = now_timestamp()

            with get_transaction() as conn:
                conn.execute(text("""
                    INSERT INTO users (id, email, password_hash, password_salt, is_active, created_at)
                    VALUES (:id, :email, :hash, :salt, :active, :now)
                """), {
                    'id': user_id, 'email': email, 'hash': pwd_hash,
                    'salt': salt, 'active': True, 'now': now,
                })
                conn.execute(text("""
                    INSERT INTO users_meta
                        (id, full_name, username, role, division, profile,
                         registered_at, created_at, updated_at)
                    VALUES
                        (:id, :full_name, :username, :role, :division, NULL,
                         :now, :now, :now)
                """), {
                    'id': user_id, 'full_name': full_name, 'username': username,
                    'role': role, 'division': division, 'now': now,
                })

            logger.info(f"Registered user {email} as {role}")
            return True, f"Account for {full_name} created"

        except Exception as e:
            logger.error(f"Sign-up error for {email}: {e}")
            return False, str(e)

    def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        """Profile lookup; None on a missing row or a failed query"""
        try:
            engine = get_db_engine()
            with engine.connect() as conn:
                row = conn.execute(text("""
                    SELECT id, full_name, username, role, division, profile, registered_at
                    FROM users_meta
                    WHERE id = :id
                """), {'id': user_id}).fetchone()
            return UserProfile.from_row(dict(row._mapping)) if row else None
        except Exception as e:
            logger.error(f"Error loading profile for {user_id}: {e}")
            return None

    # ==================== SESSION MANAGEMENT ====================

    def login(self, user_info: Dict) -> SessionContext:
        """Create the session context after successful authentication"""
        ctx = SessionContext(
            user_id=user_info['id'],
            email=user_info['email'],
            login_time=user_info.get('login_time') or datetime.now(),
            profile=self.get_user_profile(user_info['id']),
        )
        self._state[SESSION_KEY] = ctx
        logger.info(f"User {ctx.email} logged in (role: {ctx.role or 'unknown'})")
        return ctx

    def logout(self):
        """Tear down the session context and cached data"""
        ctx = self._state.get(SESSION_KEY)
        if SESSION_KEY in self._state:
            del self._state[SESSION_KEY]

        st.cache_data.clear()
        logger.info(f"User {ctx.email if ctx else 'Unknown'} logged out")

    def get_session(self) -> Optional[SessionContext]:
        """Current session context, None when signed out or expired"""
        ctx = self._state.get(SESSION_KEY)
        if ctx is None:
            return None

        if ctx.is_expired(self.session_timeout):
            logger.info(f"Session expired for user: {ctx.email}")
            self.logout()
            return None

        return ctx

    def check_session(self) -> bool:
        return self.get_session() is not None

    def refresh_profile(self) -> Optional[SessionContext]:
        ctx = self.get_session()
        if ctx is not None:
            ctx.profile = self.get_user_profile(ctx.user_id)
        return ctx


__all__ = [
    'AuthManager',
    'SessionContext',
    'UserProfile',
    'SESSION_KEY',
]
