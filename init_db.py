# init_db.py
"""
Create the database tables and, when MANAGER_EMAIL / MANAGER_PASSWORD
are set, a first manager account.

Usage:
    python init_db.py
"""

import os
import logging

from perfmon.auth import AuthManager
from perfmon.db import execute_query
from perfmon.schema import create_all

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def init_db():
    create_all()

    email = os.getenv("MANAGER_EMAIL")
    password = os.getenv("MANAGER_PASSWORD")
    if not email or not password:
        logger.info("MANAGER_EMAIL / MANAGER_PASSWORD not set, skipping manager seed")
        return

    if execute_query("SELECT id FROM users WHERE email = :email", {'email': email.lower()}):
        logger.info(f"Manager {email} already exists")
        return

    success, message = AuthManager(state={}).sign_up(
        email=email,
        password=password,
        full_name=os.getenv("MANAGER_NAME", "Manager"),
        username=os.getenv("MANAGER_USERNAME", "manager"),
        role='manager',
        division='manager',
    )
    if success:
        logger.info(f"Default manager created: {email}")
    else:
        logger.error(f"Could not create manager: {message}")


if __name__ == "__main__":
    init_db()
