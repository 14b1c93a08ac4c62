# app.py
"""
Affiliate Performance Monitor - Main Entry Point

Version: 1.0.0
"""

import streamlit as st
from perfmon.auth import AuthManager
from perfmon.config import config
from perfmon.db import check_db_connection
from perfmon.forms import SignUpForm, submit_form
from perfmon.layout import render_sidebar, show_form_result
import logging

# Configure logging
logging.basicConfig(
    level=config.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ==================== PAGE CONFIGURATION ====================

APP_NAME = "Performance Monitor"
APP_ICON = "📊"
APP_VERSION = "1.0.0"

st.set_page_config(
    page_title=APP_NAME,
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded"
)

# ==================== CUSTOM CSS ====================

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        margin-bottom: 0.5rem;
        color: #14b8a6;
    }

    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }

    .welcome-box {
        background: linear-gradient(135deg, #14b8a6 0%, #f59e0b 100%);
        color: white;
        padding: 2rem;
        border-radius: 0.75rem;
        margin-bottom: 2rem;
    }

    .welcome-title {
        font-size: 1.75rem;
        font-weight: 600;
        margin-bottom: 0.5rem;
    }
</style>
""", unsafe_allow_html=True)

# ==================== INITIALIZATION ====================

auth = AuthManager()

# ==================== HELPER FUNCTIONS ====================

def show_sign_in():
    with st.form("login_form", clear_on_submit=False):
        st.markdown("#### 🔐 Sign In")

        email = st.text_input("Email", placeholder="you@company.com", key="login_email")
        password = st.text_input("Password", type="password", key="login_password")

        submit = st.form_submit_button("🔑 Sign In", type="primary", use_container_width=True)

        if submit:
            if not email or not password:
                st.warning("Please enter both email and password")
            else:
                with st.spinner("Authenticating..."):
                    success, result = auth.authenticate(email, password)

                if success:
                    auth.login(result)
                    st.success("✅ Signed in!")
                    st.rerun()
                else:
                    st.error(result.get("error", "Authentication failed"))


def show_sign_up():
    with st.form("signup_form", clear_on_submit=False):
        st.markdown("#### ✨ Create Account")

        full_name = st.text_input("Full Name")
        username = st.text_input("Username")
        email = st.text_input("Email", key="signup_email")
        password = st.text_input("Password", type="password", key="signup_password",
                                 help="At least 6 characters")

        submit = st.form_submit_button("Create Account", type="primary", use_container_width=True)

    if submit:
        result = submit_form(
            SignUpForm,
            {'full_name': full_name, 'username': username, 'email': email, 'password': password},
            lambda data: auth.sign_up(data.email, data.password, data.full_name, data.username),
        )
        if show_form_result(result):
            st.info("You can now sign in with your new account.")


def show_login_page():
    """Display the sign-in page"""
    st.markdown(f'<p class="main-header">{APP_ICON} {APP_NAME}</p>', unsafe_allow_html=True)
    st.markdown('<p class="sub-header">Affiliate team performance monitoring</p>', unsafe_allow_html=True)

    db_ok, db_error = check_db_connection()
    if not db_ok:
        st.error(f"⚠️ {db_error}")
        st.info("Please check your network connection or database settings.")
        return

    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        if config.is_feature_enabled("SIGNUP"):
            tab_in, tab_up = st.tabs(["Sign In", "Sign Up"])
            with tab_in:
                show_sign_in()
            with tab_up:
                show_sign_up()
        else:
            show_sign_in()

        with st.expander("ℹ️ Need Help?"):
            st.info(f"""
            - New accounts start as Karyawan; ask your manager to assign a division
            - Session expires after {config.get_app_setting('SESSION_TIMEOUT_HOURS', 8)} hours
            """)


def show_main_app(session):
    """Welcome page after sign-in"""
    render_sidebar(auth, session)

    st.markdown(f"""
    <div class="welcome-box">
        <div class="welcome-title">Welcome back, {session.display_name}! 👋</div>
        <div>Select a page from the sidebar menu to get started.</div>
    </div>
    """, unsafe_allow_html=True)

    if not session.profile_loaded:
        st.warning("⚠️ Your profile could not be loaded. Manager features are unavailable.")

    st.markdown("### 🎯 Getting Started")
    if session.is_manager:
        st.markdown("""
        As a manager, you can:
        - Add and manage employees
        - Create and assign KPI targets
        - Monitor team performance and review daily reports
        - Manage affiliate accounts
        """)
    else:
        st.markdown("""
        You can:
        - Submit your daily report
        - View your performance metrics
        - Track your KPI targets
        - Access tutorials, SOPs, tools and products
        """)

    st.markdown("---")
    st.caption(f"{APP_NAME} v{APP_VERSION}")


# ==================== MAIN ====================

def main():
    session = auth.get_session()
    if session is None:
        show_login_page()
    else:
        show_main_app(session)


if __name__ == "__main__":
    main()
