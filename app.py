# app.py
"""
Sales Admin Console - Main Entry Point

Version: 1.0.0
"""

import streamlit as st
from sales_admin.auth import AuthManager
from sales_admin.config import config
from sales_admin.gateway import check_gateway_connection
from sales_admin.roles import role_badge
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ==================== PAGE CONFIGURATION ====================

APP_NAME = "Sales Admin"
APP_ICON = "🛡️"
APP_VERSION = "1.0.0"

st.set_page_config(
    page_title=f"{APP_NAME} Console",
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
        color: #1f77b4;
    }

    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }

    .welcome-box {
        background: linear-gradient(135deg, #1f77b4 0%, #2196f3 100%);
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

    .info-card {
        background: #f8f9fa;
        padding: 1.5rem;
        border-radius: 0.5rem;
        border-left: 4px solid #1f77b4;
        margin-bottom: 1rem;
    }

    .footer {
        text-align: center;
        color: #888;
        padding: 1rem;
        margin-top: 3rem;
        border-top: 1px solid #eee;
        font-size: 0.9rem;
    }
</style>
""", unsafe_allow_html=True)

# ==================== INITIALIZATION ====================

auth = AuthManager()

# Screens shown on the home page: (title, description, roles)
SCREENS = [
    ("📊 Overview Dashboard", "Sales, revenue, field reps and stock at a glance.", ['admin', 'manager']),
    ("👤 Signup Management", "Approve signups, change roles and remove users.", ['admin']),
    ("🎯 DE & TL Management", "Team leader and distribution executive lists with monthly targets.", ['admin']),
    ("👥 Team Leaders", "Read-only team leader overview.", ['admin', 'manager']),
]

# ==================== HELPER FUNCTIONS ====================

def show_login_page():
    """Display the login page"""
    st.markdown(f'<p class="main-header">{APP_ICON} {APP_NAME}</p>', unsafe_allow_html=True)
    st.markdown('<p class="sub-header">Sales tracking administration</p>', unsafe_allow_html=True)

    ok, error = check_gateway_connection()
    if not ok:
        st.error(f"⚠️ {error}")
        st.info("Please check your network connection or the Supabase settings.")
        return

    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        with st.form("login_form", clear_on_submit=False):
            st.markdown("#### 🔐 Login")

            email = st.text_input(
                "Email",
                placeholder="Enter your email",
                key="login_email"
            )
            password = st.text_input(
                "Password",
                type="password",
                placeholder="Enter your password",
                key="login_password"
            )

            submit = st.form_submit_button(
                "🔑 Login",
                type="primary",
                use_container_width=True
            )

            if submit:
                if not email or not password:
                    st.warning("Please enter both email and password")
                else:
                    with st.spinner("Authenticating..."):
                        success, result = auth.authenticate(email.strip(), password)

                    if success:
                        auth.login(result)
                        st.success("✅ Login successful!")
                        st.rerun()
                    else:
                        st.error(result.get("error", "Authentication failed"))

        timeout = config.get_app_setting("SESSION_TIMEOUT_HOURS", 8)
        with st.expander("ℹ️ Need Help?"):
            st.info(f"""
            - Use the same account as the sales app
            - New accounts need admin approval before they can sign in
            - Session expires after {timeout} hours
            """)


def show_main_app():
    """Display the main application after login"""
    role = st.session_state.get('user_role', '')

    with st.sidebar:
        st.markdown(f"### 👤 {auth.get_user_display_name()}")
        st.markdown(role_badge(role))
        st.markdown("---")

        if st.button("🚪 Logout", use_container_width=True):
            auth.logout()
            st.rerun()

    st.markdown(f"""
    <div class="welcome-box">
        <div class="welcome-title">Welcome, {auth.get_user_display_name()}! 👋</div>
        <div class="welcome-subtitle">Select a screen from the sidebar menu to get started.</div>
    </div>
    """, unsafe_allow_html=True)

    st.markdown("### 🧭 Available Screens")

    for title, description, roles in SCREENS:
        if role in roles:
            st.markdown(f"""
            <div class="info-card">
                <strong>{title}</strong><br>
                <span style="color: #666;">{description}</span>
            </div>
            """, unsafe_allow_html=True)

    # System Status (Admin only)
    if auth.is_admin():
        st.markdown("---")
        with st.expander("🔧 System Status (Admin Only)"):
            ok, error = check_gateway_connection()

            col1, col2 = st.columns(2)
            with col1:
                st.metric("Data Backend", config.data_backend)
            with col2:
                st.metric("Connection", "OK" if ok else "Error")

            if not ok:
                st.error(error)

            if config.data_backend == 'sql':
                from sales_admin.db import check_db_connection, get_connection_pool_status
                db_ok, db_error = check_db_connection()
                if not db_ok:
                    st.error(db_error)
                st.json(get_connection_pool_status())

    st.markdown(f"""
    <div class="footer">
        <strong>{APP_NAME}</strong> v{APP_VERSION}
    </div>
    """, unsafe_allow_html=True)


# ==================== MAIN ====================

def main():
    """Main application entry point"""
    if not auth.check_session():
        show_login_page()
    else:
        show_main_app()


if __name__ == "__main__":
    main()
