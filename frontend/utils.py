import streamlit as st
import requests
import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_URL = os.environ.get("BACKEND_URL", "http://localhost:8000")

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

APPLE = {
    "blue":   "#007AFF",
    "green":  "#34C759",
    "red":    "#FF3B30",
    "orange": "#FF9500",
    "gray":   "#8E8E93",
    "bg":     "#F2F2F7",
    "label":  "#1C1C1E",
    "secondary_label": "#6D6D72",
}

TREND_COLOR = {
    "up":   APPLE["green"],
    "down": APPLE["red"],
}

CATEGORY_LABEL = {
    "WORKSHOP":     "Workshop",
    "SEMINAR":      "Seminar",
    "COMPETITION":  "Competition",
    "SOCIAL":       "Social",
    "VOLUNTEERING": "Volunteering",
    "SPORTS":       "Sports",
    "CULTURAL":     "Cultural",
    "OTHER":        "Other",
}


# ---------------------------------------------------------------------------
# CSS
# ---------------------------------------------------------------------------

def apply_styles():
    st.markdown(
        """
        <style>
        html, body, [class*="css"], .stMarkdown, .stText {
            font-family: -apple-system, BlinkMacSystemFont, "SF Pro Text",
                         "Helvetica Neue", Arial, sans-serif;
        }
        h1, h2, h3 {
            font-weight: 600;
            letter-spacing: -0.02em;
        }
        .main .block-container {
            padding-top: 2.5rem;
            padding-bottom: 3rem;
            max-width: 1100px;
        }
        [data-testid="stSidebar"] {
            background-color: #F2F2F7;
            border-right: 1px solid rgba(0,0,0,0.08);
        }
        [data-testid="stVerticalBlockBorderWrapper"] > div {
            border-radius: 14px !important;
            border: 1px solid rgba(0,0,0,0.08) !important;
            box-shadow: 0 1px 4px rgba(0,0,0,0.06);
        }
        [data-testid="stMetric"] {
            background-color: #F2F2F7;
            border-radius: 12px;
            padding: 14px 18px;
        }
        [data-testid="stAlert"] {
            border-radius: 12px !important;
            border: none !important;
        }
        hr {
            border-color: rgba(0,0,0,0.06);
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

def render_sidebar():
    apply_styles()
    with st.sidebar:
        st.markdown(
            "<p style='font-size:1.15rem;font-weight:600;margin-bottom:0;"
            "letter-spacing:-0.02em'>ClubHub</p>"
            "<p style='font-size:0.8rem;color:#8E8E93;margin-top:2px'>Volunteer club management</p>",
            unsafe_allow_html=True,
        )
        st.divider()

        if "api_url" not in st.session_state:
            st.session_state["api_url"] = DEFAULT_API_URL

        new_url = st.text_input(
            "Backend URL",
            value=st.session_state["api_url"],
            help="Base URL of the FastAPI server",
        )
        st.session_state["api_url"] = (new_url or DEFAULT_API_URL).rstrip("/")
        st.divider()


def get_api_url() -> str:
    return st.session_state.get("api_url", DEFAULT_API_URL)


def page_header(title: str, subtitle: str):
    st.markdown(
        f"<h1 style='font-size:2rem;font-weight:700;letter-spacing:-0.03em;"
        f"margin-bottom:4px'>{title}</h1>"
        f"<p style='color:{APPLE['secondary_label']};font-size:1rem;margin-top:0'>"
        f"{subtitle}</p>",
        unsafe_allow_html=True,
    )
    st.divider()


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------

def _auth_headers(token: str | None) -> dict:
    return {"Authorization": f"Bearer {token}"} if token else {}


def api_get(path: str, token: str | None = None, params: dict | None = None):
    try:
        return requests.get(
            get_api_url() + path, headers=_auth_headers(token), params=params, timeout=15
        )
    except requests.exceptions.RequestException:
        return None


def api_send(method: str, path: str, payload: dict | None = None, token: str | None = None):
    """POST/PUT/DELETE with a JSON body; returns the response or None when unreachable."""
    try:
        return requests.request(
            method,
            get_api_url() + path,
            json=payload,
            headers=_auth_headers(token),
            timeout=15,
        )
    except requests.exceptions.RequestException:
        return None


def login(username: str, password: str):
    """Call POST /api/v1/auth/login (form-data) and return the token string or None."""
    try:
        response = requests.post(
            get_api_url() + "/api/v1/auth/login",
            data={"username": username, "password": password},
            timeout=20,
        )
        if response.status_code == 200:
            return response.json().get("access_token")
        return None
    except requests.exceptions.RequestException:
        return None


def require_admin_token() -> str:
    """Render a login form until an admin token is in the session, then return it."""
    if not st.session_state.get("jwt_token"):
        st.markdown("##### Sign in")
        with st.form("login_form"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", use_container_width=True, type="primary")

        if submitted:
            token = login(username, password)
            if token:
                st.session_state["jwt_token"] = token
                st.rerun()
            else:
                st.error("Wrong credentials or backend unavailable.")
        st.stop()
    return st.session_state["jwt_token"]


def handle_expired_session(response) -> None:
    if response is not None and response.status_code == 401:
        st.warning("Session expired. Please sign in again.")
        st.session_state["jwt_token"] = None
        st.rerun()


def api_get_analytics(token: str):
    """Call GET /api/v1/admin/analytics; returns the response (or None when unreachable)."""
    return api_get("/api/v1/admin/analytics", token=token)


def api_upload_avatar(user_id: str, filename: str, content: bytes, content_type: str):
    try:
        return requests.post(
            f"{get_api_url()}/api/v1/users/{user_id}/avatar",
            files={"file": (filename, content, content_type)},
            timeout=60,
        )
    except requests.exceptions.RequestException:
        return None


def error_detail(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    return body.get("detail") or body.get("error") or response.text


# ---------------------------------------------------------------------------
# Badges and cards
# ---------------------------------------------------------------------------

def _chip(label: str, color: str) -> str:
    return (
        f'<span style="display:inline-block;background:{color};color:#fff;'
        f'padding:3px 11px;border-radius:20px;font-size:0.8rem;font-weight:500;'
        f'letter-spacing:0.01em;line-height:1.5">{label}</span>'
    )


def category_badge(category: str) -> str:
    return _chip(CATEGORY_LABEL.get(category, category.capitalize()), APPLE["blue"])


def active_badge(is_active: bool) -> str:
    if is_active:
        return _chip("Upcoming", APPLE["green"])
    return _chip("Past", APPLE["gray"])


def trend_badge(change: str, trend: str) -> str:
    arrow = "▲" if trend == "up" else "▼"
    return _chip(f"{arrow} {change}", TREND_COLOR.get(trend, APPLE["gray"]))


def info_card(label: str, value: str) -> str:
    return (
        f'<div style="background:#F2F2F7;border-radius:12px;padding:14px 18px">'
        f'<p style="font-size:0.72rem;font-weight:500;text-transform:uppercase;'
        f'letter-spacing:0.06em;color:#8E8E93;margin:0 0 6px 0">{label}</p>'
        f'<p style="font-size:0.95rem;font-weight:500;color:#1C1C1E;margin:0">{value}</p>'
        f'</div>'
    )
