import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import streamlit as st
from utils import render_sidebar, page_header, api_get, get_api_url, APPLE

st.set_page_config(page_title="Status · ClubHub", page_icon="💚", layout="wide")
render_sidebar()
page_header("Status", "Backend connection and endpoint reference.")

col_status, col_info = st.columns(2)

# ── Health ────────────────────────────────────────────────────────────────────
with col_status:
    st.markdown("##### Connection")
    st.markdown(
        f"<p style='font-size:0.82rem;color:{APPLE['secondary_label']};margin-bottom:12px'>"
        f"<code>{get_api_url()}</code></p>",
        unsafe_allow_html=True,
    )

    if st.button("Check", use_container_width=True):
        st.rerun()

    health = api_get("/health")
    if health is None:
        st.error("No connection. The backend is not responding.")
        st.markdown(
            "```bash\nuvicorn app.main:app --reload --port 8000\n```\n"
            "Then adjust the **Backend URL** in the sidebar if needed."
        )
    elif health.status_code == 200:
        st.success("Backend up")
        database = api_get("/health/db")
        if database is not None and database.status_code == 200:
            st.success("Database reachable")
        else:
            st.warning("Database unreachable")
    else:
        st.warning(f"HTTP {health.status_code}")
        st.text(health.text)

# ── API info ──────────────────────────────────────────────────────────────────
with col_info:
    st.markdown("##### API")
    info = api_get("/")
    if info and info.status_code == 200:
        d = info.json()
        st.markdown(
            f"<p style='margin:0'><span style='color:{APPLE['secondary_label']};font-size:0.8rem'>"
            f"Name</span><br><strong>{d.get('app', '-')}</strong></p>",
            unsafe_allow_html=True,
        )
        st.markdown(
            f"<p style='margin:8px 0'><span style='color:{APPLE['secondary_label']};font-size:0.8rem'>"
            f"Version</span><br><code>{d.get('version', '-')}</code></p>",
            unsafe_allow_html=True,
        )
        st.markdown(f"[Open Swagger UI]({get_api_url()}/docs)")
    else:
        st.markdown(
            f"<p style='color:{APPLE['secondary_label']};font-size:0.9rem'>"
            f"Unavailable while the backend is offline.</p>",
            unsafe_allow_html=True,
        )

st.divider()

# ── Endpoints reference ───────────────────────────────────────────────────────
st.markdown("##### Endpoints")

endpoints = [
    ("POST",   "/api/v1/auth/login",          "Admin login, returns a JWT"),
    ("GET",    "/api/v1/admin/analytics",     "Dashboard analytics (admin)"),
    ("GET",    "/api/v1/events",              "List events"),
    ("POST",   "/api/v1/events",              "Create an event (admin)"),
    ("GET",    "/api/v1/events/{id}",         "Event detail"),
    ("PUT",    "/api/v1/events/{id}",         "Update an event (admin)"),
    ("DELETE", "/api/v1/events/{id}",         "Soft-delete an event (admin)"),
    ("GET",    "/api/v1/users/{id}",          "Volunteer profile"),
    ("PUT",    "/api/v1/users/{id}",          "Update a profile"),
    ("POST",   "/api/v1/users/{id}/avatar",   "Upload a profile picture"),
    ("GET",    "/api/v1/feedbacks",           "Recent feedback"),
    ("GET",    "/health",                     "Health check"),
    ("GET",    "/health/db",                  "Database check"),
]

METHOD_COLOR = {
    "GET": APPLE["green"],
    "POST": APPLE["blue"],
    "PUT": APPLE["orange"],
    "DELETE": APPLE["red"],
}

for method, path, description in endpoints:
    color = METHOD_COLOR.get(method, APPLE["gray"])
    st.markdown(
        f'<div style="display:flex;align-items:center;gap:12px;padding:8px 0;'
        f'border-bottom:1px solid rgba(0,0,0,0.05)">'
        f'<span style="background:{color};color:#fff;padding:2px 8px;border-radius:6px;'
        f'font-size:0.72rem;font-weight:600;letter-spacing:0.03em;min-width:52px;'
        f'text-align:center">{method}</span>'
        f'<code style="font-size:0.82rem;flex:1">{path}</code>'
        f'<span style="color:{APPLE["secondary_label"]};font-size:0.82rem">{description}</span>'
        f'</div>',
        unsafe_allow_html=True,
    )
