import streamlit as st
from utils import render_sidebar, page_header, api_get, APPLE

st.set_page_config(
    page_title="ClubHub",
    page_icon="🤝",
    layout="wide",
)

render_sidebar()

page_header("ClubHub", "Clubs, events and volunteers in one place.")

# ── Pages ─────────────────────────────────────────────────────────────────────
st.markdown("##### Pages")

c1, c2, c3, c4 = st.columns(4)
pages = [
    (c1, "Analytics", APPLE["blue"],   "Live activity, month-over-month growth and top clubs."),
    (c2, "Events",    APPLE["orange"], "Browse, create, edit and remove club events."),
    (c3, "Profile",   APPLE["green"],  "Edit a volunteer profile and upload a picture."),
    (c4, "Status",    APPLE["gray"],   "Check the backend connection and endpoint list."),
]
for col, title, color, description in pages:
    with col:
        st.markdown(
            f'<div style="background:{color}14;border-left:3px solid {color};'
            f'border-radius:0 10px 10px 0;padding:14px 16px">'
            f'<p style="font-weight:600;color:{color};margin:0 0 6px 0;font-size:0.9rem">'
            f'{title}</p>'
            f'<p style="color:{APPLE["label"]};font-size:0.85rem;margin:0;line-height:1.5">'
            f'{description}</p>'
            f'</div>',
            unsafe_allow_html=True,
        )

st.divider()

# ── Recent feedback ───────────────────────────────────────────────────────────
st.markdown("##### Recent feedback")

feedback = api_get("/api/v1/feedbacks", params={"limit": 5})
if feedback is not None and feedback.status_code == 200 and feedback.json():
    for item in feedback.json():
        with st.container(border=True):
            stars = "★" * item["rating"] + "☆" * max(0, 5 - item["rating"])
            st.markdown(
                f"**{item['volunteerName']}** · {item['club']} "
                f"<span style='color:{APPLE['orange']}'>{stars}</span>",
                unsafe_allow_html=True,
            )
            if item.get("comment"):
                st.caption(item["comment"])
elif feedback is not None and feedback.status_code == 200:
    st.caption("No feedback yet.")

st.divider()

# ── Backend status ────────────────────────────────────────────────────────────
response = api_get("/health")
if response and response.status_code == 200:
    st.success("Backend connected", icon="✅")
else:
    st.error(
        "Cannot reach the backend. "
        "Make sure the server is running and check the **Backend URL** in the sidebar.",
        icon="❌",
    )
