import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import streamlit as st
from utils import (
    APPLE,
    api_get,
    api_send,
    api_upload_avatar,
    error_detail,
    info_card,
    page_header,
    render_sidebar,
)

st.set_page_config(page_title="Profile · ClubHub", page_icon="👤", layout="wide")
render_sidebar()
page_header("Profile", "Volunteer details and profile picture.")

user_id = st.text_input("User ID", value=st.session_state.get("profile_user_id", ""))
if not user_id:
    st.stop()
st.session_state["profile_user_id"] = user_id

response = api_get(f"/api/v1/users/{user_id}")
if response is None:
    st.error("Cannot reach the backend. Check the **Backend URL** in the sidebar.", icon="❌")
    st.stop()
if response.status_code != 200:
    st.error(error_detail(response))
    st.stop()

profile = response.json()

col_picture, col_details = st.columns([1, 3])

# ── Picture ───────────────────────────────────────────────────────────────────
with col_picture:
    if profile.get("image"):
        st.image(profile["image"], width=160)
    else:
        st.markdown(
            f"<div style='width:160px;height:160px;border-radius:80px;background:{APPLE['bg']};"
            f"display:flex;align-items:center;justify-content:center;font-size:3rem;"
            f"color:{APPLE['gray']}'>{profile['firstName'][:1]}</div>",
            unsafe_allow_html=True,
        )

    upload = st.file_uploader("New picture", type=["png", "jpg", "jpeg", "gif", "webp"])
    if upload is not None and st.button("Upload", use_container_width=True):
        with st.spinner("Uploading..."):
            result = api_upload_avatar(user_id, upload.name, upload.getvalue(), upload.type)
        if result is not None and result.status_code == 200:
            st.success("Picture updated")
            st.rerun()
        elif result is None:
            st.error("Cannot reach the backend.")
        else:
            st.error(error_detail(result))

# ── Details ───────────────────────────────────────────────────────────────────
with col_details:
    c1, c2 = st.columns(2)
    c1.markdown(info_card("Member since", profile["createdAt"][:10]), unsafe_allow_html=True)
    c2.markdown(info_card("Email", profile["email"]), unsafe_allow_html=True)

    st.markdown("##### Edit")
    with st.form("profile_form"):
        first_name = st.text_input("First name", value=profile["firstName"])
        last_name = st.text_input("Last name", value=profile["lastName"])
        email = st.text_input("Email", value=profile["email"])
        phone = st.text_input("Phone", value=profile.get("phone") or "")
        submitted = st.form_submit_button("Save", type="primary", use_container_width=True)

    if submitted:
        candidate = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "phone": phone or None,
        }
        # Only send what changed
        changes = {k: v for k, v in candidate.items() if v != profile.get(k)}
        if not changes:
            st.info("Nothing to save.")
        else:
            result = api_send("PUT", f"/api/v1/users/{user_id}", changes)
            if result is not None and result.status_code == 200:
                st.success("Profile saved")
                st.rerun()
            elif result is None:
                st.error("Cannot reach the backend.")
            else:
                st.error(f"Error {result.status_code}: {error_detail(result)}")
