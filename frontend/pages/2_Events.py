import sys
import os
from datetime import datetime, time

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import streamlit as st
from utils import (
    APPLE,
    CATEGORY_LABEL,
    active_badge,
    api_get,
    api_send,
    category_badge,
    error_detail,
    handle_expired_session,
    page_header,
    render_sidebar,
)

st.set_page_config(page_title="Events · ClubHub", page_icon="📅", layout="wide")
render_sidebar()
page_header("Events", "Club events, newest first.")

token = st.session_state.get("jwt_token")
CATEGORIES = list(CATEGORY_LABEL)


def _event_form(key: str, event: dict | None = None, with_club: bool = False) -> dict | None:
    """Render the create/edit form and return the request payload on submit."""
    event = event or {}
    start = datetime.fromisoformat(f"{event['date']}T{event['time']}") if event else None

    with st.form(key):
        title = st.text_input("Title", value=event.get("title", ""))
        subtitle = st.text_input("Subtitle", value=event.get("subtitle") or "")
        club_id = st.text_input("Club ID") if with_club else None
        category = st.selectbox(
            "Category",
            CATEGORIES,
            index=CATEGORIES.index(event.get("category", "OTHER")),
            format_func=lambda c: CATEGORY_LABEL[c],
        )
        c1, c2 = st.columns(2)
        day = c1.date_input("Date", value=start.date() if start else None)
        hour = c2.time_input("Start time", value=start.time() if start else time(9, 0))
        venue = st.text_input("Venue", value=event.get("venue") or "")
        max_participants = st.number_input(
            "Max participants", min_value=0, value=event.get("maxCapacity") or 0, step=1
        )
        description = st.text_area("Description", value=event.get("description") or "")
        submitted = st.form_submit_button("Save", type="primary", use_container_width=True)

    if not submitted:
        return None

    payload = {
        "title": title,
        "subtitle": subtitle or None,
        "category": category,
        "startDateTime": datetime.combine(day, hour).astimezone().isoformat() if day else None,
        "venue": venue or None,
        "maxParticipants": int(max_participants) or None,
        "description": description or None,
    }
    if with_club:
        payload["clubId"] = club_id
    return payload


def _report(response, success: str) -> None:
    if response is None:
        st.error("Cannot reach the backend.")
        return
    handle_expired_session(response)
    if response.status_code == 200:
        st.success(success)
    else:
        st.error(f"Error {response.status_code}: {error_detail(response)}")


# ── Create ────────────────────────────────────────────────────────────────────
if token:
    with st.expander("New event"):
        payload = _event_form("create_event", with_club=True)
        if payload is not None:
            _report(api_send("POST", "/api/v1/events", payload, token), "Event created")
else:
    st.caption("Sign in on the **Analytics** page to create, edit or delete events.")

# ── List ──────────────────────────────────────────────────────────────────────
club_filter = st.text_input("Filter by club ID", placeholder="All clubs")
params = {"clubId": club_filter} if club_filter else None
response = api_get("/api/v1/events", params=params)

if response is None:
    st.error("Cannot reach the backend. Check the **Backend URL** in the sidebar.", icon="❌")
    st.stop()
if response.status_code != 200:
    st.error(f"Error {response.status_code}: {error_detail(response)}")
    st.stop()

events = response.json()
if not events:
    st.markdown(
        f"<p style='color:{APPLE['secondary_label']};font-size:0.9rem'>No events.</p>",
        unsafe_allow_html=True,
    )

for event in events:
    with st.container(border=True):
        st.markdown(
            f"{category_badge(event['category'])} {active_badge(event['isActive'])}",
            unsafe_allow_html=True,
        )
        st.markdown(f"**{event['title']}** · {event['organizer']['name']}")
        capacity = f" / {event['maxCapacity']}" if event.get("maxCapacity") else ""
        st.caption(
            f"{event['date']} {event['time']} · {event.get('venue') or 'No venue'} · "
            f"{event['registeredCount']}{capacity} registered"
        )

        with st.expander("Details"):
            detail = api_get(f"/api/v1/events/{event['id']}")
            if detail is not None and detail.status_code == 200:
                body = detail.json()
                if body.get("coverImage"):
                    st.image(body["coverImage"], width=320)
                if body.get("description"):
                    st.write(body["description"])
                for item in body["agenda"]:
                    st.markdown(f"- {item['startTime'][11:16]} {item['title']}")
                for person in body["resourcePersons"]:
                    st.markdown(f"- **{person['name']}** {person.get('designation') or ''}")
            else:
                st.caption("Details unavailable.")

        if token:
            with st.expander("Edit"):
                payload = _event_form(f"edit_{event['id']}", event)
                if payload is not None:
                    _report(
                        api_send("PUT", f"/api/v1/events/{event['id']}", payload, token),
                        "Event updated",
                    )
            if st.button("Delete", key=f"delete_{event['id']}"):
                _report(api_send("DELETE", f"/api/v1/events/{event['id']}", token=token), "Event deleted")
                st.rerun()
