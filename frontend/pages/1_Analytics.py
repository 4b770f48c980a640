"""
Analytics — admin dashboard.

Renders the single document returned by GET /api/v1/admin/analytics.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pandas as pd
import altair as alt
import streamlit as st

from utils import (
    APPLE,
    CATEGORY_LABEL,
    api_get_analytics,
    error_detail,
    handle_expired_session,
    page_header,
    render_sidebar,
    require_admin_token,
    trend_badge,
)

st.set_page_config(page_title="Analytics · ClubHub", page_icon="📊", layout="wide")
render_sidebar()
page_header("Analytics", "Platform activity, growth and engagement.")

token = require_admin_token()

col_note, col_refresh = st.columns([5, 1])
with col_note:
    st.caption("Counts are computed on every refresh. Growth compares this month with last month.")
with col_refresh:
    if st.button("Refresh", use_container_width=True):
        st.rerun()

response = api_get_analytics(token)
if response is None:
    st.error("Cannot reach the backend. Check the **Backend URL** in the sidebar.", icon="❌")
    st.stop()
handle_expired_session(response)
if response.status_code != 200:
    st.error(f"Error {response.status_code}: {error_detail(response)}")
    st.stop()

data = response.json()["data"]

# ── Live metrics ───────────────────────────────────────────────────────────────
live = data["liveMetrics"]
health = data["systemHealth"]
st.markdown("##### Live")

l1, l2, l3, l4 = st.columns(4)
l1.metric("Active users (24h)", live["activeUsers"], live["activeUsersChange"])
l2.metric("Sessions (last hour)", live["concurrentSessions"], live["sessionsChange"])
l3.metric("Upcoming events", live["eventsToday"], live["eventsTodayChange"])
l4.metric("System health", f"{health['overall']}%", help="Share of liveness checks passing.")

st.divider()

# ── Summary ────────────────────────────────────────────────────────────────────
summary = data["summaryStats"]
st.markdown("##### Summary")

s1, s2, s3, s4 = st.columns(4)
s1.metric("Clubs", summary["totalClubs"], f"{summary['clubGrowth']}%")
s2.metric("Events", summary["totalEvents"], f"{summary['eventGrowth']}%")
s3.metric("Members", summary["totalMembers"])
s4.metric("Attendance", summary["totalAttendance"], f"{summary['attendanceGrowth']}%")

st.divider()

# ── Performance ────────────────────────────────────────────────────────────────
PERFORMANCE_LABEL = {
    "userEngagement":   "User engagement",
    "eventSuccessRate": "Event success rate",
    "clubParticipation": "Club participation",
    "contentQuality":   "Content quality",
    "growthVelocity":   "Growth velocity",
}

st.markdown("##### Performance")
perf_cols = st.columns(len(PERFORMANCE_LABEL))
for col, (key, label) in zip(perf_cols, PERFORMANCE_LABEL.items()):
    metric = data["performanceMetrics"][key]
    with col:
        with st.container(border=True):
            st.markdown(
                f"<p style='font-size:0.75rem;color:{APPLE['secondary_label']};margin:0'>{label}</p>"
                f"<p style='font-size:1.4rem;font-weight:600;margin:2px 0 6px 0'>{metric['value']}</p>"
                f"{trend_badge(metric['change'], metric['trend'])}",
                unsafe_allow_html=True,
            )

st.divider()

# ── Charts ─────────────────────────────────────────────────────────────────────
col_growth, col_engagement = st.columns(2)

with col_growth:
    st.markdown("##### Monthly growth")
    growth_df = pd.DataFrame(data["monthlyGrowth"])
    growth_df["order"] = range(len(growth_df))
    growth_long = growth_df.melt(
        id_vars=["month", "order"],
        value_vars=["newClubs", "newEvents"],
        var_name="series",
        value_name="count",
    )
    growth_long["series"] = growth_long["series"].map({"newClubs": "Clubs", "newEvents": "Events"})
    chart = (
        alt.Chart(growth_long)
        .mark_line(point=True)
        .encode(
            x=alt.X("month:N", sort=alt.SortField("order"), title=""),
            y=alt.Y("count:Q", title="Created", axis=alt.Axis(tickMinStep=1)),
            color=alt.Color(
                "series:N",
                scale=alt.Scale(domain=["Clubs", "Events"], range=[APPLE["blue"], APPLE["orange"]]),
                legend=alt.Legend(title=None, orient="bottom"),
            ),
            tooltip=["month:N", "series:N", "count:Q"],
        )
        .properties(height=260)
    )
    st.altair_chart(chart, use_container_width=True)

with col_engagement:
    st.markdown("##### Engagement vs target")
    engagement_df = pd.DataFrame(data["engagementMetrics"])
    bars = (
        alt.Chart(engagement_df)
        .mark_bar(cornerRadiusEnd=6, color=APPLE["blue"])
        .encode(
            x=alt.X("value:Q", title=""),
            y=alt.Y("metric:N", title="", axis=alt.Axis(labelLimit=180)),
            tooltip=["metric:N", "value:Q", "target:Q"],
        )
    )
    targets = (
        alt.Chart(engagement_df)
        .mark_tick(color=APPLE["red"], thickness=2, size=22)
        .encode(x="target:Q", y="metric:N")
    )
    st.altair_chart((bars + targets).properties(height=260), use_container_width=True)

col_geo, col_category = st.columns(2)

with col_geo:
    st.markdown("##### Clubs by region")
    geo_df = pd.DataFrame(data["geographicData"])
    chart = (
        alt.Chart(geo_df)
        .mark_arc(innerRadius=50, outerRadius=90)
        .encode(
            theta=alt.Theta("clubs:Q"),
            color=alt.Color(
                "region:N",
                scale=alt.Scale(domain=geo_df["region"].tolist(), range=geo_df["color"].tolist()),
                legend=alt.Legend(title=None, orient="right"),
            ),
            tooltip=["region:N", "clubs:Q"],
        )
        .properties(height=240)
    )
    st.altair_chart(chart, use_container_width=True)

with col_category:
    st.markdown("##### Events by category")
    category_rows = data["eventsByCategory"]
    if category_rows:
        category_df = pd.DataFrame(category_rows)
        category_df["label"] = category_df["category"].map(
            lambda c: CATEGORY_LABEL.get(c, c.capitalize())
        )
        chart = (
            alt.Chart(category_df)
            .mark_bar(cornerRadiusEnd=6, color=APPLE["orange"])
            .encode(
                x=alt.X("count:Q", title="Events", axis=alt.Axis(tickMinStep=1)),
                y=alt.Y("label:N", sort="-x", title=""),
                tooltip=["label:N", "count:Q"],
            )
            .properties(height=240)
        )
        st.altair_chart(chart, use_container_width=True)
    else:
        st.caption("No events yet")

st.divider()

# ── Top performers ─────────────────────────────────────────────────────────────
st.markdown("##### Top clubs")

performers = data["topPerformers"]
if performers:
    performers_df = pd.DataFrame(performers).rename(
        columns={
            "name":    "Club",
            "members": "Members",
            "events":  "Events",
            "score":   "Score",
            "growth":  "Monthly growth",
        }
    )
    st.dataframe(
        performers_df,
        hide_index=True,
        use_container_width=True,
        column_config={
            "Score": st.column_config.ProgressColumn("Score", min_value=0, max_value=100, format="%.1f"),
        },
    )
else:
    st.caption("No active clubs yet")
