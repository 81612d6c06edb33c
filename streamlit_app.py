"""Live dashboard for the carpark tracker sheet."""
from __future__ import annotations

import os
from dataclasses import asdict
from typing import Tuple

import pandas as pd
import streamlit as st

from carpark_tracker import config
from carpark_tracker.facets import facet_style
from carpark_tracker.ingest import SheetIngestor
from carpark_tracker.models import ParkingEvent, Period
from carpark_tracker.refresh import RefreshController, RefreshScheduler
from carpark_tracker.transform import DashboardViews, build_dashboard_views

TIME_OF_DAY_LABELS = {
    "morning": "เช้า (5-12)",
    "afternoon": "บ่าย (12-18)",
    "evening": "เย็น-ดึก",
}

PERIOD_LABELS = {
    Period.ALL.value: "ทั้งหมด",
    Period.WEEK.value: "สัปดาห์นี้",
    Period.MONTH.value: "เดือนนี้",
}


@st.cache_resource
def get_controller(url: str) -> RefreshController:
    controller = RefreshController(SheetIngestor(url=url).fetch_rows)
    RefreshScheduler(controller).start()
    return controller


def reference_today() -> str:
    return pd.Timestamp.now(tz=config.REFERENCE_TIMEZONE).strftime("%Y-%m-%d")


@st.cache_data
def load_views(
    events: Tuple[ParkingEvent, ...],
    month: str,
    location: str,
    period: str,
    today: str,
) -> DashboardViews:
    # today is part of the cache key so week/month windows roll over
    now = pd.Timestamp(today).tz_localize(config.REFERENCE_TIMEZONE)
    return build_dashboard_views(events, month=month, location=location, period=period, now=now)


def _label_location(location: str) -> str:
    if location == config.ALL:
        return "📍 ทุกสถานที่"
    return f"{facet_style(location).icon} {location}"


def main() -> None:
    st.set_page_config(page_title="Carpark Tracker", layout="wide")

    st.markdown(
        """
        <div style="padding: 0.75rem 1rem; border-radius: 0.75rem;
                    background: linear-gradient(135deg, #1e40af, #3b82f6); color: #f5f7fb;">
            <h1 style="margin-bottom: 0.2rem;">วันนี้จอดรถที่ไหน?</h1>
            <p style="margin-bottom: 0; opacity: 0.85;">Auto refresh every 5 minutes from the shared sheet.</p>
        </div>
        """,
        unsafe_allow_html=True,
    )

    url = os.environ.get(config.SHEET_URL_ENV_VAR, config.SHEET_CSV_URL)
    controller = get_controller(url)
    snapshot = controller.snapshot()
    status = snapshot.status

    with st.sidebar:
        st.header("Filters")
        if st.button("🔄 Refresh now", disabled=status.loading):
            controller.refresh()
            snapshot = controller.snapshot()
            status = snapshot.status
        if status.loading:
            st.caption("Loading...")
        elif status.error:
            st.error(f"Refresh failed: {status.error}")
        if status.last_refresh:
            updated = pd.Timestamp(status.last_refresh).tz_convert(config.REFERENCE_TIMEZONE)
            st.caption(f"Updated {updated:%H:%M:%S} · next refresh in {status.countdown_display}")
        st.caption(f"{len(snapshot.events)} rows")

    if not snapshot.events:
        st.warning("No data loaded yet.")
        st.stop()

    today = reference_today()
    base = load_views(snapshot.events, config.ALL, config.ALL, Period.ALL.value, today)
    with st.sidebar:
        month = st.selectbox(
            "Month",
            options=base.months,
            format_func=lambda value: "📅 ทุกเดือน" if value == config.ALL else value,
        )
        location = st.selectbox("Location", options=base.locations, format_func=_label_location)
        period = st.radio(
            "Average period",
            options=list(PERIOD_LABELS),
            format_func=PERIOD_LABELS.get,
            horizontal=True,
        )

    views = load_views(snapshot.events, month, location, period, today)

    metric_cols = st.columns(5)
    metric_cols[0].metric("เที่ยวทั้งหมด", f"{views.filtered_total:,}")
    metric_cols[1].metric("คอนโด", f"{views.primary_residence_count:,}")
    metric_cols[2].metric("ที่ทำงาน", f"{views.workplace_count:,}")
    metric_cols[3].metric("ชั้นบ่อยสุด (คอนโด)", f"ชั้น {views.top_floor}")
    metric_cols[4].metric("บันทึกทั้งหมด", f"{views.total_records:,}")

    st.divider()
    left, right = st.columns(2)
    with left:
        st.subheader("📍 สัดส่วนสถานที่จอด")
        if views.location_distribution:
            st.bar_chart(pd.DataFrame([asdict(item) for item in views.location_distribution]).set_index("name"))
    with right:
        st.subheader("🅿️ ชั้นจอดรถที่คอนโด")
        st.caption(f"ชั้นที่จอดบ่อยสุด: {views.top_floor}")
        if views.floor_distribution:
            st.bar_chart(pd.DataFrame([asdict(item) for item in views.floor_distribution]).set_index("floor"))

    left, right = st.columns(2)
    with left:
        st.subheader("🕐 ช่วงเวลาที่จอด")
        time_frame = pd.DataFrame([asdict(item) for item in views.time_of_day])
        time_frame["bucket"] = time_frame["bucket"].map(TIME_OF_DAY_LABELS)
        st.bar_chart(time_frame.set_index("bucket"))
    with right:
        st.subheader("📅 วันในสัปดาห์")
        st.bar_chart(pd.DataFrame([asdict(item) for item in views.weekdays]).set_index("weekday"))

    st.subheader("⏰ เวลาที่ถึง — Trend")
    if views.arrival_trend:
        trend = pd.DataFrame(
            {point.date: point.minutes_by_location for point in views.arrival_trend}
        ).T.sort_index()
        st.line_chart(trend)
        st.caption("Minutes after midnight, weekdays only.")

    st.subheader("📊 เวลาถึงเฉลี่ย แยกตามสถานที่")
    if views.average_arrival:
        avg_cols = st.columns(len(views.average_arrival))
        for column, item in zip(avg_cols, views.average_arrival):
            style = facet_style(item.location)
            column.metric(f"{style.icon} {item.location}", item.display, help=f"{item.sample_count} samples")
    else:
        st.caption("No arrival times in this period.")

    st.subheader("📈 จำนวนบันทึกรายวัน")
    if views.daily_counts:
        st.line_chart(pd.DataFrame([asdict(item) for item in views.daily_counts]).set_index("date"))

    st.subheader("🕑 รายการล่าสุด")
    recent = pd.DataFrame(
        [
            {
                "วันที่": item.event.exit_date,
                "เวลา": item.time_display,
                "สถานที่": _label_location(item.event.location),
                "ชั้น": item.event.floor,
                "หมายเหตุ": item.event.note or "—",
                "สถานะ": "✓ Sent" if item.event.is_sent else "✗ Fail",
            }
            for item in views.recent
        ]
    )
    st.dataframe(recent, use_container_width=True, hide_index=True)


if __name__ == "__main__":
    main()
