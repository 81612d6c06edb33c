import streamlit_app


def test_average_window_follows_reference_date(make_event):
    events = (
        make_event(location="A", recorded_at="2024-03-12T09:00:00+07:00", time_of_event="09:00"),
    )

    this_week = streamlit_app.load_views(events, "all", "all", "week", "2024-03-14")
    two_weeks_on = streamlit_app.load_views(events, "all", "all", "week", "2024-03-25")

    assert [(item.location, item.sample_count) for item in this_week.average_arrival] == [("A", 1)]
    assert two_weeks_on.average_arrival == []


def test_month_window_rolls_over(make_event):
    events = (
        make_event(location="A", recorded_at="2024-03-29T09:00:00+07:00", time_of_event="09:00"),
    )

    assert len(streamlit_app.load_views(events, "all", "all", "month", "2024-03-31").average_arrival) == 1
    assert streamlit_app.load_views(events, "all", "all", "month", "2024-04-01").average_arrival == []
