from carpark_tracker.views import filter_events, location_options, month_options

CONDO = "คอนโด"
WORK = "ที่ทำงาน"


def _events(make_event):
    return [
        make_event(location=WORK, exit_date="2024-03-05"),
        make_event(location=CONDO, exit_date="2024-02-28"),
        make_event(location=CONDO, exit_date="2024-03-20"),
        make_event(location=WORK, exit_date="2024-01-02"),
    ]


def test_month_options_sorted_with_all_first(make_event):
    assert month_options(_events(make_event)) == ["all", "2024-01", "2024-02", "2024-03"]


def test_location_options_sorted_with_all_first(make_event):
    assert location_options(_events(make_event)) == ["all", CONDO, WORK]


def test_options_for_empty_collection():
    assert month_options([]) == ["all"]
    assert location_options([]) == ["all"]


def test_all_tokens_return_everything_in_order(make_event):
    events = _events(make_event)
    assert filter_events(events, "all", "all") == events


def test_month_and_location_filters_combine(make_event):
    events = _events(make_event)
    result = filter_events(events, "2024-03", CONDO)
    assert result == [events[2]]


def test_month_filter_preserves_relative_order(make_event):
    events = _events(make_event)
    assert filter_events(events, month="2024-03") == [events[0], events[2]]


def test_location_filter_is_exact(make_event):
    events = _events(make_event) + [make_event(location=CONDO + " ")]
    assert len(filter_events(events, location=CONDO)) == 2


def test_facets_do_not_depend_on_selection(make_event):
    events = _events(make_event)
    filter_events(events, location=CONDO)
    assert month_options(events) == ["all", "2024-01", "2024-02", "2024-03"]
