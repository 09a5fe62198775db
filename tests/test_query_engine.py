import pandas as pd
import pytest

from quadrant_insights.core.query.query_engine import (
    ASCENDING,
    DESCENDING,
    QueryEngine,
    QueryParameters,
    collation_key,
    toggle_sort,
)
from quadrant_insights.core.segment.quadrant_classifier import HEALTHY, INACTIVE_AND_DORMANT


def _ids(frame):
    return list(frame["account_id"])


def test_default_view_sorts_by_name_ignoring_case_and_accents(accounts_df):
    rows = QueryEngine(accounts_df).run().rows
    assert _ids(rows) == ["acc-1", "acc-5", "acc-2", "acc-4", "acc-3"]


def test_search_matches_name_or_id_case_insensitively(accounts_df):
    engine = QueryEngine(accounts_df)
    assert _ids(engine.run(QueryParameters(search="ACME")).rows) == ["acc-1", "acc-5"]
    assert _ids(engine.run(QueryParameters(search="acc-3")).rows) == ["acc-3"]
    assert engine.run(QueryParameters(search="zzz")).filtered_count == 0


@pytest.mark.parametrize(
    "bucket, expected",
    [
        ("0-5", ["acc-1", "acc-2"]),
        ("6-10", ["acc-3"]),
        ("11-20", ["acc-5"]),
        ("20+", ["acc-4"]),
    ],
)
def test_inactive_day_buckets(accounts_df, bucket, expected):
    params = QueryParameters(inactive_days=bucket, sort_field="account_id")
    assert _ids(QueryEngine(accounts_df).run(params).rows) == expected


def test_five_days_falls_in_first_bucket():
    df = pd.DataFrame({"account_id": ["a"], "account_name": ["A"], "avg_inactive_days": [5.0]})
    engine = QueryEngine(df)
    assert engine.run(QueryParameters(inactive_days="0-5")).filtered_count == 1
    assert engine.run(QueryParameters(inactive_days="6-10")).filtered_count == 0


def test_unknown_bucket_keeps_every_row(accounts_df):
    assert QueryEngine(accounts_df).run(QueryParameters(inactive_days="lots")).filtered_count == 5


def test_quadrant_filter(accounts_df):
    result = QueryEngine(accounts_df).run(QueryParameters(quadrant=INACTIVE_AND_DORMANT))
    assert sorted(_ids(result.rows)) == ["acc-4", "acc-5"]
    assert result.summary == "Showing 2 of 5 accounts"


def test_unknown_quadrant_matches_nothing(accounts_df):
    assert QueryEngine(accounts_df).run(QueryParameters(quadrant="Sleeping")).filtered_count == 0


def test_focus_quadrant_combines_with_dropdown(accounts_df):
    engine = QueryEngine(accounts_df)
    same = QueryParameters(quadrant=HEALTHY, focus_quadrant=HEALTHY)
    different = QueryParameters(quadrant=HEALTHY, focus_quadrant=INACTIVE_AND_DORMANT)

    assert _ids(engine.run(same).rows) == ["acc-1"]
    assert engine.run(different).filtered_count == 0


def test_filters_compose_in_any_order(accounts_df):
    search = QueryParameters(search="acme")
    quadrant = QueryParameters(quadrant=INACTIVE_AND_DORMANT)
    combined = QueryParameters(search="acme", quadrant=INACTIVE_AND_DORMANT)

    search_first = QueryEngine(QueryEngine(accounts_df).filter(search)).filter(quadrant)
    quadrant_first = QueryEngine(QueryEngine(accounts_df).filter(quadrant)).filter(search)
    together = QueryEngine(accounts_df).filter(combined)

    assert _ids(search_first) == _ids(quadrant_first) == _ids(together) == ["acc-5"]


def test_numeric_sort_descending(accounts_df):
    params = QueryParameters(sort_field="avg_inactive_days", sort_direction=DESCENDING)
    assert _ids(QueryEngine(accounts_df).run(params).rows) == ["acc-4", "acc-5", "acc-3", "acc-2", "acc-1"]


def test_sort_is_stable_for_equal_keys(accounts_df):
    engine = QueryEngine(accounts_df)
    ascending = engine.run(QueryParameters(sort_field="workspace_count")).rows
    descending = engine.run(QueryParameters(sort_field="workspace_count", sort_direction=DESCENDING)).rows

    assert _ids(ascending) == ["acc-2", "acc-5", "acc-1", "acc-3", "acc-4"]
    assert _ids(descending) == ["acc-4", "acc-3", "acc-1", "acc-2", "acc-5"]


def test_unknown_sort_field_falls_back_to_name(accounts_df):
    rows = QueryEngine(accounts_df).run(QueryParameters(sort_field="favourite_colour")).rows
    assert _ids(rows) == ["acc-1", "acc-5", "acc-2", "acc-4", "acc-3"]


def test_toggle_sort():
    params = QueryParameters()
    params = toggle_sort(params, "chat_count")
    assert (params.sort_field, params.sort_direction) == ("chat_count", ASCENDING)

    params = toggle_sort(params, "chat_count")
    assert params.sort_direction == DESCENDING

    params = toggle_sort(params, "chat_count")
    assert params.sort_direction == ASCENDING

    params = toggle_sort(toggle_sort(params, "chat_count"), "account_name")
    assert (params.sort_field, params.sort_direction) == ("account_name", ASCENDING)


def test_pagination(accounts_df):
    engine = QueryEngine(accounts_df)
    last = engine.run(QueryParameters(page=3, page_size=2))
    assert (last.page, last.page_count, len(last.rows)) == (3, 3, 1)
    assert last.filtered_count == 5

    clamped = engine.run(QueryParameters(page=10, page_size=2))
    assert clamped.page == 3


def test_view_is_unpaginated(accounts_df):
    view = QueryEngine(accounts_df).view(QueryParameters(page=1, page_size=2))
    assert len(view) == 5


def test_source_frame_is_not_modified(accounts_df):
    before = accounts_df.copy()
    QueryEngine(accounts_df).run(QueryParameters(search="a", sort_field="chat_count", sort_direction=DESCENDING))
    pd.testing.assert_frame_equal(accounts_df, before)


def test_collation_key_orders_accents_with_base_letters():
    names = ["Zulu", "émile", "Eve", "apple"]
    assert sorted(names, key=collation_key) == ["apple", "émile", "Eve", "Zulu"]


def test_resorting_a_sorted_view_is_identity(accounts_df):
    engine = QueryEngine(accounts_df)
    params = QueryParameters(sort_field="chat_count", sort_direction=DESCENDING)
    once = engine.view(params)
    twice = QueryEngine(once).view(params)
    assert _ids(once) == _ids(twice)
