"""Tests for old-pipeline selection and age calculation."""

from datetime import datetime, timedelta, timezone

import pytest
import responses
from responses import matchers

from conftest import FIXED_NOW, MOCK_API_URL, days_ago, make_pipeline

from gl_mcp import GitLabOperationError, InvalidArgumentError, PipelineFilter, cutoff_for_years, pipeline_age

PIPELINES_URL = f"{MOCK_API_URL}/projects/group%2Fproject/pipelines"


@pytest.fixture
def pipeline_filter(mock_client, clock):
    return PipelineFilter(mock_client, clock=clock)


class TestPipelineAge:
    def test_missing_timestamp(self):
        assert pipeline_age(None, FIXED_NOW) == (-1, -1)

    def test_future_timestamp(self):
        assert pipeline_age(FIXED_NOW + timedelta(days=1), FIXED_NOW) == (-1, -1)

    def test_ten_days(self):
        days, years = pipeline_age(FIXED_NOW - timedelta(days=10), FIXED_NOW)
        assert days >= 10
        assert abs(years - 10 / 365.25) <= 0.01

    def test_partial_days_are_floored(self):
        assert pipeline_age(FIXED_NOW - timedelta(days=3, hours=23), FIXED_NOW)[0] == 3

    def test_created_now_is_zero(self):
        assert pipeline_age(FIXED_NOW, FIXED_NOW) == (0, 0.0)

    def test_naive_created_at_treated_as_utc(self):
        naive = (FIXED_NOW - timedelta(days=730)).replace(tzinfo=None)
        assert pipeline_age(naive, FIXED_NOW) == (730, 2.0)


class TestCutoffForYears:
    def test_calendar_years(self):
        assert cutoff_for_years(2, FIXED_NOW) == datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

    def test_leap_day(self):
        leap = datetime(2028, 2, 29, tzinfo=timezone.utc)
        assert cutoff_for_years(1, leap) == datetime(2027, 2, 28, tzinfo=timezone.utc)

    @pytest.mark.parametrize("years", [0, -3])
    def test_non_positive_rejected(self, years):
        with pytest.raises(InvalidArgumentError):
            cutoff_for_years(years, FIXED_NOW)

    def test_years_reaching_year_zero_rejected(self):
        with pytest.raises(InvalidArgumentError, match="less than 2026"):
            cutoff_for_years(FIXED_NOW.year, FIXED_NOW)

    def test_largest_accepted_years(self):
        assert cutoff_for_years(FIXED_NOW.year - 1, FIXED_NOW) == datetime(1, 6, 15, 12, 0, tzinfo=timezone.utc)


class TestListOldPipelines:
    @responses.activate
    def test_only_strictly_older_pipelines(self, pipeline_filter):
        cutoff = days_ago(365)
        responses.add(
            responses.GET,
            PIPELINES_URL,
            json=[
                make_pipeline(101, days_ago(1000)),
                make_pipeline(102, cutoff),
                make_pipeline(103, days_ago(30)),
                make_pipeline(104, None),
            ],
        )

        result = pipeline_filter.list_old_pipelines("group/project", cutoff)

        assert [p.id for p in result] == [101]
        assert result[0].age_days == 1000
        assert result[0].age_years == round(1000 / 365.25, 2)
        assert result[0].created_at == days_ago(1000)
        assert result[0].updated_at == days_ago(1000)

    @responses.activate
    def test_future_pipeline_never_old(self, pipeline_filter):
        cutoff = FIXED_NOW + timedelta(days=30)
        responses.add(
            responses.GET,
            PIPELINES_URL,
            json=[make_pipeline(201, days_ago(5)), make_pipeline(202, FIXED_NOW + timedelta(days=2))],
        )

        assert [p.id for p in pipeline_filter.list_old_pipelines("group/project", cutoff)] == [201]

    @responses.activate
    def test_requests_server_side_filter_and_order(self, pipeline_filter):
        cutoff = datetime(2024, 1, 1, 5, 0, tzinfo=timezone(timedelta(hours=5)))
        responses.add(
            responses.GET,
            PIPELINES_URL,
            json=[],
            match=[
                matchers.query_param_matcher(
                    {
                        "created_before": "2024-01-01T00:00:00Z",
                        "order_by": "created_at",
                        "sort": "asc",
                        "per_page": "100",
                        "page": "1",
                    }
                )
            ],
        )

        assert pipeline_filter.list_old_pipelines("group/project", cutoff) == []

    @responses.activate
    def test_keeps_remote_order_across_pages(self, pipeline_filter):
        responses.add(
            responses.GET,
            PIPELINES_URL,
            json=[make_pipeline(1, days_ago(900)), make_pipeline(2, days_ago(800))],
            headers={"x-next-page": "2"},
            match=[matchers.query_param_matcher({"page": "1"}, strict_match=False)],
        )
        responses.add(
            responses.GET,
            PIPELINES_URL,
            json=[make_pipeline(3, days_ago(700))],
            headers={"x-next-page": ""},
            match=[matchers.query_param_matcher({"page": "2"}, strict_match=False)],
        )

        result = pipeline_filter.list_old_pipelines("group/project", days_ago(365))

        assert [p.id for p in result] == [1, 2, 3]

    @responses.activate
    def test_page_failure_discards_partial_results(self, pipeline_filter):
        responses.add(
            responses.GET,
            PIPELINES_URL,
            json=[make_pipeline(1, days_ago(900))],
            headers={"x-next-page": "2"},
            match=[matchers.query_param_matcher({"page": "1"}, strict_match=False)],
        )
        responses.add(
            responses.GET,
            PIPELINES_URL,
            status=500,
            match=[matchers.query_param_matcher({"page": "2"}, strict_match=False)],
        )

        with pytest.raises(GitLabOperationError) as exc_info:
            pipeline_filter.list_old_pipelines("group/project", days_ago(365))
        assert exc_info.value.operation == "list project pipelines"

    @responses.activate
    def test_unparseable_timestamp_is_listing_error(self, pipeline_filter):
        bad = make_pipeline(1, days_ago(900))
        bad["created_at"] = "not-a-date"
        responses.add(responses.GET, PIPELINES_URL, json=[bad])

        with pytest.raises(GitLabOperationError) as exc_info:
            pipeline_filter.list_old_pipelines("group/project", days_ago(365))
        assert exc_info.value.operation == "list project pipelines"
        assert isinstance(exc_info.value.cause, ValueError)

    @responses.activate
    def test_nanosecond_timestamps_accepted(self, pipeline_filter):
        pipeline = make_pipeline(1, None)
        pipeline["created_at"] = "2020-03-04T05:06:07.123456789Z"
        pipeline["updated_at"] = "2020-03-04T05:06:07.5+00:00"
        responses.add(responses.GET, PIPELINES_URL, json=[pipeline])

        result = pipeline_filter.list_old_pipelines("group/project", days_ago(365))

        assert result[0].created_at == datetime(2020, 3, 4, 5, 6, 7, 123456, tzinfo=timezone.utc)
        assert result[0].updated_at == datetime(2020, 3, 4, 5, 6, 7, 500000, tzinfo=timezone.utc)

    def test_blank_project_rejected(self, pipeline_filter):
        with pytest.raises(InvalidArgumentError):
            pipeline_filter.list_old_pipelines("", FIXED_NOW)

    def test_summary_serialisation(self):
        from gl_mcp.models import PipelineSummary

        summary = PipelineSummary(
            id=1,
            iid=2,
            project_id=3,
            status="failed",
            source="web",
            ref="main",
            sha="abc",
            web_url="https://example.com",
            created_at=datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        )

        d = summary.to_dict()
        assert d["created_at"] == "2020-01-02T03:04:05Z"
        assert "updated_at" not in d
        assert (d["age_days"], d["age_years"]) == (-1, -1)
