"""Tests for RouteResult, RouteSummary and batch contracts."""

import pytest

from planner.contracts.batch import BatchProgress, BatchSummary
from planner.contracts.enums import BatchItemStatus, RouteSource
from planner.contracts.route import RouteResult, RouteSummary

LINE = {"type": "LineString", "coordinates": [[-46.5, -23.4], [-46.6, -23.5]]}


class TestRouteResult:
    def test_road_result(self):
        result = RouteResult(distance_km=12.5, path_geometry=LINE)
        assert result.source == RouteSource.ROAD
        assert not result.used_fallback

    def test_fallback_result_has_no_geometry(self):
        result = RouteResult(distance_km=3.2)
        assert result.path_geometry is None
        assert result.used_fallback
        assert result.source == RouteSource.STRAIGHT_LINE

    def test_negative_distance_rejected(self):
        with pytest.raises(Exception):
            RouteResult(distance_km=-1.0)

    def test_document_omits_missing_geometry(self):
        data = RouteResult(distance_km=1.0).to_document()
        assert "path_geometry" not in data
        assert data["source"] == "straight_line"


class TestRouteSummary:
    def test_defaults(self):
        summary = RouteSummary(stop_count=2, distance_km=0.0)
        assert summary.liters_needed == 0.0
        assert summary.source == "straight_line"


class TestBatchContracts:
    def test_summary_total(self):
        summary = BatchSummary(succeeded=2, failed=1)
        assert summary.total == 3
        assert summary.model_dump() == {"succeeded": 2, "failed": 1, "total": 3}

    def test_progress_done(self):
        progress = BatchProgress(
            index=3, total=3, query="x", status=BatchItemStatus.FAILED, failed=1
        )
        assert progress.done
