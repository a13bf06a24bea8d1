"""Unit tests for data models and the error taxonomy."""

import pytest

from landmark_api.models import (
    BoundingBox,
    ErrorCode,
    GeocodeResult,
    InvalidBounds,
    InvalidExpiry,
    InvalidQuery,
    Landmark,
    NotFound,
    UpstreamError,
)


class TestBoundingBoxValidation:
    def test_valid_bounds(self) -> None:
        BoundingBox(north=51.51, south=51.50, east=-0.08, west=-0.10).validate_bounds()

    def test_equal_edges_are_valid(self) -> None:
        BoundingBox(north=10.0, south=10.0, east=5.0, west=5.0).validate_bounds()

    def test_world_bounds_are_valid(self) -> None:
        BoundingBox(north=90, south=-90, east=180, west=-180).validate_bounds()

    def test_north_below_south(self) -> None:
        with pytest.raises(InvalidBounds, match="North"):
            BoundingBox(north=51.50, south=51.51, east=-0.08, west=-0.10).validate_bounds()

    def test_east_below_west(self) -> None:
        with pytest.raises(InvalidBounds, match="East"):
            BoundingBox(north=51.51, south=51.50, east=-0.10, west=-0.08).validate_bounds()

    @pytest.mark.parametrize("north,south", [(91.0, 0.0), (0.0, -91.0)])
    def test_latitude_out_of_range(self, north: float, south: float) -> None:
        with pytest.raises(InvalidBounds, match="Latitude"):
            BoundingBox(north=north, south=south, east=1.0, west=0.0).validate_bounds()

    @pytest.mark.parametrize("east,west", [(181.0, 0.0), (0.0, -181.0)])
    def test_longitude_out_of_range(self, east: float, west: float) -> None:
        with pytest.raises(InvalidBounds, match="Longitude"):
            BoundingBox(north=1.0, south=0.0, east=east, west=west).validate_bounds()

    def test_center(self) -> None:
        bounds = BoundingBox(north=51.51, south=51.50, east=-0.08, west=-0.10)
        lat, lon = bounds.center
        assert lat == pytest.approx(51.505)
        assert lon == pytest.approx(-0.09)


class TestWireFormat:
    def test_landmark_serializes_camel_case(self) -> None:
        landmark = Landmark(
            pageid=42,
            title="Tower Bridge",
            lat=51.5055,
            lon=-0.0754,
            thumbnail_url="https://example.org/t.jpg",
            distance_km=0.4,
        )
        data = landmark.model_dump(by_alias=True)
        assert data["thumbnailUrl"] == "https://example.org/t.jpg"
        assert data["distanceKm"] == 0.4
        assert data["description"] is None

    def test_landmark_accepts_alias_input(self) -> None:
        landmark = Landmark.model_validate(
            {"pageid": 1, "title": "X", "lat": 0, "lon": 0, "thumbnailUrl": "u", "distanceKm": 1.5}
        )
        assert landmark.thumbnail_url == "u"
        assert landmark.distance_km == 1.5

    def test_geocode_result_display_name(self) -> None:
        result = GeocodeResult(lat=48.8584, lon=2.2945, display_name="Eiffel Tower")
        assert result.model_dump(by_alias=True) == {
            "lat": 48.8584,
            "lon": 2.2945,
            "displayName": "Eiffel Tower",
        }


class TestErrors:
    @pytest.mark.parametrize(
        "error_cls,code,status",
        [
            (InvalidBounds, ErrorCode.INVALID_BOUNDS, 400),
            (InvalidQuery, ErrorCode.INVALID_QUERY, 400),
            (InvalidExpiry, ErrorCode.INVALID_EXPIRY, 400),
            (UpstreamError, ErrorCode.UPSTREAM_ERROR, 500),
            (NotFound, ErrorCode.NOT_FOUND, 404),
        ],
    )
    def test_codes_and_statuses(self, error_cls, code: ErrorCode, status: int) -> None:
        error = error_cls("boom")
        assert error.code == code
        assert error.status_code == status
        assert str(error) == "boom"

    def test_to_app_error(self) -> None:
        app_error = NotFound("nothing for 'xyz'").to_app_error()
        assert app_error.code == ErrorCode.NOT_FOUND
        assert app_error.message == "nothing for 'xyz'"
        assert app_error.user_message == "Location not found."

    def test_custom_user_message(self) -> None:
        error = UpstreamError("timeout", user_message="Wikipedia is slow right now.")
        assert error.to_app_error().user_message == "Wikipedia is slow right now."
