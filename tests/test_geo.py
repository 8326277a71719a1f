"""Tests for distance and coordinate helpers."""

import math

import pytest

from fieldforce.services.geo import (EARTH_RADIUS_KM, haversine_km,
                                     is_valid_latitude, is_valid_longitude)
from fieldforce.utils.datetime_utils import day_bounds, hours_between, parse_date


def test_same_point_is_zero():
    assert haversine_km(28.4946, 77.0887, 28.4946, 77.0887) == 0.0


def test_one_degree_of_longitude_on_equator():
    assert haversine_km(0, 0, 0, 1) == pytest.approx(EARTH_RADIUS_KM * math.pi / 180)


def test_distance_is_symmetric():
    a = haversine_km(28.4946, 77.0887, 28.5707, 77.3219)
    b = haversine_km(28.5707, 77.3219, 28.4946, 77.0887)
    assert a == pytest.approx(b)


def test_antipodes_do_not_overflow():
    assert haversine_km(0, 0, 0, 180) == pytest.approx(EARTH_RADIUS_KM * math.pi)


def test_short_hop_near_client():
    """~600 m north-east of ABC Corp."""
    distance = haversine_km(28.50, 77.09, 28.4946, 77.0887)
    assert 0.55 < distance < 0.7


@pytest.mark.parametrize("value,ok", [(0, True), (90, True), (-90, True), (90.01, False),
                                      (float("nan"), False)])
def test_latitude_range(value, ok):
    assert is_valid_latitude(value) is ok


@pytest.mark.parametrize("value,ok", [(180, True), (-180, True), (-180.5, False),
                                      (float("inf"), False)])
def test_longitude_range(value, ok):
    assert is_valid_longitude(value) is ok


# ── Date helpers ────────────────────────────────────────────────────
def test_parse_date_strict():
    assert parse_date("2024-01-15").isoformat() == "2024-01-15"
    assert parse_date("2024-1-15") is None
    assert parse_date("2024-02-30") is None
    assert parse_date("15/01/2024") is None


def test_day_bounds_is_half_open_utc_day():
    start, end = day_bounds(parse_date("2024-01-15"))
    assert start.isoformat() == "2024-01-15T00:00:00+00:00"
    assert end.isoformat() == "2024-01-16T00:00:00+00:00"


def test_open_visit_counts_zero_hours():
    start, end = day_bounds(parse_date("2024-01-15"))
    assert hours_between(start, None) == 0.0
    assert hours_between(start, end) == 24.0
