"""Tests for the synthetic report generator."""

from __future__ import annotations

import argparse

import pytest

from hazardwatch.core.clustering import build_clusters
from hazardwatch.core.geo import haversine_m
from tools.simulator.simulate import generate, offset


def _args(**overrides):
    defaults = dict(sites=2, background=10, center=(19.076, 72.8777), radius_km=10.0, seed=42)
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


def test_offset_moves_roughly_the_requested_distance():
    lat, lng = offset(19.076, 72.8777, 1000, 45)
    assert haversine_m(19.076, 72.8777, lat, lng) == pytest.approx(1000, rel=0.01)


def test_generate_is_reproducible():
    a = generate(_args())
    b = generate(_args())
    assert [(r.lat, r.lng, r.report_type) for r in a] == [(r.lat, r.lng, r.report_type) for r in b]


def test_generated_sites_form_hotspots():
    reports = generate(_args(background=0))

    assert 10 <= len(reports) <= 20
    assert len(build_clusters(reports).hotspots) >= 1


def test_background_only():
    reports = generate(_args(sites=0, background=25))
    assert len(reports) == 25
    assert all(r.id is None for r in reports)
