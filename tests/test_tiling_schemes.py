#!/usr/bin/env python3
"""
Tests for tiling schemes, projections and URL joining
"""

import math
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from tms_provider.models.geometry import Cartographic, Rectangle
from tms_provider.utils.tiling_schemes import (
    GeographicTilingScheme,
    WebMercatorProjection,
    WebMercatorTilingScheme,
)
from tms_provider.utils.url_utils import join_urls


class TestGeographicTilingScheme:
    """Test cases for GeographicTilingScheme"""
    
    def test_tile_counts(self):
        scheme = GeographicTilingScheme()
        assert scheme.number_of_x_tiles_at_level(0) == 2
        assert scheme.number_of_y_tiles_at_level(0) == 1
        assert scheme.number_of_x_tiles_at_level(3) == 16
        assert scheme.number_of_y_tiles_at_level(3) == 8
    
    def test_position_to_tile_xy(self):
        scheme = GeographicTilingScheme()
        assert scheme.position_to_tile_xy(Cartographic.from_degrees(-170.0, 80.0), 1) == (0, 0)
        assert scheme.position_to_tile_xy(Cartographic.from_degrees(100.0, -10.0), 1) == (3, 1)
    
    def test_edges_clamped_to_last_tile(self):
        scheme = GeographicTilingScheme()
        assert scheme.position_to_tile_xy(Cartographic(math.pi, -math.pi / 2.0), 2) == (7, 3)
    
    def test_outside_position(self):
        scheme = GeographicTilingScheme(rectangle=Rectangle.from_degrees(0.0, 0.0, 10.0, 10.0))
        assert scheme.position_to_tile_xy(Cartographic.from_degrees(20.0, 5.0), 0) is None
    
    def test_tile_rectangle(self):
        rectangle = GeographicTilingScheme().tile_xy_to_rectangle(1, 0, 0)
        assert (rectangle.west, rectangle.south, rectangle.east, rectangle.north) == \
            pytest.approx((0.0, -math.pi / 2.0, math.pi, math.pi / 2.0))


class TestWebMercatorTilingScheme:
    """Test cases for WebMercatorTilingScheme"""
    
    def test_rectangle(self):
        rectangle = WebMercatorTilingScheme().rectangle
        assert rectangle.west == pytest.approx(-math.pi)
        assert rectangle.east == pytest.approx(math.pi)
        assert math.degrees(rectangle.north) == pytest.approx(85.05112878)
        assert rectangle.south == pytest.approx(-rectangle.north)
    
    def test_tile_counts(self):
        scheme = WebMercatorTilingScheme()
        assert scheme.number_of_x_tiles_at_level(0) == 1
        assert scheme.number_of_y_tiles_at_level(2) == 4
    
    def test_position_to_tile_xy(self):
        scheme = WebMercatorTilingScheme()
        # Same indices as the XYZ slippy map convention
        assert scheme.position_to_tile_xy(Cartographic.from_degrees(-74.006, 40.7128), 10) == (301, 385)
        assert scheme.position_to_tile_xy(Cartographic(0.0, 0.0), 0) == (0, 0)
    
    def test_corners(self):
        scheme = WebMercatorTilingScheme()
        rectangle = scheme.rectangle
        assert scheme.position_to_tile_xy(rectangle.southwest(), 2) == (0, 3)
        assert scheme.position_to_tile_xy(rectangle.northeast(), 2) == (3, 0)
    
    def test_pole_is_outside(self):
        assert WebMercatorTilingScheme().position_to_tile_xy(Cartographic(0.0, math.pi / 2.0), 0) is None
    
    def test_projection_round_trip(self):
        projection = WebMercatorProjection()
        position = Cartographic.from_degrees(12.5, 41.9)
        restored = projection.unproject(projection.project(position))
        assert restored.longitude == pytest.approx(position.longitude)
        assert restored.latitude == pytest.approx(position.latitude)
    
    def test_tile_rectangle(self):
        scheme = WebMercatorTilingScheme()
        rectangle = scheme.tile_xy_to_rectangle(1, 1, 1)
        assert rectangle.west == pytest.approx(0.0)
        assert rectangle.north == pytest.approx(0.0, abs=1e-12)
        assert rectangle.east == pytest.approx(math.pi)
        assert rectangle.south == pytest.approx(scheme.rectangle.south)


class TestRectangle:
    """Test cases for Rectangle"""
    
    def test_clamped_never_widens(self):
        bounds = Rectangle.from_degrees(-10.0, -10.0, 10.0, 10.0)
        inner = Rectangle.from_degrees(-5.0, -20.0, 20.0, 5.0)
        clamped = inner.clamped_to(bounds)
        
        assert clamped == Rectangle(inner.west, bounds.south, bounds.east, inner.north)
    
    def test_antimeridian_geometry(self):
        rectangle = Rectangle.from_degrees(170.0, -10.0, -170.0, 10.0)
        west_tile = Rectangle.from_degrees(-180.0, -10.0, -175.0, 10.0)
        
        assert rectangle.width == pytest.approx(math.radians(20.0))
        assert rectangle.to_geometry().intersects(west_tile.to_geometry())
        assert rectangle.contains(Cartographic.from_degrees(-175.0, 0.0))


class TestJoinUrls:
    """Test cases for join_urls"""
    
    @pytest.mark.parametrize('first, second, expected', [
        ('http://example.com/tiles', 'tilemapresource.xml', 'http://example.com/tiles/tilemapresource.xml'),
        ('http://example.com/tiles/', 'tilemapresource.xml', 'http://example.com/tiles/tilemapresource.xml'),
        ('http://example.com/tiles/', '/1/2/3.png', 'http://example.com/tiles/1/2/3.png'),
        ('.', '0/0/0.png', './0/0/0.png'),
        ('http://example.com/tiles', 'https://other.com/x.png', 'https://other.com/x.png'),
    ])
    def test_join(self, first, second, expected):
        assert join_urls(first, second) == expected


if __name__ == "__main__":
    pytest.main([__file__])
