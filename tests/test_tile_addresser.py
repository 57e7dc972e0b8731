#!/usr/bin/env python3
"""
Tests for TileAddresser
"""

import math
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from tms_provider.exceptions.tms_provider_exceptions import OutOfRangeAddressError
from tms_provider.models.geometry import Rectangle
from tms_provider.models.provider_config import ResolvedConfig
from tms_provider.services.tile_addresser import TileAddresser
from tms_provider.utils.tiling_schemes import GeographicTilingScheme, WebMercatorTilingScheme


def make_config(scheme=None, rectangle=None, minimum_level=0, maximum_level=None, extension='png'):
    scheme = scheme or WebMercatorTilingScheme()
    return ResolvedConfig(
        file_extension=extension,
        tile_width=256,
        tile_height=256,
        minimum_level=minimum_level,
        maximum_level=maximum_level,
        tiling_scheme=scheme,
        rectangle=rectangle or scheme.rectangle,
    )


class TestRowFlip:
    """TMS rows count from the south"""
    
    def test_top_row_maps_to_last_tms_row(self):
        addresser = TileAddresser('http://example.com/tiles', make_config())
        assert addresser.address_of(1, 0, 2) == 'http://example.com/tiles/2/1/3.png'
    
    def test_bottom_row_maps_to_first_tms_row(self):
        addresser = TileAddresser('http://example.com/tiles', make_config())
        assert addresser.address_of(1, 3, 2) == 'http://example.com/tiles/2/1/0.png'
    
    def test_flip_twice_is_identity(self):
        addresser = TileAddresser('http://example.com/tiles', make_config())
        for y in range(4):
            assert addresser.flipped_row(addresser.flipped_row(y, 2), 2) == y
    
    def test_level_zero(self):
        addresser = TileAddresser('http://example.com/tiles', make_config())
        assert addresser.address_of(0, 0, 0) == 'http://example.com/tiles/0/0/0.png'
    
    def test_geographic_rows(self):
        # Two columns, one row at level zero; four rows at level two
        config = make_config(scheme=GeographicTilingScheme(), extension='jpg')
        addresser = TileAddresser('tiles', config)
        
        assert addresser.address_of(1, 0, 0) == 'tiles/0/1/0.jpg'
        assert addresser.address_of(7, 1, 2) == 'tiles/2/7/2.jpg'


class TestBaseUrl:
    """Base location joined without doubled slashes"""
    
    def test_trailing_slash_tolerated(self):
        addresser = TileAddresser('http://example.com/tiles/', make_config())
        assert addresser.address_of(0, 0, 1) == 'http://example.com/tiles/1/0/1.png'


class TestValidation:
    """Out of range addresses"""
    
    def test_level_below_minimum(self):
        addresser = TileAddresser('tiles', make_config(minimum_level=2))
        with pytest.raises(OutOfRangeAddressError):
            addresser.address_of(0, 0, 1)
    
    def test_level_above_maximum(self):
        addresser = TileAddresser('tiles', make_config(maximum_level=3))
        with pytest.raises(OutOfRangeAddressError):
            addresser.address_of(0, 0, 4)
    
    def test_unbounded_maximum_level(self):
        addresser = TileAddresser('tiles', make_config(maximum_level=None))
        assert addresser.address_of(0, 0, 18) == f"tiles/18/0/{2 ** 18 - 1}.png"
    
    def test_outside_grid(self):
        addresser = TileAddresser('tiles', make_config())
        with pytest.raises(OutOfRangeAddressError):
            addresser.address_of(4, 0, 2)
        with pytest.raises(OutOfRangeAddressError):
            addresser.address_of(0, -1, 2)
    
    def test_outside_rectangle(self):
        # North-east quarter of the world only
        config = make_config(scheme=GeographicTilingScheme(),
                             rectangle=Rectangle.from_degrees(10.0, 10.0, 170.0, 80.0))
        addresser = TileAddresser('tiles', config)
        
        assert addresser.address_of(1, 0, 0) == 'tiles/0/1/0.png'
        with pytest.raises(OutOfRangeAddressError):
            addresser.address_of(0, 0, 0)
    
    def test_tile_sharing_only_an_edge(self):
        # Western hemisphere only; the eastern tile meets it along the prime meridian
        config = make_config(scheme=GeographicTilingScheme(),
                             rectangle=Rectangle(-math.pi, -math.pi / 2.0, 0.0, math.pi / 2.0))
        addresser = TileAddresser('tiles', config)
        
        assert addresser.address_of(0, 0, 0) == 'tiles/0/0/0.png'
        with pytest.raises(OutOfRangeAddressError):
            addresser.address_of(1, 0, 0)
    
    def test_tile_sharing_only_a_corner(self):
        config = make_config(scheme=GeographicTilingScheme(),
                             rectangle=Rectangle.from_degrees(0.0, 0.0, 45.0, 45.0))
        addresser = TileAddresser('tiles', config)
        
        # Level 2 tile 4/1 covers the rectangle exactly; tile 5/2 meets it only at 45E, 0N
        assert addresser.address_of(4, 1, 2) == 'tiles/2/4/2.png'
        with pytest.raises(OutOfRangeAddressError):
            addresser.address_of(5, 2, 2)
    
    def test_validation_disabled(self):
        addresser = TileAddresser('tiles', make_config(minimum_level=2), validate=False)
        assert addresser.address_of(0, 0, 1) == 'tiles/1/0/1.png'


if __name__ == "__main__":
    pytest.main([__file__])
