"""Geographic and Web Mercator tiling schemes.

Both follow the usual globe tiling conventions: tile (0, 0) is the
north-west tile of the pyramid, columns grow eastward and rows grow
southward. TMS files rows from the south, see TileAddresser.
"""
import math
from typing import Optional, Tuple

from tms_provider.interfaces.tiling_scheme import IProjection, ITilingScheme
from tms_provider.models.geometry import Cartographic, Ellipsoid, Rectangle


class GeographicProjection(IProjection):
    """Equirectangular projection: longitude and latitude scaled by the semimajor axis"""
    
    def __init__(self, ellipsoid: Optional[Ellipsoid] = None):
        self._ellipsoid = ellipsoid or Ellipsoid.WGS84
        self._semimajor_axis = self._ellipsoid.maximum_radius
    
    @property
    def ellipsoid(self) -> Ellipsoid:
        return self._ellipsoid
    
    def project(self, position: Cartographic) -> Tuple[float, float]:
        return (position.longitude * self._semimajor_axis,
                position.latitude * self._semimajor_axis)
    
    def unproject(self, xy: Tuple[float, float]) -> Cartographic:
        x, y = xy
        return Cartographic(x / self._semimajor_axis, y / self._semimajor_axis)


class WebMercatorProjection(IProjection):
    """Spherical Mercator projection (EPSG:3857)"""
    
    MAXIMUM_LATITUDE = math.pi / 2.0 - 2.0 * math.atan(math.exp(-math.pi))
    
    def __init__(self, ellipsoid: Optional[Ellipsoid] = None):
        self._ellipsoid = ellipsoid or Ellipsoid.WGS84
        self._semimajor_axis = self._ellipsoid.maximum_radius
    
    @property
    def ellipsoid(self) -> Ellipsoid:
        return self._ellipsoid
    
    @staticmethod
    def mercator_angle_to_geodetic_latitude(mercator_angle: float) -> float:
        return math.pi / 2.0 - 2.0 * math.atan(math.exp(-mercator_angle))
    
    @staticmethod
    def geodetic_latitude_to_mercator_angle(latitude: float) -> float:
        # Poles are at infinity; clamp to the square extent
        limit = WebMercatorProjection.MAXIMUM_LATITUDE
        latitude = max(-limit, min(limit, latitude))
        sin_latitude = math.sin(latitude)
        return 0.5 * math.log((1.0 + sin_latitude) / (1.0 - sin_latitude))
    
    def project(self, position: Cartographic) -> Tuple[float, float]:
        return (position.longitude * self._semimajor_axis,
                self.geodetic_latitude_to_mercator_angle(position.latitude) * self._semimajor_axis)
    
    def unproject(self, xy: Tuple[float, float]) -> Cartographic:
        x, y = xy
        one_over_semimajor = 1.0 / self._semimajor_axis
        return Cartographic(x * one_over_semimajor,
                            self.mercator_angle_to_geodetic_latitude(y * one_over_semimajor))


class _LevelZeroGrid:
    """Shared tile counting for schemes with a fixed level zero grid"""
    
    def __init__(self, level_zero_tiles_x: int, level_zero_tiles_y: int):
        self._level_zero_tiles_x = level_zero_tiles_x
        self._level_zero_tiles_y = level_zero_tiles_y
    
    def number_of_x_tiles_at_level(self, level: int) -> int:
        return self._level_zero_tiles_x << level
    
    def number_of_y_tiles_at_level(self, level: int) -> int:
        return self._level_zero_tiles_y << level


class GeographicTilingScheme(_LevelZeroGrid, ITilingScheme):
    """Tiling scheme in plain longitude/latitude, two tiles wide at level zero"""
    
    def __init__(self, ellipsoid: Optional[Ellipsoid] = None,
                 rectangle: Optional[Rectangle] = None,
                 level_zero_tiles_x: int = 2, level_zero_tiles_y: int = 1):
        super().__init__(level_zero_tiles_x, level_zero_tiles_y)
        self._ellipsoid = ellipsoid or Ellipsoid.WGS84
        self._rectangle = rectangle or Rectangle.MAX_VALUE
        self._projection = GeographicProjection(self._ellipsoid)
    
    @property
    def ellipsoid(self) -> Ellipsoid:
        return self._ellipsoid
    
    @property
    def rectangle(self) -> Rectangle:
        return self._rectangle
    
    @property
    def projection(self) -> IProjection:
        return self._projection
    
    def position_to_tile_xy(self, position: Cartographic, level: int) -> Optional[Tuple[int, int]]:
        rectangle = self._rectangle
        if not rectangle.contains(position):
            return None
        
        x_tiles = self.number_of_x_tiles_at_level(level)
        y_tiles = self.number_of_y_tiles_at_level(level)
        x_tile_width = rectangle.width / x_tiles
        y_tile_height = rectangle.height / y_tiles
        
        longitude = position.longitude
        if rectangle.east < rectangle.west:
            longitude += 2.0 * math.pi
        
        x = min(int((longitude - rectangle.west) / x_tile_width), x_tiles - 1)
        y = min(int((rectangle.north - position.latitude) / y_tile_height), y_tiles - 1)
        return x, y
    
    def tile_xy_to_rectangle(self, x: int, y: int, level: int) -> Rectangle:
        rectangle = self._rectangle
        x_tile_width = rectangle.width / self.number_of_x_tiles_at_level(level)
        y_tile_height = rectangle.height / self.number_of_y_tiles_at_level(level)
        
        west = rectangle.west + x * x_tile_width
        north = rectangle.north - y * y_tile_height
        return Rectangle(west, north - y_tile_height, west + x_tile_width, north)


class WebMercatorTilingScheme(_LevelZeroGrid, ITilingScheme):
    """Spherical Mercator tiling scheme, one square tile at level zero"""
    
    def __init__(self, ellipsoid: Optional[Ellipsoid] = None,
                 level_zero_tiles_x: int = 1, level_zero_tiles_y: int = 1):
        super().__init__(level_zero_tiles_x, level_zero_tiles_y)
        self._ellipsoid = ellipsoid or Ellipsoid.WGS84
        self._projection = WebMercatorProjection(self._ellipsoid)
        
        semimajor_axis = self._ellipsoid.maximum_radius
        self._southwest_meters = (-semimajor_axis * math.pi, -semimajor_axis * math.pi)
        self._northeast_meters = (semimajor_axis * math.pi, semimajor_axis * math.pi)
        
        self._rectangle = Rectangle.from_corners(
            self._projection.unproject(self._southwest_meters),
            self._projection.unproject(self._northeast_meters),
        )
    
    @property
    def ellipsoid(self) -> Ellipsoid:
        return self._ellipsoid
    
    @property
    def rectangle(self) -> Rectangle:
        return self._rectangle
    
    @property
    def projection(self) -> IProjection:
        return self._projection
    
    def _tile_size_meters(self, level: int) -> Tuple[float, float]:
        width = self._northeast_meters[0] - self._southwest_meters[0]
        height = self._northeast_meters[1] - self._southwest_meters[1]
        return (width / self.number_of_x_tiles_at_level(level),
                height / self.number_of_y_tiles_at_level(level))
    
    def position_to_tile_xy(self, position: Cartographic, level: int) -> Optional[Tuple[int, int]]:
        if not self._rectangle.contains(position):
            return None
        
        x_tiles = self.number_of_x_tiles_at_level(level)
        y_tiles = self.number_of_y_tiles_at_level(level)
        x_tile_width, y_tile_height = self._tile_size_meters(level)
        
        x_meters, y_meters = self._projection.project(position)
        x = min(int((x_meters - self._southwest_meters[0]) / x_tile_width), x_tiles - 1)
        y = min(int((self._northeast_meters[1] - y_meters) / y_tile_height), y_tiles - 1)
        return x, y
    
    def tile_xy_to_rectangle(self, x: int, y: int, level: int) -> Rectangle:
        x_tile_width, y_tile_height = self._tile_size_meters(level)
        
        west = self._southwest_meters[0] + x * x_tile_width
        north = self._northeast_meters[1] - y * y_tile_height
        southwest = self._projection.unproject((west, north - y_tile_height))
        northeast = self._projection.unproject((west + x_tile_width, north))
        return Rectangle.from_corners(southwest, northeast)
