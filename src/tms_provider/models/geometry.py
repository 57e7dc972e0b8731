import math
from dataclasses import dataclass, replace
from typing import ClassVar

from shapely.geometry import MultiPolygon, box
from shapely.geometry.base import BaseGeometry


@dataclass(frozen=True)
class Cartographic:
    """Geographic position, longitude/latitude in radians"""
    longitude: float
    latitude: float
    height: float = 0.0
    
    @classmethod
    def from_degrees(cls, longitude: float, latitude: float, height: float = 0.0) -> 'Cartographic':
        """Create a position from degrees"""
        return cls(math.radians(longitude), math.radians(latitude), height)


@dataclass(frozen=True)
class Ellipsoid:
    """Reference ellipsoid, radii in meters"""
    radii_x: float
    radii_y: float
    radii_z: float
    
    WGS84: ClassVar['Ellipsoid']
    
    @property
    def maximum_radius(self) -> float:
        return max(self.radii_x, self.radii_y, self.radii_z)


Ellipsoid.WGS84 = Ellipsoid(6378137.0, 6378137.0, 6356752.3142451793)


@dataclass(frozen=True)
class Rectangle:
    """Geographic rectangle, edges in radians"""
    west: float
    south: float
    east: float
    north: float
    
    MAX_VALUE: ClassVar['Rectangle']
    
    @classmethod
    def from_degrees(cls, west: float, south: float, east: float, north: float) -> 'Rectangle':
        """Create a rectangle from edges in degrees"""
        return cls(math.radians(west), math.radians(south),
                   math.radians(east), math.radians(north))
    
    @classmethod
    def from_corners(cls, southwest: Cartographic, northeast: Cartographic) -> 'Rectangle':
        return cls(southwest.longitude, southwest.latitude,
                   northeast.longitude, northeast.latitude)
    
    @property
    def width(self) -> float:
        east = self.east
        if east < self.west:
            east += 2.0 * math.pi
        return east - self.west
    
    @property
    def height(self) -> float:
        return self.north - self.south
    
    def southwest(self) -> Cartographic:
        return Cartographic(self.west, self.south)
    
    def northeast(self) -> Cartographic:
        return Cartographic(self.east, self.north)
    
    def contains(self, position: Cartographic) -> bool:
        """Inclusive containment test, honoring rectangles that cross the antimeridian"""
        longitude = position.longitude
        latitude = position.latitude
        west = self.west
        east = self.east
        
        if east < west:
            east += 2.0 * math.pi
            if longitude < 0.0:
                longitude += 2.0 * math.pi
        
        return (west <= longitude <= east and
                self.south <= latitude <= self.north)
    
    def clamped_to(self, bounds: 'Rectangle') -> 'Rectangle':
        """Return a copy whose edges do not extend past ``bounds``.
        
        Each edge is tightened independently; an edge already inside
        ``bounds`` is left as is, so the result is never wider than self.
        """
        return replace(
            self,
            west=max(self.west, bounds.west),
            south=max(self.south, bounds.south),
            east=min(self.east, bounds.east),
            north=min(self.north, bounds.north),
        )
    
    def to_geometry(self) -> BaseGeometry:
        """Shapely geometry in radian space, split in two at the antimeridian if needed"""
        if self.east < self.west:
            return MultiPolygon([
                box(self.west, self.south, math.pi, self.north),
                box(-math.pi, self.south, self.east, self.north),
            ])
        return box(self.west, self.south, self.east, self.north)
    
    def to_degrees(self) -> list:
        """Edges as [west, south, east, north] in degrees"""
        return [math.degrees(self.west), math.degrees(self.south),
                math.degrees(self.east), math.degrees(self.north)]


Rectangle.MAX_VALUE = Rectangle(-math.pi, -math.pi / 2.0, math.pi, math.pi / 2.0)
