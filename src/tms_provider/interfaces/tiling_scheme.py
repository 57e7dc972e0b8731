from abc import ABC, abstractmethod
from typing import Optional, Tuple

from tms_provider.models.geometry import Cartographic, Ellipsoid, Rectangle


class IProjection(ABC):
    """Interface for map projections between geographic and planar coordinates"""
    
    @property
    @abstractmethod
    def ellipsoid(self) -> Ellipsoid:
        """Get the ellipsoid the projection is based on"""
        pass
    
    @abstractmethod
    def project(self, position: Cartographic) -> Tuple[float, float]:
        """Project a geographic position to planar (x, y) in meters"""
        pass
    
    @abstractmethod
    def unproject(self, xy: Tuple[float, float]) -> Cartographic:
        """Unproject planar (x, y) in meters to a geographic position"""
        pass


class ITilingScheme(ABC):
    """Interface for tiling schemes splitting the globe into a tile pyramid"""
    
    @property
    @abstractmethod
    def ellipsoid(self) -> Ellipsoid:
        """Get the ellipsoid that is tiled"""
        pass
    
    @property
    @abstractmethod
    def rectangle(self) -> Rectangle:
        """Get the maximum extent of the scheme, in radians"""
        pass
    
    @property
    @abstractmethod
    def projection(self) -> IProjection:
        """Get the projection used by the scheme"""
        pass
    
    @abstractmethod
    def number_of_x_tiles_at_level(self, level: int) -> int:
        """Get the number of tile columns at the given level"""
        pass
    
    @abstractmethod
    def number_of_y_tiles_at_level(self, level: int) -> int:
        """Get the number of tile rows at the given level"""
        pass
    
    @abstractmethod
    def position_to_tile_xy(self, position: Cartographic, level: int) -> Optional[Tuple[int, int]]:
        """Get the (x, y) tile containing position, or None when outside the scheme"""
        pass
    
    @abstractmethod
    def tile_xy_to_rectangle(self, x: int, y: int, level: int) -> Rectangle:
        """Get the geographic extent of a tile"""
        pass
