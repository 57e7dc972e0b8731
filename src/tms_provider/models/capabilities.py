from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class TileFormat:
    """TileFormat node: pixel geometry and file extension"""
    extension: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True)
class TileSet:
    """TileSet node; order is the zoom level"""
    order: Optional[int] = None


@dataclass(frozen=True)
class BoundingBox:
    """BoundingBox node, units depend on the profile"""
    minx: Optional[float] = None
    miny: Optional[float] = None
    maxx: Optional[float] = None
    maxy: Optional[float] = None
    
    def is_complete(self) -> bool:
        return None not in (self.minx, self.miny, self.maxx, self.maxy)


@dataclass(frozen=True)
class CapabilitiesDocument:
    """Typed view of a tilemapresource.xml document"""
    source_url: str
    tile_format: Optional[TileFormat] = None
    profile: Optional[str] = None
    has_tilesets: bool = False
    tilesets: List[TileSet] = field(default_factory=list)
    bounding_box: Optional[BoundingBox] = None
    srs: Optional[str] = None
