from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from tms_provider.interfaces.tiling_scheme import ITilingScheme
from tms_provider.models.geometry import Ellipsoid, Rectangle


@dataclass(frozen=True)
class Overrides:
    """Caller supplied values that win over the capabilities document"""
    file_extension: Optional[str] = None
    tile_width: Optional[int] = None
    tile_height: Optional[int] = None
    minimum_level: Optional[int] = None
    maximum_level: Optional[int] = None
    rectangle: Optional[Rectangle] = None
    tiling_scheme: Optional[ITilingScheme] = None
    ellipsoid: Optional[Ellipsoid] = None


@dataclass(frozen=True)
class ResolvedConfig:
    """Canonical configuration of a ready provider"""
    file_extension: str
    tile_width: int
    tile_height: int
    minimum_level: int
    maximum_level: Optional[int]  # None means no upper bound
    tiling_scheme: ITilingScheme
    rectangle: Rectangle
    flip_xy: bool = False


class ProviderState(Enum):
    """Lifecycle of a provider"""
    UNINITIALIZED = 'uninitialized'
    PENDING_METADATA = 'pending_metadata'
    READY = 'ready'
    FAILED = 'failed'


@dataclass
class TileProviderError:
    """Payload passed to error listeners"""
    provider: Any
    message: str
    error: Optional[BaseException] = None
