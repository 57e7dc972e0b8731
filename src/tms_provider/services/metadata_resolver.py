import logging
from typing import Optional

from tms_provider.exceptions.tms_provider_exceptions import FatalConfigError
from tms_provider.interfaces.tiling_scheme import ITilingScheme
from tms_provider.models.capabilities import CapabilitiesDocument
from tms_provider.models.geometry import Cartographic, Rectangle
from tms_provider.models.provider_config import Overrides, ResolvedConfig
from tms_provider.utils.tiling_schemes import GeographicTilingScheme, WebMercatorTilingScheme


class MetadataResolver:
    """Combines a capabilities document with caller overrides into a ResolvedConfig.
    
    Overrides always win. Profiles written by gdal2tiles ('geodetic',
    'mercator') store the bounding box with X and Y swapped and always in
    degrees; the TMS standard profiles ('global-geodetic',
    'global-mercator') use longitude for X and the scheme's native units.
    """
    
    GEOGRAPHIC_PROFILES = ('geodetic', 'global-geodetic')
    MERCATOR_PROFILES = ('mercator', 'global-mercator')
    FLIPPED_PROFILES = ('geodetic', 'mercator')
    
    # More tiles than this at the minimum level means it is not really a minimum
    MAX_MINIMUM_LEVEL_TILES = 4
    
    DEFAULT_FILE_EXTENSION = 'png'
    DEFAULT_TILE_SIZE = 256
    
    def __init__(self):
        self.logger = logging.getLogger('MetadataResolver')
    
    def resolve(self, document: Optional[CapabilitiesDocument], overrides: Overrides) -> ResolvedConfig:
        """Resolve a configuration; ``document`` is None when it could not be loaded"""
        if document is None:
            return self.resolve_fallback(overrides)
        return self._resolve_document(document, overrides)
    
    def resolve_fallback(self, overrides: Overrides) -> ResolvedConfig:
        """Defaults used when the capabilities document is unreachable or unparseable"""
        tiling_scheme = overrides.tiling_scheme
        if tiling_scheme is None:
            tiling_scheme = WebMercatorTilingScheme(ellipsoid=overrides.ellipsoid)
        
        rectangle = overrides.rectangle
        if rectangle is None:
            rectangle = tiling_scheme.rectangle
        
        config = ResolvedConfig(
            file_extension=self._first_defined(overrides.file_extension, self.DEFAULT_FILE_EXTENSION),
            tile_width=self._first_defined(overrides.tile_width, self.DEFAULT_TILE_SIZE),
            tile_height=self._first_defined(overrides.tile_height, self.DEFAULT_TILE_SIZE),
            minimum_level=self._first_defined(overrides.minimum_level, 0),
            maximum_level=overrides.maximum_level,
            tiling_scheme=tiling_scheme,
            rectangle=rectangle,
            flip_xy=False,
        )
        self.logger.info(f"Using default configuration: {self.describe(config)}")
        return config
    
    def _resolve_document(self, document: CapabilitiesDocument, overrides: Overrides) -> ResolvedConfig:
        source_url = document.source_url
        
        file_extension, tile_width, tile_height = self._resolve_tile_format(document, overrides)
        if not document.has_tilesets:
            raise FatalConfigError(f"{source_url} has no TileSets element", source_url=source_url)
        
        minimum_level, maximum_level = self._resolve_levels(document, overrides)
        
        profile = document.profile
        flip_xy = profile in self.FLIPPED_PROFILES
        tiling_scheme = overrides.tiling_scheme
        if tiling_scheme is None:
            tiling_scheme = self._tiling_scheme_for_profile(profile, overrides, source_url)
        
        rectangle = overrides.rectangle
        if rectangle is None:
            rectangle = self._rectangle_from_bounding_box(document, tiling_scheme, flip_xy)
        
        rectangle = self._clamp_rectangle(rectangle, tiling_scheme, source_url)
        
        minimum_level = self._relax_minimum_level(tiling_scheme, rectangle, minimum_level)
        
        config = ResolvedConfig(
            file_extension=file_extension,
            tile_width=tile_width,
            tile_height=tile_height,
            minimum_level=minimum_level,
            maximum_level=maximum_level,
            tiling_scheme=tiling_scheme,
            rectangle=rectangle,
            flip_xy=flip_xy,
        )
        self.logger.info(f"Resolved {source_url} (profile={profile}): {self.describe(config)}")
        return config
    
    def _resolve_tile_format(self, document: CapabilitiesDocument, overrides: Overrides):
        tile_format = document.tile_format
        if tile_format is None:
            if None in (overrides.file_extension, overrides.tile_width, overrides.tile_height):
                raise FatalConfigError(
                    f"{document.source_url} has no TileFormat element and the file extension "
                    f"and tile size were not all supplied",
                    source_url=document.source_url)
            return overrides.file_extension, overrides.tile_width, overrides.tile_height
        
        values = (
            self._first_defined(overrides.file_extension, tile_format.extension),
            self._first_defined(overrides.tile_width, tile_format.width),
            self._first_defined(overrides.tile_height, tile_format.height),
        )
        if None in values:
            raise FatalConfigError(
                f"{document.source_url} TileFormat is missing extension, width or height",
                source_url=document.source_url)
        return values
    
    def _resolve_levels(self, document: CapabilitiesDocument, overrides: Overrides):
        # Document order is trusted to be ascending; it is not sorted here
        tilesets = document.tilesets
        minimum_level = overrides.minimum_level
        maximum_level = overrides.maximum_level
        
        if minimum_level is None and tilesets:
            minimum_level = tilesets[0].order
        if maximum_level is None and tilesets:
            maximum_level = tilesets[-1].order
        
        if minimum_level is None or maximum_level is None:
            raise FatalConfigError(
                f"{document.source_url} does not list TileSet orders for the zoom levels",
                source_url=document.source_url)
        if minimum_level > maximum_level:
            raise FatalConfigError(
                f"{document.source_url} resolves to minimum level {minimum_level} "
                f"above maximum level {maximum_level}",
                source_url=document.source_url)
        return minimum_level, maximum_level
    
    def _tiling_scheme_for_profile(self, profile: Optional[str], overrides: Overrides,
                                   source_url: str) -> ITilingScheme:
        if profile in self.GEOGRAPHIC_PROFILES:
            return GeographicTilingScheme(ellipsoid=overrides.ellipsoid)
        if profile in self.MERCATOR_PROFILES:
            return WebMercatorTilingScheme(ellipsoid=overrides.ellipsoid)
        
        message = f"{source_url} specifies an unsupported profile attribute, {profile}."
        self.logger.error(message)
        raise FatalConfigError(message, profile=profile, source_url=source_url)
    
    def _rectangle_from_bounding_box(self, document: CapabilitiesDocument,
                                     tiling_scheme: ITilingScheme, flip_xy: bool) -> Rectangle:
        bbox = document.bounding_box
        if bbox is None or not bbox.is_complete():
            raise FatalConfigError(
                f"{document.source_url} has no complete BoundingBox and no rectangle was supplied",
                source_url=document.source_url)
        
        if flip_xy:
            # Old tilers: X is latitude, Y is longitude, always degrees
            southwest = Cartographic.from_degrees(bbox.miny, bbox.minx)
            northeast = Cartographic.from_degrees(bbox.maxy, bbox.maxx)
        elif isinstance(tiling_scheme, GeographicTilingScheme):
            southwest = Cartographic.from_degrees(bbox.minx, bbox.miny)
            northeast = Cartographic.from_degrees(bbox.maxx, bbox.maxy)
        else:
            projection = tiling_scheme.projection
            southwest = projection.unproject((bbox.minx, bbox.miny))
            northeast = projection.unproject((bbox.maxx, bbox.maxy))
        
        return Rectangle.from_corners(southwest, northeast)
    
    def _clamp_rectangle(self, rectangle: Rectangle, tiling_scheme: ITilingScheme,
                         source_url: str) -> Rectangle:
        crosses_antimeridian = rectangle.east < rectangle.west
        clamped = rectangle.clamped_to(tiling_scheme.rectangle)
        
        if clamped.south > clamped.north or (
                not crosses_antimeridian and clamped.east < clamped.west):
            west, south, east, north = rectangle.to_degrees()
            raise FatalConfigError(
                f"Rectangle [{west:.6f}, {south:.6f}, {east:.6f}, {north:.6f}] for {source_url} "
                f"lies outside the {type(tiling_scheme).__name__} extent",
                source_url=source_url)
        return clamped
    
    def _relax_minimum_level(self, tiling_scheme: ITilingScheme, rectangle: Rectangle,
                             minimum_level: int) -> int:
        southwest_tile = tiling_scheme.position_to_tile_xy(rectangle.southwest(), minimum_level)
        northeast_tile = tiling_scheme.position_to_tile_xy(rectangle.northeast(), minimum_level)
        if southwest_tile is None or northeast_tile is None:
            self.logger.warning(f"Rectangle {rectangle} falls outside the tiling scheme; "
                                f"keeping minimum level {minimum_level}")
            return minimum_level
        
        tile_count = ((abs(northeast_tile[0] - southwest_tile[0]) + 1) *
                      (abs(northeast_tile[1] - southwest_tile[1]) + 1))
        if tile_count > self.MAX_MINIMUM_LEVEL_TILES:
            self.logger.info(f"{tile_count} tiles at minimum level {minimum_level}, "
                             f"requesting from level 0 instead")
            return 0
        return minimum_level
    
    @staticmethod
    def _first_defined(*values):
        for value in values:
            if value is not None:
                return value
        return None
    
    @staticmethod
    def describe(config: ResolvedConfig) -> str:
        """One line summary of a configuration for logs and the CLI"""
        west, south, east, north = config.rectangle.to_degrees()
        maximum = 'unbounded' if config.maximum_level is None else config.maximum_level
        return (f"{type(config.tiling_scheme).__name__} "
                f"{config.tile_width}x{config.tile_height} .{config.file_extension} "
                f"levels {config.minimum_level}-{maximum} "
                f"rectangle [{west:.6f}, {south:.6f}, {east:.6f}, {north:.6f}] "
                f"flip_xy={config.flip_xy}")
