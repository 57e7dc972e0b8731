import logging

from tms_provider.exceptions.tms_provider_exceptions import OutOfRangeAddressError
from tms_provider.interfaces.tile_source import ITileAddresser
from tms_provider.models.provider_config import ResolvedConfig
from tms_provider.utils.url_utils import join_urls


class TileAddresser(ITileAddresser):
    """Maps (x, y, level) tile addresses to TMS resource paths.
    
    Rows are addressed top-down (row 0 is the northernmost row) while TMS
    files them bottom-up, so the row is flipped against the number of rows
    at the level before building ``base/level/x/row.extension``.
    """
    
    def __init__(self, base_url: str, config: ResolvedConfig, validate: bool = True):
        self.base_url = base_url
        self.config = config
        self.validate = validate
        self.logger = logging.getLogger('TileAddresser')
    
    def flipped_row(self, y: int, level: int) -> int:
        """Row index as stored on disk by TMS"""
        y_tiles = self.config.tiling_scheme.number_of_y_tiles_at_level(level)
        return y_tiles - y - 1
    
    def address_of(self, x: int, y: int, level: int) -> str:
        """Get the resource path of a tile"""
        if self.validate:
            self.check_address(x, y, level)
        
        tms_y = self.flipped_row(y, level)
        path = join_urls(self.base_url, f"{level}/{x}/{tms_y}.{self.config.file_extension}")
        self.logger.debug(f"Tile {level}/{x}/{y} -> {path}")
        return path
    
    def check_address(self, x: int, y: int, level: int) -> None:
        """Raise OutOfRangeAddressError if the tile cannot exist for this provider"""
        config = self.config
        if level < config.minimum_level or (
                config.maximum_level is not None and level > config.maximum_level):
            maximum = 'unbounded' if config.maximum_level is None else config.maximum_level
            raise OutOfRangeAddressError(
                f"Level {level} outside [{config.minimum_level}, {maximum}]")
        
        scheme = config.tiling_scheme
        x_tiles = scheme.number_of_x_tiles_at_level(level)
        y_tiles = scheme.number_of_y_tiles_at_level(level)
        if not (0 <= x < x_tiles and 0 <= y < y_tiles):
            raise OutOfRangeAddressError(
                f"Tile {level}/{x}/{y} outside the {x_tiles}x{y_tiles} grid at level {level}")
        
        # Sharing only an edge is not coverage
        tile_geometry = scheme.tile_xy_to_rectangle(x, y, level).to_geometry()
        rectangle_geometry = config.rectangle.to_geometry()
        if not tile_geometry.intersects(rectangle_geometry) or tile_geometry.touches(rectangle_geometry):
            raise OutOfRangeAddressError(
                f"Tile {level}/{x}/{y} does not intersect the provider rectangle")
