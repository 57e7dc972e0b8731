import json
import os
from typing import Any, Dict

from tms_provider.exceptions.tms_provider_exceptions import ConfigurationError, ValidationError
from tms_provider.models.geometry import Ellipsoid, Rectangle
from tms_provider.models.provider_config import Overrides
from tms_provider.utils.tiling_schemes import GeographicTilingScheme, WebMercatorTilingScheme


class ConfigService:
    """Service for loading and validating provider configuration"""
    
    TILING_SCHEMES = {
        'geographic': GeographicTilingScheme,
        'web-mercator': WebMercatorTilingScheme,
    }
    
    INTEGER_KEYS = ('tile_width', 'tile_height', 'minimum_level', 'maximum_level',
                    'timeout', 'retry_attempts')
    
    def load_config(self, config_path: str) -> Dict[str, Any]:
        """Load configuration from JSON file"""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Config file {config_path} not found!")
        
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {config_path}: {e}")
        
        self.validate_config(config)
        return config
    
    def validate_config(self, config: Dict[str, Any]) -> bool:
        """Validate configuration structure"""
        if not isinstance(config, dict):
            raise ValidationError("Configuration must be a JSON object")
        
        if not config.get('url'):
            raise ValidationError("Missing required key: url")
        
        for key in self.INTEGER_KEYS:
            value = config.get(key)
            if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
                raise ValidationError(f"{key} must be a non-negative integer")
        
        for key in ('tile_width', 'tile_height'):
            if config.get(key) == 0:
                raise ValidationError(f"{key} must be positive")
        
        minimum = config.get('minimum_level')
        maximum = config.get('maximum_level')
        if minimum is not None and maximum is not None and minimum > maximum:
            raise ValidationError("minimum_level must not exceed maximum_level")
        
        if 'rectangle' in config and 'rectangle_degrees' in config:
            raise ValidationError("Use either rectangle or rectangle_degrees, not both")
        
        for key in ('rectangle', 'rectangle_degrees'):
            bounds = config.get(key)
            if bounds is None:
                continue
            if not isinstance(bounds, list) or len(bounds) != 4 or not all(map(self._is_number, bounds)):
                raise ValidationError(f"{key} must be [west, south, east, north] numbers")
            if bounds[1] > bounds[3]:
                raise ValidationError(f"{key} south must not exceed north")
        
        scheme = config.get('tiling_scheme')
        if scheme is not None and scheme not in self.TILING_SCHEMES:
            raise ValidationError(
                f"tiling_scheme must be one of {', '.join(sorted(self.TILING_SCHEMES))}")
        
        ellipsoid = config.get('ellipsoid')
        if ellipsoid is not None and ellipsoid != 'WGS84':
            if (not isinstance(ellipsoid, list) or len(ellipsoid) != 3 or
                    not all(self._is_number(radius) and radius > 0 for radius in ellipsoid)):
                raise ValidationError("ellipsoid must be 'WGS84' or three positive radii in meters")
        
        return True
    
    @staticmethod
    def _is_number(value: Any) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    
    def build_overrides(self, config: Dict[str, Any]) -> Overrides:
        """Convert a validated configuration into provider overrides"""
        rectangle = None
        if config.get('rectangle') is not None:
            rectangle = Rectangle(*config['rectangle'])
        elif config.get('rectangle_degrees') is not None:
            rectangle = Rectangle.from_degrees(*config['rectangle_degrees'])
        
        ellipsoid = None
        if isinstance(config.get('ellipsoid'), list):
            ellipsoid = Ellipsoid(*config['ellipsoid'])
        elif config.get('ellipsoid') == 'WGS84':
            ellipsoid = Ellipsoid.WGS84
        
        tiling_scheme = None
        if config.get('tiling_scheme') is not None:
            tiling_scheme = self.TILING_SCHEMES[config['tiling_scheme']](ellipsoid=ellipsoid)
        
        return Overrides(
            file_extension=config.get('file_extension'),
            tile_width=config.get('tile_width'),
            tile_height=config.get('tile_height'),
            minimum_level=config.get('minimum_level'),
            maximum_level=config.get('maximum_level'),
            rectangle=rectangle,
            tiling_scheme=tiling_scheme,
            ellipsoid=ellipsoid,
        )
