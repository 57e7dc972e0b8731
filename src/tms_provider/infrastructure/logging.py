"""Logging configuration"""
import logging
import sys
from typing import Dict, Any

from tms_provider.exceptions.tms_provider_exceptions import ValidationError


class LoggingManager:
    """Manages logging for the provider and its services.
    
    Example ``logging`` section::
    
        {"level": "INFO", "components": {"MetadataResolver": "DEBUG"}}
    """
    
    DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    
    # Named loggers used across the package
    COMPONENT_LOGGERS = (
        'CapabilitiesParser',
        'MetadataResolver',
        'TileAddresser',
        'TileMapServiceProvider',
        'MetadataService',
        'TileRequestService',
    )
    
    @staticmethod
    def parse_level(value: Any) -> int:
        """Turn 'debug', 'DEBUG' or 10 into a logging level"""
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        level = logging.getLevelName(str(value).upper())
        if not isinstance(level, int):
            raise ValidationError(f"Unknown logging level: {value}")
        return level
    
    @staticmethod
    def setup_logging(config: Dict[str, Any]) -> None:
        """Setup logging based on configuration"""
        logging_config = config.get('logging', {})
        
        logging.basicConfig(
            level=LoggingManager.parse_level(logging_config.get('level', 'INFO')),
            format=logging_config.get('format', LoggingManager.DEFAULT_FORMAT),
            stream=sys.stdout
        )
        
        for name, level in logging_config.get('components', {}).items():
            if name not in LoggingManager.COMPONENT_LOGGERS:
                raise ValidationError(
                    f"Unknown logging component {name}; expected one of "
                    f"{', '.join(LoggingManager.COMPONENT_LOGGERS)}")
            logging.getLogger(name).setLevel(LoggingManager.parse_level(level))
        
        # HTTP stack is noisy at DEBUG
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)
