from typing import Optional


class TileMapServiceException(Exception):
    """Base exception for the tile map service provider"""
    pass


class ConfigurationError(TileMapServiceException):
    """Configuration related errors"""
    pass


class ValidationError(ConfigurationError):
    """Validation related errors"""
    pass


class FatalConfigError(ConfigurationError):
    """Capabilities document cannot be turned into a usable configuration"""

    def __init__(self, message: str, profile: Optional[str] = None,
                 source_url: Optional[str] = None):
        super().__init__(message)
        self.profile = profile
        self.source_url = source_url


class MetadataUnavailableError(TileMapServiceException):
    """Capabilities document could not be fetched"""
    pass


class MetadataParseError(MetadataUnavailableError):
    """Capabilities document could not be parsed"""
    pass


class OutOfRangeAddressError(TileMapServiceException):
    """Tile address outside the provider's levels, grid or rectangle"""
    pass


class ProviderNotReadyError(TileMapServiceException):
    """Provider used before it became ready"""
    pass


class DownloadError(TileMapServiceException):
    """Download related errors"""
    pass
