from abc import ABC, abstractmethod


class IProxy(ABC):
    """Interface for rewriting resource URLs through a proxy"""
    
    @abstractmethod
    def get_url(self, resource: str) -> str:
        """Get the proxied URL for a resource"""
        pass


class IMetadataFetcher(ABC):
    """Interface for fetching the TMS capabilities document"""
    
    @abstractmethod
    def fetch_metadata(self, url: str) -> str:
        """Fetch the document text; raise MetadataUnavailableError on failure"""
        pass


class ITileFetcher(ABC):
    """Interface for fetching tile payloads"""
    
    @abstractmethod
    def fetch_tile(self, url: str) -> bytes:
        """Fetch tile bytes; raise DownloadError on failure"""
        pass


class ITileAddresser(ABC):
    """Interface for turning tile addresses into resource paths"""
    
    @abstractmethod
    def address_of(self, x: int, y: int, level: int) -> str:
        """Get the resource path of a tile"""
        pass
