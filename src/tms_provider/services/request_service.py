import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from tms_provider.exceptions.tms_provider_exceptions import DownloadError, MetadataUnavailableError
from tms_provider.interfaces.tile_source import IMetadataFetcher, ITileFetcher


class HttpRequestService:
    """Shared session handling for capabilities and tile requests"""
    
    def __init__(self, retry_attempts: int = 3, timeout: int = 30, headers: dict = None):
        self.retry_attempts = retry_attempts
        self.timeout = timeout
        self.headers = headers or {}
        self.logger = logging.getLogger(type(self).__name__)
    
    def create_session(self) -> requests.Session:
        """Create session with connection pooling and retries on transient failures.
        
        ``retry_attempts`` counts the first request, so a failing URL is
        requested at most that many times.
        """
        session = requests.Session()
        
        retry_strategy = Retry(
            total=max(self.retry_attempts - 1, 0),
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"]
        )
        
        adapter = HTTPAdapter(
            max_retries=retry_strategy,
            pool_connections=20,
            pool_maxsize=20
        )
        
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        
        return session
    
    def get(self, url: str) -> requests.Response:
        """GET through a short-lived session; HTTP errors are raised"""
        with self.create_session() as session:
            try:
                response = session.get(url, headers=self.headers, timeout=self.timeout)
                response.raise_for_status()
            except requests.RequestException as e:
                self.logger.debug(f"GET {url} failed after {self.retry_attempts} attempt(s): {e}")
                raise
        return response


class MetadataService(HttpRequestService, IMetadataFetcher):
    """Fetches tilemapresource.xml documents"""
    
    def fetch_metadata(self, url: str) -> str:
        """Fetch the capabilities document text"""
        try:
            response = self.get(url)
        except requests.RequestException as e:
            raise MetadataUnavailableError(f"Failed to fetch {url}: {e}")
        
        if not response.content:
            raise MetadataUnavailableError(f"Empty capabilities document at {url}")
        return response.text


class TileRequestService(HttpRequestService, ITileFetcher):
    """Fetches tile images"""
    
    def fetch_tile(self, url: str) -> bytes:
        """Fetch raw tile bytes"""
        try:
            response = self.get(url)
        except requests.RequestException as e:
            raise DownloadError(f"Failed to download tile {url}: {e}")
        
        content = response.content
        # Reject empty content, an empty body is not a tile
        if not content:
            raise DownloadError(f"Empty content received for tile {url}")
        return content
