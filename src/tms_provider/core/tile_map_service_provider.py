import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, List, Optional

from tms_provider.exceptions.tms_provider_exceptions import (
    ConfigurationError,
    FatalConfigError,
    MetadataUnavailableError,
    ProviderNotReadyError,
)
from tms_provider.interfaces.tile_source import IMetadataFetcher, IProxy, ITileFetcher
from tms_provider.interfaces.tiling_scheme import ITilingScheme
from tms_provider.models.geometry import Rectangle
from tms_provider.models.provider_config import (
    Overrides,
    ProviderState,
    ResolvedConfig,
    TileProviderError,
)
from tms_provider.services.metadata_resolver import MetadataResolver
from tms_provider.services.request_service import MetadataService, TileRequestService
from tms_provider.services.tile_addresser import TileAddresser
from tms_provider.utils.capabilities_parser import CapabilitiesParser
from tms_provider.utils.url_utils import join_urls

ErrorListener = Callable[[TileProviderError], None]


class TileMapServiceProvider:
    """Imagery provider for tile pyramids published in the TMS layout.
    
    Typical use::
    
        provider = TileMapServiceProvider('https://example.com/tiles')
        provider.initialize()
        provider.wait_until_ready()
        provider.build_tile_url(0, 0, 1)
    
    ``initialize`` fetches ``tilemapresource.xml`` in the background. A
    missing or unreadable document is not fatal: defaults are used and
    error listeners are notified. An unsupported document fails the ready
    future with FatalConfigError and the provider never becomes ready.
    """
    
    METADATA_FILE = 'tilemapresource.xml'
    
    def __init__(self, url: str, overrides: Optional[Overrides] = None,
                 proxy: Optional[IProxy] = None, credit: Optional[str] = None,
                 metadata_fetcher: Optional[IMetadataFetcher] = None,
                 tile_fetcher: Optional[ITileFetcher] = None,
                 executor: Optional[Executor] = None,
                 validate_addresses: bool = True):
        if not url:
            raise ConfigurationError("url is required.")
        
        self.url = url
        self.overrides = overrides or Overrides()
        self.proxy = proxy
        self.credit = credit
        self.metadata_fetcher = metadata_fetcher or MetadataService()
        self.tile_fetcher = tile_fetcher or TileRequestService()
        self.validate_addresses = validate_addresses
        self.logger = logging.getLogger('TileMapServiceProvider')
        
        self._executor = executor
        self._resolver = MetadataResolver()
        self._state = ProviderState.UNINITIALIZED
        self._state_lock = threading.Lock()
        self._ready_future: Future = Future()
        self._error_listeners: List[ErrorListener] = []
        self._config: Optional[ResolvedConfig] = None
        self._addresser: Optional[TileAddresser] = None
    
    @property
    def metadata_source_url(self) -> str:
        """Location of the capabilities document, before proxying"""
        return join_urls(self.url, self.METADATA_FILE)
    
    @property
    def metadata_url(self) -> str:
        """Location the capabilities document is requested from"""
        return self._proxied(self.metadata_source_url)
    
    @property
    def state(self) -> ProviderState:
        return self._state
    
    @property
    def ready(self) -> bool:
        return self._state is ProviderState.READY
    
    @property
    def ready_future(self) -> Future:
        """Completes with the ResolvedConfig, or fails with FatalConfigError"""
        return self._ready_future
    
    @property
    def has_alpha_channel(self) -> bool:
        return True
    
    def add_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.append(listener)
    
    def remove_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.remove(listener)
    
    def initialize(self) -> Future:
        """Start loading metadata; later calls return the same future"""
        with self._state_lock:
            if self._state is not ProviderState.UNINITIALIZED:
                return self._ready_future
            self._state = ProviderState.PENDING_METADATA
        
        if self._executor is not None:
            self._executor.submit(self._load_metadata)
        else:
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='tms-metadata')
            executor.submit(self._load_metadata)
            executor.shutdown(wait=False)
        
        return self._ready_future
    
    def wait_until_ready(self, timeout: Optional[float] = None) -> ResolvedConfig:
        """Block until the provider is ready; re-raises a fatal configuration error"""
        if self._state is ProviderState.UNINITIALIZED:
            self.initialize()
        return self._ready_future.result(timeout=timeout)
    
    def _load_metadata(self) -> None:
        source_url = self.metadata_source_url
        try:
            try:
                text = self.metadata_fetcher.fetch_metadata(self.metadata_url)
                document = CapabilitiesParser.parse(text, source_url)
            except MetadataUnavailableError as e:
                self.logger.warning(f"Metadata unavailable, using defaults: {e}")
                self._raise_error(str(e), e)
                document = None
            
            config = self._resolver.resolve(document, self.overrides)
        
        except FatalConfigError as e:
            self._fail(e)
            return
        except Exception as e:
            self.logger.exception(f"Unexpected error resolving {source_url}")
            self._fail(e)
            return
        
        self._config = config
        self._addresser = TileAddresser(self.url, config, validate=self.validate_addresses)
        self._state = ProviderState.READY
        self._ready_future.set_result(config)
    
    def _fail(self, error: Exception) -> None:
        self._state = ProviderState.FAILED
        self._raise_error(str(error), error)
        self._ready_future.set_exception(error)
    
    def _raise_error(self, message: str, error: Exception) -> None:
        if not self._error_listeners:
            return
        
        provider_error = TileProviderError(provider=self, message=message, error=error)
        for listener in list(self._error_listeners):
            try:
                listener(provider_error)
            except Exception:
                self.logger.exception("Error listener raised")
    
    def _proxied(self, url: str) -> str:
        if self.proxy is not None:
            return self.proxy.get_url(url)
        return url
    
    def _require_ready(self, name: str) -> ResolvedConfig:
        if self._state is not ProviderState.READY:
            raise ProviderNotReadyError(
                f"{name} must not be called before the imagery provider is ready.")
        return self._config
    
    @property
    def config(self) -> ResolvedConfig:
        return self._require_ready('config')
    
    @property
    def file_extension(self) -> str:
        return self._require_ready('file_extension').file_extension
    
    @property
    def tile_width(self) -> int:
        return self._require_ready('tile_width').tile_width
    
    @property
    def tile_height(self) -> int:
        return self._require_ready('tile_height').tile_height
    
    @property
    def minimum_level(self) -> int:
        return self._require_ready('minimum_level').minimum_level
    
    @property
    def maximum_level(self) -> Optional[int]:
        return self._require_ready('maximum_level').maximum_level
    
    @property
    def tiling_scheme(self) -> ITilingScheme:
        return self._require_ready('tiling_scheme').tiling_scheme
    
    @property
    def rectangle(self) -> Rectangle:
        return self._require_ready('rectangle').rectangle
    
    def build_tile_url(self, x: int, y: int, level: int) -> str:
        """Get the (proxied) URL of a tile"""
        self._require_ready('build_tile_url')
        return self._proxied(self._addresser.address_of(x, y, level))
    
    def request_image(self, x: int, y: int, level: int) -> bytes:
        """Fetch the encoded image of a tile"""
        url = self.build_tile_url(x, y, level)
        return self.tile_fetcher.fetch_tile(url)
    
    def get_tile_credits(self, x: int, y: int, level: int):
        return None
    
    def pick_features(self, *args, **kwargs):
        # Feature picking is not supported for TMS imagery
        return None
