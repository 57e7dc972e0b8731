#!/usr/bin/env python3
"""
TMS Inspector - resolve a Tile Map Service layer and print its configuration
"""

import argparse
import logging
import sys
from concurrent.futures import TimeoutError as FutureTimeoutError

from tms_provider.core.tile_map_service_provider import TileMapServiceProvider
from tms_provider.exceptions.tms_provider_exceptions import TileMapServiceException
from tms_provider.infrastructure.logging import LoggingManager
from tms_provider.services.config_service import ConfigService
from tms_provider.services.metadata_resolver import MetadataResolver
from tms_provider.services.request_service import MetadataService, TileRequestService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Resolve the configuration of a TMS tile pyramid (tilemapresource.xml).',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            'Examples:\n\n'
            '1) Inspect a layer:\n'
            '   tms-inspect https://example.com/tiles/layer\n\n'
            '2) Inspect using a JSON config with overrides and print a tile URL:\n'
            '   tms-inspect --config layer.json --tile 3 4 2\n'
        )
    )
    parser.add_argument('url', nargs='?', help='Base URL of the tile pyramid (overrides "url" in --config)')
    parser.add_argument('--config', help='JSON file with url and optional overrides')
    parser.add_argument('--tile', nargs=3, type=int, metavar=('LEVEL', 'X', 'Y'),
                        help='Also print the URL of this tile (Y counted from the north)')
    parser.add_argument('--no-validate', action='store_true',
                        help='Do not reject tile addresses outside the resolved levels or rectangle')
    parser.add_argument('--timeout', type=float, default=60.0,
                        help='Seconds to wait for the metadata (default: 60)')
    parser.add_argument('--log-level', help='Logging level (default: INFO, or the config file value)')
    return parser


def main(argv=None) -> int:
    """Main entry point for the inspector"""
    args = build_parser().parse_args(argv)
    
    try:
        config_service = ConfigService()
        config = config_service.load_config(args.config) if args.config else {}
        if args.url:
            config['url'] = args.url
        config_service.validate_config(config)
        
        if args.log_level:
            config.setdefault('logging', {})['level'] = args.log_level
        LoggingManager.setup_logging(config)
        logger = logging.getLogger(__name__)
        
        http_options = {
            'retry_attempts': config.get('retry_attempts', 3),
            'timeout': config.get('timeout', 30),
        }
        provider = TileMapServiceProvider(
            config['url'],
            overrides=config_service.build_overrides(config),
            metadata_fetcher=MetadataService(**http_options),
            tile_fetcher=TileRequestService(**http_options),
            validate_addresses=not args.no_validate and config.get('validate_addresses', True),
        )
        logger.info(f"Loading {provider.metadata_url}")
        resolved = provider.wait_until_ready(timeout=args.timeout)
        
        print(MetadataResolver.describe(resolved))
        if args.tile:
            level, x, y = args.tile
            print(provider.build_tile_url(x, y, level))
        return 0
    
    except TileMapServiceException as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    except FutureTimeoutError:
        print(f"\nError: metadata did not load within {args.timeout} seconds", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
