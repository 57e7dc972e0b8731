import logging
import xml.etree.ElementTree as ET
from typing import Callable, List, Optional, TypeVar

from tms_provider.exceptions.tms_provider_exceptions import MetadataParseError
from tms_provider.models.capabilities import BoundingBox, CapabilitiesDocument, TileFormat, TileSet

T = TypeVar('T')

logger = logging.getLogger('CapabilitiesParser')


class CapabilitiesParser:
    """Turns tilemapresource.xml text into a CapabilitiesDocument.
    
    Node names are matched case-insensitively by substring, so both
    ``TileFormat`` and ``tms:tileformat`` are recognised. Only the first
    node of each kind is used.
    """
    
    @staticmethod
    def _local_name(element: ET.Element) -> str:
        tag = element.tag if isinstance(element.tag, str) else ''
        if '}' in tag:
            tag = tag.rsplit('}', 1)[1]
        return tag.lower()
    
    @staticmethod
    def _attribute(element: ET.Element, name: str, convert: Callable[[str], T],
                   source_url: str) -> Optional[T]:
        value = element.attrib.get(name)
        if value is None:
            return None
        try:
            return convert(value.strip())
        except ValueError as e:
            raise MetadataParseError(
                f"Invalid {name} attribute '{value}' on {element.tag} in {source_url}: {e}")
    
    @classmethod
    def parse(cls, text: str, source_url: str) -> CapabilitiesDocument:
        """Parse document text; raise MetadataParseError if it is not usable XML"""
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise MetadataParseError(f"Failed to parse {source_url}: {e}")
        
        tile_format = None
        profile = None
        has_tilesets = False
        tilesets: List[TileSet] = []
        bounding_box = None
        srs = None
        
        for node in root:
            name = cls._local_name(node)
            
            if 'tileformat' in name:
                if tile_format is not None:
                    logger.debug(f"Ignoring extra {node.tag} node in {source_url}")
                    continue
                tile_format = TileFormat(
                    extension=node.attrib.get('extension'),
                    width=cls._attribute(node, 'width', int, source_url),
                    height=cls._attribute(node, 'height', int, source_url),
                )
            elif 'tilesets' in name:
                if has_tilesets:
                    logger.debug(f"Ignoring extra {node.tag} node in {source_url}")
                    continue
                has_tilesets = True
                profile = node.attrib.get('profile')
                for child in node:
                    if 'tileset' in cls._local_name(child):
                        tilesets.append(TileSet(order=cls._attribute(child, 'order', int, source_url)))
            elif 'boundingbox' in name:
                if bounding_box is not None:
                    continue
                bounding_box = BoundingBox(
                    minx=cls._attribute(node, 'minx', float, source_url),
                    miny=cls._attribute(node, 'miny', float, source_url),
                    maxx=cls._attribute(node, 'maxx', float, source_url),
                    maxy=cls._attribute(node, 'maxy', float, source_url),
                )
            elif 'srs' in name:
                if srs is None:
                    srs = (node.text or '').strip()
        
        return CapabilitiesDocument(
            source_url=source_url,
            tile_format=tile_format,
            profile=profile,
            has_tilesets=has_tilesets,
            tilesets=tilesets,
            bounding_box=bounding_box,
            srs=srs,
        )
