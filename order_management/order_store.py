"""
Writes pulled orders to disk, one XML file per order.

File names follow `<YYYYmmdd-HHMMSS>-<order_id>-GetOrders_Response.xml` so that
downstream importers can pick them up in arrival order. The directory is only
ever appended to; nothing here reads or deletes earlier files.
"""

import os
import re
import logging
from datetime import datetime
from xml.dom.minidom import parseString
from xml.parsers.expat import ExpatError

from dicttoxml import dicttoxml

from common.exceptions import DecodeError

logger = logging.getLogger(__name__)

FILE_SUFFIX = "GetOrders_Response.xml"
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"
XML_ROOT = "order"

# Characters outside the XML 1.0 Char production (control characters, lone surrogates...).
INVALID_XML_CHARS = re.compile('[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]')


def strip_empty(value):
    """
    Drops None values at every depth so absent fields do not become empty elements,
    and removes characters XML cannot carry from every string.
    """
    if isinstance(value, dict):
        return {k: strip_empty(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [strip_empty(v) for v in value if v is not None]
    if isinstance(value, str):
        return INVALID_XML_CHARS.sub('', value)
    return value


def order_to_xml(order):
    """Serializes the order's wire record as a pretty-printed XML document."""
    xml_data = dicttoxml(strip_empty(order.raw), custom_root=XML_ROOT, attr_type=False)
    try:
        return parseString(xml_data).toprettyxml(indent="  ")
    except ExpatError as e:
        raise DecodeError(f"order {order.order_id}", e) from e


class OrderStore:
    """
    Append-only directory of order files.

    Args:
        order_path (str): Target directory. Created (with parents) if missing.
        clock (callable): Returns the current local datetime; replaceable in tests.
    """

    def __init__(self, order_path, clock=datetime.now):
        self.order_path = order_path
        self.clock = clock
        os.makedirs(self.order_path, exist_ok=True)

    def file_name_for(self, order, counter=0):
        timestamp = self.clock().strftime(TIMESTAMP_FORMAT)
        if counter:
            return f"{timestamp}-{order.order_id}-{counter}-{FILE_SUFFIX}"
        return f"{timestamp}-{order.order_id}-{FILE_SUFFIX}"

    def save(self, order):
        """
        Writes one order to a new file and returns its path.

        Files are opened in exclusive mode. If the name is taken (the same order
        listed twice within one second) a counter is added to the name rather
        than overwriting the earlier file. Any other OSError propagates.
        """
        xml = order_to_xml(order)
        counter = 0
        while True:
            path = os.path.join(self.order_path, self.file_name_for(order, counter))
            try:
                with open(path, 'x', encoding='utf-8') as f:
                    f.write(xml)
            except FileExistsError:
                counter += 1
                continue
            logger.info(f"Wrote order {order.order_id} to {path}")
            return path
