"""
Tracking information for one shipped order.

Which fields are required depends on the carrier:
- registered carrier: `carrier_code` is mandatory, `tracking_number` too when the
  carrier's URL needs one, `carrier_url` is ignored (computed by the marketplace);
- unregistered carrier: `carrier_name` is mandatory, `carrier_url` optional.

The marketplace does that validation; nothing here enforces it.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional

from common.exceptions import DecodeError

TRACKING_FIELDS = ('carrier_code', 'carrier_name', 'carrier_url', 'tracking_number')


@dataclass(frozen=True)
class TrackingSubmission:
    carrier_code: Optional[str] = None
    carrier_name: Optional[str] = None
    carrier_url: Optional[str] = None
    tracking_number: Optional[str] = None

    def to_payload(self):
        # All four keys are always sent; an unset field goes out as null.
        return {name: getattr(self, name) for name in TRACKING_FIELDS}


@dataclass(frozen=True)
class TrackingFile:
    """The contents of a local tracking file: the target order plus its submission."""

    order_id: str
    submission: TrackingSubmission


def parse_tracking_xml(xml_text):
    """
    Parses a tracking file such as:

        <tracking>
          <order_id>B7</order_id>
          <carrier_code>DHL</carrier_code>
          <tracking_number>123</tracking_number>
        </tracking>

    `xml_text` may be bytes, in which case the declared encoding applies.
    The root element name is not checked. A missing element becomes None, an
    empty one becomes "".

    Raises:
        DecodeError: malformed XML, undecodable text or no order_id.
    """
    try:
        root = ET.fromstring(xml_text)
    except (ET.ParseError, ValueError) as e:
        raise DecodeError("tracking file", e) from e

    values = {}
    for child in root:
        values[child.tag] = (child.text or '').strip()

    order_id = values.get('order_id')
    if not order_id:
        raise DecodeError("tracking file", "missing order_id")

    submission = TrackingSubmission(**{name: values.get(name) for name in TRACKING_FIELDS})
    return TrackingFile(order_id=order_id, submission=submission)
