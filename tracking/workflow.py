# -*- coding: utf-8 -*-
"""
================================================================================
Tracking Update Workflow
================================================================================
Purpose:
----------------
This module pushes the tracking information of one shipped order to the
marketplace. The warehouse drops an XML tracking file per shipment; the file
names the order and the carrier details.

Key Steps:
1.  **Read File**: The tracking file is checked for existence and parsed
    before any request is made.
2.  **Update Tracking**: The carrier details are POSTed to the order's
    tracking endpoint. The order id is only used in the URL, never in the body.
3.  **Verify**: The order's ship endpoint is then requested to confirm that the
    marketplace accepted the update.
----------------
"""

# =====================================================================================
# --- Imports ---
# =====================================================================================
import os
import logging

from common.exceptions import InputFileNotFoundError
from tracking.models import parse_tracking_xml

logger = logging.getLogger(__name__)

ORDERS_PATH = "/api/orders"


# =====================================================================================
# --- File Handling ---
# =====================================================================================

def read_tracking_file(tracking_file):
    """
    Loads a local tracking file.

    Returns:
        TrackingFile: the order id and the submission to send.

    Raises:
        InputFileNotFoundError: if the file does not exist.
        DecodeError: if the file is not a valid tracking document.
    """
    if not os.path.exists(tracking_file):
        raise InputFileNotFoundError('tracking', tracking_file)
    # Read as bytes so the parser honours the encoding in the XML declaration.
    with open(tracking_file, 'rb') as f:
        return parse_tracking_xml(f.read())


# =====================================================================================
# --- API Interaction ---
# =====================================================================================

def update_tracking_number(client, order_id, submission):
    """Sends the carrier details for an order. Returns the raw response text."""
    response = client.post(f"{ORDERS_PATH}/{order_id}/tracking", submission.to_payload())
    logger.debug(f"Tracking push response: {response.text}")
    return response.text


def verify_shipment(client, order_id):
    """Requests the ship endpoint after a tracking update."""
    client.get(f"{ORDERS_PATH}/{order_id}/ship")


# =====================================================================================
# --- Main Workflow ---
# =====================================================================================

def push_tracking_info(client, tracking_file):
    """
    Pushes the tracking info found in `tracking_file` and verifies it.

    Returns:
        str: The order id that was updated.
    """
    logger.debug(f"Pushing tracking info from {tracking_file}")
    tracking = read_tracking_file(tracking_file)

    update_tracking_number(client, tracking.order_id, tracking.submission)
    logger.info(f"Pushed tracking info for order {tracking.order_id}, verifying...")

    verify_shipment(client, tracking.order_id)
    logger.info(f"Verified tracking info for order {tracking.order_id}")
    return tracking.order_id
