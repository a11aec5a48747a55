# -*- coding: utf-8 -*-
"""
================================================================================
Order Pull Workflow
================================================================================
Purpose:
----------------
This module downloads every order matching the configured state codes from the
marketplace, accepts the ones still waiting for acceptance, and writes each
order to its own XML file for the downstream order importer.

Key Steps:
1.  **List Orders**: It requests the orders listing filtered by the configured
    state codes (`order_state_codes=WAITING_ACCEPTANCE,SHIPPING,...`).
2.  **Follow Pages**: The marketplace returns the next page as a `Link` header.
    The loop follows it until a page arrives without one. Pages are strictly
    sequential because page N+1 is only known once page N has arrived.
3.  **Accept**: An order whose state is exactly `WAITING_ACCEPTANCE` is accepted
    with a PUT before it is written. The state is not re-checked; if it changed
    in the meantime the marketplace rejects the call and the run stops.
4.  **Write**: Every order, accepted or not, is written to the order directory.

There is no retry and no resume. Any failure stops the run; the files written
and the orders accepted up to that point stay as they are.
----------------
"""

# =====================================================================================
# --- Imports ---
# =====================================================================================
import logging
from dataclasses import dataclass, field
from typing import List

from order_management.models import OrderPage

logger = logging.getLogger(__name__)


# =====================================================================================
# --- Configuration ---
# =====================================================================================
ORDERS_PATH = "/api/orders"
WAITING_ACCEPTANCE = "WAITING_ACCEPTANCE"


@dataclass
class PullSummary:
    """What one pull did: pages fetched, orders accepted, files written."""

    pages_fetched: int = 0
    accepted_order_ids: List[str] = field(default_factory=list)
    written_files: List[str] = field(default_factory=list)

    @property
    def orders_written(self):
        return len(self.written_files)


# =====================================================================================
# --- API Interaction ---
# =====================================================================================

def accept_order(client, order_id):
    """
    Accepts an order via the marketplace accept endpoint.

    A non-success status raises HttpStatusError, which ends the pull.
    """
    logger.info(f"Accepting order {order_id}...")
    client.put(f"{ORDERS_PATH}/{order_id}/accept")


def fetch_order_page(client, target, params=None):
    """
    Fetches one page of the orders listing.

    Args:
        client (MiraklClient): The API client.
        target (str): `/api/orders` for the first page, the continuation URL after that.
        params (dict): Query parameters; only used on the first page because the
                       continuation URL already carries the filter.

    Returns:
        tuple: (OrderPage, next target or None)
    """
    response = client.get(target, params=params)
    next_target = client.next_page_url(response)
    page = OrderPage.from_dict(client.decode_json(response, "orders page"))
    return page, next_target


def process_order(client, order_store, order, summary):
    if order.order_state == WAITING_ACCEPTANCE:
        accept_order(client, order.order_id)
        summary.accepted_order_ids.append(order.order_id)
    summary.written_files.append(order_store.save(order))


# =====================================================================================
# --- Main Workflow ---
# =====================================================================================

def pull_orders(client, order_state_codes, order_store):
    """
    Runs one full pull over every page of the orders listing.

    Args:
        client (MiraklClient): The API client.
        order_state_codes (list[str]): State codes to request, in configuration order.
        order_store (OrderStore): Where each order is written.

    Returns:
        PullSummary: Counts and paths for the caller to report.
    """
    state_codes = ",".join(order_state_codes)
    logger.debug(f"Fetching orders that have the following state codes: {state_codes}")

    summary = PullSummary()
    target = ORDERS_PATH
    params = {'order_state_codes': state_codes}

    while target:
        page, target = fetch_order_page(client, target, params)
        params = None
        summary.pages_fetched += 1
        logger.debug(f"Fetched {len(page.orders)} orders (total_count={page.total_count})")

        for order in page.orders:
            process_order(client, order_store, order, summary)

    logger.info(
        f"Pull finished: {summary.pages_fetched} page(s), "
        f"{summary.orders_written} order(s) written, "
        f"{len(summary.accepted_order_ids)} accepted."
    )
    return summary
