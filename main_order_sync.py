#!/usr/bin/env python3

"""
Main entry point for the marketplace order sync.

Three commands, one per workflow module:

    order-sync pull-orders
    order-sync push-tracking-info <tracking_file.xml>
    order-sync push-invoice <order_id>_<anything>.<ext>

Settings are read once at startup (see `common.utils`). Any error ends the
command with exit status 1 after being logged.
"""

import sys
import os
import argparse
import logging

# Ensure the project root is in the Python path when run as a script
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from common.exceptions import MarketplaceSyncError
from common.mirakl_client import MiraklClient
from common.utils import APP_NAME, APP_VERSION, load_settings, setup_logging
from invoicing.workflow import push_invoice
from order_management.order_store import OrderStore
from order_management.workflow import pull_orders
from tracking.workflow import push_tracking_info

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="order-sync",
        description="Pull orders from and push tracking info and invoices to the marketplace."
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("pull-orders", help="Download (and auto-accept) orders in the configured states.")

    tracking = subparsers.add_parser("push-tracking-info", help="Send the tracking info of one order.")
    tracking.add_argument("tracking_file", type=str, help="Path to the XML tracking file.")

    invoice = subparsers.add_parser("push-invoice", help="Upload a customer invoice for one order.")
    invoice.add_argument("invoice_file", type=str, help="Path to the invoice, named <order_id>_<anything>.<ext>.")
    return parser


def run_command(args, settings):
    client = MiraklClient(settings['base_url'], settings['api_key'])

    if args.command == "pull-orders":
        logger.info("Pulling orders")
        order_store = OrderStore(settings['order_path'])
        return pull_orders(client, settings['order_state_codes'], order_store)
    elif args.command == "push-tracking-info":
        logger.info("Pushing tracking info")
        return push_tracking_info(client, args.tracking_file)
    elif args.command == "push-invoice":
        logger.info("Pushing invoice")
        return push_invoice(client, args.invoice_file)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv=None):
    """
    Parses the command line, runs the selected workflow and exits non-zero on failure.
    """
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        settings = load_settings()
        run_command(args, settings)
    except (MarketplaceSyncError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
