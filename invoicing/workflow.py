# -*- coding: utf-8 -*-
"""
================================================================================
Invoice Upload Workflow
================================================================================
Purpose:
----------------
This module attaches a customer invoice to a marketplace order. The accounting
system exports one file per invoice, named `<order_id>_<anything>.<ext>`
(e.g. `C9_invoice.pdf`); the order id is taken from that name.

Key Steps:
1.  **Check File**: The file must exist and its extension must be one of the
    document formats the marketplace accepts. Both checks happen before any
    request is made.
2.  **Name Upload**: The order id is the text before the first underscore and
    the file is uploaded as `Invoice-<order_id>.<ext>`.
3.  **Upload**: A multipart POST sends the file stream (`files`) together with
    a JSON manifest describing it (`order_documents`).
4.  **Classify**: The documents endpoint returns 200 even when it rejects the
    document, so the `errors_count` in the body decides success. A rejected
    upload raises DocumentUploadError carrying the full decoded result.
----------------
"""

# =====================================================================================
# --- Imports ---
# =====================================================================================
import os
import json
import logging

from common.exceptions import (
    InputFileNotFoundError,
    UnsupportedFormatError,
    InvalidInvoiceNameError,
    DocumentUploadError,
)
from invoicing.models import (
    DocumentUploadRequest,
    DocumentUploadResult,
    DocumentUploadPartialFailure,
    classify_upload,
)

logger = logging.getLogger(__name__)


# =====================================================================================
# --- Configuration ---
# =====================================================================================
ORDERS_PATH = "/api/orders"
INVOICE_TYPE_CODE = "CUSTOMER_INVOICE"
INVOICE_FILE_PREFIX = "Invoice-"

# Document formats accepted by the marketplace.
DOCUMENT_FORMATS = (
    "csv", "doc", "xls", "xlsx", "ppt", "pdf", "odt", "ods", "odp",
    "txt", "rtf", "png", "jpg", "gif", "zpl", "mov", "mp4",
)


# =====================================================================================
# --- File Naming ---
# =====================================================================================

def file_extension(invoice_file):
    """The extension without its dot, as written (case preserved)."""
    return os.path.splitext(invoice_file)[1][1:]


def validate_document_format(invoice_file):
    extension = file_extension(invoice_file)
    if extension.lower() not in DOCUMENT_FORMATS:
        raise UnsupportedFormatError(extension, DOCUMENT_FORMATS)
    return extension


def derive_invoice_names(invoice_file):
    """
    Derives the order id and the upload file name from the local file name.

    `C9_invoice.pdf` -> ('C9', 'Invoice-C9.pdf')

    Raises:
        InvalidInvoiceNameError: the name has no underscore or nothing before it.
    """
    file_name = os.path.basename(invoice_file)
    order_id, separator, _ = file_name.partition('_')
    if not separator or not order_id:
        raise InvalidInvoiceNameError(file_name)

    upload_file_name = f"{INVOICE_FILE_PREFIX}{order_id}.{file_extension(file_name)}"
    return order_id, upload_file_name


# =====================================================================================
# --- API Interaction ---
# =====================================================================================

def upload_document(client, order_id, invoice_file, document):
    """
    Uploads one file as an order document.

    Args:
        client (MiraklClient): The API client.
        order_id (str): The order the document belongs to.
        invoice_file (str): Local path of the file to stream.
        document (DocumentUploadRequest): Upload name and type code.

    Returns:
        DocumentUploadResult: The decoded response, whether or not it reports errors.
    """
    manifest = json.dumps(document.to_manifest())
    with open(invoice_file, 'rb') as f:
        response = client.post_multipart(
            f"{ORDERS_PATH}/{order_id}/documents",
            files={
                'files': (document.file_name, f),
                'order_documents': (None, manifest, 'application/json'),
            },
        )
    return DocumentUploadResult.from_dict(client.decode_json(response, "document upload response"))


# =====================================================================================
# --- Main Workflow ---
# =====================================================================================

def push_invoice(client, invoice_file):
    """
    Uploads `invoice_file` as the customer invoice of the order named in it.

    Returns:
        DocumentUploadOk: on success.

    Raises:
        InputFileNotFoundError, UnsupportedFormatError, InvalidInvoiceNameError:
            before any request is made.
        DocumentUploadError: the marketplace reported errors in the response body.
    """
    logger.debug(f"Pushing invoice from {invoice_file}")
    if not os.path.exists(invoice_file):
        raise InputFileNotFoundError('invoice', invoice_file)

    validate_document_format(invoice_file)
    order_id, upload_file_name = derive_invoice_names(invoice_file)
    document = DocumentUploadRequest(file_name=upload_file_name, type_code=INVOICE_TYPE_CODE)

    result = upload_document(client, order_id, invoice_file, document)
    outcome = classify_upload(result)
    if isinstance(outcome, DocumentUploadPartialFailure):
        for error in outcome.errors:
            logger.warning(f"Order {order_id} document error: {error}")
        raise DocumentUploadError(result, order_id)

    logger.info(f"Pushed invoice for order {order_id} as {upload_file_name}")
    return outcome
