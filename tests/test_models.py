import os
import sys
import unittest

# Add project root to Python path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from common.exceptions import DecodeError, DocumentUploadError
from invoicing.models import (
    DocumentUploadOk,
    DocumentUploadPartialFailure,
    DocumentUploadRequest,
    DocumentUploadResult,
    classify_upload,
)
from order_management.models import (
    BooleanField,
    MultipleValuesListField,
    NumericField,
    Order,
    OrderPage,
    parse_additional_field,
)
from tracking.models import TrackingSubmission, parse_tracking_xml


class TestAdditionalFields(unittest.TestCase):

    def test_type_selects_variant(self):
        field = parse_additional_field({'code': 'gift-wrap', 'type': 'BOOLEAN', 'value': 'true'})
        self.assertIsInstance(field, BooleanField)
        self.assertEqual(field.value, 'true')

    def test_scalar_values_are_kept_as_text(self):
        field = parse_additional_field({'code': 'weight', 'type': 'NUMERIC', 'value': 2.5})
        self.assertIsInstance(field, NumericField)
        self.assertEqual(field.value, '2.5')

    def test_multiple_values_list(self):
        field = parse_additional_field({'code': 'colors', 'type': 'MULTIPLE_VALUES_LIST', 'value': ['red', 'blue']})
        self.assertIsInstance(field, MultipleValuesListField)
        self.assertEqual(field.value, ['red', 'blue'])
        self.assertEqual(field.to_dict()['type'], 'MULTIPLE_VALUES_LIST')

    def test_unknown_type_is_rejected(self):
        with self.assertRaises(DecodeError):
            parse_additional_field({'code': 'x', 'type': 'COLOR', 'value': 'red'})

    def test_wrong_value_shape_is_rejected(self):
        with self.assertRaises(DecodeError):
            parse_additional_field({'code': 'x', 'type': 'STRING', 'value': ['a']})
        with self.assertRaises(DecodeError):
            parse_additional_field({'code': 'x', 'type': 'MULTIPLE_VALUES_LIST', 'value': 'a'})


class TestOrderDecoding(unittest.TestCase):

    def test_order_keeps_raw_record(self):
        data = {
            'order_id': 'A1',
            'order_state': 'WAITING_ACCEPTANCE',
            'total_price': 59.99,
            'fulfillment': {'center': {'code': 'DEFAULT'}},
            'order_additional_fields': [{'code': 'po', 'type': 'STRING', 'value': 'PO-9'}],
            'some_future_field': {'nested': True},
        }

        order = Order.from_dict(data)

        self.assertEqual(order.order_id, 'A1')
        self.assertEqual(order.total_price, 59.99)
        self.assertEqual(order.fulfillment_center_code, 'DEFAULT')
        self.assertEqual(order.additional_fields[0].value, 'PO-9')
        self.assertIs(order.raw, data)

    def test_order_without_id_is_rejected(self):
        with self.assertRaises(DecodeError):
            Order.from_dict({'order_state': 'SHIPPING'})

    def test_page_defaults(self):
        page = OrderPage.from_dict({'orders': None})
        self.assertEqual(page.orders, [])
        self.assertEqual(page.total_count, 0)

    def test_page_with_non_list_orders_is_rejected(self):
        with self.assertRaises(DecodeError):
            OrderPage.from_dict({'orders': {'order_id': 'A1'}, 'total_count': 1})


class TestTrackingModels(unittest.TestCase):

    def test_payload_always_has_four_keys(self):
        self.assertEqual(TrackingSubmission(carrier_name='Courier').to_payload(), {
            'carrier_code': None,
            'carrier_name': 'Courier',
            'carrier_url': None,
            'tracking_number': None,
        })

    def test_values_are_stripped(self):
        tracking = parse_tracking_xml("<t><order_id> B7 </order_id><tracking_number>\n 123 \n</tracking_number></t>")
        self.assertEqual(tracking.order_id, 'B7')
        self.assertEqual(tracking.submission.tracking_number, '123')


class TestDocumentUploadModels(unittest.TestCase):

    def test_manifest_shape(self):
        request = DocumentUploadRequest(file_name='Invoice-C9.pdf', type_code='CUSTOMER_INVOICE')
        self.assertEqual(request.to_manifest(), {
            'order_documents': [{'file_name': 'Invoice-C9.pdf', 'type_code': 'CUSTOMER_INVOICE'}],
        })

    def test_classify_upload(self):
        self.assertIsInstance(classify_upload(DocumentUploadResult.from_dict({'errors_count': 0})), DocumentUploadOk)
        self.assertIsInstance(classify_upload(DocumentUploadResult.from_dict({})), DocumentUploadOk)

        rejected = DocumentUploadResult.from_dict({
            'errors_count': 1,
            'order_documents': [{'errors': [{'code': 'E1', 'field': 'file', 'message': 'Too large'}]}],
        })
        outcome = classify_upload(rejected)
        self.assertIsInstance(outcome, DocumentUploadPartialFailure)
        self.assertEqual(str(outcome.errors[0]), 'E1 (file): Too large')

    def test_non_integer_errors_count_is_rejected(self):
        with self.assertRaises(DecodeError):
            DocumentUploadResult.from_dict({'errors_count': 'two'})

    def test_upload_error_message(self):
        result = DocumentUploadResult.from_dict({
            'errors_count': 1,
            'order_documents': [{'errors': [{'code': 'E1', 'field': 'file', 'message': 'Too large'}]}],
        })
        error = DocumentUploadError(result, 'C9')
        self.assertIn('1 error(s)', str(error))
        self.assertEqual(error.details['order_id'], 'C9')


if __name__ == '__main__':
    unittest.main()
