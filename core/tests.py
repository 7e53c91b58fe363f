"""
Tests for the result envelope and error flattening.
"""
from django.test import SimpleTestCase

from core.exceptions import flatten_errors
from core.result import ErrorKind, Failure, Success, from_wire, to_wire


class ResultEnvelopeTestCase(SimpleTestCase):

    def test_success_to_wire(self):
        self.assertEqual(to_wire(Success({'id': 1})), {'data': {'id': 1}, 'error': None})

    def test_success_with_serialized_payload(self):
        self.assertEqual(to_wire(Success(object()), {'id': 2}), {'data': {'id': 2}, 'error': None})

    def test_failure_to_wire(self):
        failure = Failure(ErrorKind.INSUFFICIENT_STOCK, 'Insufficient stock for X')

        self.assertFalse(failure.ok)
        self.assertEqual(to_wire(failure), {'data': None, 'error': 'Insufficient stock for X'})

    def test_from_wire(self):
        ok = from_wire({'data': [1, 2], 'error': None})
        failed = from_wire({'data': None, 'error': 'Invalid credentials'}, ErrorKind.AUTHENTICATION)

        self.assertEqual(ok, Success([1, 2]))
        self.assertEqual(failed, Failure(ErrorKind.AUTHENTICATION, 'Invalid credentials'))

    def test_from_wire_rejects_non_envelopes(self):
        for payload in (None, [], 'oops', {'data': 1}):
            with self.subTest(payload=payload):
                self.assertEqual(from_wire(payload).kind, ErrorKind.TRANSPORT)


class FlattenErrorsTestCase(SimpleTestCase):

    def test_field_errors(self):
        message = flatten_errors({'email': ['This field is required.'], 'items': ['Empty.']})

        self.assertEqual(message, 'email: This field is required.; items: Empty.')

    def test_non_field_errors_have_no_prefix(self):
        self.assertEqual(flatten_errors({'non_field_errors': ['Totals differ']}), 'Totals differ')

    def test_nested_list_errors(self):
        detail = {'items': [{}, {'quantity': ['Must be at least 1.']}]}

        self.assertEqual(flatten_errors(detail), 'items[1].quantity: Must be at least 1.')

    def test_plain_string(self):
        self.assertEqual(flatten_errors('Not found.'), 'Not found.')
