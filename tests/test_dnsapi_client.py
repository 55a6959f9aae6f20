#
# Tests for the Hetzner DNS API client: wire format and error translation
#

from unittest import TestCase
from unittest.mock import Mock

from requests import ConnectionError, Timeout

from dns_reconciler import (
    DecodeError,
    ProviderError,
    ProviderNotFound,
    ProviderRecord,
    ProviderRejected,
    ProviderUnauthorized,
    RecordCreateRequest,
    TransportError,
)
from dns_reconciler.dnsapi_client import HetznerDNSClient

BASE = 'https://dns.hetzner.com/api/v1'

RECORD = {
    'id': '1',
    'zone_id': 'z',
    'type': 'A',
    'name': 'app.example.com',
    'value': '1.2.3.4',
    'ttl': 300,
    'created': '2024-01-01 00:00:00 +0000 UTC',
    'modified': '2024-01-01 00:00:00 +0000 UTC',
}


def _response(status=200, payload=None, text=''):
    response = Mock()
    response.status_code = status
    response.ok = status < 400
    response.text = text
    if payload is None:
        response.json.side_effect = ValueError('No JSON object')
    else:
        response.json.return_value = payload
    return response


class TestHetznerDNSClient(TestCase):
    def _client(self, *responses):
        client = HetznerDNSClient('token')
        client._session.request = Mock(side_effect=list(responses))
        return client

    def test_session_headers(self):
        client = HetznerDNSClient('secret-token')
        headers = client._session.headers
        self.assertEqual('secret-token', headers['Auth-API-Token'])
        self.assertIn('dns-reconciler/', headers['User-Agent'])

    def test_list_records(self):
        other = dict(RECORD, id='2', type='MX', value='10 mail.example.com.')
        no_ttl = dict(RECORD, id='3', name='@', type='NS')
        del no_ttl['ttl']
        client = self._client(
            _response(payload={'records': [RECORD, other, no_ttl]})
        )

        records = client.list_records('z')

        client._session.request.assert_called_once_with(
            'GET',
            f'{BASE}/records',
            params={'zone_id': 'z'},
            json=None,
            timeout=30,
        )
        self.assertEqual(
            [
                ProviderRecord('1', 'z', 'A', 'app.example.com', '1.2.3.4', 300),
                ProviderRecord(
                    '2', 'z', 'MX', 'app.example.com', '10 mail.example.com.', 300
                ),
                ProviderRecord('3', 'z', 'NS', '@', '1.2.3.4', None),
            ],
            records,
        )

    def test_list_records_empty(self):
        client = self._client(_response(payload={'records': []}))
        self.assertEqual([], client.list_records('z'))

    def test_create_record(self):
        client = self._client(
            _response(
                payload={
                    'record': dict(
                        RECORD,
                        id='new',
                        name='new.example.com',
                        value='5.6.7.8',
                        ttl=60,
                    )
                }
            )
        )

        record = client.create_record(
            RecordCreateRequest('z', 'A', 'new.example.com', '5.6.7.8', 60)
        )

        client._session.request.assert_called_once_with(
            'POST',
            f'{BASE}/records',
            params=None,
            json={
                'zone_id': 'z',
                'type': 'A',
                'name': 'new.example.com',
                'value': '5.6.7.8',
                'ttl': 60,
            },
            timeout=30,
        )
        self.assertEqual('new', record.id)
        self.assertEqual('z', record.zone_id)

    def test_update_record_sends_full_record(self):
        client = self._client(
            _response(payload={'record': dict(RECORD, ttl=600)})
        )

        record = client.update_record(
            ProviderRecord('1', 'z', 'A', 'app.example.com', '1.2.3.4', 600)
        )

        client._session.request.assert_called_once_with(
            'PUT',
            f'{BASE}/records/1',
            params=None,
            json={
                'id': '1',
                'zone_id': 'z',
                'type': 'A',
                'name': 'app.example.com',
                'value': '1.2.3.4',
                'ttl': 600,
            },
            timeout=30,
        )
        self.assertEqual(600, record.ttl)

    def test_delete_record(self):
        client = self._client(_response(status=200, text=''))

        self.assertIsNone(client.delete_record('1'))

        client._session.request.assert_called_once_with(
            'DELETE', f'{BASE}/records/1', params=None, json=None, timeout=30
        )

    def test_custom_base_url_and_timeout(self):
        client = HetznerDNSClient(
            'token', base_url='http://localhost:8080/v1/', timeout=3
        )
        client._session.request = Mock(
            return_value=_response(payload={'records': []})
        )

        client.list_records('z')

        client._session.request.assert_called_once_with(
            'GET',
            'http://localhost:8080/v1/records',
            params={'zone_id': 'z'},
            json=None,
            timeout=3,
        )

    def test_unauthorized(self):
        client = self._client(
            _response(status=401, payload={'message': 'Invalid API key'})
        )
        with self.assertRaises(ProviderUnauthorized) as ctx:
            client.list_records('z')
        self.assertEqual(401, ctx.exception.status)
        self.assertEqual({'message': 'Invalid API key'}, ctx.exception.body)

    def test_update_missing_record_is_not_found(self):
        client = self._client(_response(status=404, text='record not found'))
        with self.assertRaises(ProviderNotFound) as ctx:
            client.update_record(
                ProviderRecord('gone', 'z', 'A', 'a.example.com', '1.1.1.1', 60)
            )
        self.assertEqual(404, ctx.exception.status)
        self.assertEqual('record not found', ctx.exception.body)

    def test_delete_missing_record_is_not_found(self):
        client = self._client(_response(status=404))
        with self.assertRaises(ProviderNotFound):
            client.delete_record('gone')

    def test_other_rejections(self):
        for status in (400, 409, 422, 500, 503):
            client = self._client(
                _response(
                    status=status, payload={'error': {'message': 'nope'}}
                )
            )
            with self.assertRaises(ProviderRejected) as ctx:
                client.create_record(
                    RecordCreateRequest('z', 'A', 'a.example.com', 'x', 60)
                )
            self.assertEqual(status, ctx.exception.status)
            self.assertNotIsInstance(ctx.exception, ProviderNotFound)
            self.assertNotIsInstance(ctx.exception, ProviderUnauthorized)

    def test_transport_failures(self):
        for error in (ConnectionError('refused'), Timeout('read timeout')):
            client = self._client(error)
            with self.assertRaises(TransportError) as ctx:
                client.list_records('z')
            self.assertIs(error, ctx.exception.cause)
            self.assertIs(error, ctx.exception.__cause__)
            self.assertNotIsInstance(ctx.exception, ProviderRejected)

    def test_invalid_json_on_success(self):
        client = self._client(_response(status=200, text='<html>'))
        with self.assertRaises(DecodeError):
            client.list_records('z')

    def test_unexpected_shapes(self):
        payloads = (
            {},
            {'records': None},
            {'records': [{'id': '1'}]},
            ['not', 'an', 'object'],
        )
        for payload in payloads:
            client = self._client(_response(payload=payload))
            with self.assertRaises(DecodeError):
                client.list_records('z')

        client = self._client(_response(payload={'records': []}))
        with self.assertRaises(DecodeError):
            client.create_record(
                RecordCreateRequest('z', 'A', 'a.example.com', '1.1.1.1', 60)
            )

    def test_errors_share_base(self):
        for cls in (TransportError, ProviderRejected, DecodeError):
            self.assertTrue(issubclass(cls, ProviderError))
