#
#
#

import logging

from requests import RequestException, Session

from octodns import __VERSION__ as octodns_version

from . import __version__ as package_version
from .exceptions import (
    DecodeError,
    ProviderNotFound,
    ProviderRejected,
    ProviderUnauthorized,
    TransportError,
)
from .records import ProviderRecord


class HetznerDNSClient(object):
    BASE_URL = 'https://dns.hetzner.com/api/v1'
    TIMEOUT = 30

    def __init__(self, token, base_url=None, timeout=None):
        self.log = logging.getLogger('HetznerDNSClient')
        self.base_url = (base_url or self.BASE_URL).rstrip('/')
        self.timeout = timeout or self.TIMEOUT
        session = Session()
        session.headers.update(
            {
                'Auth-API-Token': token,
                'User-Agent': f'octodns/{octodns_version} dns-reconciler/{package_version}',
            }
        )
        self._session = session

    def _do(self, method, path, params=None, data=None):
        url = f'{self.base_url}{path}'
        self.log.debug('_do: method=%s, url=%s, params=%s', method, url, params)
        try:
            response = self._session.request(
                method, url, params=params, json=data, timeout=self.timeout
            )
        except RequestException as e:
            raise TransportError(method, url, e) from e
        if not response.ok:
            body = self._error_body(response)
            if response.status_code == 401:
                raise ProviderUnauthorized(body)
            if response.status_code == 404:
                raise ProviderNotFound(body)
            raise ProviderRejected(response.status_code, body)
        return response

    def _error_body(self, response):
        try:
            return response.json()
        except ValueError:
            return response.text or None

    def _do_json(self, method, path, params=None, data=None):
        response = self._do(method, path, params, data)
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(
                f'{method} {path}: response is not valid JSON'
            ) from e

    def _record(self, payload):
        try:
            data = payload['record']
        except (KeyError, TypeError) as e:
            raise DecodeError(f'Missing record in {payload!r}') from e
        return ProviderRecord.from_payload(data)

    def list_records(self, zone_id):
        params = {'zone_id': zone_id}
        payload = self._do_json('GET', '/records', params=params)
        try:
            records = payload['records']
        except (KeyError, TypeError) as e:
            raise DecodeError(f'Missing records in {payload!r}') from e
        if not isinstance(records, list):
            raise DecodeError(f'records is not a list: {records!r}')
        return [ProviderRecord.from_payload(r) for r in records]

    def create_record(self, request):
        payload = self._do_json('POST', '/records', data=request.to_payload())
        return self._record(payload)

    def update_record(self, record):
        payload = self._do_json(
            'PUT', f'/records/{record.id}', data=record.to_payload()
        )
        return self._record(payload)

    def delete_record(self, record_id):
        self._do('DELETE', f'/records/{record_id}')
