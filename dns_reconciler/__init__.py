#
#
#

import logging

__version__ = '0.1.0'

from .clients import DNSProvider  # noqa: E402
from .exceptions import (  # noqa: E402
    DecodeError,
    ProviderError,
    ProviderNotFound,
    ProviderRejected,
    ProviderUnauthorized,
    TransportError,
)
from .records import (  # noqa: E402
    DesiredRecord,
    ProviderRecord,
    RecordCreateRequest,
    RecordType,
)

__all__ = [
    'DNSProvider',
    'DecodeError',
    'DesiredRecord',
    'ProviderError',
    'ProviderNotFound',
    'ProviderRecord',
    'ProviderRejected',
    'ProviderUnauthorized',
    'Reconciler',
    'RecordCreateRequest',
    'RecordType',
    'TransportError',
]


class Reconciler(object):
    """Converges one zone of a DNS provider toward desired records.

    Each ``reconcile`` call lists the zone, then creates, updates or leaves
    alone the single record matching the desired ``(name, type)``. Records
    are never deleted implicitly; ``delete`` must be called explicitly.

    The reconciler keeps no state between calls, so reconciliations for
    different hostnames may run concurrently. The underlying transport
    clients wrap a requests Session, which is not documented as thread-safe:
    give each worker thread its own Reconciler. Two concurrent calls for
    the same hostname can both see no match and both create, nothing here
    serializes them.
    """

    def __init__(
        self, id, token, zone_id, backend='dnsapi', base_url=None, timeout=None
    ):
        self.log = logging.getLogger(f'Reconciler[{id}]')
        self.log.debug(
            '__init__: id=%s, token=***, zone_id=%s, backend=%s, base_url=%s',
            id,
            zone_id,
            backend,
            base_url,
        )
        self.id = id
        self.zone_id = zone_id
        self._client: DNSProvider = self._create_client(
            backend, token, zone_id, base_url, timeout
        )

    @classmethod
    def from_config(cls, id, config):
        return cls(
            id,
            config.token,
            config.zone_id,
            backend=config.backend,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    def _create_client(
        self, backend, token, zone_id, base_url, timeout
    ) -> DNSProvider:
        """Factory method for client creation with lazy imports.

        Args:
            backend: Backend type ('dnsapi' or 'hcloud')
            token: API token
            zone_id: Zone the client operates on
            base_url: Optional API endpoint override
            timeout: Optional request timeout in seconds

        Returns:
            DNS provider client instance

        Raises:
            ValueError: If backend is invalid
        """
        if backend == 'hcloud':
            from .hcloud_adapter import HCloudZonesClient

            return HCloudZonesClient(
                token, zone_id, api_endpoint=base_url, timeout=timeout
            )
        elif backend == 'dnsapi':
            from .dnsapi_client import HetznerDNSClient

            return HetznerDNSClient(token, base_url=base_url, timeout=timeout)
        else:
            raise ValueError(
                f"Invalid backend '{backend}'. Must be 'dnsapi' or 'hcloud'"
            )

    def _find_match(self, records, desired):
        # With duplicates the first in provider order wins
        for record in records:
            if record.matches(desired):
                return record
        return None

    def reconcile(self, desired):
        self.log.debug(
            'reconcile: hostname=%s, type=%s, value=%s, ttl=%d',
            desired.hostname,
            desired.record_type.value,
            desired.value,
            desired.ttl,
        )
        records = self._client.list_records(self.zone_id)
        matched = self._find_match(records, desired)

        if matched is None:
            request = RecordCreateRequest(
                zone_id=self.zone_id,
                record_type=desired.record_type.value,
                name=desired.hostname,
                value=desired.value,
                ttl=desired.ttl,
            )
            self.log.info(
                'reconcile: creating %s %s', request.record_type, request.name
            )
            return self._client.create_record(request)

        if matched.converged(desired):
            self.log.debug('reconcile:   %s is up-to-date', matched.id)
            return matched

        updated = ProviderRecord(
            id=matched.id,
            zone_id=matched.zone_id,
            record_type=desired.record_type.value,
            name=desired.hostname,
            value=desired.value,
            ttl=desired.ttl,
        )
        self.log.info(
            'reconcile: updating %s %s (id=%s, value=%s->%s, ttl=%s->%s)',
            updated.record_type,
            updated.name,
            matched.id,
            matched.value,
            desired.value,
            matched.ttl,
            desired.ttl,
        )
        return self._client.update_record(updated)

    def reconcile_all(self, desired_records):
        """Reconcile records one after another, stopping at the first error.

        Every record gets its own listing of the zone.
        """
        return [self.reconcile(desired) for desired in desired_records]

    def delete(self, record_id):
        self.log.info('delete: record_id=%s', record_id)
        self._client.delete_record(record_id)
