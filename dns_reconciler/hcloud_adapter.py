#
#
#

"""
Adapter for Hetzner Cloud DNS Zones (hcloud.zones).

Exposes the RRSet based Zones API through the same record-level
interface as HetznerDNSClient so the reconciler can run against either
backend unchanged.

Notes
- Import of hcloud happens only when this class is instantiated.
- A record id is the id of its RRSet (``name/type``). Every value of a
  multi-value RRSet is listed as its own record carrying that id; an
  update replaces the whole RRSet with the single submitted value.
- hcloud's built-in retry policy is switched off, each call surfaces the
  outcome of its first attempt.
- The API sets records and TTL through separate actions. An update that
  changes both is two writes and is not atomic: if the TTL change fails,
  the new value is already live and the error is raised.
- Listing follows the API's pagination, one request per page.
"""

import logging
import re
from typing import Any, List, Optional

from requests import RequestException

from . import __version__ as package_version
from .exceptions import (
    DecodeError,
    ProviderNotFound,
    ProviderRejected,
    ProviderUnauthorized,
    TransportError,
)
from .records import ProviderRecord, RecordCreateRequest

_QUOTED_TXT = re.compile(r'"((?:[^"\\]|\\.)*)"')


class HCloudZonesClient:
    """Thin wrapper around hcloud's Zones client bound to one zone."""

    def __init__(
        self,
        token: str,
        zone_id: str,
        api_endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        from hcloud import APIException
        from hcloud import Client as HCloudClient  # lazy import
        from hcloud.zones import Zone, ZoneRecord, ZoneRRSet

        self.log = logging.getLogger('HCloudZonesClient')
        self.zone_id = zone_id
        kwargs = {}
        if api_endpoint:
            kwargs['api_endpoint'] = api_endpoint
        self._hcloud = HCloudClient(
            token=token,
            application_name='dns-reconciler',
            application_version=package_version,
            timeout=timeout,
            **kwargs,
        )
        # hcloud has no public switch for its retry policy
        self._hcloud._client._retry_max_retries = 0
        self._zones = self._hcloud.zones
        self._Zone = Zone
        self._ZoneRecord = ZoneRecord
        self._ZoneRRSet = ZoneRRSet
        self._APIException = APIException

    # --- Error translation -------------------------------------------------

    def _call(self, operation: str, target: str, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except self._APIException as e:
            raise self._translate(operation, target, e) from e
        except RequestException as e:
            raise TransportError(operation, target, e) from e
        except KeyError as e:
            raise DecodeError(
                f'{operation} {target}: missing {e} in response'
            ) from e

    def _translate(self, operation: str, target: str, e: Any) -> Exception:
        code = e.code
        status = None
        if isinstance(code, int):
            # hcloud reports the HTTP status when the body is not an API error
            if code < 400:
                return DecodeError(
                    f'{operation} {target}: undecodable response ({code})'
                )
            status = code
        if code in (401, 'unauthorized'):
            return ProviderUnauthorized(e.message, code)
        if code in (404, 'not_found'):
            return ProviderNotFound(e.message, code)
        return ProviderRejected(status, e.message, code)

    # --- Value normalization -----------------------------------------------

    def _quote_txt_value(self, value: str) -> str:
        """Wrap TXT record value in double quotes for hcloud API.

        Always quotes, so that listing (which unquotes) returns exactly the
        value that was written.
        """
        escaped = value.replace('\\', '\\\\').replace('"', '\\"')
        return f'"{escaped}"'

    def _unquote_txt_value(self, value: str) -> str:
        match = _QUOTED_TXT.fullmatch(value)
        if match is None:
            # multi-string TXT data is left as the API reports it
            return value
        return re.sub(r'\\(.)', r'\1', match.group(1))

    def _zone_records(self, record_type: str, value: str) -> List[Any]:
        if record_type == 'TXT':
            value = self._quote_txt_value(value)
        return [self._ZoneRecord(value=value)]

    def _values(self, rrset: Any) -> List[str]:
        values = [rec.value for rec in rrset.records or []]
        if rrset.type == 'TXT':
            values = [self._unquote_txt_value(v) for v in values]
        return values

    # --- References --------------------------------------------------------

    def _zone_ref(self, zone_id: str) -> Any:
        return self._Zone(id=zone_id)

    def _rrset_ref(self, zone_id: str, record_id: str) -> Any:
        return self._ZoneRRSet(id=record_id, zone=self._zone_ref(zone_id))

    def _to_records(self, zone_id: str, rrset: Any) -> List[ProviderRecord]:
        return [
            ProviderRecord(
                id=str(rrset.id),
                zone_id=zone_id,
                record_type=rrset.type,
                name=rrset.name,
                value=value,
                ttl=rrset.ttl,
            )
            for value in self._values(rrset)
        ]

    # --- Record operations -------------------------------------------------

    def list_records(self, zone_id: str) -> List[ProviderRecord]:
        rrsets = self._call(
            'list_records',
            zone_id,
            self._zones.get_rrset_all,
            self._zone_ref(zone_id),
        )
        records = []
        for rrset in rrsets:
            records.extend(self._to_records(zone_id, rrset))
        return records

    def create_record(self, request: RecordCreateRequest) -> ProviderRecord:
        response = self._call(
            'create_rrset',
            f'{request.name}/{request.record_type}',
            self._zones.create_rrset,
            self._zone_ref(request.zone_id),
            name=request.name,
            type=request.record_type,
            ttl=request.ttl,
            records=self._zone_records(request.record_type, request.value),
        )
        self.log.debug('create_record: created rrset %s', response.rrset.id)
        records = self._to_records(request.zone_id, response.rrset)
        if not records:
            raise DecodeError(
                f'Created rrset {response.rrset.id} has no records'
            )
        return records[0]

    def update_record(self, record: ProviderRecord) -> ProviderRecord:
        target = self._rrset_ref(record.zone_id, record.id)
        if target.name != record.name or target.type != record.record_type:
            raise ProviderRejected(
                None,
                f'RRSet {record.id} cannot be renamed to '
                f'{record.name}/{record.record_type}',
                'invalid_input',
            )
        current = self._call(
            'get_rrset',
            record.id,
            self._zones.get_rrset,
            target.zone,
            target.name,
            target.type,
        )
        if self._values(current) != [record.value]:
            self._call(
                'set_rrset_records',
                record.id,
                self._zones.set_rrset_records,
                target,
                self._zone_records(record.record_type, record.value),
            )
        ttl = current.ttl
        if record.ttl is not None and record.ttl != ttl:
            self._call(
                'change_rrset_ttl',
                record.id,
                self._zones.change_rrset_ttl,
                target,
                record.ttl,
            )
            ttl = record.ttl
        return ProviderRecord(
            id=str(target.id),
            zone_id=record.zone_id,
            record_type=target.type,
            name=target.name,
            value=record.value,
            ttl=ttl,
        )

    def delete_record(self, record_id: str) -> None:
        self._call(
            'delete_rrset',
            record_id,
            self._zones.delete_rrset,
            self._rrset_ref(self.zone_id, record_id),
        )
