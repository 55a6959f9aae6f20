#
#
#

"""Record types exchanged between the reconciler and DNS providers."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .exceptions import DecodeError


class RecordType(str, Enum):
    """Record types accepted as desired state."""

    A = 'A'
    AAAA = 'AAAA'
    CAA = 'CAA'
    CNAME = 'CNAME'
    DS = 'DS'
    MX = 'MX'
    NS = 'NS'
    PTR = 'PTR'
    SRV = 'SRV'
    TLSA = 'TLSA'
    TXT = 'TXT'


@dataclass(frozen=True)
class DesiredRecord:
    """A record the caller wants to exist, as reported by the registry.

    ``hostname`` is compared verbatim against provider record names, so
    both sides must be normalized the same way by the caller.
    """

    hostname: str
    record_type: RecordType
    value: str
    ttl: int

    def __post_init__(self):
        # frozen, so coercion has to bypass __setattr__
        object.__setattr__(self, 'record_type', RecordType(self.record_type))
        if isinstance(self.ttl, bool) or not isinstance(self.ttl, int):
            raise ValueError(f'ttl must be an integer, got {self.ttl!r}')
        if self.ttl <= 0:
            raise ValueError(f'ttl must be positive, got {self.ttl}')


@dataclass
class ProviderRecord:
    """A record as it exists at the provider.

    ``id`` is the only stable identity. ``ttl`` is None when the provider
    falls back to the zone default for this record.
    """

    id: str
    zone_id: str
    record_type: str
    name: str
    value: str
    ttl: Optional[int] = None

    @classmethod
    def from_payload(cls, data: Dict) -> 'ProviderRecord':
        try:
            return cls(
                id=data['id'],
                zone_id=data['zone_id'],
                record_type=data['type'],
                name=data['name'],
                value=data['value'],
                ttl=data.get('ttl'),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise DecodeError(f'Malformed record {data!r}: {e!r}') from e

    def to_payload(self) -> Dict:
        return {
            'id': self.id,
            'zone_id': self.zone_id,
            'type': self.record_type,
            'name': self.name,
            'value': self.value,
            'ttl': self.ttl,
        }

    def matches(self, desired: DesiredRecord) -> bool:
        return (
            self.name == desired.hostname
            and self.record_type == desired.record_type
        )

    def converged(self, desired: DesiredRecord) -> bool:
        return self.value == desired.value and self.ttl == desired.ttl


@dataclass(frozen=True)
class RecordCreateRequest:
    zone_id: str
    record_type: str
    name: str
    value: str
    ttl: int

    def to_payload(self) -> Dict:
        return {
            'zone_id': self.zone_id,
            'type': self.record_type,
            'name': self.name,
            'value': self.value,
            'ttl': self.ttl,
        }
