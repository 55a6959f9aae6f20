#
#
#

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ReconcilerConfig:
    """Provider settings consumed by the reconciler."""

    token: str
    zone_id: str
    backend: str = 'dnsapi'
    base_url: Optional[str] = None
    timeout: Optional[int] = None

    def __repr__(self):
        return (
            f'ReconcilerConfig(token=***, zone_id={self.zone_id!r}, '
            f'backend={self.backend!r}, base_url={self.base_url!r}, '
            f'timeout={self.timeout!r})'
        )

    @classmethod
    def from_env(cls, environ=None) -> 'ReconcilerConfig':
        """Create config from environment variables"""
        environ = os.environ if environ is None else environ
        token = environ.get('HETZNER_DNS_TOKEN', '')
        zone_id = environ.get('HETZNER_DNS_ZONE_ID', '')
        if not token:
            raise ValueError('HETZNER_DNS_TOKEN is not set')
        if not zone_id:
            raise ValueError('HETZNER_DNS_ZONE_ID is not set')
        timeout = environ.get('HETZNER_DNS_TIMEOUT')
        return cls(
            token=token,
            zone_id=zone_id,
            backend=environ.get('HETZNER_DNS_BACKEND', 'dnsapi'),
            base_url=environ.get('HETZNER_DNS_API_URL') or None,
            timeout=int(timeout) if timeout else None,
        )
