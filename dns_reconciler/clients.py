#
#
#

"""Protocol definitions for DNS provider clients.

This module defines structural typing (PEP 544) for provider clients,
allowing the reconciler to be written once against any provider without
requiring explicit inheritance.
"""

from typing import List, Protocol, runtime_checkable

from .records import ProviderRecord, RecordCreateRequest


@runtime_checkable
class DNSProvider(Protocol):
    """Protocol defining the operations the reconciler needs.

    Both HetznerDNSClient (dnsapi) and HCloudZonesClient (hcloud) conform
    to this interface. Every method performs a single remote operation
    and raises a ProviderError subclass on failure, without retrying.
    """

    def list_records(self, zone_id: str) -> List[ProviderRecord]:
        """List all records of a zone.

        Args:
            zone_id: Zone identifier

        Returns:
            Records in the order the provider reports them
        """
        ...

    def create_record(self, request: RecordCreateRequest) -> ProviderRecord:
        """Create a single record.

        Args:
            request: Zone, type, name, value and ttl of the new record

        Returns:
            The created record, carrying its provider-assigned id
        """
        ...

    def update_record(self, record: ProviderRecord) -> ProviderRecord:
        """Replace the record identified by ``record.id``.

        All fields are resubmitted, this is not a partial patch.

        Args:
            record: Full desired state of the record

        Returns:
            The record as stored by the provider after the write
        """
        ...

    def delete_record(self, record_id: str) -> None:
        """Delete a record.

        Args:
            record_id: Record identifier; a missing record is an error
        """
        ...
