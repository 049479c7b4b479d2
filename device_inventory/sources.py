"""Known inventory sources, their schema fingerprints, and field maps."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


class SourceKind(Enum):
    """Inventory systems a device export can come from.

    Declaration order is the fixed order used for detection, merging, and
    output column grouping.
    """

    IDENTITY = "identity"
    TICKETING = "ticketing"
    ENDPOINT_PROTECTION = "endpoint_protection"
    RECOVERY_TRACKING = "recovery_tracking"

    @property
    def definition(self) -> SourceDefinition:
        """Return the schema definition for this source."""

        return _DEFINITIONS[self]

    @property
    def label(self) -> str:
        """Return the human-readable product label for this source."""

        return _DEFINITIONS[self].label


@dataclass(frozen=True, slots=True)
class SourceDefinition:
    """Describes how one source's CSV export maps to canonical output fields."""

    kind: SourceKind
    label: str
    fingerprint: str
    name_column: str
    presence_column: str
    column_map: dict[str, str]

    @property
    def canonical_fields(self) -> tuple[str, ...]:
        """Return canonical output field names in column-map order."""

        return tuple(self.column_map.values())

    @property
    def canonical_name_field(self) -> str:
        """Return the canonical field holding the device name."""

        return self.column_map[self.name_column]


_SOURCES = (
    SourceDefinition(
        kind=SourceKind.IDENTITY,
        label="Azure AD",
        fingerprint="joinType (trustType)",
        name_column="displayName",
        presence_column="in_identity",
        column_map={
            "displayName": "identity_display_name",
            "operatingSystem": "identity_operating_system",
            "joinType (trustType)": "identity_join_type",
            "userNames": "identity_user_names",
            "registrationTime": "identity_registration_time",
            "approximateLastSignInDateTime": "identity_last_sign_in",
        },
    ),
    SourceDefinition(
        kind=SourceKind.TICKETING,
        label="FreshService",
        fingerprint="Used By",
        name_column="Display Name",
        presence_column="in_ticketing",
        column_map={
            "Display Name": "ticketing_display_name",
            "Serial Number": "ticketing_serial_number",
            "Used By": "ticketing_used_by",
            "Last login by": "ticketing_last_login_by",
            "Acquisition Date": "ticketing_acquisition_date",
            "Warranty Expiry Date": "ticketing_warranty_expiry_date",
            "Asset State": "ticketing_asset_state",
            "Last Audit Date": "ticketing_last_audit_date",
        },
    ),
    SourceDefinition(
        kind=SourceKind.ENDPOINT_PROTECTION,
        label="Sophos",
        fingerprint="Health Status",
        name_column="Name",
        presence_column="in_endpoint_protection",
        column_map={
            "Name": "endpoint_name",
            "Health Status": "endpoint_health_status",
            "IP": "endpoint_ip",
            "OS": "endpoint_os",
            "Protection": "endpoint_protection",
            "Last User": "endpoint_last_user",
            "Last Active": "endpoint_last_active",
        },
    ),
    SourceDefinition(
        kind=SourceKind.RECOVERY_TRACKING,
        label="Absolute",
        fingerprint="Encryption status",
        name_column="Device name",
        presence_column="in_recovery_tracking",
        column_map={
            "Device name": "recovery_device_name",
            "Serial number": "recovery_serial_number",
            "Last connected": "recovery_last_connected",
            "Username": "recovery_username",
            "Make": "recovery_make",
            "Model": "recovery_model",
            "Local IP address": "recovery_local_ip_address",
            "Public IP address": "recovery_public_ip_address",
            "Encryption status": "recovery_encryption_status",
        },
    ),
)

_DEFINITIONS: dict[SourceKind, SourceDefinition] = {source.kind: source for source in _SOURCES}

SOURCE_ORDER: tuple[SourceKind, ...] = tuple(SourceKind)


def map_fields(kind: SourceKind, record: Mapping[str, str]) -> dict[str, str]:
    """Map one native record to the canonical fields of its source.

    Columns missing from the record come back as empty strings.
    """

    return {
        canonical: record.get(native) or ""
        for native, canonical in kind.definition.column_map.items()
    }


def blank_fields(kind: SourceKind) -> dict[str, str]:
    """Return every canonical field of a source set to an empty string."""

    return dict.fromkeys(kind.definition.canonical_fields, "")


def output_columns() -> tuple[str, ...]:
    """Return the flattened report header: presence flags, then fields by source."""

    presence = tuple(kind.definition.presence_column for kind in SOURCE_ORDER)
    fields = tuple(field for kind in SOURCE_ORDER for field in kind.definition.canonical_fields)
    return presence + fields


def parse_source_kind(value: str | SourceKind) -> SourceKind:
    """Resolve user input to a `SourceKind`.

    Accepts the enum value (``endpoint_protection``), member name
    (``ENDPOINT_PROTECTION``), product label (``Sophos``), or the 1-based
    position in `SOURCE_ORDER`. Matching is case-insensitive.
    """

    if isinstance(value, SourceKind):
        return value

    candidate = value.strip().casefold()
    if candidate.isdigit():
        position = int(candidate)
        if 1 <= position <= len(SOURCE_ORDER):
            return SOURCE_ORDER[position - 1]

    for kind in SOURCE_ORDER:
        aliases = {
            kind.value.casefold(),
            kind.name.casefold(),
            kind.label.casefold(),
            kind.label.replace(" ", "").casefold(),
        }
        if candidate in aliases:
            return kind

    raise ValueError(f"Unsupported source kind: {value}")
