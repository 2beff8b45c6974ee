"""Domain models for secret generation."""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Tuple

from .errors import ManifestError

SERVICE_TYPES = ("redis", "kafka", "cloudant")

# Credential bundle as returned by the key lookup API
Bundle = Dict[str, Any]


def _string_field(raw: Mapping[str, Any], key: str, where: str, required: bool = False) -> str:
    value = raw.get(key)
    if value is None:
        if required:
            raise ManifestError(f"{where}: missing required field '{key}'")
        return ""
    if not isinstance(value, str):
        raise ManifestError(f"{where}: field '{key}' must be a string, got {type(value).__name__}")
    if required and not value:
        raise ManifestError(f"{where}: field '{key}' cannot be empty")
    return value


@dataclass(frozen=True)
class CredentialRequest:
    """One desired output secret."""
    output: str
    resource_group: str
    name: str = ""
    public_key_name: str = ""
    private_key_name: str = ""
    resource_instance_id: str = ""

    @classmethod
    def from_dict(cls, raw: Any, where: str = "credential") -> "CredentialRequest":
        if not isinstance(raw, dict):
            raise ManifestError(f"{where}: expected an object, got {type(raw).__name__}")
        return cls(
            output=_string_field(raw, "output", where, required=True),
            resource_group=_string_field(raw, "resource_group", where, required=True),
            name=_string_field(raw, "name", where),
            public_key_name=_string_field(raw, "public_key_name", where),
            private_key_name=_string_field(raw, "private_key_name", where),
            resource_instance_id=_string_field(raw, "resource_instance_id", where),
        )

    @property
    def is_resolved(self) -> bool:
        return bool(self.resource_instance_id)


@dataclass(frozen=True)
class RegionalDetails:
    """Credential requests grouped by service type, in manifest order."""
    redis: Tuple[CredentialRequest, ...] = ()
    kafka: Tuple[CredentialRequest, ...] = ()
    cloudant: Tuple[CredentialRequest, ...] = ()

    @classmethod
    def from_dict(cls, raw: Any) -> "RegionalDetails":
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ManifestError(f"data: expected an object, got {type(raw).__name__}")

        sequences = {}
        for service_type in SERVICE_TYPES:
            entries = raw.get(service_type) or []
            if not isinstance(entries, list):
                raise ManifestError(f"data.{service_type}: expected a list, got {type(entries).__name__}")
            sequences[service_type] = tuple(
                CredentialRequest.from_dict(entry, where=f"data.{service_type}[{index}]")
                for index, entry in enumerate(entries)
            )
        return cls(**sequences)

    def requests_for(self, service_type: str) -> Tuple[CredentialRequest, ...]:
        return getattr(self, service_type)

    def by_service_type(self) -> List[Tuple[str, Tuple[CredentialRequest, ...]]]:
        """Return (service_type, requests) pairs in processing order."""
        return [(service_type, self.requests_for(service_type)) for service_type in SERVICE_TYPES]

    def with_requests(self, service_type: str, requests: Tuple[CredentialRequest, ...]) -> "RegionalDetails":
        return replace(self, **{service_type: tuple(requests)})


@dataclass(frozen=True)
class Manifest:
    """Top-level input document."""
    account: str
    region: str
    data: RegionalDetails = field(default_factory=RegionalDetails)

    @classmethod
    def from_dict(cls, raw: Any) -> "Manifest":
        if not isinstance(raw, dict):
            raise ManifestError(f"Manifest must be a JSON object, got {type(raw).__name__}")
        return cls(
            account=_string_field(raw, "account", "manifest"),
            region=_string_field(raw, "region", "manifest"),
            data=RegionalDetails.from_dict(raw.get("data")),
        )


@dataclass(frozen=True)
class ResourceInstance:
    """Service instance record returned by the instance lookup."""
    crn: str
    region_id: str


@dataclass(frozen=True)
class ServiceKey:
    """Service key record returned by the key lookup."""
    name: str
    source_crn: str
    credentials: Bundle = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedKeyPair:
    """Public and private credential bundles of one instance."""
    public: Bundle = field(default_factory=dict)
    private: Bundle = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.public and not self.private


@dataclass(frozen=True)
class SecretDocument:
    """Kubernetes Secret manifest."""
    name: str
    namespace: str
    data: Dict[str, str] = field(default_factory=dict)
    api_version: str = "v1"
    kind: str = "Secret"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
            },
            "data": dict(self.data),
        }


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for one generation run."""
    namespace: str = ""
    input_file: str = ""
    api_key: str = ""
    output_dir: str = "."
    output_suffix: str = ".json"
    parser: str = "compliance"
    to_base64: bool = False
