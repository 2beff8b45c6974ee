"""Credential transformers.

Each transformer turns a raw service-key credential bundle into the flat
field set written to a Kubernetes Secret. Transformers are registered per
(parser group, service type) pair; "compliance" is the default group.
"""
import base64
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Tuple

from .errors import SchemaMismatch, UnknownParserError
from .models import Bundle

DEFAULT_PARSER_GROUP = "compliance"

ParserFn = Callable[[Bundle, Bundle, bool], Dict[str, str]]

_PARSERS: Dict[Tuple[str, str], ParserFn] = {}


def register_parser(parser_group: str, service_type: str) -> Callable[[ParserFn], ParserFn]:
    """Register a transformer for (parser_group, service_type)."""
    def decorator(fn: ParserFn) -> ParserFn:
        _PARSERS[(parser_group, service_type)] = fn
        return fn
    return decorator


def get_parser(parser_group: str, service_type: str) -> ParserFn:
    try:
        return _PARSERS[(parser_group, service_type)]
    except KeyError:
        raise UnknownParserError(parser_group, service_type) from None


def available_parsers() -> List[Tuple[str, str]]:
    return sorted(_PARSERS)


def to_base64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def _lookup(service_type: str, source: Any, path: List[Any], expected: type) -> Any:
    """Walk `path` through nested mappings/lists and check the leaf type."""
    current = source
    walked = ""
    for step in path:
        walked = f"{walked}[{step}]" if isinstance(step, int) else (f"{walked}.{step}" if walked else step)
        if isinstance(step, int):
            if not isinstance(current, list) or step >= len(current):
                raise SchemaMismatch(service_type, walked, "index out of range or not a list")
            current = current[step]
        else:
            if not isinstance(current, Mapping) or step not in current:
                raise SchemaMismatch(service_type, walked, "field is missing")
            current = current[step]
    if not isinstance(current, expected):
        raise SchemaMismatch(
            service_type, walked, f"expected {expected.__name__}, got {type(current).__name__}"
        )
    return current


@dataclass(frozen=True)
class RedisCredentials:
    url: str
    certificate_base64: str

    @classmethod
    def from_bundle(cls, bundle: Bundle) -> "RedisCredentials":
        return cls(
            url=_lookup("redis", bundle, ["connection", "cli", "arguments", 0, 1], str),
            certificate_base64=_lookup(
                "redis", bundle, ["connection", "cli", "certificate", "certificate_base64"], str
            ),
        )


@dataclass(frozen=True)
class KafkaCredentials:
    user: str
    password: str
    brokers: Tuple[str, ...]

    @classmethod
    def from_bundle(cls, bundle: Bundle) -> "KafkaCredentials":
        brokers = _lookup("kafka", bundle, ["kafka_brokers_sasl"], list)
        for index in range(len(brokers)):
            _lookup("kafka", bundle, ["kafka_brokers_sasl", index], str)
        return cls(
            user=_lookup("kafka", bundle, ["user"], str),
            password=_lookup("kafka", bundle, ["password"], str),
            brokers=tuple(brokers),
        )


@dataclass(frozen=True)
class CloudantCredentials:
    username: str
    password: str
    host: str

    @classmethod
    def from_bundle(cls, bundle: Bundle) -> "CloudantCredentials":
        return cls(
            username=_lookup("cloudant", bundle, ["username"], str),
            password=_lookup("cloudant", bundle, ["password"], str),
            host=_lookup("cloudant", bundle, ["host"], str),
        )

    @property
    def url(self) -> str:
        return f"https://{self.host}"


def _encode(fields: Dict[str, str], encode_base64: bool) -> Dict[str, str]:
    if not encode_base64:
        return fields
    return {key: to_base64(value) for key, value in fields.items()}


def _primary(public: Bundle, private: Bundle) -> Bundle:
    # Fields come from the public key; fall back to the private key when only it was found
    return public if public else private


@register_parser(DEFAULT_PARSER_GROUP, "redis")
def parse_redis(public: Bundle, private: Bundle, encode_base64: bool) -> Dict[str, str]:
    creds = RedisCredentials.from_bundle(_primary(public, private))
    url = creds.url[:-2] if creds.url.endswith("/0") else creds.url
    return _encode({
        "redis_url": url,
        "redis_cert": creds.certificate_base64,
    }, encode_base64)


@register_parser(DEFAULT_PARSER_GROUP, "kafka")
def parse_kafka(public: Bundle, private: Bundle, encode_base64: bool) -> Dict[str, str]:
    # kafka_brokers_sasl is decoded but not emitted
    creds = KafkaCredentials.from_bundle(_primary(public, private))
    return _encode({
        "kafkaSaslUsername": creds.user,
        "kafkaSaslPassword": creds.password,
    }, encode_base64)


@register_parser(DEFAULT_PARSER_GROUP, "cloudant")
def parse_cloudant(public: Bundle, private: Bundle, encode_base64: bool) -> Dict[str, str]:
    creds = CloudantCredentials.from_bundle(_primary(public, private))
    return _encode({
        "cloudant_username": creds.username,
        "cloudant_password": creds.password,
        "cloudant_url": creds.url,
    }, encode_base64)


def transform(
    service_type: str,
    public: Bundle,
    private: Bundle,
    encode_base64: bool = False,
    parser_group: str = DEFAULT_PARSER_GROUP,
) -> Dict[str, str]:
    """
    Transform a credential bundle pair into Secret data fields.

    Args:
        service_type: One of "redis", "kafka", "cloudant" (or any registered type)
        public: Credentials of the public service key
        private: Credentials of the private service key
        encode_base64: Base64-encode every emitted value
        parser_group: Registered parser group to use

    Returns:
        Mapping of Secret data field name to string value

    Raises:
        UnknownParserError: If no parser is registered for the pair
        SchemaMismatch: If the bundle doesn't have the expected shape
    """
    parser = get_parser(parser_group, service_type)
    return parser(public or {}, private or {}, encode_base64)
