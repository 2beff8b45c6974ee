"""Exception types raised by ic-secretgen."""


class SecretGenError(Exception):
    """Base class for all ic-secretgen errors."""
    pass


class ConfigError(SecretGenError):
    """Configuration error exception."""
    pass


class ManifestError(SecretGenError):
    """Input manifest could not be read or does not match the expected shape."""
    pass


class SessionError(SecretGenError):
    """Authentication against IBM Cloud failed."""
    pass


class KeyLookupError(SecretGenError):
    """Service key lookup failed at the API level."""
    pass


class SchemaMismatch(SecretGenError):
    """Credential bundle is missing a field or a field has the wrong type."""

    def __init__(self, service_type: str, path: str, reason: str):
        self.service_type = service_type
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed {service_type} credentials at '{path}': {reason}")


class UnknownParserError(SecretGenError):
    """No parser registered for a (parser group, service type) pair."""

    def __init__(self, parser_group: str, service_type: str):
        self.parser_group = parser_group
        self.service_type = service_type
        super().__init__(f"Unknown parser '{parser_group}' for service type '{service_type}'")


class SecretWriteError(SecretGenError):
    """Secret manifest could not be written to disk."""
    pass
