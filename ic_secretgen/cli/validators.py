"""Input validation for CLI arguments."""
import re
import sys

from ic_secretgen.secrets.domains.models import GeneratorConfig

# Kubernetes namespaces are RFC 1123 labels
NAMESPACE_PATTERN = r'^[a-z0-9]([-a-z0-9]*[a-z0-9])?$'
NAMESPACE_MAX_LENGTH = 63


def validate_required_config(config: GeneratorConfig, parser) -> None:
    """
    Check that namespace, input file and API key are all set.

    Raises:
        SystemExit with code 1 if any is missing (usage printed to stdout)
    """
    if not config.namespace or not config.input_file or not config.api_key:
        print("namespace, input file or api key can't be empty")
        parser.print_help(sys.stdout)
        sys.exit(1)


def validate_namespace(namespace: str) -> None:
    """
    Validate namespace is a Kubernetes RFC 1123 label.

    Args:
        namespace: Namespace to validate

    Raises:
        SystemExit with code 1 if validation fails
    """
    if len(namespace) > NAMESPACE_MAX_LENGTH or not re.match(NAMESPACE_PATTERN, namespace):
        print(f"Error: Invalid namespace '{namespace}'", file=sys.stderr)
        print(
            f"\nNamespaces must be at most {NAMESPACE_MAX_LENGTH} characters of lowercase "
            "letters, numbers and hyphens (-), starting and ending with a letter or number.",
            file=sys.stderr,
        )
        sys.exit(1)
