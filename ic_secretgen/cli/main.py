"""CLI entrypoint for ic-secretgen."""
import sys
import argparse
import logging
from pathlib import Path

from .validators import validate_namespace, validate_required_config

VERSION = "0.1.0"

# Configure logging to stderr
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ic-secretgen",
        description="Generate Kubernetes Secret manifests from IBM Cloud service keys",
        allow_abbrev=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0 - Success
  1 - Missing configuration or runtime error (authentication, key lookup, malformed credentials, etc.)

Environment variables:
  IC_API_KEY - IBM Cloud API key (used when -apikey is not given)

Configuration:
  Default location: ~/.config/ic-secretgen/config.yml (optional)
  Custom path: -config <path>
  Keys: namespace, output_dir, suffix, parser, tob64, apikey
        """
    )
    # Every option defaults to None so unset flags fall through to the config file
    parser.add_argument(
        "-tob64",
        dest="to_base64",
        action="store_true",
        default=None,
        help="If provided get secrets in base64"
    )
    parser.add_argument("-ns", dest="namespace", help="Namespace (required)")
    parser.add_argument("-i", dest="input_file", help="Input file (required)")
    parser.add_argument(
        "-apikey",
        dest="api_key",
        help="API Key (required), can be exported as IC_API_KEY"
    )
    parser.add_argument("-o", dest="output_dir", help="Output directory (default: .)")
    parser.add_argument("-suffix", dest="output_suffix", help="Suffix output files (default: .json)")
    parser.add_argument("-parser", dest="parser", help="The parser to use (default: compliance)")
    parser.add_argument("-config", dest="config_path", help="Path to YAML config file")
    parser.add_argument("-verbose", action="store_true", help="Log progress details to stderr")
    parser.add_argument("-version", action="version", version=f"ic-secretgen {VERSION}")
    return parser


def _ensure_output_dir(output_dir: str) -> None:
    path = Path(output_dir)
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created output directory {path}")


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Missing required configuration, or any fatal runtime error
    """
    from ic_secretgen.secrets.domains.config_loader import build_config, load_config
    from ic_secretgen.secrets.workflows.secret_operations import generate_secrets

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    cli_values = {
        "namespace": args.namespace,
        "input_file": args.input_file,
        "api_key": args.api_key,
        "output_dir": args.output_dir,
        "output_suffix": args.output_suffix,
        "parser": args.parser,
        "to_base64": args.to_base64,
    }

    try:
        config = build_config(cli_values, load_config(args.config_path))
        validate_required_config(config, parser)
        validate_namespace(config.namespace)
        _ensure_output_dir(config.output_dir)
        generate_secrets(config)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
