"""
davmount command line.

    sudo davmount \
      --base-url https://cloud.example/remote.php/dav/files \
      --map localuser:ncuser:/mnt/webdav/user \
      [--map ...] [--secret ncuser:ENVVAR] \
      [--auto | --persist] [--no-locks] [--insecure] [--system-secrets]
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.console import Console

from .core.exceptions import ProvisioningError, ValidationError
from .dependencies import get_provisioner, get_settings
from .logging_config import setup_logging
from .models import ProvisionRequest

logger = logging.getLogger(__name__)

EPILOG = """\
notes:
  --auto            On-demand systemd automount (recommended for desktops).
  --persist         Mount at boot. Mutually exclusive with --auto.
  --system-secrets  Also write creds to /etc/davfs2/secrets (needed for --persist).
"""

err_console = Console(stderr=True, highlight=False)


class _ArgumentParser(argparse.ArgumentParser):
    """Report bad arguments as ValidationError so every failure exits 1."""

    def error(self, message):
        raise ValidationError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="davmount",
        description="Provision davfs2 WebDAV mounts for local users.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--base-url", metavar="URL", help="WebDAV files root, e.g. https://cloud.example/remote.php/dav/files")
    parser.add_argument("--map", dest="maps", action="append", default=[], metavar="LOCAL:REMOTE:PATH", help="Mount REMOTE's files at PATH for LOCAL (repeatable)")
    parser.add_argument("--secret", dest="secrets", action="append", default=[], metavar="REMOTE:ENVVAR", help="Read REMOTE's password from $ENVVAR (repeatable)")
    parser.add_argument("--auto", action="store_true", help="On-demand systemd automount")
    parser.add_argument("--persist", action="store_true", help="Mount at boot")
    parser.add_argument("--no-locks", action="store_true", help="Disable WebDAV locks (use_locks 0)")
    parser.add_argument("--insecure", action="store_true", help="Trust any server certificate (trust_server_cert 1)")
    parser.add_argument("--system-secrets", action="store_true", help="Also store credentials in the system secrets file")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Override DAVMOUNT_LOG_LEVEL")
    return parser


def parse_request(args: argparse.Namespace) -> ProvisionRequest:
    return ProvisionRequest.from_cli(
        base_url=args.base_url,
        maps=args.maps,
        secrets=args.secrets,
        auto=args.auto,
        persist=args.persist,
        no_locks=args.no_locks,
        insecure=args.insecure,
        system_secrets=args.system_secrets,
    )


def print_hints() -> None:
    err_console.print()
    err_console.print("    Manual mount:   mount /path/to/mountpoint")
    err_console.print("    Manual umount:  umount /path/to/mountpoint")
    err_console.print("    Boot mount:     use --persist (and --system-secrets so root can mount at boot).")
    err_console.print()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)

        settings = get_settings()
        if args.log_level:
            settings = settings.model_copy(update={"log_level": args.log_level})
        setup_logging(settings, console=err_console)
        logger.debug(f"Configuration loaded from: {settings.config_file_info['active_config_file']}")

        request = parse_request(args)
        asyncio.run(get_provisioner().provision(request))
    except (ProvisioningError, OSError) as e:
        err_console.print(f"[!] {e}", markup=False)
        return 1
    except KeyboardInterrupt:
        err_console.print("[!] interrupted", markup=False)
        return 1

    print_hints()
    return 0


if __name__ == "__main__":
    sys.exit(main())
