#!/usr/bin/env python3
"""
Scoop auth server - Auth0 sign-in callback and session endpoints.
"""

import argparse
import logging
import sys
from typing import Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", stream=sys.stderr
)

#
# NOTE: Keep scoop imports lazy (inside functions) so `--help` works without the server extras.
#


def print_login_url(return_to: str, connection: Optional[str]) -> None:
    """Print an Auth0 authorize URL for manual sign-in testing."""
    from scoop.auth.auth0 import build_authorize_url
    from scoop.auth.config import load_auth_config, validate_auth_config
    from scoop.auth.util import encode_state, sanitize_next_path

    cfg = load_auth_config()
    validate_auth_config(cfg)
    state = encode_state(sanitize_next_path(return_to), connection)
    print(build_authorize_url(cfg, state=state, connection=connection))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Scoop auth server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the HTTP server
  python main.py --serve --port 3000

  # Print a sign-in URL that links a Facebook account
  python main.py --login-url --return-to /connected-accounts --connection facebook
        """,
    )
    parser.add_argument("--serve", action="store_true", help="Run the auth HTTP server")
    parser.add_argument("--host", default="0.0.0.0", help="Bind host for --serve (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=3000, help="Bind port for --serve (default: 3000)")
    parser.add_argument("--login-url", action="store_true", help="Print an Auth0 authorize URL and exit")
    parser.add_argument("--return-to", default="/", help="Destination path after sign-in (for --login-url)")
    parser.add_argument("--connection", help="Auth0 connection hint, e.g. google-oauth2 (for --login-url)")

    args = parser.parse_args()

    try:
        if args.serve:
            from scoop.api.server import run as run_server

            run_server(host=args.host, port=args.port)
            return

        if args.login_url:
            print_login_url(args.return_to, args.connection)
            return

        parser.print_help()

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        raise


if __name__ == "__main__":
    main()
