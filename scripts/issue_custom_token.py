from __future__ import annotations

import argparse
import sys
from datetime import timedelta
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from jobboard.config import settings  # noqa: E402
from jobboard.utils.jwt_handler import create_custom_token  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Mint a custom session token for an identity. "
            "Export it as INITIAL_AUTH_TOKEN to start the app signed in as that identity."
        )
    )
    parser.add_argument("--uid", required=True, help="Identity the token signs in as")
    parser.add_argument(
        "--minutes",
        type=int,
        default=None,
        help="Token lifetime (defaults to CUSTOM_TOKEN_EXPIRE_MINUTES)",
    )
    args = parser.parse_args(argv)

    if settings.jwt_secret == "change-me":
        sys.stderr.write("WARNING: JWT_SECRET is the default value; set it before issuing real tokens.\n")

    expires = timedelta(minutes=args.minutes) if args.minutes else None
    print(create_custom_token(args.uid, expires_delta=expires))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
