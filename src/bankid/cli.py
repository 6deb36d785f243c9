"""BankID command-line client."""

from __future__ import annotations

import argparse
import json
import os

from zeep.helpers import serialize_object

from bankid.certificates import get_certificate, get_certs_dir
from bankid.client import BankIDClient
from bankid.types import CallResult


def _env_test_default() -> bool:
    return os.environ.get("BANKID_TEST", "").strip().lower() in ("1", "true", "yes")


def _parse_option(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Options must look like key=value, got {raw!r}")
    return key, value


def _add_client_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--cert", required=True, help="Client certificate file name")
    parser.add_argument("--certs-dir", default=None)
    parser.add_argument(
        "--test",
        action=argparse.BooleanOptionalAction,
        default=_env_test_default(),
        help="Use the test environment (--no-test forces production)",
    )
    parser.add_argument("--json", action="store_true")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bankid", description="BankID relying-party client")
    subparsers = parser.add_subparsers(dest="command", required=True)

    cert_parser = subparsers.add_parser("cert", help="Resolve a certificate path")
    cert_parser.add_argument("name")
    cert_parser.add_argument("--certs-dir", default=None)
    cert_parser.add_argument("--json", action="store_true")

    auth_parser = subparsers.add_parser("authenticate", help="Start an authentication order")
    auth_parser.add_argument("personal_id")
    auth_parser.add_argument("--option", action="append", type=_parse_option, default=[])
    _add_client_arguments(auth_parser)

    sign_parser = subparsers.add_parser("sign", help="Start a signing order")
    sign_parser.add_argument("personal_id")
    sign_parser.add_argument("visible")
    sign_parser.add_argument("--hidden", default="")
    sign_parser.add_argument("--option", action="append", type=_parse_option, default=[])
    _add_client_arguments(sign_parser)

    collect_parser = subparsers.add_parser("collect", help="Poll an order once")
    collect_parser.add_argument("order_ref")
    _add_client_arguments(collect_parser)

    return parser


def _print_result(command: str, result: CallResult, as_json: bool) -> int:
    value = serialize_object(result.value, target_cls=dict) if result.ok else None
    if as_json:
        print(
            json.dumps(
                {
                    "command": command,
                    "ok": result.ok,
                    "kind": result.kind.value,
                    "message": result.message,
                    "code": result.code,
                    "value": value,
                },
                sort_keys=True,
                default=str,
            )
        )
        return 0 if result.ok else 1

    if not result.ok:
        print(f"{command} failed ({result.kind.value}): {result.message}")
        return 1
    print(json.dumps(value, indent=2, sort_keys=True, default=str))
    return 0


def main(argv: list[str] | None = None, client_factory=BankIDClient) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "cert":
        path = get_certificate(args.name, args.certs_dir)
        if args.json:
            print(
                json.dumps(
                    {
                        "command": "cert",
                        "name": args.name,
                        "certs_dir": get_certs_dir(args.certs_dir),
                        "path": path,
                    },
                    sort_keys=True,
                )
            )
        elif path is None:
            print(f"Certificate {args.name} not found in {get_certs_dir(args.certs_dir)}")
        else:
            print(path)
        return 0 if path is not None else 1

    client = client_factory(args.cert, args.test, certs_dir=args.certs_dir)

    if args.command == "authenticate":
        result = client.authenticate(args.personal_id, dict(args.option))
    elif args.command == "sign":
        result = client.sign(args.personal_id, args.visible, args.hidden, dict(args.option))
    elif args.command == "collect":
        result = client.collect(args.order_ref)
    else:
        parser.print_help()
        return 1

    return _print_result(args.command, result, args.json)


if __name__ == "__main__":
    raise SystemExit(main())
