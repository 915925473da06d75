"""Command line tool that turns an IAM policy JSON into code and a CredentialsRequest."""

from __future__ import annotations

import argparse
import sys

from lbcoperator.iampolicy import DEFAULT_FUNCTION, PolicyError, generate_iam_policy


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser of the iamctl command."""
    parser = argparse.ArgumentParser(
        prog="iamctl",
        description=(
            "Convert an AWS IAM policy JSON to code consumed by the operator, "
            "and optionally to a CredentialsRequest YAML that provisions the controller's secret."
        ),
    )
    parser.add_argument("-t", "--toggle", action="store_true", help="Help message for toggle")
    parser.add_argument("-i", "--input-file", required=True, help="Used to specify input JSON file path.")
    parser.add_argument("-o", "--output-file", required=True, help="Used to specify output Go file path.")
    parser.add_argument("-c", "--output-cr-file", default="",
                        help="Used to specify output CredentialsRequest YAML file path.")
    parser.add_argument("-p", "--package", required=True, default="main",
                        help="Used to specify the Go package in the output file.")
    parser.add_argument("-f", "--function", default=DEFAULT_FUNCTION,
                        help="Used to specify the Go function name in the output file.")
    parser.add_argument("-n", "--no-minify", action="store_true",
                        help="Used to skip the minification of the output AWS policy.")
    parser.add_argument("-s", "--split-resource", action="store_true",
                        help="Used to split AWS policy's statement into many with one resource per statement.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command and return its exit status."""
    args = build_parser().parse_args(argv)
    try:
        generate_iam_policy(
            args.input_file,
            args.output_file,
            args.output_cr_file,
            args.package,
            args.function,
            args.no_minify,
            args.split_resource,
        )
    except (PolicyError, OSError) as exc:
        print(f"iamctl: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())