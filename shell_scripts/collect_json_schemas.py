#!/usr/bin/env python3

import json
from pathlib import Path

from pydantic.json_schema import model_json_schema

from passpolicy._conf import Settings
from passpolicy.dto import CredentialChangeRequest
from passpolicy.policy import PolicyConfiguration


def execute(output_dir: str):
    for filename, builder in {
        Path(output_dir) / "configuration.json": Settings,
        Path(output_dir) / "password_policy.json": PolicyConfiguration,
        Path(output_dir) / "credential_change_request.json": CredentialChangeRequest,
    }.items():
        filename.write_text(json.dumps(model_json_schema(builder), indent=2))
        print("generated", filename)


if __name__ == "__main__":
    from argparse import ArgumentParser

    parser = ArgumentParser(
        prog="collect_json_schemas",
        description="Writes the JSON schemas of the configuration and request models "
        "to a given folder.",
    )
    parser.add_argument("output_dir")
    args = parser.parse_args()

    execute(output_dir=args.output_dir)
