#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0

"""
Print an RSA key pair for JWT signing as environment variables.

Setting ``JWT_PRIVATE_KEY`` and ``JWT_PUBLIC_KEY`` keeps tokens valid across
restarts and across workers.
"""

from ..services.auth import generate_key_pair


def format_env(private_key: str, public_key: str) -> str:
    """Render both keys as single-line env assignments with escaped newlines."""
    newline = "\\n"
    return "\n".join([
        f'JWT_PRIVATE_KEY="{private_key.strip().replace(chr(10), newline)}"',
        f'JWT_PUBLIC_KEY="{public_key.strip().replace(chr(10), newline)}"',
    ])


if __name__ == "__main__":
    private_key, public_key = generate_key_pair()
    print(format_env(private_key, public_key))
