#!/usr/bin/env python3
"""
Example posting a nested body with a file attachment as multipart form data
"""

import asyncio
import sys
from pathlib import Path

import aiohttp

from structured_forms import Blob, configure_logging, maybe_wrap_as_multipart


async def upload(url: str, attachment: Path) -> None:
    """Send a nested body with an attachment, flattened with dot notation"""
    options = {
        "method": "POST",
        "url": url,
        "body": {
            "purpose": "assistants",
            "file": attachment,
            "metadata": {"source": "example", "tags": ["demo", "upload"]},
            "preview": Blob(b"first lines", name="preview.txt"),
        },
    }

    options = await maybe_wrap_as_multipart(options, {"object_strategy": "dot"})
    for name, value in options["body"]:
        print(f"{name} = {value!r}")

    async with aiohttp.ClientSession() as session:
        async with session.request(
            options["method"], options["url"], data=options["body"].to_form_data()
        ) as response:
            print(f"Server answered {response.status}")


if __name__ == "__main__":
    configure_logging("DEBUG")
    if len(sys.argv) != 3:
        print("usage: upload_example.py URL FILE")
        sys.exit(1)
    asyncio.run(upload(sys.argv[1], Path(sys.argv[2])))
