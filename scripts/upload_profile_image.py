#!/usr/bin/env python
"""Demo script for the profile image upload agent.

Registers a demo customer against a running API, uploads an image with
progress reporting and reads it back.

Usage:
    uvicorn interfaces.api.main:app --port 8080
    python scripts/upload_profile_image.py path/to/avatar.jpg [--base-url URL] [--customer-id ID]
"""

import argparse
import asyncio
import mimetypes
from pathlib import Path

import httpx
import structlog

from domain.value_objects.file_candidate import FileCandidate
from infrastructure.config import settings
from infrastructure.logging import setup_logging
from interfaces.client import (
    FileCredentialStore,
    ProfileImageClient,
    UploadError,
    UploadProgress,
    get_error_message,
)

setup_logging()
logger = structlog.get_logger()


async def register_demo_customer(base_url: str) -> int:
    async with httpx.AsyncClient(base_url=base_url) as client:
        response = await client.post(
            "/api/v1/customers",
            json={"name": "Demo Customer", "email": "demo@example.com", "age": 30, "gender": "FEMALE"},
        )
        if response.status_code == httpx.codes.CONFLICT:
            customers = (await client.get("/api/v1/customers")).json()
            return next(c["id"] for c in customers if c["email"] == "demo@example.com")
        response.raise_for_status()
        return response.json()["id"]


def log_progress(progress: UploadProgress) -> None:
    logger.info(
        "Upload progress",
        progress=f"{progress.progress}%",
        loaded=progress.loaded,
        total=progress.total,
        speed_kib_s=round(progress.speed / 1024, 1),
    )


async def demo_upload(path: Path, base_url: str, customer_id: int | None) -> None:
    """Upload ``path`` as a customer's profile image and verify the round trip."""
    if customer_id is None:
        customer_id = await register_demo_customer(base_url)
        logger.info("Registered demo customer", customer_id=customer_id)

    content_type, _ = mimetypes.guess_type(path.name)
    candidate = FileCandidate(content=path.read_bytes(), content_type=content_type, filename=path.name)

    async with ProfileImageClient(
        base_url,
        settings.upload_rules(),
        FileCredentialStore("~/.customer-profiles/credentials.json"),
    ) as agent:
        try:
            await agent.upload(customer_id, candidate, on_progress=log_progress)
        except UploadError as e:
            message = get_error_message(e)
            logger.error("❌ Upload failed", title=message.title, description=message.description)
            raise

        downloaded = await agent.get_profile_image(customer_id)
        logger.info(
            "✅ Profile image stored",
            customer_id=customer_id,
            url=agent.profile_image_url(customer_id),
            round_trip_ok=downloaded == candidate.content,
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Upload a customer profile image")
    parser.add_argument("path", type=Path)
    parser.add_argument("--base-url", default=f"http://{settings.api_host}:{settings.api_port}")
    parser.add_argument("--customer-id", type=int, default=None)
    args = parser.parse_args()

    asyncio.run(demo_upload(args.path, args.base_url, args.customer_id))


if __name__ == "__main__":
    main()
