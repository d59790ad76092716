"""Operational probes for storage buckets and webhook payload shapes.

Usage:
    python -m agenticv.diagnostics list-buckets
    python -m agenticv.diagnostics probe-buckets cv-uploads cv_uploads
    python -m agenticv.diagnostics probe-webhook cv-parser --public-url https://...

These commands are never used by the API itself.
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from datetime import UTC, datetime

import httpx
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from agenticv.config import Settings, load_settings
from agenticv.errors import AgenticvError
from agenticv.log import configure_logging
from agenticv.services.object_storage import (
    create_storage_client,
    delete_object,
    list_bucket_names,
    put_object_bytes,
)
from agenticv.services.webhook_client import build_headers, post_with_deadline, resolve_webhook_url

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATE_BUCKETS = ("cv-uploads", "cv_uploads", "cv-documents")


@dataclass(frozen=True)
class WebhookProbeOutcome:
    shape: str
    status_code: int | None
    content_type: str | None
    snippet: str


def probe_buckets(client: BaseClient, names: list[str] | tuple[str, ...]) -> list[str]:
    """Upload a tiny object into each candidate bucket and report which accept it.

    Every test object is removed again; a failed removal is only logged.
    """
    working: list[str] = []
    for name in names:
        key = f"diagnostic-{datetime.now(UTC).strftime('%Y%m%dT%H%M%S%f')}.txt"
        try:
            put_object_bytes(
                client=client,
                bucket=name,
                key=key,
                data=b"agenticv bucket probe",
                content_type="text/plain",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Bucket %s rejected the probe: %s", name, exc)
            continue

        logger.info("Bucket %s accepted the probe object %s", name, key)
        working.append(name)
        try:
            delete_object(client=client, bucket=name, key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Could not remove probe object %s/%s: %s", name, key, exc)
    return working


def build_probe_payloads(*, public_url: str, file_name: str, file_type: str, file_size: int) -> dict[str, dict]:
    uploaded_at = datetime.now(UTC).isoformat()
    file_fields = {
        "filename": file_name,
        "publicUrl": public_url,
        "fileType": file_type,
        "fileSize": file_size,
        "uploadedAt": uploaded_at,
    }
    return {
        "simple-question": {"question": f"Please analyze this CV file: {public_url}"},
        "override-config": {
            "question": "Parse this CV and extract key information",
            "overrideConfig": file_fields,
        },
        "flat-variables": {"question": "Parse CV", **file_fields},
    }


async def probe_webhook(
    kind: str,
    *,
    public_url: str,
    settings: Settings,
    file_name: str = "probe.pdf",
    file_type: str = "application/pdf",
    file_size: int = 0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[WebhookProbeOutcome]:
    url = resolve_webhook_url(kind, settings)
    payloads = build_probe_payloads(
        public_url=public_url,
        file_name=file_name,
        file_type=file_type,
        file_size=file_size,
    )

    outcomes: list[WebhookProbeOutcome] = []
    for shape, payload in payloads.items():
        logger.info("Probing %s with the %s payload", url, shape)
        try:
            response = await post_with_deadline(
                url,
                content=json.dumps(payload).encode("utf-8"),
                headers=build_headers(settings),
                timeout=settings.webhook_timeout_seconds,
                transport=transport,
            )
        except AgenticvError as exc:
            logger.warning("Probe %s failed: %s", shape, exc)
            outcomes.append(WebhookProbeOutcome(shape=shape, status_code=None, content_type=None, snippet=str(exc)))
            continue

        content_type = response.headers.get("content-type")
        logger.info("Probe %s answered %s (%s)", shape, response.status_code, content_type)
        outcomes.append(
            WebhookProbeOutcome(
                shape=shape,
                status_code=response.status_code,
                content_type=content_type,
                snippet=response.text[:200],
            )
        )
    return outcomes


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AgentiCV storage and webhook diagnostics.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-buckets", help="List buckets visible to the configured credentials")

    probe_buckets_parser = subparsers.add_parser("probe-buckets", help="Find which bucket names accept uploads")
    probe_buckets_parser.add_argument("names", nargs="*", default=list(DEFAULT_CANDIDATE_BUCKETS))

    probe_webhook_parser = subparsers.add_parser("probe-webhook", help="Try several payload shapes on a webhook")
    probe_webhook_parser.add_argument("kind", help="cv-parser, jd-parser, gap-analyzer or complete-analysis")
    probe_webhook_parser.add_argument("--public-url", required=True, help="Public URL of an already uploaded file")
    probe_webhook_parser.add_argument("--file-name", default="probe.pdf")
    probe_webhook_parser.add_argument("--file-type", default="application/pdf")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(settings.log_level)

    try:
        if args.command == "list-buckets":
            names = list_bucket_names(create_storage_client(settings))
            logger.info("Found %d bucket(s): %s", len(names), ", ".join(names) or "-")
            return 0

        if args.command == "probe-buckets":
            working = probe_buckets(create_storage_client(settings), args.names)
            if not working:
                logger.error("No candidate bucket accepted uploads")
                return 1
            logger.info("Set STORAGE_BUCKET to one of: %s", ", ".join(working))
            return 0

        outcomes = asyncio.run(
            probe_webhook(
                args.kind,
                public_url=args.public_url,
                settings=settings,
                file_name=args.file_name,
                file_type=args.file_type,
            )
        )
        return 0 if any(o.status_code is not None and 200 <= o.status_code < 300 for o in outcomes) else 1
    except (AgenticvError, BotoCoreError, ClientError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
