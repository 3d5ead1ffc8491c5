#!/usr/bin/env python3
"""Development helper that posts sample producer payloads to a running instance."""

import argparse
import sys

import requests

DEFAULT_BASE_URL = "http://localhost:3001"

SAMPLES = {
    "overseerr": {
        "pending": {
            "notification_type": "MEDIA_PENDING",
            "event": "New Movie Request",
            "subject": "Dune (2021)",
            "message": "A new request is waiting for approval",
            "request": {"request_id": "42", "requestedBy_username": "alice"},
            "media": {"media_type": "movie", "tmdbId": "438631"},
        },
        "available": {
            "event": "Movie Now Available",
            "subject": "Dune (2021)",
            "request": {"request_id": "42", "requestedBy_username": "alice"},
        },
        "test": {"notification_type": "TEST_NOTIFICATION", "event": "test"},
    },
    "sonarr": {
        "download": {
            "eventType": "Download",
            "series": {"title": "Severance"},
            "episodes": [{"seasonNumber": 2, "episodeNumber": 1}],
            "release": {"quality": "WEBDL-1080p"},
        },
        "health": {
            "eventType": "Health",
            "message": "Indexers unavailable due to failures",
        },
        "test": {"eventType": "Test"},
    },
    "radarr": {
        "grab": {
            "eventType": "Grab",
            "movie": {"title": "Dune", "year": 2021},
            "release": {"quality": "Bluray-2160p"},
        },
        "test": {"eventType": "Test"},
    },
}


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("service", choices=sorted(SAMPLES))
    parser.add_argument("token")
    parser.add_argument("--event", default="test", help="Sample payload to send")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    args = parser.parse_args()

    payload = SAMPLES[args.service].get(args.event)
    if payload is None:
        print(
            f"No {args.service} sample named {args.event}. "
            f"Choose from: {', '.join(SAMPLES[args.service])}",
            file=sys.stderr,
        )
        return 1

    url = f"{args.base_url.rstrip('/')}/api/webhooks/{args.service}/{args.token}"
    try:
        resp = requests.post(url, json=payload, timeout=10)
    except requests.RequestException as e:
        print(f"Request failed: {e}", file=sys.stderr)
        return 1

    print(f"{resp.status_code}: {resp.text}")
    return 0 if resp.ok else 1


if __name__ == "__main__":
    sys.exit(main())
