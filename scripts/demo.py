#!/usr/bin/env python3
"""Demo: create a blood request response and wait for its delivery status.

Requires a running push dispatcher pointed at the same Firebase project
(or at the Firestore emulator via FIRESTORE_EMULATOR_HOST). Run the
dispatcher with DISPATCHER_DRY_RUN=true to avoid real pushes.

Usage:
    python scripts/demo.py [--user-id ID] [--token TOKEN ...] [--timeout SECONDS]
"""

import argparse
import sys
import time
import uuid

from shared.config import FirebaseConfig
from shared.db.base import (
    close_firebase_app,
    create_firebase_app,
    create_firestore_client,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a demo notification")
    parser.add_argument("--user-id", default=f"demo-{uuid.uuid4().hex[:8]}")
    parser.add_argument(
        "--token",
        action="append",
        default=[],
        help="Device token to store on the user (repeatable; none = topic fallback)",
    )
    parser.add_argument("--timeout", type=float, default=30.0)
    args = parser.parse_args()

    config = FirebaseConfig()
    app = create_firebase_app(config)
    client = create_firestore_client(app)

    try:
        client.collection(config.users_collection).document(args.user_id).set(
            {"notificationsEnabled": True, "deviceTokens": args.token},
            merge=True,
        )
        _, ref = client.collection(config.notifications_collection).add(
            {
                "type": "blood_request_response",
                "userId": args.user_id,
                "responderName": "Demo Donor",
                "responderPhone": "+10000000000",
                "bloodType": "O+",
                "responderId": "demo-responder",
                "requestId": f"req-{uuid.uuid4().hex[:8]}",
            }
        )
        print(f"Created notification {ref.id} for user {args.user_id}")

        deadline = time.monotonic() + args.timeout
        while time.monotonic() < deadline:
            status = (ref.get().to_dict() or {}).get("deliveryStatus")
            if status:
                print(f"  status:   {status.get('status')}")
                print(f"  success:  {status.get('successCount', 0)}")
                print(f"  failure:  {status.get('failureCount', 0)}")
                for detail in status.get("errorDetails", []):
                    print(f"  error:    {detail}")
                return
            time.sleep(1.0)

        print("Timed out waiting for deliveryStatus; is the dispatcher running?")
        sys.exit(1)
    finally:
        close_firebase_app(app)


if __name__ == "__main__":
    main()
