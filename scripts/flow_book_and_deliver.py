#!/usr/bin/env python3
"""
Complete booking lifecycle flow against a running server.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_book_and_deliver.py \
        --customer-token <JWT> --admin-token <JWT> --driver-token <JWT> \
        --driver-id <DRIVER_PROFILE_UUID>

Flow:
    1. Create booking (customer)
    2. Assign driver (admin)
    3. Accept booking (driver)
    4. Start trip (driver)
    5. Push a location update (driver)
    6. Complete trip (driver)
    7. Check final booking state (customer)
"""

import argparse
import json
import sys
from datetime import UTC, datetime, timedelta

import httpx

BASE_URL = "http://localhost:4000"


def api_request(token: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make authenticated API request."""
    response = httpx.request(
        method,
        f"{BASE_URL}{endpoint}",
        headers={"Authorization": f"Bearer {token}"},
        json=data,
        timeout=10.0,
        follow_redirects=True,
    )
    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("=" * 60)


def expect(result: dict, status: int, what: str) -> dict:
    """Exit on an unexpected status code, else return the envelope data."""
    if result["status"] != status:
        print(f"ERROR: {what} returned {result['status']}")
        print(json.dumps(result["data"], indent=2))
        sys.exit(1)
    data = result["data"].get("data") or {}
    print(f"OK: {what} -> {data.get('status', result['data'].get('message'))}")
    return data


def main():
    parser = argparse.ArgumentParser(description="Run a booking through its whole lifecycle")
    parser.add_argument("--customer-token", required=True)
    parser.add_argument("--admin-token", required=True)
    parser.add_argument("--driver-token", required=True)
    parser.add_argument("--driver-id", required=True, help="Driver profile ID")
    args = parser.parse_args()

    print_step(1, "Create booking")
    booking = expect(
        api_request(
            args.customer_token,
            "POST",
            "/api/v1/bookings",
            {
                "service_type": "TRUCK_DELIVERY",
                "pickup_address": "12 MG Road, Bengaluru, Karnataka",
                "pickup_latitude": 12.9756,
                "pickup_longitude": 77.6050,
                "dropoff_address": "48 Indiranagar 100 Ft Road, Bengaluru",
                "dropoff_latitude": 12.9719,
                "dropoff_longitude": 77.6412,
                "pickup_datetime": (datetime.now(UTC) + timedelta(hours=2)).isoformat(),
                "estimated_fare": 450,
            },
        ),
        201,
        "Create booking",
    )
    booking_id = booking["id"]
    print(f"Booking number: {booking['booking_number']}")

    print_step(2, "Assign driver")
    expect(
        api_request(
            args.admin_token,
            "POST",
            "/api/v1/bookings/admin/assign-driver",
            {"booking_id": booking_id, "driver_id": args.driver_id},
        ),
        200,
        "Assign driver",
    )

    print_step(3, "Accept booking")
    expect(api_request(args.driver_token, "PUT", f"/api/v1/bookings/{booking_id}/accept"), 200, "Accept")

    print_step(4, "Start trip")
    expect(api_request(args.driver_token, "PUT", f"/api/v1/bookings/{booking_id}/start"), 200, "Start")

    print_step(5, "Location update")
    expect(
        api_request(
            args.driver_token,
            "PUT",
            f"/api/v1/bookings/{booking_id}/update-location",
            {"latitude": 12.9730, "longitude": 77.6200},
        ),
        200,
        "Update location",
    )

    print_step(6, "Complete trip")
    expect(
        api_request(args.driver_token, "PUT", f"/api/v1/bookings/{booking_id}/complete", {}),
        200,
        "Complete",
    )

    print_step(7, "Final state")
    final = expect(
        api_request(args.customer_token, "GET", f"/api/v1/bookings/{booking_id}"), 200, "Fetch"
    )
    print(f"Status: {final['status']}  Actual fare: {final['actual_fare']}")


if __name__ == "__main__":
    main()
