#!/usr/bin/env python3
"""Check that the Firebase store from config.json is reachable and show what the rover wrote"""
import sys

from core.config import ConfigError, load_config
from rtdb.commands import ALERTS_PATH, SENSOR_DATA_PATH
from rtdb.firebase_client import FirebaseError, client_from_config


def main():
    try:
        config = load_config(sys.argv[1] if len(sys.argv) > 1 else None)
    except ConfigError as e:
        print(f"✗ {e}")
        return 1

    client = client_from_config(config)
    if client is None:
        print("✗ firebase.database_url is not configured (dashboard will run in demo mode)")
        return 1

    print(f"Store: {client.database_url}")
    try:
        status = client.get("status")
        sensor_data = client.get(SENSOR_DATA_PATH) or {}
        alerts = client.get(ALERTS_PATH) or {}
    except FirebaseError as e:
        print(f"✗ {e}")
        return 1
    finally:
        client.close()

    print(f"✓ Connected (rover status: {status or 'unknown'})")
    print("\nsensor_data:")
    if not sensor_data:
        print("  (empty)")
    for key, value in sorted(sensor_data.items()):
        print(f"  {key}: {value}")

    print("\nalerts:")
    print(f"  last_alert: {alerts.get('last_alert', '--')}")
    print(f"  last_message: {alerts.get('last_message', '--')}")
    print(f"  gas_level: {alerts.get('gas_level', '--')}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
