"""
Simple script to verify the browser console WebSocket server is working
"""
import asyncio
import json
import sys

import websockets


async def check_connection(uri):
    try:
        print(f"Connecting to {uri}...")
        async with websockets.connect(uri) as websocket:
            print("Connected!")

            welcome = await websocket.recv()
            print(f"Received: {welcome}")

            snapshot = json.loads(await websocket.recv())
            state = snapshot.get("snapshot", {})
            print(f"Connection status: {state.get('connection_status')}")
            print(f"Sensor: {state.get('sensor')}")

            await websocket.send(json.dumps({
                "type": "command",
                "command": "get_status",
                "data": {}
            }))
            print("Sent get_status command...")
            response = await websocket.recv()
            print(f"Status response: {response}")

            print("Check completed successfully!")
            return True

    except ConnectionRefusedError:
        print("ERROR: Could not connect to WebSocket server.")
        print("Make sure the dashboard is running and the remote console is enabled.")
    except (OSError, websockets.exceptions.WebSocketException) as e:
        print(f"ERROR: {e}")
    return False


if __name__ == "__main__":
    uri = sys.argv[1] if len(sys.argv) > 1 else "ws://localhost:8765"
    sys.exit(0 if asyncio.run(check_connection(uri)) else 1)
