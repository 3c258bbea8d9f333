"""
Browser Dashboard Console - WebSocket server feeding web/dashboard.html

Browsers receive the same view state as the desktop window and send the same
commands. Messages are JSON objects with a "type" field; commands are
{"type": "command", "command": <name>, "data": {...}}.
"""
import asyncio
import json
import logging
from datetime import datetime
from typing import Callable, Dict, Optional, Set

import websockets

from core.rover_data import AlertRecord, SensorSnapshot, UltrasonicServoSettings
from core.view_state import DashboardState

logger = logging.getLogger(__name__)


class RemoteConsoleServer:
    """WebSocket server for browser dashboard clients"""

    def __init__(self, state: DashboardState, commands, host: str = "localhost",
                 port: int = 8765):
        self.state = state
        # Anything with the CommandWriter operations (the store manager in the app)
        self.commands = commands
        self.host = host
        self.port = port
        self.clients: Set = set()
        self.clear_alerts_callback: Optional[Callable[[], None]] = None
        self.command_handlers = {
            "get_status": self.handle_get_status,
            "get_snapshot": self.handle_get_snapshot,
            "get_alerts": self.handle_get_alerts,
            "clear_alerts": self.handle_clear_alerts,
            "motion": self.handle_motion,
            "servo": self.handle_servo,
            "emergency_stop": self.handle_emergency_stop,
            "ultrasonic_settings": self.handle_ultrasonic_settings,
            "ultrasonic_reset": self.handle_ultrasonic_reset,
        }

    def set_clear_alerts_callback(self, callback: Callable[[], None]):
        """Called after a browser clears the alert list"""
        self.clear_alerts_callback = callback

    async def register_client(self, websocket):
        self.clients.add(websocket)
        logger.info("Client connected: %s", getattr(websocket, "remote_address", None))

    async def unregister_client(self, websocket):
        self.clients.discard(websocket)
        logger.info("Client disconnected: %s", getattr(websocket, "remote_address", None))

    async def _run_blocking(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    async def handle_get_status(self, websocket, data: Dict) -> Dict:
        return {
            "type": "status",
            "connection_status": self.state.connection_status,
            "connection_label": self.state.connection_label,
            "alert_count": len(self.state.all_alerts()),
            "connected_clients": len(self.clients),
            "timestamp": datetime.now().isoformat()
        }

    async def handle_get_snapshot(self, websocket, data: Dict) -> Dict:
        return {
            "type": "snapshot",
            "snapshot": self.state.to_dict()
        }

    async def handle_get_alerts(self, websocket, data: Dict) -> Dict:
        limit = int(data.get("limit", 10))
        alerts = [a.to_dict() for a in self.state.recent_alerts(limit)]
        return {
            "type": "alerts",
            "alerts": alerts,
            "count": len(alerts),
            "summary": self.state.alert_summary()
        }

    async def handle_clear_alerts(self, websocket, data: Dict) -> Dict:
        count = self.state.clear_alerts()
        logger.info("Browser client cleared %d alerts", count)
        if self.clear_alerts_callback:
            self.clear_alerts_callback()
        return {
            "type": "success",
            "message": f"Cleared {count} alerts",
            "alerts": []
        }

    def _result(self, result) -> Dict:
        return {"type": "command_result", "result": result.to_dict()}

    async def handle_motion(self, websocket, data: Dict) -> Dict:
        result = await self._run_blocking(self.commands.send_motion_command,
                                          data.get("command", ""))
        return self._result(result)

    async def handle_servo(self, websocket, data: Dict) -> Dict:
        angle = float(data["angle"])
        result = await self._run_blocking(self.commands.send_servo_command, angle)
        return self._result(result)

    async def handle_emergency_stop(self, websocket, data: Dict) -> Dict:
        result = await self._run_blocking(self.commands.send_emergency_stop)
        return self._result(result)

    async def handle_ultrasonic_settings(self, websocket, data: Dict) -> Dict:
        defaults = UltrasonicServoSettings()
        settings = UltrasonicServoSettings(
            threshold=int(data.get("threshold", defaults.threshold)),
            motor_speed=int(data.get("motor_speed", defaults.motor_speed)),
            rotation_duration=int(data.get("rotation_duration", defaults.rotation_duration)),
        )
        results = await self._run_blocking(self.commands.apply_ultrasonic_settings, settings)
        return {
            "type": "command_result",
            "results": [r.to_dict() for r in results],
            "settings": settings.to_dict()
        }

    async def handle_ultrasonic_reset(self, websocket, data: Dict) -> Dict:
        result = await self._run_blocking(self.commands.reset_ultrasonic_servo)
        return self._result(result)

    async def handle_command(self, websocket, message: Dict):
        command = message.get("command", "")
        data = message.get("data") or {}

        handler = self.command_handlers.get(command)
        if handler is None:
            await websocket.send(json.dumps({
                "type": "error",
                "message": f"Unknown command: {command}"
            }))
            return

        try:
            result = await handler(websocket, data)
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            result = {"type": "error", "message": str(e)}
        await websocket.send(json.dumps(result))

    async def _broadcast(self, message: str):
        disconnected = set()
        for client in list(self.clients):
            try:
                await client.send(message)
            except websockets.exceptions.ConnectionClosed:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister_client(client)

    async def broadcast_sensor_update(self, snapshot: SensorSnapshot):
        if not self.clients:
            return
        await self._broadcast(json.dumps({
            "type": "sensor_update",
            "snapshot": self.state.to_dict(),
            "sensor": snapshot.to_dict()
        }))

    async def broadcast_alert(self, alert: AlertRecord):
        if not self.clients:
            return
        await self._broadcast(json.dumps({
            "type": "alert",
            "alert": alert.to_dict(),
            "summary": self.state.alert_summary()
        }))

    async def broadcast_connection_status(self, status: str):
        if not self.clients:
            return
        await self._broadcast(json.dumps({
            "type": "connection_status",
            "connection_status": status,
            "connection_label": self.state.connection_label
        }))

    async def handle_client(self, websocket, path: str = None):
        await self.register_client(websocket)
        try:
            await websocket.send(json.dumps({
                "type": "welcome",
                "message": "Connected to ToxiRover Dashboard"
            }))
            await websocket.send(json.dumps(await self.handle_get_snapshot(websocket, {})))

            async for message in websocket:
                try:
                    data = json.loads(message)
                except json.JSONDecodeError:
                    await websocket.send(json.dumps({
                        "type": "error",
                        "message": "Invalid JSON"
                    }))
                    continue

                msg_type = data.get("type", "") if isinstance(data, dict) else ""
                if msg_type == "command":
                    await self.handle_command(websocket, data)
                else:
                    await websocket.send(json.dumps({
                        "type": "error",
                        "message": f"Unknown message type: {msg_type}"
                    }))
        except websockets.exceptions.ConnectionClosed:
            pass
        finally:
            await self.unregister_client(websocket)

    async def start(self):
        logger.info("Dashboard console starting on ws://%s:%s", self.host, self.port)
        async with websockets.serve(
            self.handle_client,
            self.host,
            self.port,
            ping_interval=20,
            ping_timeout=10
        ):
            logger.info("Dashboard console running on ws://%s:%s", self.host, self.port)
            await asyncio.Future()  # Run forever
