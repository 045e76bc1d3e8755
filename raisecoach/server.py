"""
RaiseCoach WebSocket Server

Bridges the wearable transport and the coaching UI. A transport client
(e.g. the BLE bridge on the phone) pushes decoded or raw-text samples;
the server runs them through the session pipeline and streams back:

1. tick messages (angle, momentum, rep state, rep count) per sample
2. rep_event messages with quality, feedback text and haptic pattern
3. acks, set summaries and errors for commands

Every connection gets its own ExerciseSession, so two users never share
rep state.

Usage:
    python ws_server.py --port 8765
"""

import argparse
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import websockets

from .config import ANGLE_MODE, HOST, MOMENTUM_THRESHOLD, PORT
from .errors import InvalidConfigurationError, InvalidSampleError, SensorParseError
from .feedback import CALIBRATED_MESSAGE, feedback_for
from .orientation import AngleMode
from .parser import parse_sensor_line
from .samples import Sample, SensorPacket
from .session import ExerciseSession

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def is_command_message(msg: dict) -> bool:
    return msg.get("type") in ("cmd", "command")


def error_message(where: str, error: Exception) -> Dict[str, Any]:
    return {"type": "error", "where": where, "error": str(error)}


def packet_from_message(msg: dict) -> SensorPacket:
    """Decode a sample message carrying either a text line or acc/gyro dicts."""
    line = msg.get("line")
    if line is not None:
        return parse_sensor_line(str(line))
    return SensorPacket.from_dict(msg)


def build_status(session: ExerciseSession) -> Dict[str, Any]:
    return {
        "type": "status",
        "state": session.state.value,
        "reps": int(session.reps),
        "angle": round(session.estimator.angle, 1),
        "momentum": round(session.estimator.momentum, 1),
        "angle_mode": session.estimator.mode.value,
        "calibration_offset": session.estimator.calibration_offset,
        "thresholds": session.thresholds.to_dict(),
    }


# =============================================================================
# Message Handling
# =============================================================================

def handle_sample(session: ExerciseSession, msg: dict) -> List[Dict[str, Any]]:
    try:
        packet = packet_from_message(msg)
        tick = session.process(packet)
    except (InvalidSampleError, SensorParseError) as e:
        return [error_message("sample", e)]

    if tick is None:
        return []

    out = [{
        "type": "tick",
        "angle": round(tick.angle, 1),
        "momentum": round(tick.momentum, 1),
        "momentum_warning": tick.momentum > MOMENTUM_THRESHOLD,
        "state": tick.state.value,
        "reps": int(tick.reps),
    }]

    if tick.rep_result is not None:
        result = tick.rep_result
        rep_event = {
            "type": "rep_event",
            "rep": int(result.rep),
            "max_angle_reached": round(result.max_angle_reached, 1),
            "quality": result.quality.value,
        }
        rep_event.update(feedback_for(result).to_dict())
        out.append(rep_event)

    return out


def handle_command(session: ExerciseSession, msg: dict) -> List[Dict[str, Any]]:
    action = msg.get("action")

    if action == "reset":
        session.reset()
        return [{"type": "ack", "action": "reset", "ok": True}]

    if action == "configure":
        options = msg.get("thresholds")
        if not isinstance(options, dict):
            options = {k: v for k, v in msg.items() if k not in ("type", "action")}
        try:
            thresholds = session.configure(options)
        except InvalidConfigurationError as e:
            return [error_message("configure", e)]
        return [{"type": "ack", "action": "configure", "ok": True, "thresholds": thresholds.to_dict()}]

    if action == "calibrate":
        resting: Optional[Sample] = None
        try:
            if msg.get("acc") is not None or msg.get("line") is not None:
                resting = packet_from_message(msg).acc
                if resting is None:
                    raise InvalidSampleError("calibration line carries no acceleration")
            offset = session.calibrate(resting)
        except (InvalidSampleError, SensorParseError) as e:
            return [error_message("calibrate", e)]
        return [{
            "type": "ack", "action": "calibrate", "ok": True,
            "offset": round(offset, 2),
            "message": CALIBRATED_MESSAGE,
        }]

    if action == "summary":
        out = {"type": "set_summary"}
        out.update(session.summary().to_dict())
        return [out]

    if action == "status":
        return [build_status(session)]

    return [{"type": "error", "where": "command", "error": f"unknown action: {action!r}"}]


def handle_message(session: ExerciseSession, raw) -> List[Dict[str, Any]]:
    """
    Process one incoming websocket frame.

    Returns:
        Messages to send back, in order
    """
    try:
        msg = json.loads(raw)
    except ValueError as e:
        return [error_message("decode", e)]

    if not isinstance(msg, dict):
        return [{"type": "error", "where": "decode", "error": "expected a JSON object"}]

    if msg.get("type") == "sample":
        return handle_sample(session, msg)
    if is_command_message(msg):
        return handle_command(session, msg)

    return [{"type": "error", "where": "decode", "error": f"unknown message type: {msg.get('type')!r}"}]


# =============================================================================
# Client Handler
# =============================================================================

async def handle_client(ws, angle_mode: AngleMode = AngleMode.RAW):
    session = ExerciseSession(angle_mode=angle_mode)
    logger.info("Client connected")

    try:
        await ws.send(json.dumps(build_status(session)))

        async for raw in ws:
            for out in handle_message(session, raw):
                await ws.send(json.dumps(out))

    except websockets.exceptions.ConnectionClosed:
        pass
    finally:
        logger.info("Client disconnected after %d reps", session.reps)


# =============================================================================
# Main
# =============================================================================

async def main(host: str = HOST, port: int = PORT, angle_mode: str = ANGLE_MODE):
    mode = AngleMode(angle_mode)
    print("RaiseCoach Server")
    print(f"WebSocket: ws://{host}:{port}")
    print(f"Angle mode: {mode.value}")

    async def handler(ws):
        await handle_client(ws, angle_mode=mode)

    async with websockets.serve(handler, host, port, ping_interval=20, ping_timeout=20):
        await asyncio.Future()


def cli(argv=None):
    parser = argparse.ArgumentParser(description="RaiseCoach WebSocket Server")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--angle-mode", default=ANGLE_MODE, choices=[m.value for m in AngleMode])
    parser.add_argument("--verbose", action="store_true", help="Log every rep state change")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    try:
        asyncio.run(main(args.host, args.port, args.angle_mode))
    except KeyboardInterrupt:
        print("\n--- STOP ---")


if __name__ == "__main__":
    cli()
