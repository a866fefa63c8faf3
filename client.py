"""
Demo client that plays both sides of a reception call against a running server.

A staff connection logs in, a visitor connection requests a call, the staff
member accepts it, the two sides exchange placeholder offer/answer/ICE payloads
through the relay, and the staff member records a decision.

Usage:
    python client.py [--uri ws://localhost:8000/ws] [--access-key KEY]
"""

import argparse
import asyncio
import json
import logging
from typing import Any, Dict

import websockets

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("reception_client")


async def send(websocket, message: Dict[str, Any]) -> None:
    logger.debug(f"Sending: {json.dumps(message)}")
    await websocket.send(json.dumps(message))


async def expect(websocket, event_type: str) -> Dict[str, Any]:
    """Read frames until one of the given type arrives, logging the rest."""
    while True:
        data = json.loads(await websocket.recv())
        if data.get("type") == event_type:
            logger.info(f"Received {event_type}")
            return data
        if data.get("type") == "error":
            raise RuntimeError(f"Server error while waiting for {event_type}: {data['message']}")
        logger.info(f"Skipping {data.get('type')} while waiting for {event_type}")


async def run_demo(uri: str, access_key: str = "") -> None:
    async with websockets.connect(uri) as staff, websockets.connect(uri) as visitor:
        logger.info(f"Connected staff and visitor to {uri}")

        # Step 1: Staff logs in and receives the current queue
        await send(staff, {
            "type": "staff-login",
            "name": "Demo Staff",
            "email": "staff@example.com",
            "department": "Front Desk",
            "accessKey": access_key or None,
        })
        await expect(staff, "login-success")
        waiting = await expect(staff, "waiting-calls")
        logger.info(f"{len(waiting['calls'])} call(s) already waiting")

        # Step 2: Visitor requests a call
        await send(visitor, {
            "type": "start-conversation",
            "name": "Demo Visitor",
            "email": "visitor@example.com",
            "purpose": "Support",
        })
        started = await expect(visitor, "conversation-started")
        request = await expect(staff, "new-call-request")
        logger.info(f"Call {started['callId']} queued: {request['purpose']}")

        # Step 3: Staff claims the call
        await send(staff, {"type": "accept-call", "callId": started["callId"]})
        call_started = await expect(staff, "call-started")
        accepted = await expect(visitor, "call-accepted")
        visitor_id = call_started["clientId"]
        staff_id = accepted["staffId"]
        logger.info(f"{accepted['staffName']} picked up the call")

        # Step 4: Signaling exchange with placeholder payloads
        await send(visitor, {"type": "offer", "target": staff_id, "offer": {"type": "offer", "sdp": "v=0"}})
        offer = await expect(staff, "offer")
        await send(staff, {"type": "answer", "target": offer["from"], "answer": {"type": "answer", "sdp": "v=0"}})
        await expect(visitor, "answer")
        for i in range(2):
            candidate = {"candidate": f"candidate:{i} 1 udp 2122260223 10.0.0.{i} 5000{i} typ host", "sdpMLineIndex": 0}
            await send(staff, {"type": "ice-candidate", "target": visitor_id, "candidate": candidate})
            await expect(visitor, "ice-candidate")

        # Step 5: Staff records a decision
        await send(staff, {
            "type": "call-decision",
            "callId": started["callId"],
            "decision": "accepted",
            "notes": "follow-up needed",
        })
        saved = await expect(staff, "decision-saved")
        completed = await expect(visitor, "call-completed")
        logger.info(f"Decision {saved['decision']} saved, visitor notes: {completed['notes']}")


def parse_args():
    parser = argparse.ArgumentParser(description="Reception Relay demo client")
    parser.add_argument("--uri", default="ws://localhost:8000/ws", help="WebSocket endpoint")
    parser.add_argument("--access-key", default="", help="Staff access key, if the server requires one")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    logger.info("Starting Reception Relay demo client")
    try:
        asyncio.run(run_demo(args.uri, args.access_key))
    except Exception as e:
        logger.error(f"Demo failed: {e}", exc_info=True)
