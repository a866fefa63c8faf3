"""
Reception Relay - call routing and WebRTC signaling for a website receptionist

This application lets website visitors request a live audio/video call with
reception staff. Visitors queue a call from the chat widget, every logged-in
staff dashboard is alerted, the first staff member to accept claims the call,
and the two browsers then negotiate a peer-to-peer session through signaling
messages relayed by this server. The media itself never passes through here.

Architecture Overview:
- FastAPI server exposing one WebSocket endpoint for visitors and staff
- Session registry tracking live connections and their roles
- Call queue enforcing the call lifecycle (waiting, in-progress, completed, rejected)
- Signaling relay forwarding offers, answers and ICE candidates verbatim
- Notification fan-out pushing call events to staff dashboards and visitors

Key Components:
- config: Constants, environment settings and logging setup
- handlers: Event handlers for the visitor/staff WebSocket protocol
- models: Connection and call state, and the message schemas
- services: Signaling relay, notification fan-out, call archive and the switchboard
- websocket_manager: Central handler for WebSocket connections and event routing

Getting Started:
1. Set up environment variables (optional):
   - PORT: Port to run the server on (default 8000)
   - HOST: Host to bind the server to (default 0.0.0.0)
   - LOG_LEVEL: Logging level (default INFO)
   - STAFF_ACCESS_KEY: Shared key staff dashboards must send on login
   - CALL_ARCHIVE_PATH: JSON-lines file that receives finished calls

2. Start the server:
   ```bash
   python run.py
   ```

3. Point the visitor widget and the staff dashboard at ws://your-server:8000/ws
"""
