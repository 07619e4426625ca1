"""Hello tool example."""

from octoscreen.client import OctoPrintClient, SelectCommand

# The API key is loaded from OCTOPRINT_API_KEY
client = OctoPrintClient(base_url="http://octopi.local")

state = client.tools.state(history=True, limit=3)

print("Current temperatures:")
for key, tool in sorted(state.current.items()):
    print(f"- {key}: {tool.actual:.1f}°C (target {tool.target:.0f}°C, offset {tool.offset:+.0f})")

print(f"History points: {len(state.history)}")

# Commands can also be built explicitly and run through the same entry point
client.tools.do(SelectCommand(tool="tool0"))
client.tools.set_target({"tool0": 210})
