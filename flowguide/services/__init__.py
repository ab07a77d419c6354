"""
Services Package

- storage: durable slots and the demo table store
- network: latency and one-shot failure simulation
- auth: demo session handling
- calls: outbound voice calls through Twilio
"""

from flowguide.services.network import NetworkHiccupError, NetworkSimulator

__all__ = [
    "NetworkHiccupError",
    "NetworkSimulator",
]
