"""Building blocks for a LoRa APRS iGate: APRS-IS client, beacon positions, time, tasks and display."""

__version__ = "23.31.1"