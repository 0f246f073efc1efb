"""Terminal based MQTT explorer: topic tree, message view and broker profiles."""

__version__ = "0.1.0"