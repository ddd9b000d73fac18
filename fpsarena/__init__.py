"""Multiplayer maze shooter: game model, physics helpers, UDP server and text client."""

__version__ = "0.1.0"