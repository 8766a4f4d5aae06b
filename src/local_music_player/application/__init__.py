"""
Application Layer

Orchestrates the domain and the infrastructure ports to run the player.

Structure:
- services/: The playback session and the snapshot autosaver
- interfaces/: Port interfaces for infrastructure adapters
"""
