"""
Request dependencies.
"""

from fastapi import Request

from papertrade.core.engine.session import SimulationSession


def get_session(request: Request) -> SimulationSession:
    """Get the simulation session attached to the application."""
    return request.app.state.session
