"""TUI (Terminal User Interface) module for stackq.

One session, one state machine, one event queue.
"""
from .machine import NavigationStateMachine
from .navigator import Navigator
from .router import Router
from .state import Session, Severity, State

__all__ = ["NavigationStateMachine", "Navigator", "Router", "Session", "Severity", "State"]
