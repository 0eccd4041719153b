"""Game domain services: board, turn clock and the room session.

Nothing in here knows about Flask or Socket.IO; the session talks to the
outside world through the emitter it is constructed with.
"""
from .board import Board, EMPTY, MARK_O, MARK_X
from .clock import TurnClock
from .session import ActionResult, Phase, Rejection, Role, Session
