"""Single-room caro session: roles, start handshake, turns and the turn clock.

Every public method runs under one re-entrant lock, shared with the turn clock,
so a clock expiry never interleaves with a player action. Invalid actions are
silently ignored on the wire; internally they come back as a rejected
``ActionResult`` so callers and tests can see why.
"""
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .board import Board, Coord, MARK_O, MARK_X
from .clock import TurnClock

Emitter = Callable[..., None]


class Role(str, Enum):
    X = 'X'
    O = 'O'
    SPECTATOR = 'SPECTATOR'


class Phase(str, Enum):
    WAITING_FOR_PLAYERS = 'waiting_for_players'
    READY_TO_CONFIRM = 'ready_to_confirm'
    IN_PROGRESS = 'in_progress'
    FINISHED = 'finished'


class Rejection(str, Enum):
    UNKNOWN_CONNECTION = 'unknown_connection'
    NOT_A_PLAYER = 'not_a_player'
    WRONG_PHASE = 'wrong_phase'
    NOT_YOUR_TURN = 'not_your_turn'
    MALFORMED_COORDINATES = 'malformed_coordinates'
    CELL_OCCUPIED = 'cell_occupied'
    ALREADY_CONFIRMED = 'already_confirmed'
    GAME_OVER = 'game_over'
    BOARD_FULL = 'board_full'


@dataclass(frozen=True)
class ActionResult:
    accepted: bool
    reason: Optional[Rejection] = None

    def __bool__(self) -> bool:
        return self.accepted


ACCEPTED = ActionResult(True)

READY_MESSAGE = 'Both players are here. Confirm to start!'
WAITING_MESSAGE = 'Waiting for two players...'


def _is_coordinate(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _other(mark: str) -> str:
    return MARK_O if mark == MARK_X else MARK_X


class Session:
    def __init__(
        self,
        emit: Emitter,
        board_size: int = 20,
        win_length: int = 5,
        turn_time: int = 30,
        spawn: Optional[Callable[..., Any]] = None,
        sleep: Callable[[float], Any] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        self._emit = emit
        self.board_size = board_size
        self.turn_time = turn_time
        self.logger = logger or logging.getLogger(__name__)
        self.lock = threading.RLock()

        self.board = Board(board_size, win_length)
        self.clock = TurnClock(
            on_tick=self._emit_timer,
            on_expire=self.auto_move,
            lock=self.lock,
            spawn=spawn,
            sleep=sleep,
            logger=self.logger,
        )

        self.roles: Dict[str, Role] = {}
        self.players: Dict[str, Optional[str]] = {MARK_X: None, MARK_O: None}
        self.confirmations: Dict[str, bool] = {MARK_X: False, MARK_O: False}
        self.phase = Phase.WAITING_FOR_PLAYERS
        self.turn = MARK_X
        self.winner: Optional[str] = None
        self.win_line: List[Coord] = []
        self.last_move: Optional[Dict[str, Any]] = None

        self._reset_game()

    # ---- read side ----

    def role_of(self, connection_id: str) -> Optional[Role]:
        return self.roles.get(connection_id)

    def both_seated(self) -> bool:
        return self.players[MARK_X] is not None and self.players[MARK_O] is not None

    def public_state(self) -> Dict[str, Any]:
        return {
            'board': self.board.to_dict(),
            'turn': self.turn,
            'winner': self.winner,
            'winLine': [[x, y] for x, y in self.win_line],
            'phase': self.phase.value,
        }

    def snapshot(self) -> Dict[str, Any]:
        with self.lock:
            state = self.public_state()
            state.update({
                'timer': self.clock.remaining,
                'clockRunning': self.clock.running,
                'lastMove': self.last_move,
                'confirmations': dict(self.confirmations),
                'players': {mark: sid is not None for mark, sid in self.players.items()},
                'spectators': sum(1 for r in self.roles.values() if r is Role.SPECTATOR),
            })
            return state

    # ---- inbound events ----

    def join(self, connection_id: str) -> Role:
        with self.lock:
            role = self.roles.get(connection_id)
            if role is None:
                if self.players[MARK_X] is None:
                    self.players[MARK_X] = connection_id
                    role = Role.X
                elif self.players[MARK_O] is None:
                    self.players[MARK_O] = connection_id
                    role = Role.O
                else:
                    role = Role.SPECTATOR
                self.roles[connection_id] = role
                self.logger.info(f"[join] sid={connection_id} role={role.value} phase={self.phase.value}")

            self._emit('assign_role', {'symbol': role.value}, to=connection_id)
            self._emit('state', self.public_state(), to=connection_id)
            self._emit('timer', self.clock.remaining, to=connection_id)
            self._emit('last_move', self.last_move, to=connection_id)
            self._emit('start_confirm_update', dict(self.confirmations), to=connection_id)

            # A running or finished game is never disturbed by a spectator arriving
            if self.phase in (Phase.WAITING_FOR_PLAYERS, Phase.READY_TO_CONFIRM):
                self._announce_readiness()
            return role

    def confirm_start(self, connection_id: str) -> ActionResult:
        with self.lock:
            mark = self._player_mark(connection_id)
            if mark is None:
                return self._reject('confirm', connection_id, Rejection.NOT_A_PLAYER)
            if self.phase is not Phase.READY_TO_CONFIRM:
                return self._reject('confirm', connection_id, Rejection.WRONG_PHASE)
            if self.confirmations[mark]:
                return self._reject('confirm', connection_id, Rejection.ALREADY_CONFIRMED)

            self.confirmations[mark] = True
            self.logger.info(f"[confirm] mark={mark} confirmations={self.confirmations}")
            self._emit('start_confirm_update', dict(self.confirmations))

            if all(self.confirmations.values()):
                self._reset_board()
                self.phase = Phase.IN_PROGRESS
                self.logger.info("[start] both players confirmed, game in progress")
                self._emit('state', self.public_state())
                self._emit('last_move', None)
                self._emit('game_started')
                self.clock.start(self.turn_time)
            return ACCEPTED

    def move(self, connection_id: str, x: Any, y: Any) -> ActionResult:
        with self.lock:
            mark = self._player_mark(connection_id)
            if mark is None:
                return self._reject('move', connection_id, Rejection.NOT_A_PLAYER)
            if self.phase is not Phase.IN_PROGRESS:
                return self._reject('move', connection_id, Rejection.WRONG_PHASE)
            if mark != self.turn:
                return self._reject('move', connection_id, Rejection.NOT_YOUR_TURN)
            if not (_is_coordinate(x) and _is_coordinate(y)):
                return self._reject('move', connection_id, Rejection.MALFORMED_COORDINATES)
            if not self.board.is_empty(x, y):
                return self._reject('move', connection_id, Rejection.CELL_OCCUPIED)

            self.logger.info(f"[move] mark={mark} x={x} y={y}")
            self._place(x, y, mark)
            return ACCEPTED

    def auto_move(self) -> ActionResult:
        """Play for the idle turn-holder on the first empty working cell."""
        with self.lock:
            if self.winner is not None:
                return self._reject('auto-move', None, Rejection.GAME_OVER)
            if self.phase is not Phase.IN_PROGRESS:
                return self._reject('auto-move', None, Rejection.WRONG_PHASE)
            cell = self.board.first_empty_cell()
            if cell is None:
                # Full working area without a winner: the game stalls here
                self.logger.warning("[auto-move] no empty cell left, game stalled without a winner")
                return ActionResult(False, Rejection.BOARD_FULL)

            x, y = cell
            self.logger.info(f"[auto-move] mark={self.turn} x={x} y={y}")
            self._place(x, y, self.turn)
            return ACCEPTED

    def request_reset(self, connection_id: str) -> ActionResult:
        with self.lock:
            if self._player_mark(connection_id) is None:
                return self._reject('reset', connection_id, Rejection.NOT_A_PLAYER)
            self.logger.info(f"[reset] requested by sid={connection_id}")
            self._reset_game()
            self._broadcast_reset()
            return ACCEPTED

    def leave(self, connection_id: str) -> ActionResult:
        with self.lock:
            role = self.roles.pop(connection_id, None)
            if role is None:
                return self._reject('leave', connection_id, Rejection.UNKNOWN_CONNECTION)
            if role is not Role.SPECTATOR:
                self.players[role.value] = None

            # Any departure, spectators included, restarts the room
            self.logger.info(f"[leave] sid={connection_id} role={role.value}, resetting game")
            self._reset_game()
            self._broadcast_reset()
            return ACCEPTED

    # ---- internals ----

    def _player_mark(self, connection_id: str) -> Optional[str]:
        role = self.roles.get(connection_id)
        if role in (Role.X, Role.O):
            return role.value
        return None

    def _reject(self, action: str, connection_id: Optional[str], reason: Rejection) -> ActionResult:
        self.logger.debug(f"[reject] action={action} sid={connection_id} reason={reason.value}")
        return ActionResult(False, reason)

    def _place(self, x: int, y: int, mark: str) -> None:
        self.board.set(x, y, mark)
        self.last_move = {'x': x, 'y': y, 'mark': mark}
        self._emit('last_move', self.last_move)

        line = self.board.check_win(x, y)
        if line:
            self.winner = mark
            self.win_line = line
            self.phase = Phase.FINISHED
            self.clock.stop()
            self.logger.info(f"[win] mark={mark} line={line}")
            self._emit('state', self.public_state())
        else:
            self.turn = _other(self.turn)
            self._emit('state', self.public_state())
            self.clock.start(self.turn_time)

    def _reset_board(self) -> None:
        self.board.reset(self.board_size)
        self.turn = MARK_X
        self.winner = None
        self.win_line = []
        self.last_move = None
        self.clock.stop()
        self.clock.set_remaining(self.turn_time)

    def _reset_game(self) -> None:
        self._reset_board()
        self.confirmations = {MARK_X: False, MARK_O: False}
        self.phase = Phase.READY_TO_CONFIRM if self.both_seated() else Phase.WAITING_FOR_PLAYERS

    def _broadcast_reset(self) -> None:
        self._emit('state', self.public_state())
        self._emit('last_move', None)
        self._emit('timer', self.clock.remaining)
        self._announce_readiness()

    def _announce_readiness(self) -> None:
        if self.phase is Phase.WAITING_FOR_PLAYERS and self.both_seated():
            self.phase = Phase.READY_TO_CONFIRM
            self.confirmations = {MARK_X: False, MARK_O: False}

        if self.phase is Phase.READY_TO_CONFIRM:
            self._emit('ready_to_start', {'message': READY_MESSAGE})
        else:
            self._emit('waiting_for_players', {'message': WAITING_MESSAGE})

    def _emit_timer(self, remaining: int) -> None:
        self._emit('timer', remaining)
