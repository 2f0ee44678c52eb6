import os
import stat
import tempfile
import unittest
from unittest.mock import patch

import game
from shogi12_core.board import PieceKind, Player
from shogi12_core.errors import OracleLaunchError, ProtocolError, ReserveOverflow
from shogi12_core.moves import Outcome
from shogi12_core.oracle import find_oracle_exe, query_oracle
from shogi12_core.protocol import serialize
from shogi12_core.reserve import Reserve
from shogi12_core.state import GameState

GOOD_OUTPUT = (
    "--------------------\n"
    "-KI-LI-ZO\n"
    " . -HI . \n"
    " . +HI . \n"
    "+ZO+LI+KI\n"
    "000000\n"
    "+\n"
    "\n"
    "0(12)\n"
    "0:B3B2HI 1(6)\n"
    "1:B4A3LI 0(11)\n"
    "Move : \n"
)


class DummyProc:
    def __init__(self, out: str, err: str = ''):
        self.stdout = out
        self.stderr = err
        self.returncode = 0


class TestQueryOracle(unittest.TestCase):
    def test_given_canned_output_when_querying_then_file_holds_state_and_is_removed(self):
        state = GameState()
        seen = {}

        def run_proc(exe, path):
            seen['exe'] = exe
            seen['path'] = path
            with open(path, encoding='ascii') as f:
                seen['text'] = f.read()
            return GOOD_OUTPUT, ''

        res = query_oracle(state, find_exe=lambda: '/bin/oracle', run_proc=run_proc)
        self.assertEqual(seen['exe'], '/bin/oracle')
        self.assertEqual(seen['text'], serialize(state))
        self.assertFalse(os.path.exists(seen['path']))
        self.assertEqual(res.verdict.outcome, Outcome.DRAW)
        self.assertEqual(res.verdict.plies, 12)
        self.assertEqual([m.sequence_id for m in res.moves], [0, 1])
        self.assertEqual(res.moves[0].outcome, Outcome.LOSE)
        self.assertEqual(res.moves[0].plies, 7)

    def test_given_garbled_output_when_querying_then_protocol_error_carries_stderr_and_file_removed(self):
        seen = {}

        def run_proc(exe, path):
            seen['path'] = path
            return "oops\n", "segfault"

        with self.assertRaises(ProtocolError) as cm:
            query_oracle(GameState(), find_exe=lambda: 'x', run_proc=run_proc)
        self.assertEqual(cm.exception.stderr, "segfault")
        self.assertEqual(cm.exception.submitted, serialize(GameState()))
        self.assertEqual(cm.exception.line, "oops")
        self.assertFalse(os.path.exists(seen['path']))

    def test_given_failing_launch_when_querying_then_launch_error_and_file_removed(self):
        seen = {}

        def run_proc(exe, path):
            seen['path'] = path
            raise OracleLaunchError("boom")

        with self.assertRaises(OracleLaunchError):
            query_oracle(GameState(), find_exe=lambda: 'x', run_proc=run_proc)
        self.assertFalse(os.path.exists(seen['path']))

    def test_given_missing_executable_when_querying_then_launch_error_before_running(self):
        calls = []
        with self.assertRaises(OracleLaunchError):
            query_oracle(GameState(), find_exe=lambda: None, run_proc=lambda e, p: calls.append(p))
        self.assertEqual(calls, [])

    def test_given_unrepresentable_reserve_when_querying_then_overflow_before_anything_runs(self):
        r = Reserve()
        for _ in range(10):
            r.add(Player.FIRST, PieceKind.ELEPHANT)
        calls = []
        with self.assertRaises(ReserveOverflow):
            query_oracle(GameState(reserve=r), find_exe=lambda: calls.append('find') or 'x',
                         run_proc=lambda e, p: calls.append(p))
        self.assertEqual(calls, [])

    def test_given_env_var_pointing_at_executable_when_resolving_then_used(self):
        with tempfile.TemporaryDirectory() as d:
            exe = os.path.join(d, 'checkState')
            with open(exe, 'w') as f:
                f.write('#!/bin/sh\n')
            os.chmod(exe, os.stat(exe).st_mode | stat.S_IXUSR)
            with patch.dict(os.environ, {'SHOGI12_ORACLE_EXE': exe}):
                self.assertEqual(find_oracle_exe(), exe)


class TestFacade(unittest.TestCase):
    def test_given_patched_subprocess_when_fetching_moves_then_parsed_result(self):
        with patch('game.find_oracle_exe', return_value='dummy'), \
             patch('game.subprocess.run', return_value=DummyProc(GOOD_OUTPUT)) as run:
            res = game.fetch_moves(GameState())
        args = run.call_args[0][0]
        self.assertEqual(args[0], 'dummy')
        self.assertEqual(len(args), 2)
        self.assertEqual(len(res.moves), 2)
        self.assertEqual(res.moves[1].piece, PieceKind.LION)

    def test_given_oserror_from_subprocess_when_fetching_moves_then_launch_error(self):
        with patch('game.find_oracle_exe', return_value='dummy'), \
             patch('game.subprocess.run', side_effect=FileNotFoundError('dummy')):
            with self.assertRaises(OracleLaunchError):
                game.fetch_moves(GameState())


if __name__ == '__main__':
    unittest.main(verbosity=2)
