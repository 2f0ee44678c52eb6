import unittest

from shogi12_core.board import PieceKind, Player
from shogi12_core.moves import Move, Outcome, Verdict
from shogi12_core.render import (
    ROTATIONS,
    Players,
    colorize,
    history_lines,
    interpret_color,
    move_to_str,
    render,
    verdict_to_str,
)
from shogi12_core.state import GameState


def _plain():
    return Players(use_color=False)


class TestRender(unittest.TestCase):
    def test_given_initial_state_when_rendered_down_then_second_player_on_top(self):
        text = render(GameState(), 'down', _plain())
        lines = text.splitlines()
        self.assertEqual(lines[0], 'Second Player ')
        self.assertEqual(lines[1], '    A   B   C')
        self.assertIn('1 ┃將V┃王V┃相V┃ 1', text)
        self.assertIn('4 ┃相^┃王^┃將^┃ 4', text)
        self.assertEqual(lines[-2], 'First Player ')
        self.assertEqual(lines[-1], "It's First Player's turn")

    def test_given_initial_state_when_rendered_up_then_board_rotated_half_turn(self):
        text = render(GameState(), 'up', _plain())
        self.assertTrue(text.startswith('First Player '))
        self.assertIn('    C   B   A', text)
        self.assertIn('4 ┃將V┃王V┃相V┃ 4', text)

    def test_given_sideways_orientations_when_rendered_then_columns_are_ranks(self):
        left = render(GameState(), 'left', _plain())
        self.assertIn('    4   3   2   1', left)
        self.assertIn('相>', left)
        self.assertIn('<王', left)
        right = render(GameState(), 'right', _plain())
        self.assertIn('    1   2   3   4', right)
        self.assertTrue(right.startswith('Second Player\n'))

    def test_given_unknown_orientation_or_color_when_rendering_then_value_error(self):
        with self.assertRaises(ValueError):
            render(GameState(), 'diagonal', _plain())
        with self.assertRaises(ValueError):
            interpret_color('blue')
        self.assertEqual(interpret_color('Red'), 31)
        self.assertEqual(colorize('x', 32), '\x1b[1;32mx\x1b[0m')

    def test_given_rotation_commands_when_applied_four_times_then_back_to_start(self):
        o = 'down'
        for _ in range(4):
            o = ROTATIONS['cw'][o]
        self.assertEqual(o, 'down')
        self.assertEqual(ROTATIONS['flip']['left'], 'right')

    def test_given_moves_when_formatted_then_outcome_and_winner_names(self):
        win = Move(3, (2, 1), (1, 1), PieceKind.CHICK, Outcome.WIN, 3)
        self.assertEqual(
            move_to_str(win, my_name='A', opponents_name='B'),
            ' 3: 子 B3 -> B2  win (A wins) in   3 moves',
        )
        drop = Move(0, None, (1, 0), PieceKind.GIRAFFE, Outcome.LOSE, 10)
        self.assertEqual(
            move_to_str(drop, show_id=False, my_name='A', opponents_name='Bob'),
            '將 00 -> A2 lose (Bob wins) in  10 moves',
        )

    def test_given_verdicts_when_formatted_then_winner_resolved_from_side_to_move(self):
        s = GameState()
        p = _plain()
        self.assertEqual(verdict_to_str(Verdict(Outcome.DRAW, 0), s, p), 'Game status: Drawn')
        self.assertEqual(verdict_to_str(Verdict(Outcome.WIN, 5), s, p),
                         'Game status: First Player wins in 5 moves')
        self.assertEqual(verdict_to_str(Verdict(Outcome.LOSE, 4), s, p),
                         'Game status: Second Player wins in 4 moves')

    def test_given_played_moves_when_listing_history_then_movers_alternate(self):
        s = GameState()
        s.apply_move(Move(0, (3, 1), (2, 0), PieceKind.LION))
        s.apply_move(Move(1, (0, 1), (1, 0), PieceKind.LION))
        lines = history_lines(s, _plain())
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].startswith(' 1.  First Player '))
        self.assertTrue(lines[1].startswith(' 2. Second Player '))
        self.assertIn('B4 -> A3', lines[0])

    def test_given_reserve_when_rendered_then_glyphs_listed(self):
        s = GameState()
        s.apply_move(Move(0, (2, 1), (1, 1), PieceKind.CHICK))
        text = render(s, 'down', _plain())
        self.assertIn('First Player 子', text)
        self.assertIn("It's Second Player's turn", text)
        self.assertIs(s.to_move, Player.SECOND)


if __name__ == '__main__':
    unittest.main(verbosity=2)
