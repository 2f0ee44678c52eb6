"""
12-square shogi core Python package.

Game-state engine and oracle protocol client for the 4x3 board game with
drops and Chick->Hen promotion.
Modules:
- board.py: PieceKind, Player, Piece, Board, squares
- reserve.py: Reserve
- moves.py: Move, Verdict, undo records
- state.py: GameState (apply/undo/history)
- protocol.py: oracle file encoder and output decoder
- oracle.py: executable lookup and subprocess invocation
- render.py, cli.py: text presentation and the interactive loop
"""
