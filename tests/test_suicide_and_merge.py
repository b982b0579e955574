# tests/test_suicide_and_merge.py
import pytest
from goresume.goban_model import Board, KoViolation, Suicide


def test_simple_suicide_forbidden():
    b = Board(size=3)
    # surround corner (0,0) so that W cannot play there
    b.play('B', (0, 1))
    b.play('W', (2, 2))
    b.play('B', (1, 0))
    with pytest.raises(Suicide):
        b.play('W', (0, 0))
    # the failed move changed nothing
    assert b.get((0, 0)) is None
    assert b.move_number == 3


def test_merge_prevents_suicide():
    b = Board(size=5)
    b.play('B', (0, 1))
    b.play('W', (1, 0))
    b.play('B', (2, 2))
    b.play('W', (1, 2))
    b.play('B', None, is_pass=True)
    b.play('W', (1, 1))
    assert b.get((1, 1)) == 'W'


def _ko_shape(superko):
    b = Board(size=5, superko=superko)
    for color, point in (('B', (1, 0)), ('W', (0, 2)), ('B', (0, 1)), ('W', (2, 2)),
                         ('B', (2, 1)), ('W', (1, 3))):
        b.play(color, point)
    b.play('B', None, is_pass=True)
    b.play('W', (1, 1))
    b.play('B', (1, 2))  # takes the ko
    assert b.get((1, 1)) is None
    return b


def test_superko_forbids_immediate_retake():
    b = _ko_shape(superko=True)
    with pytest.raises(KoViolation):
        b.play('W', (1, 1))


def test_retake_allowed_without_superko():
    b = _ko_shape(superko=False)
    b.play('W', (1, 1))
    assert b.get((1, 2)) is None
