import numpy as np
import pytest

from linemod_detector.errors import InvariantViolation
from linemod_detector.loader import PoseTable
from linemod_detector.pose import correct_translation, synthesize_pose
from linemod_detector.pose_types import Match


def _rot_z(angle):
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def _table():
    table = PoseTable()
    I = np.eye(3)
    table.add(
        "mug",
        [I, I],
        [np.array([[0.0], [0.0], [1.0]]), np.array([[0.0], [1.0], [0.0]])],
    )
    return table


def test_mug_example():
    """Identity rotation, T=[0,0,1] gives [0,0,-1]."""
    pose = synthesize_pose(Match("mug", 0, 0, 0, 99.0), _table())

    assert pose.object_id == "mug"
    assert np.allclose(pose.rotation, np.eye(3))
    assert pose.translation.shape == (3, 1)
    assert np.allclose(pose.translation.flatten(), [0.0, 0.0, -1.0])
    assert pose.similarity == 99.0


def test_second_template_uses_its_own_pose():
    pose = synthesize_pose(Match("mug", 1, 0, 0, 95.0), _table())
    assert np.allclose(pose.translation.flatten(), [0.0, -1.0, 0.0])


def test_correction_rotates_then_flips_y_and_z():
    R = _rot_z(np.pi / 2)
    T = np.array([1.0, 2.0, 3.0])

    out = correct_translation(R, T)

    rotated = R @ T
    assert np.allclose(out.flatten(), [rotated[0], -rotated[1], -rotated[2]])
    assert np.allclose(out.flatten(), [-2.0, -1.0, -3.0])


def test_correction_leaves_x_unchanged():
    out = correct_translation(np.eye(3), [[4.0], [5.0], [6.0]])
    assert np.allclose(out.flatten(), [4.0, -5.0, -6.0])


def test_synthesis_does_not_mutate_pose_table():
    table = _table()
    pose = synthesize_pose(Match("mug", 0, 0, 0, 95.0), table)
    pose.rotation[0, 0] = 42.0

    R, T = table.lookup("mug", 0)
    assert np.allclose(R, np.eye(3))
    assert np.allclose(T.flatten(), [0.0, 0.0, 1.0])


def test_synthesis_is_deterministic():
    table = _table()
    match = Match("mug", 0, 0, 0, 95.0)
    a = synthesize_pose(match, table)
    b = synthesize_pose(match, table)
    assert np.array_equal(a.translation, b.translation)
    assert np.array_equal(a.rotation, b.rotation)


def test_unknown_class_is_invariant_violation():
    with pytest.raises(InvariantViolation):
        synthesize_pose(Match("bowl", 0, 0, 0, 95.0), _table())
