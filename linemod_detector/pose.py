"""Turn raw LINE-MOD matches into object poses."""

import numpy as np

from .loader import PoseTable
from .pose_types import Match, PoseResult


def correct_translation(R: np.ndarray, T: np.ndarray) -> np.ndarray:
    """
    Express a template's reference translation in the consumer convention.

    Computes T' = R @ T and flips the sign of its y and z components; x is
    left unchanged.

    Args:
        R: Reference rotation (3,3)
        T: Reference translation (3,) or (3,1)

    Returns:
        Corrected translation as a new (3,1) array
    """
    R = np.asarray(R, dtype=np.float64).reshape(3, 3)
    T = np.asarray(T, dtype=np.float64).reshape(3, 1)

    T_out = R @ T
    T_out[1, 0] = -T_out[1, 0]
    T_out[2, 0] = -T_out[2, 0]

    return T_out


def synthesize_pose(match: Match, poses: PoseTable) -> PoseResult:
    """
    Build the pose result for one match.

    Raises:
        InvariantViolation: the pose table has no entry for the match
    """
    R, T = poses.lookup(match.class_id, match.template_id)
    return PoseResult(
        object_id=match.class_id,
        rotation=np.array(R, dtype=np.float64, copy=True),
        translation=correct_translation(R, T),
        similarity=float(match.similarity),
    )
