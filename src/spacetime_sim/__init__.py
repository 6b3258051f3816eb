"""Interactive N-body gravity simulation with a deformable spacetime grid."""

__version__ = "0.1.0"
