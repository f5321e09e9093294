"""HTTP service exposing the rotation scheduler."""
