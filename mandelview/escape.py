"""Escape-time classification of complex-plane points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import tensorflow as tf

from .plane import ComplexPoint

ESCAPE_RADIUS = 2.0


@dataclass(frozen=True)
class IterationResult:
    """Outcome of iterating ``z <- z**2 + c`` for one point."""

    escaped: bool
    iterations: int

    @property
    def in_set(self) -> bool:
        return not self.escaped


def classify(c: ComplexPoint, max_iterations: int) -> IterationResult:
    """Iterate from ``z = 0`` until the modulus reaches 2 or the bound is hit.

    A point is in the set only when it survives all ``max_iterations`` steps.
    """

    z = ComplexPoint(0.0, 0.0)
    i = 0
    while i < max_iterations and z.modulus() < ESCAPE_RADIUS:
        z = z.square().add(c)
        i += 1
    return IterationResult(escaped=i < max_iterations, iterations=i)


@tf.function
def _escape_step(
    zr: tf.Tensor, zi: tf.Tensor, cr: tf.Tensor, ci: tf.Tensor, ns: tf.Tensor, active: tf.Tensor
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance the points that are still bounded by one iteration."""

    zr_new = zr * zr - zi * zi + cr
    zi_new = 2 * zr * zi + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    ns = ns + tf.cast(active, tf.int32)
    modulus = tf.sqrt(zr * zr + zi * zi)
    active = tf.logical_and(active, modulus < tf.cast(ESCAPE_RADIUS, modulus.dtype))
    return zr, zi, ns, active


@tf.function
def _escape_run(cr: tf.Tensor, ci: tf.Tensor, max_iterations: tf.Tensor) -> tf.Tensor:
    """Run the escape loop for a whole grid with a TensorFlow while loop."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    ns = tf.zeros(tf.shape(cr), tf.int32)
    active = tf.ones(tf.shape(cr), tf.bool)

    def cond(i, zr, zi, ns, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zr, zi, ns, active):
        zr, zi, ns, active = _escape_step(zr, zi, cr, ci, ns, active)
        return i + 1, zr, zi, ns, active

    _, _, _, ns, _ = tf.while_loop(cond, body, (i, zr, zi, ns, active))
    return ns


def classify_grid(
    reals: np.ndarray, imaginaries: np.ndarray, max_iterations: int, *, device: Optional[str] = None
) -> np.ndarray:
    """Iteration counts for every point of a grid, same semantics as :func:`classify`.

    Escaped points are those whose count is below ``max_iterations``.
    """

    reals = np.asarray(reals, dtype=np.float64)
    imaginaries = np.asarray(imaginaries, dtype=np.float64)
    if reals.shape != imaginaries.shape:
        raise ValueError(f"grid shapes differ: {reals.shape} vs {imaginaries.shape}")
    if reals.size == 0:
        return np.zeros(reals.shape, dtype=np.int32)

    with tf.device(device if device is not None else "/CPU:0"):
        cr = tf.convert_to_tensor(reals, dtype=tf.float64)
        ci = tf.convert_to_tensor(imaginaries, dtype=tf.float64)
        ns = _escape_run(cr, ci, tf.constant(max_iterations, dtype=tf.int32))
    return ns.numpy()
