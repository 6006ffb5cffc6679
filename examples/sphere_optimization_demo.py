#!/usr/bin/env python

"""
Sphere Optimization Demo - spherax

This script plays the role of an external Riemannian solver: a few lines of
steepest descent that only talk to the manifold descriptor. It maximizes
<X, A X B> over unit Frobenius-norm 5x3 matrices, whose optimum is the
Kronecker product of the leading eigenvectors of A and B.
"""

import jax
import jax.numpy as jnp

import spherax


def main():
    # 1. Define the manifold of unit-norm 5x3 matrices
    sphere = spherax.create_sphere(5, 3)

    # 2. Define the cost with symmetric A (5x5) and B (3x3)
    key_a, key_b, key_x = jax.random.split(jax.random.key(42), 3)
    a = jax.random.normal(key_a, (5, 5))
    a = a @ a.T
    b = jax.random.normal(key_b, (3, 3))
    b = b @ b.T

    def cost_fn(x):
        return -jnp.sum(x * (a @ x @ b))

    egrad_fn = jax.jit(jax.grad(cost_fn))
    cache = {}

    def cost_and_grad(x):
        # Memoize on the point identity, as solvers do
        key = sphere.hash(x)
        if key not in cache:
            cache[key] = (float(cost_fn(x)), sphere.egrad2rgrad(x, egrad_fn(x)))
        return cache[key]

    # 3. Steepest descent with Armijo backtracking
    x = sphere.random_point(key_x)
    for iteration in range(500):
        cost, rgrad = cost_and_grad(x)
        grad_norm = float(sphere.norm(x, rgrad))
        if grad_norm < 1e-8:
            break
        step = 1.0 / sphere.typical_dist
        while True:
            candidate = sphere.retr(x, rgrad, -step)
            if cost_and_grad(candidate)[0] <= cost - 1e-4 * step * grad_norm**2:
                break
            step /= 2
        x = candidate

    # 4. Compare with the eigen-decomposition solution
    u = jnp.linalg.eigh(a)[1][:, -1]
    v = jnp.linalg.eigh(b)[1][:, -1]
    optimum = jnp.outer(u, v)
    gap = min(float(sphere.dist(x, optimum)), float(sphere.dist(x, -optimum)))

    print(f"Manifold: {sphere.name} (dimension {sphere.dimension})")
    print(f"Iterations: {iteration}, final cost: {cost_and_grad(x)[0]:.6f}")
    print(f"Gradient norm: {grad_norm:.2e}")
    print(f"Distance to the optimum: {gap:.2e}")


if __name__ == "__main__":
    main()
