"""
Kernel layer.

Deterministic integer kernels used by the pool engine. `pairswap/kernels/python/`
holds the production Python implementations.
"""
