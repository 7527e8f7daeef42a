"""
CPU compute kernels operating on flat NumPy buffer slices.

- ``matmul_cpu``    : 2D matrix product (BLAS or reference loop)
- ``transpose_cpu`` : 2D matrix transpose
- ``reduce_cpu``    : axis / full reductions
"""
