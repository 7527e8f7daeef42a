"""
Concrete NumPy-backed runtime: arrays, kernels, graph nodes and tensors.
"""
