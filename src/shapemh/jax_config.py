"""
JAX Configuration - MUST be imported before any JAX imports.

This module sets environment variables for JAX configuration including:
- Double precision, so chain arithmetic matches the float64 host arrays
- Quiet XLA C++ logging
"""
import os

# --- PRECISION ---
# Parameters live on the host as float64; draws and log-densities must match
# bit-for-bit across runs with the same seed.
os.environ.setdefault("JAX_ENABLE_X64", "True")

# --- LOGGING ---
# Suppress CUDA/XLA C++ warnings
os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")
