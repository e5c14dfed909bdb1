"""
Tests for poisson-disk-sampling

This package contains tests for:
- Regions, points and random sources
- Spatial index strategies
- Candidate generation and the sampler
- Policies, reports and the CLI
"""
