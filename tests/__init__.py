"""Test suite for curvedit.

Test Structure:
- unit/curves/: models, coordinate mapping, splines, CurveModel, collection binding
- unit/editor/: pointer interaction, render frames, editor sessions
- unit/config/: config models and loading
- unit/cli/: command-line interface
- unit/utils/: logging, math and JSON helpers
- conftest.py: Shared fixtures and test configuration
"""
