"""
Survey Logic & Scoring Core

The deterministic engine behind survey branching and results.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - UI rendering
    - Persistence or storage
    - Network access
    - Document export

It evaluates branching rules, validates authoring-time logic and
scoring configuration, and computes scores and bands.

Every public function is pure: same inputs, same outputs.
Published engine versions are frozen; new behavior is added as a new version.
"""

__version__ = "0.1.0"
