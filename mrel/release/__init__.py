"""Monorepo release orchestration.

- semver: version parsing, validation and increments
- planner: increment choices offered to the operator, target resolution
- manifest / propagate: package.json model and version propagation
- executor: live vs dry-run command execution
- vcs / toolchain / publisher: git, build/test and registry collaborators
- pipeline: the ordered release stages
"""

from __future__ import annotations
