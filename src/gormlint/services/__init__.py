"""Service layer — operations consumed by the CLI.

INVARIANT: every public service method returns a ServiceResult.
"""

from gormlint.services.lint import LintService
from gormlint.services.result import ServiceError, ServiceResult

__all__ = ["LintService", "ServiceError", "ServiceResult"]
