"""Error line classification for playground runs."""

from enum import Enum


class FailureType(str, Enum):
    TRANSPILE_ERROR = "transpile_error"
    TIMEOUT = "timeout"
    SYNTAX_ERROR = "syntax_error"
    RUNTIME_ERROR = "runtime_error"
    INFRASTRUCTURE = "infrastructure"
    OTHER = "other"


class FailureAnalyzer:
    def __init__(self):
        self.failures: dict[FailureType, int] = {ft: 0 for ft in FailureType}

    def classify_error(self, error_msg: str) -> FailureType:
        error_lower = error_msg.lower()

        if 'transpil' in error_lower:
            return FailureType.TRANSPILE_ERROR
        elif error_lower.startswith('timeout') or 'timed out' in error_lower:
            return FailureType.TIMEOUT
        elif 'runtime not found' in error_lower or 'sandbox exited' in error_lower or 'heap out of memory' in error_lower:
            return FailureType.INFRASTRUCTURE
        elif 'syntaxerror' in error_lower:
            return FailureType.SYNTAX_ERROR
        elif any(err in error_lower for err in ['error', 'exception', 'uncaught', 'is not', 'cannot']):
            return FailureType.RUNTIME_ERROR
        else:
            return FailureType.OTHER

    def record_failure(self, error_msg: str) -> FailureType:
        failure_type = self.classify_error(error_msg)
        self.failures[failure_type] += 1
        return failure_type

    def get_top_failures(self, n: int = 5) -> list[tuple[str, int]]:
        sorted_failures = sorted(
            self.failures.items(),
            key=lambda x: x[1],
            reverse=True
        )
        return [(ft.value, count) for ft, count in sorted_failures[:n] if count > 0]
