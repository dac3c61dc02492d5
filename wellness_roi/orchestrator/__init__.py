"""Lead submission orchestration."""

from .submission import GeneratedReport, SubmissionPipeline, SubmissionResult, resolve_benchmarks

__all__ = ["GeneratedReport", "SubmissionPipeline", "SubmissionResult", "resolve_benchmarks"]
