from .loader import get_default_benchmarks, load_benchmarks
from .schema import BenchmarkConstants, InputDefaults

__all__ = ["BenchmarkConstants", "InputDefaults", "get_default_benchmarks", "load_benchmarks"]
