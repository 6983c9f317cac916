# comp_outlook/analytics/market.py
"""Market positioning of each job against a title|location benchmark table."""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from comp_outlook.analytics.salary import resolve_job_salary
from comp_outlook.config.models import ANY_BENCHMARK_KEY, Benchmark
from comp_outlook.schema.records import JobRecord, normalize_jobs
from comp_outlook.utils.numeric import as_reported

logger = logging.getLogger(__name__)

NEAR_TOP_RATIO = 0.9


def benchmark_key(job: JobRecord) -> str:
    return f"{job.job_title}|{job.location}"


def lookup_benchmark(job: JobRecord, benchmarks: Mapping[str, Benchmark]) -> Benchmark:
    key = benchmark_key(job)
    if key in benchmarks:
        return benchmarks[key]
    return benchmarks[ANY_BENCHMARK_KEY]


def position_job(job: JobRecord, benchmarks: Mapping[str, Benchmark]) -> Dict[str, Any]:
    benchmark = lookup_benchmark(job, benchmarks)
    estimated: Optional[float] = resolve_job_salary(job)
    has_estimate = estimated is not None
    return {
        "jobId": job.job_id,
        "title": job.job_title,
        "company": job.company,
        "estimatedSalary": as_reported(estimated),
        "benchmarkMedian": as_reported(benchmark.median),
        "benchmarkTop": as_reported(benchmark.top),
        "belowMedian": has_estimate and estimated < benchmark.median,
        "nearTop": has_estimate and estimated >= NEAR_TOP_RATIO * benchmark.top,
    }


def position_jobs(jobs: Iterable[Any], benchmarks: Mapping[str, Benchmark]) -> List[Dict[str, Any]]:
    """One positioning entry per job, in input order."""
    return [position_job(job, benchmarks) for job in normalize_jobs(jobs)]
