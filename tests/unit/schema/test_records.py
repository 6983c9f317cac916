from comp_outlook.schema.records import (
    CompensationComponents,
    JobRecord,
    SalaryHistoryEntry,
    normalize_jobs,
)
from comp_outlook.utils.numeric import DEFAULT_BENEFITS_VALUE


def test_job_record_from_raw_coerces_fields():
    job = JobRecord.from_raw(
        {
            "_id": 12345,
            "company": "Acme",
            "jobTitle": "Engineer",
            "salaryMin": "90,000",
            "salaryMax": 110000,
            "finalSalary": "n/a",
            "salaryHistory": [
                {"date": "2024-01-01", "finalSalary": "95000", "negotiationOutcome": "Improved"},
                {"date": "2024-02-01", "finalSalary": 97000},
            ],
            "compHistory": "not a list",
        }
    )
    assert job.job_id == "12345"
    assert job.salary_min == 90000.0
    assert job.salary_max == 110000.0
    assert job.final_salary is None
    assert job.location == ""
    assert len(job.salary_history) == 2
    assert job.salary_history[1].negotiation_outcome == "Not attempted"
    assert job.latest_final_salary == 97000.0
    assert job.comp_history == ()


def test_job_record_accepts_alternate_id_keys():
    assert JobRecord.from_raw({"id": "a"}).job_id == "a"
    assert JobRecord.from_raw({"jobId": "b"}).job_id == "b"
    assert JobRecord.from_raw({}).job_id == ""


def test_job_record_from_raw_is_identity_for_records():
    job = JobRecord.from_raw({"_id": "x"})
    assert JobRecord.from_raw(job) is job


def test_salary_history_entry_tolerates_garbage():
    entry = SalaryHistoryEntry.from_raw("nonsense")
    assert entry.final_salary is None
    assert entry.negotiation_outcome == "Not attempted"


def test_compensation_components_floor_benefits():
    assert CompensationComponents(salary=1, benefits=0).benefits == DEFAULT_BENEFITS_VALUE
    assert CompensationComponents(salary=1, benefits=-10).benefits == DEFAULT_BENEFITS_VALUE
    assert CompensationComponents(salary=1, benefits="8000").benefits == 8000.0
    comp = CompensationComponents(salary="100", bonus=None, equity="x")
    assert (comp.salary, comp.bonus, comp.equity) == (100.0, 0.0, 0.0)
    assert comp.total == 100.0 + DEFAULT_BENEFITS_VALUE


def test_normalize_jobs_rejects_non_sequences():
    assert normalize_jobs(None) == []
    assert normalize_jobs("abc") == []
    assert normalize_jobs({"_id": "x"}) == []
    assert [j.job_id for j in normalize_jobs([{"_id": "x"}, {"_id": "y"}])] == ["x", "y"]
