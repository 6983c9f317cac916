import pytest

from comp_outlook.config.loaders import load_engine_config


@pytest.fixture
def engine_config():
    return load_engine_config()


@pytest.fixture
def make_job():
    """Factory for raw job documents shaped like the document store's."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        job = {
            "_id": f"job{counter['n']}",
            "userId": "user123",
            "jobTitle": "Software Engineer",
            "company": "TechCorp",
            "location": "NYC",
            "salaryMin": 100000,
            "salaryMax": 150000,
            "salaryHistory": [],
            "compHistory": [],
        }
        job.update(overrides)
        return job

    return _make


@pytest.fixture
def offer_jobs():
    return [
        {
            "_id": "offerA",
            "userId": "user123",
            "status": "offer",
            "company": "Acme",
            "jobTitle": "Engineer",
            "location": "Remote",
            "workMode": "Remote",
            "finalSalary": 100000,
            "salaryBonus": 10000,
            "salaryEquity": 5000,
            "benefitsValue": 12000,
        },
        {
            "_id": "offerB",
            "userId": "user123",
            "status": "offer",
            "company": "Globex",
            "jobTitle": "Senior Engineer",
            "location": "NYC",
            "workMode": "Hybrid",
            "finalSalary": "120,000",
            "salaryBonus": None,
            "salaryEquity": "abc",
        },
    ]
