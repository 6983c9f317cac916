# comp_outlook/schema/columns.py

# Raw job document keys (camelCase, as stored by the persistence layer)
RAW_ID = "_id"
RAW_JOB_ID = "jobId"
RAW_COMPANY = "company"
RAW_JOB_TITLE = "jobTitle"
RAW_LOCATION = "location"
RAW_WORK_MODE = "workMode"
RAW_ARCHIVED = "archived"
RAW_ARCHIVE_REASON = "archiveReason"
RAW_SALARY_MIN = "salaryMin"
RAW_SALARY_MAX = "salaryMax"
RAW_FINAL_SALARY = "finalSalary"
RAW_SALARY_BONUS = "salaryBonus"
RAW_SALARY_EQUITY = "salaryEquity"
RAW_BENEFITS_VALUE = "benefitsValue"
RAW_SALARY_HISTORY = "salaryHistory"
RAW_COMP_HISTORY = "compHistory"
RAW_DATE = "date"
RAW_TOTAL_COMP = "totalComp"
RAW_NEGOTIATION_OUTCOME = "negotiationOutcome"

# Progression frame columns
PROG_JOB_ID = "jobId"
PROG_DATE = "date"
PROG_SALARY = "salary"
PROG_TOTAL_COMP = "totalComp"
PROG_COMPANY = "company"
PROG_TITLE = "title"
PROG_OUTCOME = "negotiationOutcome"
PROG_SORT_KEY = "_sort_date"
PROG_SALARY_COLS = [PROG_JOB_ID, PROG_DATE, PROG_SALARY, PROG_COMPANY, PROG_TITLE, PROG_OUTCOME]

# Timeline frame columns
TL_YEAR = "year"
TL_SALARY = "salary"
TL_BONUS = "bonus"
TL_EQUITY = "equity"
TL_BENEFITS = "benefits"
TL_TOTAL_COMP = "total_comp"
TL_TITLE = "title"
TL_COMPONENTS = [TL_SALARY, TL_BONUS, TL_EQUITY, TL_BENEFITS]
TIMELINE_COLS = [TL_YEAR, *TL_COMPONENTS, TL_TOTAL_COMP, TL_TITLE]

# Negotiation outcomes
OUTCOME_IMPROVED = "Improved"
OUTCOME_NOT_ATTEMPTED = "Not attempted"

# Enrichment provenance
SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"

# Scenario keys
SCENARIO_CONSERVATIVE = "conservative"
SCENARIO_EXPECTED = "expected"
SCENARIO_OPTIMISTIC = "optimistic"
