'''
Agency Dashboard Backend Test Suite

Test Modules:
-------------
- test_bucketing.py: Calendar bucketing engine
  - Group keys per granularity (Daily identity, Sunday-start weeks)
  - Chronological ordering (Sunday-first weekdays, December before January)
  - Fallback buckets for malformed dates and hours

- test_series_merge.py: Chart series merge
  - Empty input, sum-not-overwrite for accumulating granularities
  - Direct union for Hourly/Daily with missing metrics at 0

- test_derived_metrics.py: CPA, percent-of-total, rates, formatting
- test_reporting.py: Breakdown ordering, agent roll-up, snapshots, summary
- test_date_ranges.py: Date picker presets
- test_export.py: CSV layouts for the agent, state and vendor reports
- test_data_client.py: Upstream client retries, errors and dedupe guard
- test_api.py: Router contracts through FastAPI TestClient

Running Tests:
--------------
    pip install -e ".[test]"
    pytest -v

Configuration:
--------------
See conftest.py for shared fixtures and test configuration.
'''

__all__ = []
