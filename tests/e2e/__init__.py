"""
End-to-end tests for ijplatformkit.

Scenarios run the whole resolution chain against mocked repositories:
IDE download and extraction, builtin and Marketplace plugin resolution,
and snapshot refresh.

Run them with:
    pytest tests/e2e/ -v
"""
