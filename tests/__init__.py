# PrivateMessenger Test Suite
"""
Test suite including:
- Unit tests per component
- Integration tests (CLI end to end)
- Security tests (tampering, wrong keys, invalid inputs)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
