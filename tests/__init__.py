"""
didchain Test Suite
===================

Test organization:
- tests/unit/          - Unit tests (no network; web3 and gateway are faked)

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
"""
