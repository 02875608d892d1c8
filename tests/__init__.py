"""
Test suite for the poultry back office.

- integration/ - API and service tests against the test database
"""
