"""
Test suite for the Udyam registration service.

Prefer per-test monkeypatch/fixtures over global sys.modules mocks.
"""
